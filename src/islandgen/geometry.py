"""Planar geometry helpers: bounded Voronoi cells, centroids, point-in-polygon."""

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import Voronoi

Point = tuple[float, float]
Bounds = tuple[float, float, float, float]  # (min_x, min_y, max_x, max_y)

# Polygons with less area than this use the vertex average as centroid
MIN_CENTROID_AREA = 1e-10


def bounded_voronoi_cells(
    points: NDArray[np.float64],
    bounds: Bounds,
) -> list[NDArray[np.float64] | None]:
    """Compute Voronoi cells clipped to an axis-aligned box.

    Mirrors the points across the four sides of the box so that every
    original cell is finite and its boundary coincides with the box where
    it would otherwise extend past it.

    Args:
        points: Array of shape (n, 2); all points must lie inside ``bounds``.
        bounds: Clipping box.

    Returns:
        One entry per point: a closed counter-clockwise ring of shape (k + 1, 2)
        (last vertex = first), or None for a degenerate cell.
    """
    pts = np.asarray(points, dtype=np.float64)
    n = len(pts)
    if n == 0:
        return []

    min_x, min_y, max_x, max_y = bounds

    left = pts.copy()
    left[:, 0] = 2.0 * min_x - pts[:, 0]
    right = pts.copy()
    right[:, 0] = 2.0 * max_x - pts[:, 0]
    below = pts.copy()
    below[:, 1] = 2.0 * min_y - pts[:, 1]
    above = pts.copy()
    above[:, 1] = 2.0 * max_y - pts[:, 1]

    vor = Voronoi(np.vstack([pts, left, right, below, above]))

    cells: list[NDArray[np.float64] | None] = []
    for i in range(n):
        region_index = int(vor.point_region[i])
        region = vor.regions[region_index] if region_index >= 0 else []
        if not region or -1 in region or len(region) < 3:
            cells.append(None)
            continue

        # Cells are convex and contain their site: sort vertices by angle (CCW)
        ring = vor.vertices[region]
        angles = np.arctan2(ring[:, 1] - pts[i, 1], ring[:, 0] - pts[i, 0])
        ring = ring[np.argsort(angles, kind="stable")]
        cells.append(np.vstack([ring, ring[:1]]))

    return cells


def polygon_centroid(polygon: Sequence[Point] | NDArray[np.float64]) -> Point:
    """Compute the centroid of a closed polygon (last vertex = first).

    Falls back to the average of the vertices when the polygon has
    (near) zero area.
    """
    if len(polygon) < 3:
        return (0.0, 0.0)

    cx = 0.0
    cy = 0.0
    area = 0.0
    for i in range(len(polygon) - 1):
        x0, y0 = float(polygon[i][0]), float(polygon[i][1])
        x1, y1 = float(polygon[i + 1][0]), float(polygon[i + 1][1])
        cross = x0 * y1 - x1 * y0
        area += cross
        cx += (x0 + x1) * cross
        cy += (y0 + y1) * cross
    area *= 0.5

    if abs(area) < MIN_CENTROID_AREA:
        count = len(polygon) - 1
        sum_x = sum(float(p[0]) for p in polygon[:-1])
        sum_y = sum(float(p[1]) for p in polygon[:-1])
        return (sum_x / count, sum_y / count)

    factor = 1.0 / (6.0 * area)
    return (cx * factor, cy * factor)


def polygon_bounds(vertices: Sequence[Point]) -> Bounds:
    """Axis-aligned bounding box of a vertex list."""
    xs = [p[0] for p in vertices]
    ys = [p[1] for p in vertices]
    return (min(xs), min(ys), max(xs), max(ys))


def point_in_polygon(x: float, y: float, vertices: Sequence[Point]) -> bool:
    """Ray casting point-in-polygon test.

    Args:
        x: Test point X.
        y: Test point Y.
        vertices: Closed polygon ring (last vertex = first).

    Returns:
        True if the point is inside the polygon.
    """
    inside = False
    n = len(vertices) - 1
    if n < 3:
        return False

    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        # Does a ray from (x, y) going right cross this edge?
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i

    return inside


def distance_to_segment(
    px: float, py: float, x1: float, y1: float, x2: float, y2: float
) -> float:
    """Distance from a point to a line segment."""
    dx = x2 - x1
    dy = y2 - y1
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - x1, py - y1)

    t = ((px - x1) * dx + (py - y1) * dy) / length_sq
    t = min(max(t, 0.0), 1.0)
    return math.hypot(px - (x1 + t * dx), py - (y1 + t * dy))
