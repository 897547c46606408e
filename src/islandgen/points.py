"""Point distribution with Lloyd relaxation for island generation."""

import math

import numpy as np
from numpy.typing import NDArray

from .geometry import bounded_voronoi_cells, polygon_centroid

# Voronoi box margin during relaxation, as a fraction of the radius
LLOYD_MARGIN = 0.2


def generate_points(
    seed: int,
    count: int,
    radius: float,
    lloyd_iterations: int = 2,
    center: tuple[float, float] = (0.0, 0.0),
) -> NDArray[np.float64]:
    """Generate relaxed points inside a disk.

    Points are drawn by rejection sampling from the bounding square, then
    moved towards uniform spacing with Lloyd relaxation.

    Args:
        seed: Random seed.
        count: Number of interior points.
        radius: Disk radius in world units.
        lloyd_iterations: Relaxation passes.
        center: Disk center.

    Returns:
        Array of shape (count, 2).
    """
    rng = np.random.default_rng(seed)
    cx, cy = center
    radius_sq = radius * radius

    points: list[tuple[float, float]] = []
    while len(points) < count:
        x = (rng.random() * 2.0 - 1.0) * radius + cx
        y = (rng.random() * 2.0 - 1.0) * radius + cy
        dx = x - cx
        dy = y - cy
        if dx * dx + dy * dy <= radius_sq:
            points.append((x, y))

    relaxed = np.array(points, dtype=np.float64).reshape(-1, 2)
    for _ in range(lloyd_iterations):
        relaxed = lloyd_relax(relaxed, radius, center)

    return relaxed


def lloyd_relax(
    points: NDArray[np.float64],
    radius: float,
    center: tuple[float, float] = (0.0, 0.0),
) -> NDArray[np.float64]:
    """Perform one Lloyd relaxation iteration.

    Moves each point to the centroid of its Voronoi cell. Centroids outside
    the disk are projected back onto its boundary; degenerate cells keep
    their original point.

    Args:
        points: Current point positions, shape (n, 2).
        radius: Clamp boundary radius.
        center: Disk center.

    Returns:
        Relaxed points, shape (n, 2).
    """
    if len(points) == 0:
        return np.empty((0, 2), dtype=np.float64)

    cx, cy = center
    margin = radius * LLOYD_MARGIN
    bounds = (cx - radius - margin, cy - radius - margin, cx + radius + margin, cy + radius + margin)
    cells = bounded_voronoi_cells(points, bounds)

    relaxed = np.array(points, dtype=np.float64, copy=True)
    for i, cell in enumerate(cells):
        if cell is None or len(cell) < 4:
            continue

        x, y = polygon_centroid(cell)
        dx = x - cx
        dy = y - cy
        dist = math.sqrt(dx * dx + dy * dy)
        if dist > radius:
            scale = radius / dist
            x = cx + dx * scale
            y = cy + dy * scale

        relaxed[i, 0] = x
        relaxed[i, 1] = y

    return relaxed


def generate_boundary_points(
    count: int,
    radius: float,
    center: tuple[float, float] = (0.0, 0.0),
) -> NDArray[np.float64]:
    """Evenly spaced points on the circle; these always become ocean."""
    cx, cy = center
    angles = np.arange(count, dtype=np.float64) / max(count, 1) * 2.0 * math.pi
    return np.column_stack([cx + np.cos(angles) * radius, cy + np.sin(angles) * radius])
