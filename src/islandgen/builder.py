"""Voronoi graph construction and elevation assignment.

Turns a set of seed points into region, edge and corner drafts: regions are
the Voronoi cells clipped to a box around the island, corners are the
deduplicated cell vertices and edges are the shared cell boundaries.
"""

import math

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import Delaunay

from .config import IslandConfig
from .drafts import CornerDraft, EdgeDraft, RegionDraft
from .geometry import Bounds, bounded_voronoi_cells, polygon_centroid
from .mask import island_mask
from .noise import IslandNoise

# Voronoi clipping box margin, as a fraction of the radius
BOUNDS_MARGIN = 0.15

# Corner positions are deduplicated at this many units per world unit
CORNER_KEY_SCALE = 100

# Region elevation blend of corner mean and corner max
MEAN_WEIGHT = 0.6
MAX_WEIGHT = 0.4

DEGENERATE_ELEVATION = -1.0
BOUNDARY_ELEVATION = -0.8

# Vertices this close to the clipping box lie on it
BOUNDS_TOLERANCE = 1e-6


def island_bounds(center: tuple[float, float], radius: float) -> Bounds:
    """Clipping box around the island disk."""
    margin = radius * BOUNDS_MARGIN
    return (
        center[0] - radius - margin,
        center[1] - radius - margin,
        center[0] + radius + margin,
        center[1] + radius + margin,
    )


def tessellate(
    points: NDArray[np.float64],
    boundary_start: int,
    bounds: Bounds,
) -> tuple[list[RegionDraft], list[CornerDraft]]:
    """Build region and corner drafts from the Voronoi diagram of the points.

    Region ids follow point order; points from ``boundary_start`` onward are
    boundary points. Cells reaching the clipping box are treated as
    boundary cells as well. Cells that degenerate to fewer than three vertices
    become placeholder ocean regions with no vertices.

    Args:
        points: All seed points, shape (n, 2).
        boundary_start: Index of the first boundary point.
        bounds: Voronoi clipping box.

    Returns:
        Tuple of (regions, corners).
    """
    cells = bounded_voronoi_cells(points, bounds)

    corners: list[CornerDraft] = []
    corner_keys: dict[tuple[int, int], int] = {}

    def corner_for(x: float, y: float) -> int:
        key = (round(x * CORNER_KEY_SCALE), round(y * CORNER_KEY_SCALE))
        corner_id = corner_keys.get(key)
        if corner_id is None:
            corner_id = len(corners)
            corner_keys[key] = corner_id
            corners.append(CornerDraft(id=corner_id, position=(x, y)))
        return corner_id

    regions: list[RegionDraft] = []
    for i, cell in enumerate(cells):
        site = (float(points[i, 0]), float(points[i, 1]))
        is_boundary = i >= boundary_start

        if cell is None or len(cell) < 4:
            regions.append(
                RegionDraft(
                    id=i,
                    centroid=site,
                    elevation=DEGENERATE_ELEVATION,
                    is_ocean=True,
                    is_boundary=is_boundary,
                )
            )
            continue

        vertices = [(float(x), float(y)) for x, y in cell]
        is_boundary = is_boundary or _touches_bounds(vertices, bounds)
        corner_ids: list[int] = []
        for x, y in vertices[:-1]:
            corner_id = corner_for(x, y)
            # Vertices closer than the dedup resolution collapse into one corner
            if corner_ids and corner_ids[-1] == corner_id:
                continue
            corner_ids.append(corner_id)
        if len(corner_ids) > 1 and corner_ids[0] == corner_ids[-1]:
            corner_ids.pop()

        for corner_id in corner_ids:
            corners[corner_id].adjacent_regions.append(i)

        regions.append(
            RegionDraft(
                id=i,
                centroid=polygon_centroid(vertices),
                vertices=vertices,
                corner_ids=corner_ids,
                is_boundary=is_boundary,
            )
        )

    return regions, corners


def _touches_bounds(vertices: list[tuple[float, float]], bounds: Bounds) -> bool:
    min_x, min_y, max_x, max_y = bounds
    return any(
        math.isclose(x, min_x, abs_tol=BOUNDS_TOLERANCE)
        or math.isclose(x, max_x, abs_tol=BOUNDS_TOLERANCE)
        or math.isclose(y, min_y, abs_tol=BOUNDS_TOLERANCE)
        or math.isclose(y, max_y, abs_tol=BOUNDS_TOLERANCE)
        for x, y in vertices
    )


def assign_neighbors(regions: list[RegionDraft], points: NDArray[np.float64]) -> None:
    """Fill region neighbor lists from Delaunay adjacency, in ascending id order."""
    indptr, indices = Delaunay(points).vertex_neighbor_vertices
    for region in regions:
        neighbors = indices[indptr[region.id] : indptr[region.id + 1]]
        region.neighbors = sorted(int(n) for n in neighbors)


def assign_elevations(
    regions: list[RegionDraft],
    corners: list[CornerDraft],
    config: IslandConfig,
    noise: IslandNoise,
) -> None:
    """Assign corner elevations, then region elevations and ocean flags.

    Corner elevation is the scaled elevation noise plus the island mask.
    Region elevation blends the mean and maximum of its corners, which keeps
    peaks on land. Boundary and degenerate regions are always ocean.
    """
    for corner in corners:
        x, y = corner.position
        mask = island_mask(
            x,
            y,
            config.center,
            config.radius,
            noise,
            shape_variation=config.shape_variation,
            interior_boost=config.interior_boost,
            falloff_start=config.falloff_start,
        )
        corner.elevation = noise.sample_elevation(x, y) * config.noise_amplitude + mask

    for region in regions:
        if not region.corner_ids:
            region.elevation = DEGENERATE_ELEVATION
            region.is_ocean = True
            continue

        if region.is_boundary:
            region.elevation = BOUNDARY_ELEVATION
            region.is_ocean = True
            continue

        elevations = [corners[c].elevation for c in region.corner_ids]
        mean = sum(elevations) / len(elevations)
        region.elevation = mean * MEAN_WEIGHT + max(elevations) * MAX_WEIGHT
        region.is_ocean = region.elevation <= 0.0


def build_edges(regions: list[RegionDraft]) -> list[EdgeDraft]:
    """Create one edge per adjacent region pair.

    Walks each region's corner ring; the other side of a boundary segment is
    the first neighbor holding both of its corners, or None on the outer hull.
    """
    corner_sets = [set(region.corner_ids) for region in regions]
    edges: list[EdgeDraft] = []
    seen: set[tuple[int, int | None]] = set()

    for region in regions:
        ring = region.corner_ids
        if len(ring) < 2:
            continue

        for j, c1 in enumerate(ring):
            c2 = ring[(j + 1) % len(ring)]

            other: int | None = None
            for neighbor_id in region.neighbors:
                if c1 in corner_sets[neighbor_id] and c2 in corner_sets[neighbor_id]:
                    other = neighbor_id
                    break

            if other is None:
                key: tuple[int, int | None] = (region.id, None)
            else:
                key = (min(region.id, other), max(region.id, other))
            if key in seen:
                continue
            seen.add(key)

            edges.append(EdgeDraft(id=len(edges), regions=(region.id, other), corners=(c1, c2)))

    mark_coastlines(edges, regions)
    return edges


def mark_coastlines(edges: list[EdgeDraft], regions: list[RegionDraft]) -> None:
    """Flag edges with exactly one ocean side; a missing side counts as ocean."""
    for edge in edges:
        first, second = edge.regions
        first_ocean = regions[first].is_ocean
        second_ocean = True if second is None else regions[second].is_ocean
        edge.is_coastline = first_ocean != second_ocean


def build_graph(
    interior: NDArray[np.float64],
    boundary: NDArray[np.float64],
    config: IslandConfig,
    noise: IslandNoise,
) -> tuple[list[RegionDraft], list[EdgeDraft], list[CornerDraft]]:
    """Build the elevated region graph from interior and boundary points.

    Args:
        interior: Relaxed interior points.
        boundary: Boundary ring points, forced to ocean.
        config: Island configuration.
        noise: Noise channels for elevation and coastline shape.

    Returns:
        Tuple of (regions, edges, corners) drafts.
    """
    points = np.vstack([interior, boundary]) if len(boundary) else np.asarray(interior)
    bounds = island_bounds(config.center, config.radius)

    regions, corners = tessellate(points, len(interior), bounds)
    assign_neighbors(regions, points)
    assign_elevations(regions, corners, config, noise)
    edges = build_edges(regions)
    return regions, edges, corners
