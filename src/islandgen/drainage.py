"""Drainage network: sink filling, lakes, flow accumulation and rivers.

Rivers run along edges from high corners to low corners. Depressions are
filled with a Priority-Flood pass rising from sea level (Barnes et al. 2014),
so every land corner drains to water; the deepest depressions become lakes
instead of being filled.
"""

import heapq
import math
from collections import deque
from typing import Any, Callable

from .builder import mark_coastlines
from .config import LakeConfig, RiverConfig
from .drafts import CornerDraft, EdgeDraft, RegionDraft

EventCallback = Callable[[str, dict[str, Any]], None]

# Sea level: corners and regions at or below this are underwater
SEA_LEVEL = 0.0

LAKE_SURFACE = -0.02

# Filled corners sit this far above their pour point
FILL_EPSILON = 0.0001

# Pour point elevations are grouped at this precision
POUR_DECIMALS = 4

# Ocean components reaching past this fraction of the half extent are outer ocean
OUTER_OCEAN_FRACTION = 0.9


def _emit(on_event: EventCallback | None, name: str, **fields: Any) -> None:
    if on_event is not None:
        on_event(name, fields)


def build_corner_adjacency(edges: list[EdgeDraft], corner_count: int) -> list[list[int]]:
    """Corner id to sorted list of corners sharing an edge with it."""
    adjacency: list[set[int]] = [set() for _ in range(corner_count)]
    for edge in edges:
        c1, c2 = edge.corners
        if c1 == c2:
            continue
        adjacency[c1].add(c2)
        adjacency[c2].add(c1)
    return [sorted(neighbors) for neighbors in adjacency]


def fill_sinks(
    corners: list[CornerDraft],
    adjacency: list[list[int]],
    config: LakeConfig,
    on_event: EventCallback | None = None,
) -> set[int]:
    """Fill depressions so every land corner can drain to water.

    Water rises from all underwater corners in elevation order. A neighbor
    lower than the current water level lies in a depression: it is raised
    just above the level and recorded under that pour point. The deepest
    qualifying depressions become lakes instead of being filled.

    Args:
        corners: Corner drafts; elevations and lake flags are updated in place.
        adjacency: Corner adjacency lists.
        config: Lake creation parameters.
        on_event: Optional event callback.

    Returns:
        Ids of corners that became lake surface.
    """
    n = len(corners)
    original = [corner.elevation for corner in corners]
    filled = [math.inf] * n
    visited = [False] * n

    # Min-heap of (elevation, insertion order, corner id)
    heap: list[tuple[float, int, int]] = []
    counter = 0
    for corner in corners:
        if corner.elevation <= SEA_LEVEL:
            filled[corner.id] = corner.elevation
            visited[corner.id] = True
            heap.append((corner.elevation, counter, corner.id))
            counter += 1
    heapq.heapify(heap)

    # Pour point elevation -> [(corner id, original elevation)]
    depressions_by_pour: dict[float, list[tuple[int, float]]] = {}

    while heap:
        level, _, idx = heapq.heappop(heap)
        for neighbor in adjacency[idx]:
            if visited[neighbor]:
                continue
            visited[neighbor] = True

            neighbor_elev = original[neighbor]
            if neighbor_elev <= level:
                filled[neighbor] = level + FILL_EPSILON
                pour = round(level, POUR_DECIMALS)
                depressions_by_pour.setdefault(pour, []).append((neighbor, neighbor_elev))
            else:
                filled[neighbor] = neighbor_elev

            heapq.heappush(heap, (filled[neighbor], counter, neighbor))
            counter += 1

    candidates = []
    for pour, members in depressions_by_pour.items():
        max_depth = max(pour - elev for _, elev in members)
        if len(members) >= config.min_lake_corners and max_depth >= config.min_lake_depth:
            candidates.append((max_depth, pour, members))

    # Stable sort keeps discovery order among equally deep depressions
    candidates.sort(key=lambda candidate: candidate[0], reverse=True)
    lakes = candidates[: config.max_lakes]

    lake_corners: set[int] = set()
    for _, pour, members in lakes:
        for corner_id, elev in members:
            if elev < pour:
                corners[corner_id].elevation = LAKE_SURFACE
                corners[corner_id].is_lake = True
                lake_corners.add(corner_id)

    sinks_filled = 0
    for corner in corners:
        if corner.id in lake_corners:
            continue
        if filled[corner.id] != math.inf and filled[corner.id] != original[corner.id]:
            corner.elevation = filled[corner.id]
            sinks_filled += 1

    _emit(
        on_event,
        "sinks_filled",
        depression_groups=len(depressions_by_pour),
        candidates=len(candidates),
        filled_corners=sinks_filled,
    )
    _emit(on_event, "lakes_created", lakes=len(lakes), lake_corners=len(lake_corners))
    return lake_corners


def mark_lake_regions(regions: list[RegionDraft], lake_corners: set[int]) -> int:
    """Turn land regions into lakes when at least half their corners are lake surface.

    Returns:
        Number of regions converted.
    """
    if not lake_corners:
        return 0

    converted = 0
    for region in regions:
        if region.is_ocean or not region.corner_ids:
            continue
        count = sum(1 for c in region.corner_ids if c in lake_corners)
        if count > 0 and count >= len(region.corner_ids) / 2:
            region.is_lake = True
            region.elevation = LAKE_SURFACE
            converted += 1
    return converted


def convert_inland_seas(regions: list[RegionDraft], corners: list[CornerDraft]) -> int:
    """Reclassify ocean bodies that never approach the outer boundary as lakes.

    Connected ocean components are found by flood fill over region
    neighbors. A component is outer ocean if any member centroid lies beyond
    90% of the half extent of the centroid bounds, measured from their center.
    Underwater corners of a converted sea that touch no remaining ocean
    region become lake corners.

    Returns:
        Number of regions converted.
    """
    if not regions:
        return 0

    xs = [region.centroid[0] for region in regions]
    ys = [region.centroid[1] for region in regions]
    min_x, max_x, min_y, max_y = min(xs), max(xs), min(ys), max(ys)
    center_x = (min_x + max_x) / 2
    center_y = (min_y + max_y) / 2
    outer_distance = max(max_x - min_x, max_y - min_y) / 2 * OUTER_OCEAN_FRACTION

    visited: set[int] = set()
    converted: list[RegionDraft] = []

    for start in regions:
        if not start.is_ocean or start.is_lake or start.id in visited:
            continue

        component: list[RegionDraft] = []
        is_outer = False
        queue = deque([start.id])
        visited.add(start.id)
        while queue:
            region = regions[queue.popleft()]
            component.append(region)

            cx, cy = region.centroid
            if math.hypot(cx - center_x, cy - center_y) > outer_distance:
                is_outer = True

            for neighbor_id in region.neighbors:
                if neighbor_id in visited:
                    continue
                neighbor = regions[neighbor_id]
                if neighbor.is_ocean and not neighbor.is_lake:
                    visited.add(neighbor_id)
                    queue.append(neighbor_id)

        if not is_outer:
            for region in component:
                region.is_ocean = False
                region.is_lake = True
                region.elevation = LAKE_SURFACE
            converted.extend(component)

    for region in converted:
        for corner_id in region.corner_ids:
            corner = corners[corner_id]
            if corner.elevation > SEA_LEVEL:
                continue
            if not any(regions[r].is_ocean for r in corner.adjacent_regions):
                corner.is_lake = True

    return len(converted)


def compute_flow(
    corners: list[CornerDraft],
    adjacency: list[list[int]],
    rainfall: float,
) -> None:
    """Assign downslope corners and accumulate water from high to low.

    Land corners point at their lowest strictly lower neighbor and start with
    ``rainfall`` units of water; underwater corners neither drain nor collect
    rain but still receive the flow arriving from upstream.
    """
    for corner in corners:
        if corner.elevation <= SEA_LEVEL:
            corner.downslope = None
            corner.water = 0.0
            continue

        lowest: int | None = None
        lowest_elev = corner.elevation
        for neighbor in adjacency[corner.id]:
            if corners[neighbor].elevation < lowest_elev:
                lowest_elev = corners[neighbor].elevation
                lowest = neighbor
        corner.downslope = lowest
        corner.water = rainfall

    for corner in sorted(corners, key=lambda c: c.elevation, reverse=True):
        if corner.downslope is not None and corner.water > 0:
            corners[corner.downslope].water += corner.water


def is_ocean_corner(corner: CornerDraft) -> bool:
    """Underwater corner that is not part of a lake."""
    return corner.elevation <= SEA_LEVEL and not corner.is_lake


def trace_rivers(
    corners: list[CornerDraft],
    edges: list[EdgeDraft],
    config: RiverConfig,
) -> int:
    """Mark river edges from every mouth upstream.

    A mouth is a land corner carrying at least ``threshold`` water whose
    downslope corner is open ocean. From each mouth, edges are marked
    upstream while the upstream corner carries at least ``min_tributary``.

    Returns:
        Number of river mouths.
    """
    upstream: dict[int, list[int]] = {}
    for corner in corners:
        if corner.downslope is not None:
            upstream.setdefault(corner.downslope, []).append(corner.id)

    edge_by_corners: dict[tuple[int, int], EdgeDraft] = {}
    for edge in edges:
        c1, c2 = edge.corners
        edge_by_corners[(min(c1, c2), max(c1, c2))] = edge

    mouths = 0
    for corner in corners:
        if corner.downslope is None or corner.water < config.threshold:
            continue
        if not is_ocean_corner(corners[corner.downslope]):
            continue

        mouths += 1
        mouth_edge = edge_by_corners.get(_pair(corner.id, corner.downslope))
        if mouth_edge is not None:
            mouth_edge.is_river = True
            mouth_edge.river_flow = corner.water

        _trace_upstream(corner.id, corners, upstream, edge_by_corners, config.min_tributary)

    return mouths


def _pair(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


def _trace_upstream(
    mouth_id: int,
    corners: list[CornerDraft],
    upstream: dict[int, list[int]],
    edge_by_corners: dict[tuple[int, int], EdgeDraft],
    min_flow: float,
) -> None:
    stack = [mouth_id]
    visited: set[int] = set()
    while stack:
        corner_id = stack.pop()
        if corner_id in visited:
            continue
        visited.add(corner_id)

        for up_id in upstream.get(corner_id, ()):
            up = corners[up_id]
            if up.water < min_flow:
                continue

            edge = edge_by_corners.get(_pair(corner_id, up_id))
            if edge is not None:
                edge.is_river = True
                edge.river_flow = max(edge.river_flow, up.water)
            stack.append(up_id)


def find_river_adjacent_regions(regions: list[RegionDraft], edges: list[EdgeDraft]) -> set[int]:
    """Ids of non-ocean regions bordering a river edge."""
    adjacent: set[int] = set()
    for edge in edges:
        if not edge.is_river:
            continue
        for region_id in edge.regions:
            if region_id is not None and not regions[region_id].is_ocean:
                adjacent.add(region_id)
    return adjacent


def generate_rivers(
    corners: list[CornerDraft],
    edges: list[EdgeDraft],
    regions: list[RegionDraft],
    config: RiverConfig,
    on_event: EventCallback | None = None,
) -> None:
    """Run the full drainage pipeline in place.

    Fills sinks and creates lakes, reclassifies inland seas, computes
    downslope and flow, traces rivers and finally re-derives coastline flags
    for the updated water classification.

    Args:
        corners: Corner drafts with elevations.
        edges: Edge drafts.
        regions: Region drafts with ocean flags.
        config: River and lake parameters.
        on_event: Optional callback receiving (event name, fields).
    """
    for edge in edges:
        edge.is_river = False
        edge.river_flow = 0.0

    adjacency = build_corner_adjacency(edges, len(corners))
    lake_corners = fill_sinks(corners, adjacency, config.lakes, on_event)

    lake_regions = mark_lake_regions(regions, lake_corners)
    inland = convert_inland_seas(regions, corners)
    _emit(on_event, "lake_regions_marked", from_depressions=lake_regions, from_inland_seas=inland)

    compute_flow(corners, adjacency, config.rainfall)
    land = [c for c in corners if c.elevation > SEA_LEVEL]
    _emit(
        on_event,
        "flow_computed",
        land_corners=len(land),
        local_minima=sum(1 for c in land if c.downslope is None),
        max_water=max((c.water for c in corners), default=0.0),
    )

    mouths = trace_rivers(corners, edges, config)
    _emit(
        on_event,
        "rivers_traced",
        mouths=mouths,
        river_edges=sum(1 for e in edges if e.is_river),
    )

    mark_coastlines(edges, regions)
