"""Moisture propagation from water sources inland."""

from collections import deque

from .config import MoistureConfig
from .drafts import EdgeDraft, RegionDraft
from .drainage import find_river_adjacent_regions


def propagate_moisture(
    regions: list[RegionDraft],
    edges: list[EdgeDraft],
    config: MoistureConfig,
) -> None:
    """Spread moisture breadth-first from oceans, lakes and rivers.

    Water regions start at 1.0 and land bordering a river at
    ``river_moisture``; everything else starts dry. Each step multiplies by
    ``decay``, and by ``uphill_penalty`` as well when climbing, which leaves
    a rain shadow behind high ground. A region is revisited only when a
    wetter path reaches it.

    Args:
        regions: Region drafts; ``moisture`` is updated in place.
        edges: Edge drafts with river flags.
        config: Moisture parameters.
    """
    river_adjacent = find_river_adjacent_regions(regions, edges)

    queue: deque[RegionDraft] = deque()
    for region in regions:
        if region.is_water:
            region.moisture = 1.0
            queue.append(region)
        elif region.id in river_adjacent:
            region.moisture = config.river_moisture
            queue.append(region)
        else:
            region.moisture = 0.0

    while queue:
        region = queue.popleft()
        for neighbor_id in region.neighbors:
            neighbor = regions[neighbor_id]
            if neighbor.is_water:
                continue

            factor = config.decay
            if neighbor.elevation > region.elevation:
                factor *= config.uphill_penalty

            moisture = region.moisture * factor
            if moisture > neighbor.moisture:
                neighbor.moisture = moisture
                queue.append(neighbor)

    for region in regions:
        region.moisture = min(max(region.moisture, 0.0), 1.0)
