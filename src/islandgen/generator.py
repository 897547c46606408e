"""Island generation orchestration."""

import math
import time

import structlog

from .biomes import assign_biomes
from .builder import build_graph
from .config import IslandConfig
from .drainage import EventCallback, generate_rivers
from .graph import IslandGraph
from .moisture import propagate_moisture
from .noise import IslandNoise
from .points import generate_boundary_points, generate_points

logger = structlog.get_logger()

# Interior points stay inside this fraction of the radius so boundary points are outermost
INTERIOR_RADIUS = 0.95

# Boundary points as a fraction of the region count
BOUNDARY_FRACTION = 0.1

NOISE_SEED_OFFSET = 8000


def generate(config: IslandConfig, on_event: EventCallback | None = None) -> IslandGraph:
    """Generate an island graph from configuration.

    Runs the full pipeline: point placement, Voronoi graph and elevation,
    drainage with lakes and rivers, moisture, and biomes. The same
    configuration always produces the same graph.

    Args:
        config: Island generation configuration.
        on_event: Optional callback receiving (event name, fields) for each
            pipeline stage.

    Returns:
        The finished IslandGraph.
    """
    start = time.perf_counter()

    interior = generate_points(
        config.seed,
        config.region_count,
        config.radius * INTERIOR_RADIUS,
        lloyd_iterations=config.lloyd_iterations,
        center=config.center,
    )
    boundary = generate_boundary_points(
        math.floor(config.region_count * BOUNDARY_FRACTION),
        config.radius,
        center=config.center,
    )

    noise = IslandNoise.from_config(config.seed + NOISE_SEED_OFFSET, config)
    regions, edges, corners = build_graph(interior, boundary, config, noise)
    if on_event is not None:
        on_event(
            "graph_built",
            {
                "regions": len(regions),
                "edges": len(edges),
                "corners": len(corners),
                "degenerate": sum(1 for r in regions if not r.corner_ids),
            },
        )

    generate_rivers(corners, edges, regions, config.rivers, on_event)
    propagate_moisture(regions, edges, config.moisture)
    assign_biomes(regions, config.biome_preset)

    graph = IslandGraph.from_drafts(regions, edges, corners)

    land = len(graph.land_regions())
    summary = {
        "seed": config.seed,
        "regions": len(graph.regions),
        "land": land,
        "ocean": len(graph.regions) - land,
        "lakes": len(graph.lake_regions()),
        "edges": len(graph.edges),
        "coastline": len(graph.coastline_edges()),
        "rivers": len(graph.river_edges()),
        "corners": len(graph.corners),
        "land_ratio": round(land / len(graph.regions), 3) if graph.regions else 0.0,
        "elapsed_ms": round((time.perf_counter() - start) * 1000, 1),
    }
    logger.info("island_generated", **summary)
    if on_event is not None:
        on_event("island_generated", summary)

    return graph
