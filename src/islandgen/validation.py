"""Post-generation validation of island graph invariants."""

import math

import structlog

from .graph import IslandGraph

logger = structlog.get_logger()

# Land ratios outside this range are reported as warnings
MIN_LAND_RATIO = 0.05
MAX_LAND_RATIO = 0.95

# Absolute tolerance when touching the graph bounds
BOUNDS_TOLERANCE = 1e-6


class ValidationResult:
    """Result of graph validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_graph(graph: IslandGraph) -> ValidationResult:
    """Check a generated graph against its structural invariants.

    Args:
        graph: Graph to validate.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()

    _check_outer_regions_ocean(graph, result)
    _check_water_flags(graph, result)
    _check_moisture(graph, result)
    _check_coastlines(graph, result)
    _check_drainage(graph, result)
    _check_edge_corners(graph, result)
    _check_land_ratio(graph, result)

    if result.passed:
        logger.info("graph_validation_passed", warnings=len(result.warnings))
    else:
        logger.warning("graph_validation_failed", errors=len(result.errors))
        for error in result.errors:
            logger.error("graph_validation_error", message=error)

    for warning in result.warnings:
        logger.warning("graph_validation_warning", message=warning)

    return result


def _check_outer_regions_ocean(graph: IslandGraph, result: ValidationResult) -> None:
    """Regions reaching the graph bounds belong to the boundary ring and must be ocean."""
    bounds = graph.bounds
    if bounds is None:
        return

    for region in graph.regions:
        touches = any(
            math.isclose(x, bounds.min_x, abs_tol=BOUNDS_TOLERANCE)
            or math.isclose(x, bounds.max_x, abs_tol=BOUNDS_TOLERANCE)
            or math.isclose(y, bounds.min_y, abs_tol=BOUNDS_TOLERANCE)
            or math.isclose(y, bounds.max_y, abs_tol=BOUNDS_TOLERANCE)
            for x, y in region.vertices
        )
        if touches and not region.is_ocean:
            result.add_error(f"Outer region {region.id} is not ocean")


def _check_water_flags(graph: IslandGraph, result: ValidationResult) -> None:
    both = [r.id for r in graph.regions if r.is_ocean and r.is_lake]
    if both:
        result.add_error(f"{len(both)} regions are both ocean and lake (first: {both[0]})")


def _check_moisture(graph: IslandGraph, result: ValidationResult) -> None:
    out_of_range = [r.id for r in graph.regions if not 0.0 <= r.moisture <= 1.0]
    if out_of_range:
        result.add_error(f"{len(out_of_range)} regions have moisture outside [0, 1]")

    dry_water = [r.id for r in graph.regions if r.is_water and r.moisture != 1.0]
    if dry_water:
        result.add_error(f"{len(dry_water)} water regions have moisture below 1.0")


def _check_coastlines(graph: IslandGraph, result: ValidationResult) -> None:
    wrong = 0
    for edge in graph.edges:
        first, second = edge.regions
        first_ocean = graph.regions[first].is_ocean
        second_ocean = True if second is None else graph.regions[second].is_ocean
        if edge.is_coastline != (first_ocean != second_ocean):
            wrong += 1
    if wrong:
        result.add_error(f"{wrong} edges have an incorrect coastline flag")


def _check_drainage(graph: IslandGraph, result: ValidationResult) -> None:
    """Every land corner's downslope walk must reach water."""
    max_steps = len(graph.corners)
    stranded = 0
    for corner in graph.corners:
        if corner.elevation <= 0:
            continue
        current = corner
        steps = 0
        while current.downslope is not None and steps < max_steps:
            current = graph.corners[current.downslope]
            steps += 1
        if current.elevation > 0:
            stranded += 1
    if stranded:
        result.add_error(f"{stranded} land corners do not drain to water")


def _check_edge_corners(graph: IslandGraph, result: ValidationResult) -> None:
    unshared = 0
    for edge in graph.edges:
        for corner_id in edge.corners:
            adjacent = graph.corners[corner_id].adjacent_regions
            if any(r is not None and r not in adjacent for r in edge.regions):
                unshared += 1
                break
    if unshared:
        result.add_error(f"{unshared} edges have corners not shared by both regions")


def _check_land_ratio(graph: IslandGraph, result: ValidationResult) -> None:
    if not graph.regions:
        result.add_warning("Graph has no regions")
        return
    ratio = len(graph.land_regions()) / len(graph.regions)
    if not MIN_LAND_RATIO <= ratio <= MAX_LAND_RATIO:
        result.add_warning(f"Land ratio {ratio:.1%} outside expected range")
