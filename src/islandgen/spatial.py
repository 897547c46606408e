"""R-tree spatial index for region lookup."""

from typing import Protocol, Sequence

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import box
from shapely.strtree import STRtree

from .geometry import Bounds, Point, distance_to_segment, point_in_polygon, polygon_bounds


class _Polygonal(Protocol):
    id: int
    vertices: Sequence[Point]


class _Segment(Protocol):
    corners: tuple[int, int]


class _Positioned(Protocol):
    position: Point


class SpatialIndex:
    """Bounding-box tree over region polygons with exact point refinement.

    Regions without a polygon (fewer than three vertices) are not indexed.
    """

    def __init__(self, regions: Sequence[_Polygonal]):
        self.regions = regions
        self._indexed = [r for r in regions if len(r.vertices) >= 3]
        self._tree = STRtree([box(*polygon_bounds(r.vertices)) for r in self._indexed])

    def __len__(self) -> int:
        return len(self._indexed)

    def _candidates(self, geometry) -> list:
        # Index order follows region id order
        return [self._indexed[int(i)] for i in sorted(self._tree.query(geometry))]

    def find_region(self, x: float, y: float):
        """Region whose polygon contains the point, or None.

        When the point lies on a shared border the lowest id wins.
        """
        for region in self._candidates(ShapelyPoint(x, y)):
            if point_in_polygon(x, y, region.vertices):
                return region
        return None

    def query_bounds(self, bounds: Bounds) -> list:
        """All regions whose bounding box overlaps ``(min_x, min_y, max_x, max_y)``."""
        return self._candidates(box(*bounds))


def find_nearest_river(
    x: float,
    y: float,
    river_edges: Sequence[_Segment],
    corners: Sequence[_Positioned],
    max_distance: float,
) -> tuple[_Segment, float] | None:
    """Closest river edge within ``max_distance`` of a point.

    Args:
        x: World X coordinate.
        y: World Y coordinate.
        river_edges: Candidate edges.
        corners: Corner lookup by id, for edge endpoints.
        max_distance: Search radius.

    Returns:
        Tuple of (edge, distance), or None if nothing is closer than the radius.
    """
    nearest = None
    best = max_distance
    for edge in river_edges:
        (x1, y1) = corners[edge.corners[0]].position
        (x2, y2) = corners[edge.corners[1]].position
        dist = distance_to_segment(x, y, x1, y1, x2, y2)
        if dist < best:
            best = dist
            nearest = (edge, dist)
    return nearest
