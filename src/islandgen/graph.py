"""Immutable island graph: regions, edges and corners with query helpers."""

import json
from functools import cached_property
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .biomes import IslandBiome
from .drafts import CornerDraft, EdgeDraft, RegionDraft
from .exceptions import GraphFormatError
from .geometry import Bounds, Point, point_in_polygon, polygon_bounds
from .spatial import SpatialIndex, find_nearest_river

GRAPH_VERSION = "2.0"
SUPPORTED_VERSIONS = ("1.0", "2.0")

# Older files mark "no id" with -1
_LEGACY_NO_ID = -1


class _GraphModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class GraphBounds(_GraphModel):
    """Axis-aligned extent of all region polygons."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


class Corner(_GraphModel):
    """A Voronoi vertex where edges meet."""

    id: int
    position: Point
    elevation: float
    adjacent_regions: tuple[int, ...] = ()
    downslope: int | None = Field(default=None, description="Next corner downhill")
    water: float = Field(default=0.0, description="Accumulated flow")
    is_lake: bool = False

    @field_validator("downslope", mode="before")
    @classmethod
    def _legacy_downslope(cls, value: Any) -> Any:
        return None if value == _LEGACY_NO_ID else value


class Edge(_GraphModel):
    """Boundary between two regions; the second region is None on the outer hull."""

    id: int
    regions: tuple[int, int | None]
    corners: tuple[int, int]
    is_coastline: bool = False
    is_river: bool = False
    river_flow: float = 0.0

    @field_validator("regions", mode="before")
    @classmethod
    def _legacy_regions(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(None if r == _LEGACY_NO_ID else r for r in value)
        return value


class Region(_GraphModel):
    """A Voronoi cell of the island."""

    id: int
    centroid: Point
    vertices: tuple[Point, ...] = Field(default=(), description="Closed ring, last = first")
    elevation: float
    is_ocean: bool
    is_lake: bool = False
    neighbors: tuple[int, ...] = ()
    moisture: float = 0.0
    biome: IslandBiome | None = None

    @property
    def is_water(self) -> bool:
        return self.is_ocean or self.is_lake

    @field_validator("neighbors", mode="before")
    @classmethod
    def _drop_legacy_neighbors(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(n for n in value if n != _LEGACY_NO_ID)
        return value


def _compute_bounds(regions: Sequence[Region]) -> GraphBounds | None:
    boxes = [polygon_bounds(r.vertices) for r in regions if r.vertices]
    if not boxes:
        return None
    return GraphBounds(
        min_x=min(b[0] for b in boxes),
        min_y=min(b[1] for b in boxes),
        max_x=max(b[2] for b in boxes),
        max_y=max(b[3] for b in boxes),
    )


class IslandGraph:
    """The generated island.

    Entities live in flat tuples indexed by id. The graph is read-only once
    built; the spatial index is created on first use.
    """

    def __init__(
        self,
        regions: Sequence[Region],
        edges: Sequence[Edge],
        corners: Sequence[Corner],
        bounds: GraphBounds | None = None,
    ):
        self.regions: tuple[Region, ...] = tuple(regions)
        self.edges: tuple[Edge, ...] = tuple(edges)
        self.corners: tuple[Corner, ...] = tuple(corners)
        self.bounds = bounds if bounds is not None else _compute_bounds(self.regions)
        self._region_boxes = [
            polygon_bounds(r.vertices) if r.vertices else None for r in self.regions
        ]

    def __repr__(self) -> str:
        return (
            f"IslandGraph(regions={len(self.regions)}, edges={len(self.edges)}, "
            f"corners={len(self.corners)})"
        )

    @classmethod
    def from_drafts(
        cls,
        regions: Sequence[RegionDraft],
        edges: Sequence[EdgeDraft],
        corners: Sequence[CornerDraft],
    ) -> "IslandGraph":
        """Freeze build-time drafts, dropping their scratch fields."""
        return cls(
            regions=[
                Region(
                    id=r.id,
                    centroid=r.centroid,
                    vertices=tuple(r.vertices),
                    elevation=r.elevation,
                    is_ocean=r.is_ocean,
                    is_lake=r.is_lake,
                    neighbors=tuple(r.neighbors),
                    moisture=r.moisture,
                    biome=r.biome,
                )
                for r in regions
            ],
            edges=[
                Edge(
                    id=e.id,
                    regions=e.regions,
                    corners=e.corners,
                    is_coastline=e.is_coastline,
                    is_river=e.is_river,
                    river_flow=e.river_flow,
                )
                for e in edges
            ],
            corners=[
                Corner(
                    id=c.id,
                    position=c.position,
                    elevation=c.elevation,
                    adjacent_regions=tuple(c.adjacent_regions),
                    downslope=c.downslope,
                    water=c.water,
                    is_lake=c.is_lake,
                )
                for c in corners
            ],
        )

    # Lookup

    def get_region(self, region_id: int) -> Region | None:
        return self.regions[region_id] if 0 <= region_id < len(self.regions) else None

    def get_edge(self, edge_id: int) -> Edge | None:
        return self.edges[edge_id] if 0 <= edge_id < len(self.edges) else None

    def get_corner(self, corner_id: int) -> Corner | None:
        return self.corners[corner_id] if 0 <= corner_id < len(self.corners) else None

    def get_neighbors(self, region_id: int) -> list[Region]:
        """Neighboring regions; empty for an unknown id."""
        region = self.get_region(region_id)
        if region is None:
            return []
        return [self.regions[n] for n in region.neighbors if 0 <= n < len(self.regions)]

    # Filters

    def land_regions(self) -> list[Region]:
        return [r for r in self.regions if not r.is_ocean]

    def ocean_regions(self) -> list[Region]:
        return [r for r in self.regions if r.is_ocean]

    def lake_regions(self) -> list[Region]:
        return [r for r in self.regions if r.is_lake]

    def coastline_edges(self) -> list[Edge]:
        return [e for e in self.edges if e.is_coastline]

    def river_edges(self) -> list[Edge]:
        return [e for e in self.edges if e.is_river]

    # Spatial queries

    @cached_property
    def spatial_index(self) -> SpatialIndex:
        """R-tree over region polygons, built on first access."""
        return SpatialIndex(self.regions)

    def find_region(self, x: float, y: float) -> Region | None:
        """Region containing a point, using the spatial index.

        Args:
            x: World X coordinate.
            y: World Y coordinate.

        Returns:
            The containing region (lowest id on shared borders), or None
            outside the graph.
        """
        return self.spatial_index.find_region(x, y)

    def find_region_brute_force(self, x: float, y: float) -> Region | None:
        """Linear scan equivalent of :meth:`find_region`."""
        if self.bounds is None or not self.bounds.contains(x, y):
            return None

        for region, bbox in zip(self.regions, self._region_boxes):
            if bbox is None:
                continue
            min_x, min_y, max_x, max_y = bbox
            if x < min_x or x > max_x or y < min_y or y > max_y:
                continue
            if point_in_polygon(x, y, region.vertices):
                return region
        return None

    def query_bounds(self, bounds: Bounds) -> list[Region]:
        """Regions whose bounding box overlaps ``(min_x, min_y, max_x, max_y)``."""
        return self.spatial_index.query_bounds(bounds)

    def find_nearest_river(
        self, x: float, y: float, max_distance: float
    ) -> tuple[Edge, float] | None:
        """Closest river edge within ``max_distance``, with its distance."""
        return find_nearest_river(x, y, self.river_edges(), self.corners, max_distance)

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible data (format version 2.0)."""
        return {
            "version": GRAPH_VERSION,
            "bounds": self.bounds.model_dump(by_alias=True) if self.bounds else None,
            "regions": [r.model_dump(mode="json", by_alias=True) for r in self.regions],
            "edges": [e.model_dump(mode="json", by_alias=True) for e in self.edges],
            "corners": [c.model_dump(mode="json", by_alias=True) for c in self.corners],
        }

    def to_json(self) -> str:
        """Canonical JSON text: sorted keys, no whitespace."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IslandGraph":
        """Deserialize graph data written by :meth:`to_dict`.

        Version 1.0 data (or data with no version) lacks moisture, biome,
        lake, river and drainage fields; these take their defaults.

        Raises:
            GraphFormatError: If the version is unsupported or the data is malformed.
        """
        version = data.get("version")
        if version is not None and version not in SUPPORTED_VERSIONS:
            raise GraphFormatError(
                f"Unsupported graph version '{version}'. Supported: {list(SUPPORTED_VERSIONS)}"
            )

        try:
            regions = [Region.model_validate(r) for r in data["regions"]]
            edges = [Edge.model_validate(e) for e in data["edges"]]
            corners = [Corner.model_validate(c) for c in data["corners"]]
            raw_bounds = data.get("bounds")
            bounds = GraphBounds.model_validate(raw_bounds) if raw_bounds else None
        except (KeyError, TypeError) as e:
            raise GraphFormatError(f"Graph data missing section {e}") from e
        except ValidationError as e:
            raise GraphFormatError(f"Invalid graph data: {e}") from e

        return cls(regions, edges, corners, bounds=bounds)

    @classmethod
    def from_json(cls, text: str) -> "IslandGraph":
        """Parse JSON text produced by :meth:`to_json`."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise GraphFormatError(f"Graph data is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise GraphFormatError("Graph data must be a JSON object")
        return cls.from_dict(data)
