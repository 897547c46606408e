"""Mutable build-time entities.

The pipeline stages mutate these in place; the generator freezes them into
an IslandGraph once every stage has run.
"""

from dataclasses import dataclass, field

from .biomes import IslandBiome


@dataclass
class CornerDraft:
    """A Voronoi vertex under construction."""

    id: int
    position: tuple[float, float]
    elevation: float = 0.0
    adjacent_regions: list[int] = field(default_factory=list)
    downslope: int | None = None
    water: float = 0.0
    is_lake: bool = False


@dataclass
class RegionDraft:
    """A Voronoi cell under construction."""

    id: int
    centroid: tuple[float, float]
    vertices: list[tuple[float, float]] = field(default_factory=list)
    elevation: float = 0.0
    is_ocean: bool = False
    is_lake: bool = False
    neighbors: list[int] = field(default_factory=list)
    moisture: float = 0.0
    biome: IslandBiome | None = None
    # Scratch fields, not carried into the graph
    corner_ids: list[int] = field(default_factory=list)
    is_boundary: bool = False

    @property
    def is_water(self) -> bool:
        return self.is_ocean or self.is_lake


@dataclass
class EdgeDraft:
    """A cell boundary under construction; ``regions[1]`` is None on the outer hull."""

    id: int
    regions: tuple[int, int | None]
    corners: tuple[int, int]
    is_coastline: bool = False
    is_river: bool = False
    river_flow: float = 0.0
