"""Shared test fixtures for island generation tests."""

import pytest

from islandgen.config import IslandConfig
from islandgen.drafts import CornerDraft, EdgeDraft
from islandgen.generator import generate
from islandgen.graph import IslandGraph
from islandgen.templates import merge_template


@pytest.fixture(scope="session")
def small_config() -> IslandConfig:
    """Small default island, quick to generate."""
    return IslandConfig(seed=7, region_count=300, radius=10000)


@pytest.fixture(scope="session")
def small_graph(small_config: IslandConfig) -> IslandGraph:
    """Graph generated from the small config, shared across tests."""
    return generate(small_config)


@pytest.fixture(scope="session")
def volcanic_graph() -> IslandGraph:
    """Tropical volcanic island, seed 42, 500 regions."""
    config = merge_template(
        "tropical_volcanic", {"seed": 42, "region_count": 500, "radius": 10000}
    )
    return generate(config)


def make_chain(elevations: list[float]) -> tuple[list[CornerDraft], list[EdgeDraft]]:
    """Corners in a line, each joined to the next by an edge."""
    corners = [
        CornerDraft(id=i, position=(float(i), 0.0), elevation=elev)
        for i, elev in enumerate(elevations)
    ]
    edges = [
        EdgeDraft(id=i, regions=(0, None), corners=(i, i + 1))
        for i in range(len(elevations) - 1)
    ]
    return corners, edges


@pytest.fixture
def chain():
    """Factory building a corner chain from a list of elevations."""
    return make_chain


@pytest.fixture
def valley_chain() -> tuple[list[CornerDraft], list[EdgeDraft]]:
    """Ocean corner, a ridge, a 0.1-deep pit, then rising land.

    Elevations: -0.5, 0.2, 0.1, 0.3, 0.5
    """
    return make_chain([-0.5, 0.2, 0.1, 0.3, 0.5])
