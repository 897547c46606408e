"""Tests for the island graph: queries and serialization."""

import json

import numpy as np
import pytest

from islandgen.biomes import IslandBiome
from islandgen.exceptions import GraphFormatError
from islandgen.graph import IslandGraph

V1_GRAPH = {
    "version": "1.0",
    "bounds": {"minX": 0.0, "minY": 0.0, "maxX": 2.0, "maxY": 1.0},
    "regions": [
        {
            "id": 0,
            "centroid": [0.5, 0.5],
            "vertices": [[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]],
            "elevation": 0.2,
            "isOcean": False,
            "neighbors": [1],
        },
        {
            "id": 1,
            "centroid": [1.5, 0.5],
            "vertices": [[1, 0], [2, 0], [2, 1], [1, 1], [1, 0]],
            "elevation": -0.3,
            "isOcean": True,
            "neighbors": [0],
        },
    ],
    "edges": [
        {"id": 0, "regions": [0, 1], "corners": [0, 1], "isCoastline": True},
        {"id": 1, "regions": [0, -1], "corners": [1, 2], "isCoastline": True},
    ],
    "corners": [
        {"id": 0, "position": [1, 0], "elevation": 0.0, "adjacentRegions": [0, 1]},
        {"id": 1, "position": [1, 1], "elevation": 0.1, "adjacentRegions": [0, 1]},
        {"id": 2, "position": [0, 1], "elevation": 0.3, "adjacentRegions": [0]},
    ],
}


class TestSerialization:
    """Tests for dict/JSON round trips and older formats."""

    def test_round_trip_identical(self, small_graph: IslandGraph) -> None:
        """Serializing a deserialized graph gives the same JSON."""
        text = small_graph.to_json()
        restored = IslandGraph.from_json(text)
        assert restored.to_json() == text
        assert restored.regions == small_graph.regions
        assert restored.edges == small_graph.edges
        assert restored.corners == small_graph.corners
        assert restored.bounds == small_graph.bounds

    def test_to_dict_layout(self, small_graph: IslandGraph) -> None:
        """Top-level keys and camelCase entity fields."""
        data = small_graph.to_dict()
        assert data["version"] == "2.0"
        assert set(data) == {"version", "bounds", "regions", "edges", "corners"}
        assert set(data["bounds"]) == {"minX", "minY", "maxX", "maxY"}
        assert {"isOcean", "isLake", "moisture", "biome"} <= set(data["regions"][0])
        assert {"isCoastline", "isRiver", "riverFlow"} <= set(data["edges"][0])
        assert {"adjacentRegions", "downslope", "water"} <= set(data["corners"][0])

    def test_to_dict_is_json_serializable(self, small_graph: IslandGraph) -> None:
        json.dumps(small_graph.to_dict())

    def test_v1_backfill(self) -> None:
        """Version 1.0 data gets defaults for fields it predates."""
        graph = IslandGraph.from_dict(V1_GRAPH)
        region = graph.regions[0]
        assert region.moisture == 0.0
        assert region.biome is None
        assert region.is_lake is False
        edge = graph.edges[0]
        assert edge.is_river is False
        assert edge.river_flow == 0.0
        corner = graph.corners[0]
        assert corner.downslope is None
        assert corner.water == 0.0

    def test_legacy_hull_marker(self) -> None:
        """A -1 region id on hull edges becomes None."""
        graph = IslandGraph.from_dict(V1_GRAPH)
        assert graph.edges[1].regions == (0, None)

    def test_legacy_downslope_marker(self) -> None:
        data = json.loads(json.dumps(V1_GRAPH))
        data["corners"][2]["downslope"] = -1
        assert IslandGraph.from_dict(data).corners[2].downslope is None

    def test_missing_version_treated_as_v1(self) -> None:
        data = {k: v for k, v in V1_GRAPH.items() if k != "version"}
        assert len(IslandGraph.from_dict(data).regions) == 2

    def test_unsupported_version(self) -> None:
        with pytest.raises(GraphFormatError, match="3.0"):
            IslandGraph.from_dict({**V1_GRAPH, "version": "3.0"})

    def test_missing_section(self) -> None:
        with pytest.raises(GraphFormatError):
            IslandGraph.from_dict({"version": "2.0", "regions": [], "edges": []})

    def test_invalid_entity(self) -> None:
        data = json.loads(json.dumps(V1_GRAPH))
        data["regions"][0]["biome"] = "lava"
        with pytest.raises(GraphFormatError):
            IslandGraph.from_dict(data)

    def test_invalid_json(self) -> None:
        with pytest.raises(GraphFormatError):
            IslandGraph.from_json("{not json")

    def test_biome_serialized_as_tag(self, small_graph: IslandGraph) -> None:
        tags = {r["biome"] for r in small_graph.to_dict()["regions"]}
        assert tags <= {b.value for b in IslandBiome}


class TestEntities:
    """Tests for frozen entity models."""

    def test_frozen(self, small_graph: IslandGraph) -> None:
        with pytest.raises(Exception):
            small_graph.regions[0].elevation = 5.0

    def test_ids_are_indices(self, small_graph: IslandGraph) -> None:
        assert all(r.id == i for i, r in enumerate(small_graph.regions))
        assert all(e.id == i for i, e in enumerate(small_graph.edges))
        assert all(c.id == i for i, c in enumerate(small_graph.corners))


class TestQueries:
    """Tests for lookups, filters and spatial queries."""

    def test_get_by_id(self, small_graph: IslandGraph) -> None:
        assert small_graph.get_region(3).id == 3
        assert small_graph.get_edge(0).id == 0
        assert small_graph.get_corner(0).id == 0
        assert small_graph.get_region(-1) is None
        assert small_graph.get_region(len(small_graph.regions)) is None

    def test_get_neighbors(self, small_graph: IslandGraph) -> None:
        region = small_graph.regions[0]
        assert [n.id for n in small_graph.get_neighbors(0)] == list(region.neighbors)
        assert small_graph.get_neighbors(10**6) == []

    def test_filters_partition(self, small_graph: IslandGraph) -> None:
        """Land and ocean partition the regions; lakes are land-side."""
        land = small_graph.land_regions()
        ocean = small_graph.ocean_regions()
        assert len(land) + len(ocean) == len(small_graph.regions)
        assert all(not r.is_ocean for r in small_graph.lake_regions())
        assert all(e.is_coastline for e in small_graph.coastline_edges())
        assert all(e.is_river for e in small_graph.river_edges())

    def test_find_region_matches_brute_force(self, small_graph: IslandGraph) -> None:
        """Indexed and linear lookups agree everywhere."""
        bounds = small_graph.bounds
        rng = np.random.default_rng(9)
        xs = rng.uniform(bounds.min_x - 500, bounds.max_x + 500, size=300)
        ys = rng.uniform(bounds.min_y - 500, bounds.max_y + 500, size=300)
        for x, y in zip(xs, ys):
            assert small_graph.find_region(x, y) == small_graph.find_region_brute_force(x, y)

    def test_find_region_at_centroid(self, small_graph: IslandGraph) -> None:
        """A region's centroid lies inside the region."""
        for region in small_graph.regions[:50]:
            if region.vertices:
                found = small_graph.find_region(*region.centroid)
                assert found is not None and found.id == region.id

    def test_outside_bounds(self, small_graph: IslandGraph) -> None:
        bounds = small_graph.bounds
        assert small_graph.find_region(bounds.max_x + 1.0, 0.0) is None
        assert small_graph.find_region_brute_force(bounds.max_x + 1.0, 0.0) is None

    def test_query_bounds_contains_point_lookup(self, small_graph: IslandGraph) -> None:
        """The region containing a point is among the regions overlapping a box around it."""
        region = small_graph.find_region(0.0, 0.0)
        hits = small_graph.query_bounds((-10.0, -10.0, 10.0, 10.0))
        assert region in hits

    def test_find_nearest_river(self, small_graph: IslandGraph) -> None:
        rivers = small_graph.river_edges()
        if not rivers:
            pytest.skip("no rivers on this island")
        corner = small_graph.corners[rivers[0].corners[0]]
        edge, distance = small_graph.find_nearest_river(*corner.position, max_distance=1.0)
        assert edge.is_river
        assert distance == pytest.approx(0.0)

    def test_bounds_cover_all_vertices(self, small_graph: IslandGraph) -> None:
        bounds = small_graph.bounds
        for region in small_graph.regions:
            for x, y in region.vertices:
                assert bounds.contains(x, y)
