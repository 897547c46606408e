"""Tests for saving and loading graphs."""

import gzip
from pathlib import Path

import pytest

from islandgen.exceptions import GraphFormatError
from islandgen.graph import IslandGraph
from islandgen.persistence import load_graph, save_graph


class TestPersistence:
    """Tests for JSON graph files."""

    def test_save_load_json(self, tmp_path: Path, small_graph: IslandGraph) -> None:
        path = tmp_path / "island.json"
        save_graph(path, small_graph)
        assert path.read_text() == small_graph.to_json()
        assert load_graph(path).to_json() == small_graph.to_json()

    def test_save_load_gzip(self, tmp_path: Path, small_graph: IslandGraph) -> None:
        path = tmp_path / "island.json.gz"
        save_graph(path, small_graph)
        assert gzip.decompress(path.read_bytes()).decode() == small_graph.to_json()
        assert load_graph(path).to_json() == small_graph.to_json()

    def test_gzip_output_reproducible(self, tmp_path: Path, small_graph: IslandGraph) -> None:
        """Saving twice gives identical compressed bytes."""
        save_graph(tmp_path / "a.json.gz", small_graph)
        save_graph(tmp_path / "b.json.gz", small_graph)
        assert (tmp_path / "a.json.gz").read_bytes() == (tmp_path / "b.json.gz").read_bytes()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_graph(tmp_path / "nope.json")

    def test_not_a_graph(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(GraphFormatError):
            load_graph(path)

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe{")
        with pytest.raises(GraphFormatError):
            load_graph(path)

    def test_corrupt_gzip(self, tmp_path: Path) -> None:
        """A .gz file that is not gzip data is a format error."""
        path = tmp_path / "broken.json.gz"
        path.write_bytes(b"not gzip")
        with pytest.raises(GraphFormatError):
            load_graph(path)

    def test_truncated_gzip(self, tmp_path: Path, small_graph: IslandGraph) -> None:
        path = tmp_path / "island.json.gz"
        save_graph(path, small_graph)
        path.write_bytes(path.read_bytes()[:50])
        with pytest.raises(GraphFormatError):
            load_graph(path)

    def test_creates_parent_directory(self, tmp_path: Path, small_graph: IslandGraph) -> None:
        path = tmp_path / "maps" / "2026" / "island.json"
        save_graph(path, small_graph)
        assert path.exists()
