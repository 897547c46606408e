"""Graph persistence: save and load generated islands as JSON."""

import gzip
from pathlib import Path

import structlog

from .exceptions import GraphFormatError
from .graph import IslandGraph

logger = structlog.get_logger()


def _is_compressed(path: Path) -> bool:
    return path.suffix == ".gz"


def save_graph(path: Path, graph: IslandGraph) -> None:
    """Save a graph to disk.

    Writes canonical JSON, gzip-compressed when the path ends in ``.gz``.

    Args:
        path: Output path, e.g. ``island.json`` or ``island.json.gz``.
        graph: Graph to save.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = graph.to_json().encode("utf-8")
    if _is_compressed(path):
        # Fixed mtime keeps the compressed bytes reproducible
        data = gzip.compress(data, mtime=0)
    path.write_bytes(data)

    logger.info(
        "graph_saved",
        path=str(path),
        regions=len(graph.regions),
        size_kb=round(len(data) / 1024, 1),
    )


def load_graph(path: Path) -> IslandGraph:
    """Load a graph from disk.

    Args:
        path: Path written by :func:`save_graph`.

    Returns:
        Loaded IslandGraph.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        GraphFormatError: If the contents are not a supported graph.
    """
    path = Path(path)
    data = path.read_bytes()
    try:
        if _is_compressed(path):
            data = gzip.decompress(data)
        text = data.decode("utf-8")
    except (OSError, EOFError, UnicodeDecodeError) as e:
        raise GraphFormatError(f"Cannot read graph file {path}: {e}") from e

    graph = IslandGraph.from_json(text)
    logger.info("graph_loaded", path=str(path), regions=len(graph.regions))
    return graph
