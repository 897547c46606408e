"""Command-line interface for island generation."""

import argparse
import sys
import time
import tomllib
from pathlib import Path

import structlog


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for island generation."""
    parser = argparse.ArgumentParser(description="Generate a procedural polygonal island")
    parser.add_argument(
        "--template",
        type=str,
        default=None,
        help="Island template, e.g. tropical_volcanic, archipelago, atoll",
    )
    parser.add_argument("--config", type=str, default=None, help="TOML config file")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--regions", type=int, default=None, help="Number of regions")
    parser.add_argument("--radius", type=float, default=None, help="Island radius")
    parser.add_argument(
        "--biome", type=str, default=None, help="Biome preset (tropical, temperate, arctic)"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write the graph as JSON (.json.gz for compressed)",
    )
    parser.add_argument("--validate", action="store_true", help="Validate the generated graph")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(10 if args.verbose else 20),
    )
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from pydantic import ValidationError

    from .config import IslandConfig, load_config
    from .exceptions import IslandError
    from .generator import generate
    from .persistence import save_graph
    from .templates import merge_template
    from .validation import validate_graph

    overrides: dict = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.regions is not None:
        overrides["region_count"] = args.regions
    if args.radius is not None:
        overrides["radius"] = args.radius
    if args.biome is not None:
        overrides["biome_config"] = args.biome

    try:
        if args.config:
            config = load_config(Path(args.config))
            if overrides:
                config = IslandConfig.model_validate({**config.model_dump(), **overrides})
        elif args.template:
            config = merge_template(args.template, overrides)
        else:
            config = IslandConfig.model_validate(overrides)
    except (IslandError, ValidationError, FileNotFoundError, tomllib.TOMLDecodeError) as e:
        logger.error("invalid_configuration", error=str(e))
        return 1

    print(f"Generating island with seed {config.seed} ({config.region_count} regions)")

    def log_event(name: str, fields: dict) -> None:
        logger.debug(name, **fields)

    start_time = time.time()
    graph = generate(config, on_event=log_event if args.verbose else None)
    gen_time = time.time() - start_time

    land = len(graph.land_regions())
    print()
    print(f"Generation complete in {gen_time:.2f}s")
    print(f"  Regions: {len(graph.regions)} ({land} land, {len(graph.regions) - land} ocean)")
    print(f"  Lakes:   {len(graph.lake_regions())}")
    print(
        f"  Edges:   {len(graph.edges)} ({len(graph.coastline_edges())} coastline, "
        f"{len(graph.river_edges())} river)"
    )
    print(f"  Corners: {len(graph.corners)}")
    print(f"  Land ratio: {land / len(graph.regions):.1%}")

    exit_code = 0
    if args.validate:
        result = validate_graph(graph)
        print(f"  Validation: {'passed' if result.passed else 'FAILED'}")
        for warning in result.warnings:
            print(f"    warning: {warning}")
        for error in result.errors:
            print(f"    error: {error}")
        if not result.passed:
            exit_code = 1

    if args.output:
        output_path = Path(args.output)
        save_graph(output_path, graph)
        print(f"Saved to {output_path}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
