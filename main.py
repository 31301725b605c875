#!/usr/bin/env python3
"""
roomgrid - command line entry point.

Generates a room layout from the built-in catalog (or a saved catalog file)
and writes it as JSON, with an optional ASCII map and debug graph.

Usage:
    python main.py --rooms 20
    python main.py --rooms 20 --seed 42 --ascii --graph dot
    python main.py --rooms 8 --catalog my_catalog.json --output-dir out
"""

import argparse
import logging
import sys

from roomgrid.conversion.layout_export import render_ascii
from roomgrid.generators.errors import GenerationError
from roomgrid.generators.templates import build_default_catalog, load_catalog
from roomgrid.pipeline import GenerationPipeline, GenerationSettings, PipelineError
from roomgrid.validation import ValidationError

logger = logging.getLogger("roomgrid.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Assemble a room layout on a grid by backtracking placement."
    )
    parser.add_argument("--rooms", type=int, required=True,
                        help="Total number of rooms to place (including the start room).")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for reproducible layouts (random if omitted).")
    parser.add_argument("--catalog", type=str, default=None,
                        help="Catalog JSON file (built-in templates if omitted).")
    parser.add_argument("--start", type=str, default=None,
                        help="Template id of the start room.")
    parser.add_argument("--attempts", type=int, default=5,
                        help="Re-seeded attempts before giving up.")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Placement attempts allowed per search (unbounded if omitted).")
    parser.add_argument("--output-dir", type=str, default=None,
                        help="Directory for exported files (default: output/layouts).")
    parser.add_argument("--name", type=str, default="generated_layout",
                        help="Base name of exported files.")
    parser.add_argument("--ascii", action="store_true",
                        help="Also write the layout as an ASCII map and print it.")
    parser.add_argument("--graph", choices=("dot", "json"), default=None,
                        help="Write a debug graph of the layout.")
    parser.add_argument("--strict", action="store_true",
                        help="Treat validation warnings as failures.")
    parser.add_argument("--verbose", action="store_true",
                        help="Log at DEBUG level.")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        catalog = load_catalog(args.catalog) if args.catalog else build_default_catalog()
        settings = GenerationSettings(
            total_rooms=args.rooms,
            seed=args.seed,
            start_template=args.start,
            max_attempts=args.attempts,
            max_steps=args.max_steps,
            output_dir=args.output_dir,
            map_name=args.name,
            export_ascii=args.ascii,
            enable_graph_dump=args.graph is not None,
            graph_dump_format=args.graph or "dot",
            strict_validation=args.strict,
            verbose=args.verbose,
        )
        result = GenerationPipeline(settings, catalog).generate()
    except (GenerationError, PipelineError) as e:
        logger.error("%s", e)
        return 1
    except ValidationError as e:
        logger.error("Validation failed\n%s", e.result.report())
        return 1

    for warning in result.warnings:
        logger.warning("%s", warning)
    if not result.success:
        for error in result.errors:
            logger.error("%s", error)
        return 1

    logger.info("Placed %d rooms with seed %d in %d attempt(s)",
                result.room_count, result.seed, result.attempts)
    for path in result.output_files:
        logger.info("Wrote %s", path)
    if args.ascii:
        print(render_ascii(result.layout))
    return 0


if __name__ == "__main__":
    sys.exit(main())
