#!/usr/bin/env python3
"""
Command line entry point.

Usage:
    midgard generate [--seed N] [--polygons N] [--strategy S] [--shape S]
                     [--passes N] [--threshold F] [--radius F]
                     [--octaves N] [--persistence F]
    midgard serve [--host H] [--port P]
"""

import argparse
import json
import sys

import structlog
from pydantic import ValidationError

from .config import GenerationRequest, SamplingStrategy, TerrainShape, settings
from .core.errors import MidgardError
from .core.terrain import generate_terrain
from .core.terrain_analysis import summarize_terrain
from .utils.logging import configure_logging

logger = structlog.get_logger()


def _request_default(name: str):
    return GenerationRequest.model_fields[name].default


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="midgard", description="Procedural Voronoi terrain generator")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument("--log-format", default=settings.log_format,
                        choices=["json", "console"], help="Log output format")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a terrain and print its summary")
    generate.add_argument("--seed", type=int, default=0, help="Random seed")
    generate.add_argument("--polygons", type=int, default=settings.default_polygon_count,
                          help="Requested number of polygons")
    generate.add_argument("--strategy", default=SamplingStrategy.JITTERED_GRID.value,
                          choices=[s.value for s in SamplingStrategy], help="Point sampling strategy")
    generate.add_argument("--shape", default=TerrainShape.PERLIN_ISLAND.value,
                          choices=[s.value for s in TerrainShape], help="Terrain shape")
    generate.add_argument("--passes", type=int, default=settings.default_relaxation_passes,
                          help="Lloyd relaxation passes")
    generate.add_argument("--threshold", type=float, default=settings.default_water_threshold,
                          help="Fraction of water corners that makes a cell water")
    generate.add_argument("--radius", type=float, default=_request_default("circular_island_radius"),
                          help="Circular island radius")
    generate.add_argument("--octaves", type=int, default=_request_default("perlin_world_octaves"),
                          help="Perlin world octaves")
    generate.add_argument("--persistence", type=float,
                          default=_request_default("perlin_world_persistence"),
                          help="Perlin world amplitude falloff per octave")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=settings.api_host, help="Bind address")
    serve.add_argument("--port", type=int, default=settings.api_port, help="Port")

    return parser


def run_generate(args: argparse.Namespace) -> int:
    try:
        request = GenerationRequest(
            polygon_count=args.polygons,
            seed=args.seed,
            sampling_strategy=args.strategy,
            terrain_shape=args.shape,
            relaxation_passes=args.passes,
            water_threshold=args.threshold,
            circular_island_radius=args.radius,
            perlin_world_octaves=args.octaves,
            perlin_world_persistence=args.persistence,
        )
        terrain = generate_terrain(request)
    except (ValidationError, MidgardError) as e:
        logger.error("Generation failed", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 2

    summary = summarize_terrain(terrain).to_dict()
    summary["request"] = request.model_dump(mode="json")
    print(json.dumps(summary, indent=2))
    return 0


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("midgard.api.main:app", host=args.host, port=args.port)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    if args.command == "generate":
        return run_generate(args)
    return run_serve(args)


if __name__ == "__main__":
    sys.exit(main())
