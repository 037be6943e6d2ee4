"""
Terrain generation pipeline.

Runs point sampling, diagram computation, Lloyd relaxation, graph
construction, land/water classification and elevation assignment, in
that order, for one :class:`GenerationRequest`.
"""

import time
from dataclasses import dataclass
from typing import List, Optional

import structlog

from ..config.generation import GenerationRequest
from .classification import classify_land_water
from .diagram import BoundingBox, DiagramEngine
from .elevation import assign_elevation
from .point_sampler import DOMAIN_MAX, DOMAIN_MIN, Site, sample
from .relaxation import relax
from .terrain_graph import Cell, TerrainGraph, build_terrain_graph
from .terrain_shapes import NoiseField, land_predicate

logger = structlog.get_logger()

# Sampling domain as an engine box; the engine uses an upper-left origin, hence yt < yb.
DEFAULT_BOUNDING_BOX = BoundingBox(xl=DOMAIN_MIN, xr=DOMAIN_MAX, yt=DOMAIN_MIN, yb=DOMAIN_MAX)


@dataclass
class Terrain:
    """A generated map: the classified graph plus what produced it."""

    request: GenerationRequest
    sites: List[Site]
    graph: TerrainGraph
    max_elevation: float
    bbox: BoundingBox = DEFAULT_BOUNDING_BOX

    @property
    def polygon_count(self) -> int:
        """Actual number of polygons (may differ from the request)."""
        return len(self.graph.cells)

    def normalized_elevation(self, cell: Cell) -> float:
        """Cell elevation scaled to ``[0, 1]``."""
        if self.max_elevation <= 0:
            return 0.0
        return cell.elevation / self.max_elevation


def generate_terrain(request: GenerationRequest,
                     engine: Optional[DiagramEngine] = None) -> Terrain:
    """
    Generate a complete terrain for ``request``.

    The result is a pure function of the request: sampling and noise are
    both seeded from ``request.seed``. The map always covers the sampling
    domain, ``DEFAULT_BOUNDING_BOX``.

    Args:
        request: Generation parameters
        engine: Diagram engine; a fresh one is created when omitted

    Returns:
        Fully classified terrain with elevations
    """
    started = time.perf_counter()
    engine = engine or DiagramEngine()
    bbox = DEFAULT_BOUNDING_BOX

    logger.info("Generating terrain",
                seed=request.seed,
                polygon_count=request.polygon_count,
                sampling_strategy=request.sampling_strategy.value,
                terrain_shape=request.terrain_shape.value,
                relaxation_passes=request.relaxation_passes)

    sites = sample(request.polygon_count, request.seed, request.sampling_strategy)

    diagram = engine.compute(sites, bbox)
    diagram = relax(sites, diagram, request.relaxation_passes, engine, bbox)

    graph = build_terrain_graph(diagram, bbox)

    is_land = land_predicate(request, NoiseField(request.seed))
    classify_land_water(graph, is_land, request.water_threshold)

    max_elevation = assign_elevation(graph)

    logger.info("Terrain generated",
                polygons=len(graph.cells),
                max_elevation=max_elevation,
                elapsed_seconds=round(time.perf_counter() - started, 3))

    return Terrain(request=request, sites=sites, graph=graph,
                   max_elevation=max_elevation, bbox=bbox)
