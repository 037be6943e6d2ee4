"""Lloyd relaxation of diagram sites."""

from typing import Sequence

import structlog

from .diagram import BoundingBox, DiagramEngine, RawDiagram
from .point_sampler import Site

logger = structlog.get_logger()


def relax(sites: Sequence[Site], diagram: RawDiagram, passes: int,
          engine: DiagramEngine, bbox: BoundingBox) -> RawDiagram:
    """
    Apply Lloyd's relaxation to improve site distribution.

    Each pass moves every site to the average of its cell's corners and
    recomputes the diagram. The corner average is not the area-weighted
    centroid, but it converges toward an even tiling just the same.
    Sites are updated in place.

    Args:
        sites: Sites the diagram was computed from
        diagram: Diagram of ``sites``
        passes: Number of relaxation passes; zero returns ``diagram``
        engine: Engine used to recompute the diagram
        bbox: Bounding box

    Returns:
        Diagram of the relaxed sites
    """
    if passes <= 0:
        return diagram

    logger.info("Starting Lloyd's relaxation", passes=passes, sites=len(sites))

    for iteration in range(passes):
        for cell in diagram.cells:
            corners = diagram.boundary_vertices(cell)
            if not corners:
                continue
            cell.site.x = sum(diagram.vertices[v].x for v in corners) / len(corners)
            cell.site.y = sum(diagram.vertices[v].y for v in corners) / len(corners)

        engine.recycle(diagram)
        diagram = engine.compute(sites, bbox)

        logger.debug("Relaxation pass complete", iteration=iteration + 1)

    return diagram
