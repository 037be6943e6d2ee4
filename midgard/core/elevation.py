"""
Elevation assignment.

Corner elevation grows with the square of the land distance from the
map border: steps between two land corners cost one, steps touching
water cost nothing, so lakes and the ocean do not add height. The
quadratic keeps coastal terrain flat and interiors steep.
"""

import math
from collections import deque

import structlog

from .errors import UnreachableElevation
from .terrain_graph import TerrainGraph

logger = structlog.get_logger()


def assign_elevation(graph: TerrainGraph) -> float:
    """
    Set ``distance`` and ``elevation`` on every corner and cell.

    Distances come from a multi-source 0-1 BFS seeded with all border
    corners: zero-cost steps go to the front of the deque, unit steps to
    the back, and a corner is re-queued whenever its distance improves.
    The queue is always drained completely.

    Args:
        graph: Classified graph

    Returns:
        Maximum corner elevation

    Raises:
        UnreachableElevation: no border corner exists, or some corner
            cannot be reached from the border
    """
    queue = deque()
    for corner in graph.corners:
        if corner.border:
            corner.distance = 0
            corner.elevation = 0
            queue.append(corner.index)
        else:
            corner.distance = math.inf
            corner.elevation = math.inf

    if not queue:
        logger.error("No border corners to propagate elevation from", corners=len(graph.corners))
        raise UnreachableElevation("Graph has no border corners")

    while queue:
        corner = graph.corners[queue.popleft()]

        for neighbor_id in corner.neighbors:
            neighbor = graph.corners[neighbor_id]
            step = 0 if corner.water or neighbor.water else 1
            distance = corner.distance + step

            if distance < neighbor.distance:
                neighbor.distance = distance
                neighbor.elevation = distance * distance
                if step == 0:
                    queue.appendleft(neighbor_id)
                else:
                    queue.append(neighbor_id)

    unreached = [c.index for c in graph.corners if math.isinf(c.distance)]
    if unreached:
        logger.error("Corners unreachable from border", count=len(unreached))
        raise UnreachableElevation(f"{len(unreached)} corners cannot be reached from the border")

    max_elevation = max((c.elevation for c in graph.corners), default=0)

    for cell in graph.cells:
        cell.elevation = sum(graph.corners[c].elevation for c in cell.corners) / len(cell.corners)

    logger.info("Elevation assigned", max_elevation=max_elevation)

    return max_elevation
