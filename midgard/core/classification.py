"""
Land/water classification.

This module handles:
- Land/water assignment of corners from a terrain shape predicate
- Water cells from their share of water corners
- Ocean flood fill from the map border
- Coastline detection for cells and corners
"""

from typing import Set

import structlog

from .terrain_graph import TerrainGraph
from .terrain_shapes import LandPredicate

logger = structlog.get_logger()

DEFAULT_WATER_THRESHOLD = 0.3


def classify_land_water(graph: TerrainGraph, is_land: LandPredicate,
                        water_threshold: float = DEFAULT_WATER_THRESHOLD) -> None:
    """
    Mark water, ocean and coast on every cell and corner of ``graph``.

    Border cells are always water. Other cells are water when at least
    ``water_threshold`` of their corners are. Ocean is every water cell
    reachable from the border through water neighbors; remaining water
    cells are lakes.

    Args:
        graph: Graph to classify in place
        is_land: Terrain shape predicate evaluated at corner positions
        water_threshold: Fraction of water corners that makes a cell water
    """
    for corner in graph.corners:
        corner.water = not is_land(corner.x, corner.y)

    for cell in graph.cells:
        n_water = sum(1 for c in cell.corners if graph.corners[c].water)
        cell.water = cell.border or n_water >= len(cell.corners) * water_threshold
        cell.ocean = False

    _flood_fill_ocean(graph)
    _mark_coast_cells(graph)
    _refine_corners(graph)

    logger.info(
        "Land and water classified",
        water_threshold=water_threshold,
        ocean=sum(1 for c in graph.cells if c.ocean),
        lake=sum(1 for c in graph.cells if c.water and not c.ocean),
        land=sum(1 for c in graph.cells if not c.water),
        coast=sum(1 for c in graph.cells if c.coast),
    )


def _flood_fill_ocean(graph: TerrainGraph) -> None:
    """Spread ocean from the border cells through water neighbors."""
    checked: Set[int] = set(graph.bordercells)
    stack = list(graph.bordercells)

    while stack:
        cell = graph.cells[stack.pop()]
        cell.ocean = True

        for neighbor_id in cell.neighbors:
            if neighbor_id not in checked and graph.cells[neighbor_id].water:
                checked.add(neighbor_id)
                stack.append(neighbor_id)


def _mark_coast_cells(graph: TerrainGraph) -> None:
    """Coast cells: land next to ocean, or ocean next to land."""
    for cell in graph.cells:
        cell.coast = any(
            (neighbor.ocean and not cell.water) or (not neighbor.water and cell.ocean)
            for neighbor in (graph.cells[n] for n in cell.neighbors)
        )


def _refine_corners(graph: TerrainGraph) -> None:
    """Re-derive corner flags from the cells around them."""
    for corner in graph.corners:
        n_ocean = n_lake = n_land = 0
        for cell_id in corner.cells:
            cell = graph.cells[cell_id]
            if cell.ocean:
                n_ocean += 1
            elif cell.water:
                n_lake += 1
            else:
                n_land += 1

        corner.coast = n_land > 0 and n_ocean > 0
        corner.water = not corner.coast and (n_ocean + n_lake > 0)
        corner.ocean = corner.water and n_ocean > 0
