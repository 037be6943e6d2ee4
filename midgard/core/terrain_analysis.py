"""
Terrain statistics.

Summaries used by the API, the CLI and the test-suite to judge a
generated map without rendering it.
"""

from dataclasses import asdict, dataclass
from typing import Dict

import numpy as np
from scipy.spatial import cKDTree

from .terrain import Terrain
from .terrain_graph import CellKind


@dataclass
class NearestNeighborStats:
    """Nearest-neighbor distance statistics of a point set."""

    mean: float
    variance: float


@dataclass
class TerrainSummary:
    """Counts and elevation figures of a generated terrain."""

    cells: int
    corners: int
    edges: int
    border_cells: int
    ocean_cells: int
    lake_cells: int
    coast_cells: int
    land_cells: int
    water_corners: int
    coast_corners: int
    max_elevation: float
    mean_land_elevation: float

    def to_dict(self) -> Dict:
        return asdict(self)


def nearest_neighbor_stats(points: np.ndarray) -> NearestNeighborStats:
    """
    Mean and variance of each point's distance to its nearest neighbor.

    A lower variance means a more even point distribution.
    """
    points = np.asarray(points, dtype=np.float64)
    if len(points) < 2:
        return NearestNeighborStats(mean=0.0, variance=0.0)

    distances, _ = cKDTree(points).query(points, k=2)
    nearest = distances[:, 1]
    return NearestNeighborStats(mean=float(nearest.mean()), variance=float(nearest.var()))


def summarize_terrain(terrain: Terrain) -> TerrainSummary:
    """Collect counts and elevation figures for ``terrain``."""
    graph = terrain.graph
    kinds = [cell.kind for cell in graph.cells]
    land_elevations = [cell.elevation for cell in graph.cells if not cell.water]

    return TerrainSummary(
        cells=len(graph.cells),
        corners=len(graph.corners),
        edges=len(graph.edges),
        border_cells=len(graph.bordercells),
        ocean_cells=kinds.count(CellKind.OCEAN),
        lake_cells=kinds.count(CellKind.LAKE),
        coast_cells=sum(1 for cell in graph.cells if cell.coast),
        land_cells=len(land_elevations),
        water_corners=sum(1 for corner in graph.corners if corner.water),
        coast_corners=sum(1 for corner in graph.corners if corner.coast),
        max_elevation=float(terrain.max_elevation),
        mean_land_elevation=float(np.mean(land_elevations)) if land_elevations else 0.0,
    )
