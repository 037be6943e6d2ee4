"""
Core terrain generation functionality.
"""

from .diagram import BoundingBox, DiagramEngine, RawDiagram
from .errors import (
    DegenerateInput, InconsistentDiagram, InvalidCount, MidgardError, UnreachableElevation
)
from .point_sampler import Site, sample
from .terrain import Terrain, generate_terrain
from .terrain_graph import Cell, CellKind, Corner, Edge, TerrainGraph, build_terrain_graph

__all__ = ['BoundingBox', 'DiagramEngine', 'RawDiagram',
           'DegenerateInput', 'InconsistentDiagram', 'InvalidCount', 'MidgardError',
           'UnreachableElevation', 'Site', 'sample', 'Terrain', 'generate_terrain',
           'Cell', 'CellKind', 'Corner', 'Edge', 'TerrainGraph', 'build_terrain_graph']
