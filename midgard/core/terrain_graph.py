"""
Terrain graph construction.

Converts a raw diagram into an explicit planar graph of cells, corners
and edges. Entities live in flat lists and refer to each other by index,
so the graph has no reference cycles and every traversal step is a list
lookup.

Orientation: the diagram engine works in an inverted-Y frame. During
ingestion every edge has its left/right cells swapped and every cell has
its half-edge order reversed, after which cell corner lists run
counter-clockwise and an edge's ``left`` cell lies on the left of
``va -> vb`` in the ordinary y-up frame.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

import structlog

from .diagram import BoundingBox, RawDiagram
from .errors import InconsistentDiagram

logger = structlog.get_logger()


class CellKind(str, Enum):
    """Display classification of a cell."""

    OCEAN = "ocean"
    LAKE = "lake"
    COAST = "coast"
    LAND = "land"


@dataclass
class Corner:
    """A vertex of the subdivision."""

    index: int
    x: float
    y: float
    border: bool = False
    edges: List[int] = field(default_factory=list)
    cells: List[int] = field(default_factory=list)
    neighbors: List[int] = field(default_factory=list)
    water: bool = False
    ocean: bool = False
    coast: bool = False
    distance: float = math.inf
    elevation: float = 0.0

    @property
    def detached(self) -> bool:
        return not (self.edges or self.cells or self.neighbors)


@dataclass
class Edge:
    """
    Edge between corners ``va`` and ``vb``.

    ``left`` and ``right`` are cell indices; ``left`` is ``None`` on the
    outer boundary, where the only cell lies on the right.
    """

    index: int
    va: int
    vb: int
    left: Optional[int] = None
    right: Optional[int] = None
    border: bool = False


@dataclass
class Cell:
    """Region owned by one site."""

    index: int
    site: int
    x: float
    y: float
    corners: List[int] = field(default_factory=list)
    edges: List[int] = field(default_factory=list)
    neighbors: List[int] = field(default_factory=list)
    border: bool = False
    water: bool = False
    ocean: bool = False
    coast: bool = False
    elevation: float = 0.0

    @property
    def kind(self) -> CellKind:
        if self.water:
            return CellKind.OCEAN if self.ocean else CellKind.LAKE
        return CellKind.COAST if self.coast else CellKind.LAND


@dataclass
class TerrainGraph:
    """Cells, corners and edges of one generated map."""

    cells: List[Cell]
    corners: List[Corner]
    edges: List[Edge]
    bordercells: List[int]

    def cell_polygon(self, index: int) -> List[Tuple[float, float]]:
        """Corner positions of a cell, counter-clockwise."""
        return [(self.corners[c].x, self.corners[c].y) for c in self.cells[index].corners]

    def delaunay_pairs(self) -> List[Tuple[int, int]]:
        """Cell index pairs sharing an interior edge (the dual triangulation)."""
        return [(e.left, e.right) for e in self.edges
                if e.left is not None and e.right is not None]


def build_terrain_graph(diagram: RawDiagram, bbox: BoundingBox) -> TerrainGraph:
    """
    Build the terrain graph from a raw diagram.

    Args:
        diagram: Engine output
        bbox: Bounding box the diagram was computed for

    Returns:
        Graph with detached corners pruned and re-indexed

    Raises:
        InconsistentDiagram: an edge references a vertex that is not in
            the vertex list, or a site that owns no cell
    """
    n_vertices = len(diagram.vertices)

    corners = [
        Corner(index=i, x=v.x, y=v.y, border=bbox.on_border(v.x, v.y))
        for i, v in enumerate(diagram.vertices)
    ]
    cell_of: Dict[int, int] = {cell.site.id: i for i, cell in enumerate(diagram.cells)}

    def cell_index(site_id: Optional[int], edge_index: int) -> Optional[int]:
        if site_id is None:
            return None
        if site_id not in cell_of:
            raise InconsistentDiagram(f"Edge {edge_index} references site {site_id} with no cell")
        return cell_of[site_id]

    edges: List[Edge] = []
    for i, raw in enumerate(diagram.edges):
        if not (0 <= raw.va < n_vertices and 0 <= raw.vb < n_vertices):
            logger.error("Edge references missing vertex", edge=i, va=raw.va, vb=raw.vb)
            raise InconsistentDiagram(f"Edge {i} references a vertex missing from the diagram")

        a, b = corners[raw.va], corners[raw.vb]
        a.edges.append(i)
        b.edges.append(i)
        a.neighbors.append(b.index)
        b.neighbors.append(a.index)

        # Swap left and right to account for the flipped y-axis.
        edges.append(Edge(
            index=i,
            va=raw.va,
            vb=raw.vb,
            left=cell_index(raw.r_site, i),
            right=cell_index(raw.l_site, i),
            border=a.border and b.border,
        ))

    cells: List[Cell] = []
    for i, raw_cell in enumerate(diagram.cells):
        cell = Cell(index=i, site=raw_cell.site.id, x=raw_cell.site.x, y=raw_cell.site.y)

        # Reverse half-edges to make them counter-clockwise in our frame
        for edge_index in reversed(raw_cell.halfedges):
            edge = edges[edge_index]
            if edge.left == i:
                start, opposite = edge.va, edge.right
            elif edge.right == i:
                start, opposite = edge.vb, edge.left
            else:
                raise InconsistentDiagram(f"Cell {i} lists edge {edge_index} it does not border")

            cell.corners.append(start)
            cell.edges.append(edge_index)
            corners[start].cells.append(i)
            if opposite is not None:
                cell.neighbors.append(opposite)

            cell.border = cell.border or edge.border

        cells.append(cell)

    corners, edges, cells = _prune_detached(corners, edges, cells)
    bordercells = [cell.index for cell in cells if cell.border]

    logger.info("Terrain graph built", cells=len(cells), corners=len(corners),
                edges=len(edges), bordercells=len(bordercells),
                pruned=n_vertices - len(corners))

    return TerrainGraph(cells=cells, corners=corners, edges=edges, bordercells=bordercells)


def _prune_detached(corners: List[Corner], edges: List[Edge], cells: List[Cell]):
    """Drop corners nothing refers to and re-index the rest."""
    kept = [corner for corner in corners if not corner.detached]
    if len(kept) == len(corners):
        return corners, edges, cells

    remap = {corner.index: new for new, corner in enumerate(kept)}
    for new, corner in enumerate(kept):
        corner.index = new
        corner.neighbors = [remap[n] for n in corner.neighbors]
    for edge in edges:
        edge.va = remap[edge.va]
        edge.vb = remap[edge.vb]
    for cell in cells:
        cell.corners = [remap[c] for c in cell.corners]

    return kept, edges, cells
