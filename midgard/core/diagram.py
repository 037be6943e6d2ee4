"""
Bounded Voronoi diagram engine adapter.

Wraps ``scipy.spatial.Voronoi`` (Qhull) and turns its output into a
diagram clipped to a bounding box, in the layout the graph builder
consumes: vertices, edges carrying their left/right sites, and cells
listing their boundary half-edges in order.

Clipping uses the mirror trick: every site is reflected across each of
the four box edges before Qhull runs. The ridge between a site and its
own reflection lies exactly on the box edge, so the cells of the real
sites come out already clipped to the box.

The box uses an inverted-Y convention (``yt`` is the top edge with the
origin conceptually in the upper-left corner), and raw output follows
it: an edge's ``l_site`` lies on the left of ``va -> vb`` in the y-down
frame, and every cell lists its half-edges counter-clockwise in that
frame. Consumers working in the usual y-up frame must flip both.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog
from scipy.spatial import Voronoi, cKDTree

from .errors import DegenerateInput, InconsistentDiagram
from .point_sampler import Site, sites_to_array

logger = structlog.get_logger()

# Coordinates closer than this (relative to the box extent) are the same point.
EPSILON = 1e-9


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned generation area, inverted-Y (``yt`` above ``yb``)."""

    xl: float = -1.0
    xr: float = 1.0
    yt: float = -1.0
    yb: float = 1.0

    @property
    def x_min(self) -> float:
        return min(self.xl, self.xr)

    @property
    def x_max(self) -> float:
        return max(self.xl, self.xr)

    @property
    def y_min(self) -> float:
        return min(self.yt, self.yb)

    @property
    def y_max(self) -> float:
        return max(self.yt, self.yb)

    @property
    def extent(self) -> float:
        return max(self.x_max - self.x_min, self.y_max - self.y_min)

    @property
    def tolerance(self) -> float:
        """Absolute merge/border tolerance for this box."""
        return EPSILON * self.extent

    def strictly_contains(self, x: float, y: float) -> bool:
        return self.x_min < x < self.x_max and self.y_min < y < self.y_max

    def on_border(self, x: float, y: float) -> bool:
        tol = self.tolerance
        return (abs(x - self.xl) < tol or abs(x - self.xr) < tol or
                abs(y - self.yb) < tol or abs(y - self.yt) < tol)


@dataclass
class RawVertex:
    """Diagram vertex; its index in ``RawDiagram.vertices`` is its id."""

    x: float
    y: float


@dataclass
class RawEdge:
    """
    Diagram edge between two vertex indices.

    ``l_site`` / ``r_site`` are site ids. ``r_site`` is ``None`` for edges
    on the outer boundary.
    """

    va: int
    vb: int
    l_site: Optional[int]
    r_site: Optional[int] = None


@dataclass
class RawCell:
    """Cell of one site; ``halfedges`` are edge indices in boundary order."""

    site: Site
    halfedges: List[int] = field(default_factory=list)


@dataclass
class RawDiagram:
    """Raw engine output."""

    cells: List[RawCell]
    edges: List[RawEdge]
    vertices: List[RawVertex]

    def halfedge_start(self, cell: RawCell, edge_index: int) -> int:
        """Vertex a half-edge starts from, in the engine's own orientation."""
        edge = self.edges[edge_index]
        return edge.va if edge.l_site == cell.site.id else edge.vb

    def boundary_vertices(self, cell: RawCell) -> List[int]:
        """Boundary vertex indices of a cell, in engine order."""
        return [self.halfedge_start(cell, e) for e in cell.halfedges]


class _UnionFind:
    """Disjoint sets over ``0..n-1``; the smallest index represents a set."""

    def __init__(self, n: int):
        self.parent = list(range(n))

    def find(self, i: int) -> int:
        root = i
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[i] != root:
            self.parent[i], i = root, self.parent[i]
        return root

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            self.parent[max(ra, rb)] = min(ra, rb)


def _cross(ax: float, ay: float, bx: float, by: float, px: float, py: float) -> float:
    """Z component of ``(b - a) x (p - a)``; positive when p is left of a->b (y-up)."""
    return (bx - ax) * (py - ay) - (by - ay) * (px - ax)


class DiagramEngine:
    """
    Computes bounded diagrams for site sets.

    The engine keeps no geometry between calls; ``recycle`` exists so
    callers can release a diagram explicitly before recomputing.
    """

    def __init__(self, qhull_options: Optional[str] = None):
        self.qhull_options = qhull_options
        self.compute_count = 0

    def recycle(self, diagram: RawDiagram) -> None:
        """Release a diagram produced by this engine."""
        diagram.cells.clear()
        diagram.edges.clear()
        diagram.vertices.clear()

    def compute(self, sites: Sequence[Site], bbox: BoundingBox) -> RawDiagram:
        """
        Compute the diagram of ``sites`` clipped to ``bbox``.

        Duplicate sites (within tolerance) get no cell.

        Raises:
            DegenerateInput: fewer than 2 distinct sites, or a site that is
                not strictly inside the box
        """
        sites = list(sites)
        if len(sites) < 2:
            logger.error("Too few sites for a diagram", sites=len(sites))
            raise DegenerateInput(f"Need at least 2 distinct sites, got {len(sites)}")

        for site in sites:
            if not bbox.strictly_contains(site.x, site.y):
                logger.error("Site outside bounding box", site=site.id, x=site.x, y=site.y)
                raise DegenerateInput(
                    f"Site {site.id} at ({site.x}, {site.y}) is not inside the bounding box"
                )

        distinct = self._distinct_sites(sites, bbox.tolerance)
        if len(distinct) < 2:
            logger.error("Too few distinct sites for a diagram", sites=len(sites))
            raise DegenerateInput("Need at least 2 distinct sites")

        points = sites_to_array(distinct)
        n = len(points)
        vor = Voronoi(self._mirror(points, bbox), qhull_options=self.qhull_options)
        self.compute_count += 1

        vertices, vertex_map = self._merge_vertices(vor, n, bbox)

        edges: List[RawEdge] = []
        for (p, q), ridge in zip(vor.ridge_points, vor.ridge_vertices):
            if p >= n and q >= n:
                continue
            if -1 in ridge or len(ridge) != 2:
                raise InconsistentDiagram(f"Unbounded ridge between sites {p} and {q}")

            va, vb = vertex_map[ridge[0]], vertex_map[ridge[1]]
            if va == vb:
                # collapsed by vertex merging
                continue

            a, b = vertices[va], vertices[vb]
            if p >= n:
                p, q = q, p
            site = distinct[p]

            if q >= n:
                # outer boundary edge: keep the site on the left (y-down)
                if _cross(a.x, a.y, b.x, b.y, site.x, site.y) > 0:
                    va, vb = vb, va
                edges.append(RawEdge(va=va, vb=vb, l_site=site.id, r_site=None))
            else:
                other = distinct[q]
                if _cross(a.x, a.y, b.x, b.y, site.x, site.y) > 0:
                    edges.append(RawEdge(va=va, vb=vb, l_site=other.id, r_site=site.id))
                else:
                    edges.append(RawEdge(va=va, vb=vb, l_site=site.id, r_site=other.id))

        cells = self._assemble_cells(distinct, edges, vertices)

        logger.debug("Diagram computed", sites=len(sites), cells=len(cells),
                     edges=len(edges), vertices=len(vertices))

        return RawDiagram(cells=cells, edges=edges, vertices=vertices)

    @staticmethod
    def _distinct_sites(sites: List[Site], tolerance: float) -> List[Site]:
        tree = cKDTree(sites_to_array(sites))
        # query_pairs yields i < j; the lowest index of each cluster survives
        duplicates = {j for _, j in tree.query_pairs(tolerance)}
        if duplicates:
            logger.debug("Ignoring duplicate sites", count=len(duplicates))
        return [site for k, site in enumerate(sites) if k not in duplicates]

    @staticmethod
    def _mirror(points: np.ndarray, bbox: BoundingBox) -> np.ndarray:
        left = points.copy()
        left[:, 0] = 2 * bbox.x_min - left[:, 0]
        right = points.copy()
        right[:, 0] = 2 * bbox.x_max - right[:, 0]
        top = points.copy()
        top[:, 1] = 2 * bbox.y_min - top[:, 1]
        bottom = points.copy()
        bottom[:, 1] = 2 * bbox.y_max - bottom[:, 1]
        return np.vstack([points, left, right, top, bottom])

    @staticmethod
    def _merge_vertices(vor: Voronoi, n: int, bbox: BoundingBox):
        """
        Collect vertices used by real cells, snap them onto the box and
        merge coincident ones.

        Returns:
            Tuple of (vertices, mapping from Qhull vertex index to new index)
        """
        used = sorted({
            v
            for (p, q), ridge in zip(vor.ridge_points, vor.ridge_vertices)
            if p < n or q < n
            for v in ridge
            if v != -1
        })
        coords = vor.vertices[used].copy()

        tol = bbox.tolerance
        for column, bounds in ((0, (bbox.x_min, bbox.x_max)), (1, (bbox.y_min, bbox.y_max))):
            for bound in bounds:
                near = np.abs(coords[:, column] - bound) < tol
                coords[near, column] = bound

        merged = _UnionFind(len(used))
        for i, j in cKDTree(coords).query_pairs(tol):
            merged.union(i, j)

        vertices: List[RawVertex] = []
        new_index: Dict[int, int] = {}
        vertex_map: Dict[int, int] = {}
        for k, qhull_index in enumerate(used):
            root = merged.find(k)
            if root not in new_index:
                new_index[root] = len(vertices)
                vertices.append(RawVertex(x=float(coords[root, 0]), y=float(coords[root, 1])))
            vertex_map[qhull_index] = new_index[root]

        return vertices, vertex_map

    @staticmethod
    def _assemble_cells(sites: List[Site], edges: List[RawEdge],
                        vertices: List[RawVertex]) -> List[RawCell]:
        cells = [RawCell(site=site) for site in sites]
        cell_of = {site.id: k for k, site in enumerate(sites)}

        for index, edge in enumerate(edges):
            cells[cell_of[edge.l_site]].halfedges.append(index)
            if edge.r_site is not None:
                cells[cell_of[edge.r_site]].halfedges.append(index)

        # Sort by the angle of each edge's midpoint around the site,
        # descending: clockwise when y points up.
        for cell in cells:
            def angle(edge_index: int) -> float:
                edge = edges[edge_index]
                a, b = vertices[edge.va], vertices[edge.vb]
                return math.atan2((a.y + b.y) / 2 - cell.site.y, (a.x + b.x) / 2 - cell.site.x)

            cell.halfedges.sort(key=angle, reverse=True)

        return cells
