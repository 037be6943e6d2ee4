"""Tests for the bounded diagram engine adapter."""

import pytest

from midgard.config import SamplingStrategy
from midgard.core.diagram import BoundingBox
from midgard.core.errors import DegenerateInput
from midgard.core.point_sampler import Site, sample

from .conftest import grid_sites


def _signed_area(points):
    area = 0.0
    for (x1, y1), (x2, y2) in zip(points, points[1:] + points[:1]):
        area += x1 * y2 - x2 * y1
    return area / 2


class TestDegenerateInput:
    """Test rejection of sites that cannot form a diagram."""

    def test_no_sites(self, engine, bbox):
        with pytest.raises(DegenerateInput):
            engine.compute([], bbox)

    def test_single_site(self, engine, bbox):
        with pytest.raises(DegenerateInput):
            engine.compute([Site(0, 0.1, 0.2)], bbox)

    def test_coincident_sites(self, engine, bbox):
        """Two copies of one point are a single distinct site."""
        with pytest.raises(DegenerateInput):
            engine.compute([Site(0, 0.3, 0.3), Site(1, 0.3, 0.3)], bbox)

    @pytest.mark.parametrize("x,y", [(1.0, 0.0), (0.0, -1.0), (1.5, 0.2), (-3.0, -3.0)])
    def test_site_outside_box(self, engine, bbox, x, y):
        with pytest.raises(DegenerateInput):
            engine.compute([Site(0, 0.0, 0.0), Site(1, x, y)], bbox)


class TestTwoSites:
    """Two sites split the box along one vertical edge."""

    @pytest.fixture
    def diagram(self, engine, bbox):
        return engine.compute([Site(0, -0.5, 0.0), Site(1, 0.5, 0.0)], bbox)

    def test_counts(self, diagram):
        assert len(diagram.cells) == 2
        assert len(diagram.vertices) == 6
        assert len(diagram.edges) == 7

    def test_every_vertex_on_box(self, diagram, bbox):
        assert all(bbox.on_border(v.x, v.y) for v in diagram.vertices)

    def test_single_interior_edge(self, diagram):
        interior = [e for e in diagram.edges if e.r_site is not None]
        assert len(interior) == 1
        edge = interior[0]
        assert {edge.l_site, edge.r_site} == {0, 1}
        a, b = diagram.vertices[edge.va], diagram.vertices[edge.vb]
        assert a.x == pytest.approx(0.0)
        assert b.x == pytest.approx(0.0)


class TestOrientation:
    """Raw output follows the inverted-Y convention."""

    @pytest.fixture
    def diagram(self, engine, bbox):
        return engine.compute(sample(60, 3, SamplingStrategy.UNIFORM), bbox)

    def test_left_site_is_left_in_inverted_frame(self, diagram):
        """``l_site`` lies to the right of va->vb when y points up."""
        sites = {cell.site.id: cell.site for cell in diagram.cells}
        for edge in diagram.edges:
            a, b = diagram.vertices[edge.va], diagram.vertices[edge.vb]
            site = sites[edge.l_site]
            cross = (b.x - a.x) * (site.y - a.y) - (b.y - a.y) * (site.x - a.x)
            assert cross < 0

    def test_cells_clockwise_when_y_up(self, diagram):
        """Boundary order is clockwise in the y-up frame."""
        for cell in diagram.cells:
            polygon = [(diagram.vertices[v].x, diagram.vertices[v].y)
                       for v in diagram.boundary_vertices(cell)]
            assert _signed_area(polygon) < 0

    def test_cells_closed(self, diagram):
        """Consecutive half-edges share an endpoint."""
        for cell in diagram.cells:
            starts = diagram.boundary_vertices(cell)
            for k, edge_index in enumerate(cell.halfedges):
                edge = diagram.edges[edge_index]
                end = edge.vb if edge.l_site == cell.site.id else edge.va
                assert end == starts[(k + 1) % len(starts)]


class TestClipping:
    """Cells tile the bounding box exactly."""

    def test_areas_sum_to_box(self, engine, bbox):
        diagram = engine.compute(sample(100, 12, SamplingStrategy.JITTERED_GRID), bbox)
        total = sum(
            -_signed_area([(diagram.vertices[v].x, diagram.vertices[v].y)
                           for v in diagram.boundary_vertices(cell)])
            for cell in diagram.cells
        )
        assert total == pytest.approx(4.0)

    def test_box_corners_are_vertices(self, engine, bbox):
        diagram = engine.compute(sample(50, 2, SamplingStrategy.UNIFORM), bbox)
        positions = {(v.x, v.y) for v in diagram.vertices}
        for corner in [(-1.0, -1.0), (-1.0, 1.0), (1.0, -1.0), (1.0, 1.0)]:
            assert corner in positions

    def test_custom_box(self, engine):
        box = BoundingBox(xl=0.0, xr=10.0, yt=0.0, yb=5.0)
        sites = [Site(0, 2.0, 1.0), Site(1, 7.0, 4.0), Site(2, 4.0, 3.0)]
        diagram = engine.compute(sites, box)
        assert len(diagram.cells) == 3
        for v in diagram.vertices:
            assert 0.0 <= v.x <= 10.0
            assert 0.0 <= v.y <= 5.0


class TestDegenerateGeometry:
    """Cocircular sites produce merged vertices."""

    def test_square_corner_sites(self, engine, bbox):
        """Four symmetric sites meet in a single centre vertex."""
        diagram = engine.compute(grid_sites([-0.5, 0.5]), bbox)
        assert len(diagram.cells) == 4
        assert len(diagram.vertices) == 9
        assert len(diagram.edges) == 12
        assert all(len(cell.halfedges) == 4 for cell in diagram.cells)

    def test_duplicate_site_gets_no_cell(self, engine, bbox):
        sites = [Site(0, -0.5, 0.0), Site(1, 0.5, 0.0), Site(2, 0.5, 0.0)]
        diagram = engine.compute(sites, bbox)
        assert [cell.site.id for cell in diagram.cells] == [0, 1]


class TestRecompute:
    """The engine can be invoked repeatedly."""

    def test_recycle_then_recompute(self, engine, bbox):
        sites = sample(40, 6, SamplingStrategy.UNIFORM)
        first = engine.compute(sites, bbox)
        n_edges = len(first.edges)
        engine.recycle(first)
        assert first.edges == [] and first.cells == [] and first.vertices == []

        second = engine.compute(sites, bbox)
        assert len(second.edges) == n_edges
        assert engine.compute_count == 2

    def test_general_position_vertex_count(self, engine, bbox):
        """Bounded diagrams in general position have 2n + 2 vertices."""
        sites = sample(80, 31, SamplingStrategy.UNIFORM)
        diagram = engine.compute(sites, bbox)
        assert len(diagram.vertices) == 2 * len(sites) + 2
