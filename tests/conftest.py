"""Shared fixtures for the terrain tests."""

import itertools

import pytest

from midgard.core.diagram import BoundingBox, DiagramEngine
from midgard.core.point_sampler import Site
from midgard.core.terrain_graph import build_terrain_graph


def grid_sites(coordinates):
    """Sites on the cartesian product of ``coordinates``, row by row."""
    return [
        Site(id=i, x=x, y=y)
        for i, (y, x) in enumerate(itertools.product(coordinates, coordinates))
    ]


@pytest.fixture
def bbox():
    return BoundingBox()


@pytest.fixture
def engine():
    return DiagramEngine()


@pytest.fixture
def build_graph(bbox, engine):
    """Build a terrain graph straight from a list of sites."""

    def _build(sites):
        return build_terrain_graph(engine.compute(sites, bbox), bbox)

    return _build
