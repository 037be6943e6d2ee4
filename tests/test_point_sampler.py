"""Tests for initial site sampling."""

import math

import numpy as np
import pytest
from scipy.spatial import cKDTree

from midgard.config import SamplingStrategy
from midgard.core.alea_prng import AleaPRNG
from midgard.core.errors import InvalidCount
from midgard.core.point_sampler import PoissonDiscStrategy, sample, sites_to_array


class TestAleaPRNG:
    """Test the seeded generator."""

    def test_same_seed_same_sequence(self):
        """Two generators with one seed agree."""
        a, b = AleaPRNG("seed"), AleaPRNG("seed")
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_int_and_string_seeds_agree(self):
        """Seeds are hashed through their string form."""
        a, b = AleaPRNG(42), AleaPRNG("42")
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_range(self):
        """Values fall in [0, 1)."""
        prng = AleaPRNG(7)
        values = [prng.random() for _ in range(1000)]
        assert min(values) >= 0.0
        assert max(values) < 1.0
        assert prng.call_count == 1000

    def test_randrange(self):
        """Integer draws stay in range and reject empty ranges."""
        prng = AleaPRNG(3)
        draws = [prng.randrange(5) for _ in range(200)]
        assert set(draws) == {0, 1, 2, 3, 4}
        with pytest.raises(ValueError):
            prng.randrange(0)


class TestSample:
    """Test the sampling entry point."""

    @pytest.mark.parametrize("count", [0, -1, -100])
    def test_invalid_count(self, count):
        """Non-positive counts are rejected."""
        with pytest.raises(InvalidCount):
            sample(count, 1, SamplingStrategy.UNIFORM)

    @pytest.mark.parametrize("strategy", list(SamplingStrategy))
    def test_points_strictly_inside(self, strategy):
        """Every strategy keeps points inside the open square."""
        points = sites_to_array(sample(200, 11, strategy))
        assert len(points) > 0
        assert np.all(points > -1.0)
        assert np.all(points < 1.0)

    @pytest.mark.parametrize("strategy", list(SamplingStrategy))
    def test_deterministic(self, strategy):
        """Same arguments give the same sites."""
        first = sites_to_array(sample(150, "abc", strategy))
        second = sites_to_array(sample(150, "abc", strategy))
        np.testing.assert_array_equal(first, second)

    @pytest.mark.parametrize("strategy", list(SamplingStrategy))
    def test_different_seeds(self, strategy):
        """Different seeds give different sites."""
        first = sites_to_array(sample(150, 1, strategy))
        second = sites_to_array(sample(150, 2, strategy))
        assert first.shape != second.shape or not np.array_equal(first, second)

    def test_ids_are_sequential(self):
        """Site ids number the result from zero."""
        sites = sample(30, 5, SamplingStrategy.UNIFORM)
        assert [s.id for s in sites] == list(range(len(sites)))

    def test_uniform_exact_count(self):
        """Uniform sampling returns exactly the requested count."""
        assert len(sample(123, 9, SamplingStrategy.UNIFORM)) == 123


class TestJitteredGrid:
    """Test jittered grid sampling."""

    @pytest.mark.parametrize("requested,actual", [(1, 1), (10, 9), (100, 100), (130, 121)])
    def test_rounds_to_square(self, requested, actual):
        """The grid holds a perfect square number of points."""
        assert len(sample(requested, 1, SamplingStrategy.JITTERED_GRID)) == actual

    def test_jitter_stays_in_grid_square(self):
        """Each point stays within its own grid square."""
        side = 10
        spacing = 2.0 / side
        points = sites_to_array(sample(side * side, 4, SamplingStrategy.JITTERED_GRID))

        for k, (x, y) in enumerate(points):
            row, col = divmod(k, side)
            assert -1 + col * spacing < x < -1 + (col + 1) * spacing
            assert -1 + row * spacing < y < -1 + (row + 1) * spacing


class TestPoissonDisc:
    """Test Poisson-disc sampling."""

    def test_minimum_distance(self):
        """No two samples are closer than the disc radius."""
        n = 200
        points = sites_to_array(sample(n, 8, SamplingStrategy.POISSON_DISC))
        radius = math.sqrt(PoissonDiscStrategy.packing_density * 4.0 / n)

        distances, _ = cKDTree(points).query(points, k=2)
        assert distances[:, 1].min() >= radius * (1 - 1e-12)

    def test_count_near_request(self):
        """The packing produces roughly the requested count."""
        n = 300
        actual = len(sample(n, 21, SamplingStrategy.POISSON_DISC))
        assert 0.5 * n <= actual <= 1.6 * n
