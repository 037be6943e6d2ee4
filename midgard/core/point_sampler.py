"""
Initial site sampling.

Sites are scattered over the open square ``(-1, 1)^2`` using a pluggable
strategy. Strategies may return a different number of points than was
requested (the jittered grid rounds to a perfect square, Poisson-disc
sampling is only approximately sized), so callers must always re-read
the count from the result.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
import structlog

from ..config.generation import SamplingStrategy
from .alea_prng import AleaPRNG
from .errors import InvalidCount

logger = structlog.get_logger()

# Sampling domain; the diagram bounding box uses the same extent.
DOMAIN_MIN = -1.0
DOMAIN_MAX = 1.0
DOMAIN_SIZE = DOMAIN_MAX - DOMAIN_MIN


@dataclass
class Site:
    """A point owning one cell of the diagram.

    ``id`` is stable for the lifetime of a generation run; ``x`` and ``y``
    are rewritten in place by Lloyd relaxation.
    """

    id: int
    x: float
    y: float


class PointStrategy:
    """Base class for sampling strategies."""

    def __init__(self, prng: AleaPRNG):
        self.prng = prng

    def produce(self, count: int) -> np.ndarray:
        """Return an ``(m, 2)`` array of points inside ``(-1, 1)^2``."""
        raise NotImplementedError


class UniformStrategy(PointStrategy):
    """Independent uniformly distributed points."""

    def produce(self, count: int) -> np.ndarray:
        points = [
            (self.prng.open_uniform(DOMAIN_MIN, DOMAIN_MAX),
             self.prng.open_uniform(DOMAIN_MIN, DOMAIN_MAX))
            for _ in range(count)
        ]
        return np.array(points, dtype=np.float64)


class JitteredGridStrategy(PointStrategy):
    """
    Jittered square grid.

    Creates a regular ``side x side`` grid and displaces every point by
    up to 90% of half the spacing, which keeps points inside their grid
    square and therefore strictly inside the domain.
    """

    def produce(self, count: int) -> np.ndarray:
        side = max(1, int(round(math.sqrt(count))))
        spacing = DOMAIN_SIZE / side

        radius = spacing / 2
        jittering = radius * 0.9  # max deviation
        double_jittering = jittering * 2

        def jitter() -> float:
            return self.prng.random() * double_jittering - jittering

        points = []
        for row in range(side):
            y = DOMAIN_MIN + radius + row * spacing
            for col in range(side):
                x = DOMAIN_MIN + radius + col * spacing
                points.append((x + jitter(), y + jitter()))

        return np.array(points, dtype=np.float64)


class PoissonDiscStrategy(PointStrategy):
    """
    Bridson's Poisson-disc sampling.

    The minimum distance is chosen so a maximal packing of the domain
    holds roughly ``count`` points.
    """

    max_attempts = 30
    # Bridson packings reach a density of roughly 0.7 / r^2
    packing_density = 0.7

    def produce(self, count: int) -> np.ndarray:
        area = DOMAIN_SIZE * DOMAIN_SIZE
        min_distance = math.sqrt(self.packing_density * area / count)
        min_distance_sq = min_distance * min_distance

        cell_size = min_distance / math.sqrt(2.0)
        grid: Dict[Tuple[int, int], int] = {}

        def grid_key(x: float, y: float) -> Tuple[int, int]:
            return int((x - DOMAIN_MIN) / cell_size), int((y - DOMAIN_MIN) / cell_size)

        x0 = self.prng.open_uniform(DOMAIN_MIN, DOMAIN_MAX)
        y0 = self.prng.open_uniform(DOMAIN_MIN, DOMAIN_MAX)
        points: List[Tuple[float, float]] = [(x0, y0)]
        active = [0]
        grid[grid_key(x0, y0)] = 0

        while active:
            idx = self.prng.randrange(len(active))
            px, py = points[active[idx]]
            found = False

            for _ in range(self.max_attempts):
                angle = self.prng.angle()
                dist = self.prng.uniform(min_distance, 2.0 * min_distance)
                nx = px + dist * math.cos(angle)
                ny = py + dist * math.sin(angle)

                if not (DOMAIN_MIN < nx < DOMAIN_MAX and DOMAIN_MIN < ny < DOMAIN_MAX):
                    continue

                gx, gy = grid_key(nx, ny)

                # Check neighbours in a 5x5 grid window
                too_close = False
                for dx in range(-2, 3):
                    for dy in range(-2, 3):
                        other = grid.get((gx + dx, gy + dy))
                        if other is None:
                            continue
                        ox, oy = points[other]
                        if (nx - ox) ** 2 + (ny - oy) ** 2 < min_distance_sq:
                            too_close = True
                            break
                    if too_close:
                        break

                if not too_close:
                    grid[(gx, gy)] = len(points)
                    active.append(len(points))
                    points.append((nx, ny))
                    found = True
                    break

            if not found:
                active.pop(idx)

        return np.array(points, dtype=np.float64)


STRATEGIES = {
    SamplingStrategy.UNIFORM: UniformStrategy,
    SamplingStrategy.JITTERED_GRID: JitteredGridStrategy,
    SamplingStrategy.POISSON_DISC: PoissonDiscStrategy,
}


def sample(n: int, seed, strategy: SamplingStrategy = SamplingStrategy.JITTERED_GRID) -> List[Site]:
    """
    Produce the initial site set.

    Args:
        n: Requested number of sites
        seed: Seed for the Alea PRNG
        strategy: Sampling strategy

    Returns:
        Sites with ids ``0..m-1``; ``m`` may differ from ``n``

    Raises:
        InvalidCount: if ``n`` is not positive
    """
    if n <= 0:
        logger.error("Invalid site count", requested=n)
        raise InvalidCount(f"Site count must be positive, got {n}")

    strategy = SamplingStrategy(strategy)
    prng = AleaPRNG(seed)
    points = STRATEGIES[strategy](prng).produce(n)

    logger.info("Sites sampled", strategy=strategy.value, requested=n, actual=len(points))

    return [Site(id=i, x=float(x), y=float(y)) for i, (x, y) in enumerate(points)]


def sites_to_array(sites: List[Site]) -> np.ndarray:
    """Stack site coordinates into an ``(n, 2)`` array."""
    return np.array([(site.x, site.y) for site in sites], dtype=np.float64).reshape(-1, 2)
