"""
Terrain shape predicates.

Each :class:`TerrainShape` variant has one evaluator deciding whether a
point is land. Noise-based shapes sample an OpenSimplex field seeded
with the generation seed, so a seed reproduces the same coastline.
"""

import math
from typing import Callable, Dict, Optional

from opensimplex import OpenSimplex

from ..config.generation import GenerationRequest, TerrainShape

LandPredicate = Callable[[float, float], bool]

# Perlin island falloff: land within this distance unless noise says otherwise
PERLIN_ISLAND_RADIUS = 0.7
PERLIN_ISLAND_NOISE_AMPLITUDE = 0.7
PERLIN_ISLAND_NOISE_FREQUENCY = 2.0


class NoiseField:
    """2-D coherent noise in ``[-1, 1]``, deterministic for a seed."""

    def __init__(self, seed: int):
        self.seed = seed
        self._simplex = OpenSimplex(seed=seed)

    def noise(self, x: float, y: float) -> float:
        return self._simplex.noise2(x, y)


def _square(request: GenerationRequest, field: NoiseField) -> LandPredicate:
    return lambda x, y: True


def _circular(request: GenerationRequest, field: NoiseField) -> LandPredicate:
    radius = request.circular_island_radius
    return lambda x, y: math.hypot(x, y) < radius


def _perlin_island(request: GenerationRequest, field: NoiseField) -> LandPredicate:
    def is_land(x: float, y: float) -> bool:
        value = PERLIN_ISLAND_RADIUS - math.hypot(x, y)
        value += PERLIN_ISLAND_NOISE_AMPLITUDE * field.noise(
            PERLIN_ISLAND_NOISE_FREQUENCY * x, PERLIN_ISLAND_NOISE_FREQUENCY * y
        )
        return value > 0

    return is_land


def _perlin_world(request: GenerationRequest, field: NoiseField) -> LandPredicate:
    octaves = request.perlin_world_octaves
    persistence = request.perlin_world_persistence

    def is_land(x: float, y: float) -> bool:
        value = 0.0
        amplitude = 1.0
        frequency = 1.0
        for _ in range(octaves):
            value += amplitude * field.noise(frequency * x, frequency * y)
            frequency *= 2
            amplitude *= persistence
        return value > 0

    return is_land


SHAPES: Dict[TerrainShape, Callable[[GenerationRequest, NoiseField], LandPredicate]] = {
    TerrainShape.SQUARE: _square,
    TerrainShape.CIRCULAR: _circular,
    TerrainShape.PERLIN_ISLAND: _perlin_island,
    TerrainShape.PERLIN_WORLD: _perlin_world,
}


def land_predicate(request: GenerationRequest, field: Optional[NoiseField] = None) -> LandPredicate:
    """
    Build the land predicate for a request.

    Args:
        request: Generation request selecting the shape and its tunables
        field: Noise field; created from ``request.seed`` when omitted
    """
    if field is None:
        field = NoiseField(request.seed)
    return SHAPES[request.terrain_shape](request, field)
