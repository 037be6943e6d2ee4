"""
Generation request model.

Every tunable of a generation run lives on :class:`GenerationRequest`;
the pipeline reads nothing else, so a request fully determines the
generated terrain.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SamplingStrategy(str, Enum):
    """How the initial sites are scattered."""

    UNIFORM = "uniform"
    JITTERED_GRID = "jittered_grid"
    POISSON_DISC = "poisson_disc"


class TerrainShape(str, Enum):
    """Land/water predicate applied to every corner."""

    SQUARE = "square"
    CIRCULAR = "circular"
    PERLIN_ISLAND = "perlin_island"
    PERLIN_WORLD = "perlin_world"


class GenerationRequest(BaseModel):
    """Parameters for one terrain generation run."""

    model_config = ConfigDict(frozen=True)

    polygon_count: int = Field(default=1000, description="Requested number of polygons")
    seed: int = Field(default=0, description="Seed for point sampling and noise")
    sampling_strategy: SamplingStrategy = Field(
        default=SamplingStrategy.JITTERED_GRID, description="Point sampling strategy"
    )
    terrain_shape: TerrainShape = Field(
        default=TerrainShape.PERLIN_ISLAND, description="Terrain shape predicate"
    )
    relaxation_passes: int = Field(default=2, ge=0, description="Lloyd relaxation passes")
    water_threshold: float = Field(
        default=0.3, gt=0.0, le=1.0,
        description="Fraction of water corners that makes a cell water",
    )
    circular_island_radius: float = Field(
        default=0.9, gt=0.0, description="Radius of the circular island"
    )
    perlin_world_octaves: int = Field(default=5, ge=1, description="Octaves summed for Perlin worlds")
    perlin_world_persistence: float = Field(
        default=0.7, gt=0.0, le=1.0, description="Amplitude falloff per octave"
    )
