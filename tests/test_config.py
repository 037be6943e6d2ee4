"""Tests for settings and generation request validation."""

import pytest
from pydantic import ValidationError

from midgard.config import GenerationRequest, SamplingStrategy, Settings, TerrainShape


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MIDGARD_LOG_LEVEL", raising=False)
        monkeypatch.delenv("MIDGARD_MAX_POLYGON_COUNT", raising=False)
        config = Settings(_env_file=None)
        assert config.log_level == "INFO"
        assert config.max_polygon_count == 20000

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MIDGARD_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("MIDGARD_API_PORT", "9100")
        config = Settings(_env_file=None)
        assert config.log_level == "DEBUG"
        assert config.api_port == 9100


class TestGenerationRequest:
    """Test request defaults and constraints."""

    def test_defaults(self):
        request = GenerationRequest()
        assert request.polygon_count == 1000
        assert request.sampling_strategy == SamplingStrategy.JITTERED_GRID
        assert request.terrain_shape == TerrainShape.PERLIN_ISLAND
        assert request.relaxation_passes == 2
        assert request.water_threshold == 0.3

    def test_enum_values_accepted(self):
        request = GenerationRequest(sampling_strategy="poisson_disc", terrain_shape="perlin_world")
        assert request.sampling_strategy is SamplingStrategy.POISSON_DISC
        assert request.terrain_shape is TerrainShape.PERLIN_WORLD

    @pytest.mark.parametrize("field,value", [
        ("relaxation_passes", -1),
        ("water_threshold", 0.0),
        ("water_threshold", 1.01),
        ("circular_island_radius", 0.0),
        ("perlin_world_octaves", 0),
        ("perlin_world_persistence", 1.5),
    ])
    def test_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            GenerationRequest(**{field: value})

    def test_polygon_count_checked_by_sampler(self):
        """The model accepts any integer; the sampler rejects non-positive counts."""
        assert GenerationRequest(polygon_count=0).polygon_count == 0

    def test_frozen(self):
        request = GenerationRequest()
        with pytest.raises(ValidationError):
            request.seed = 5
