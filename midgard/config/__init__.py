"""
Configuration for terrain generation.
"""

from .generation import GenerationRequest, SamplingStrategy, TerrainShape
from .settings import Settings, settings

__all__ = ['GenerationRequest', 'SamplingStrategy', 'TerrainShape', 'Settings', 'settings']
