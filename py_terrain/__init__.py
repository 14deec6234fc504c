"""
Procedural terrain generation: fractal noise heightfields refined by
smoothing and erosion, turned into colored triangle meshes.
"""

from .core import (
    NoiseParameters,
    ErosionParameters,
    BorderPolicy,
    Mesh,
    TerrainConfig,
    TerrainResult,
    TerrainGenerator,
)

__version__ = "0.1.0"

__all__ = ['NoiseParameters', 'ErosionParameters', 'BorderPolicy', 'Mesh',
           'TerrainConfig', 'TerrainResult', 'TerrainGenerator', '__version__']
