"""
Core terrain generation functionality.
"""

from .exceptions import InvalidDimensionsError, GenerationInProgressError, TerrainNotGeneratedError
from .noise_field import NoiseParameters, NoiseField, PerlinNoise, generate_noise_field
from .normalizer import normalize_heights
from .smoother import BorderPolicy, smooth_heights
from .erosion import ErosionParameters, ErosionSimulator, erode_heights
from .height_classifier import TerrainBand, BAND_COLORS, classify_height, color_for_height
from .mesh_builder import Mesh, MeshBuilder, build_mesh
from .terrain_generator import TerrainConfig, TerrainResult, TerrainGenerator

__all__ = ['InvalidDimensionsError', 'GenerationInProgressError', 'TerrainNotGeneratedError',
           'NoiseParameters', 'NoiseField', 'PerlinNoise', 'generate_noise_field',
           'normalize_heights', 'BorderPolicy', 'smooth_heights',
           'ErosionParameters', 'ErosionSimulator', 'erode_heights',
           'TerrainBand', 'BAND_COLORS', 'classify_height', 'color_for_height',
           'Mesh', 'MeshBuilder', 'build_mesh',
           'TerrainConfig', 'TerrainResult', 'TerrainGenerator']
