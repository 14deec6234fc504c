"""
Terrain generation pipeline.

Runs the stages in order:

    noise -> normalize -> smooth -> erode -> mesh

and keeps the last finished result so height queries do not rerun the
pipeline. Only one generation may run at a time per generator; a request
made while one is running is rejected with GenerationInProgressError.
"""

import threading
import time
import numpy as np
import structlog
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..utils.random import Seed, random_offsets
from .erosion import ErosionParameters, ErosionSimulator
from .exceptions import GenerationInProgressError, TerrainNotGeneratedError
from .heightfield import validate_dimensions
from .mesh_builder import DEFAULT_HEIGHT_SCALE, Mesh, MeshBuilder
from .noise_field import NoiseField, NoiseParameters, PerlinNoise
from .normalizer import normalize_heights
from .smoother import BorderPolicy, smooth_heights

logger = structlog.get_logger()


@dataclass
class TerrainConfig:
    """Configuration for the full generation pipeline."""

    width: int = 256
    height: int = 256
    noise: NoiseParameters = field(default_factory=NoiseParameters)
    smoothing_radius: int = 2
    smoothing_border: BorderPolicy = BorderPolicy.COPY
    erosion: ErosionParameters = field(default_factory=ErosionParameters)
    erosion_iterations: int = 1
    height_scale: float = DEFAULT_HEIGHT_SCALE

    def __post_init__(self):
        validate_dimensions(self.width, self.height)
        if self.smoothing_radius < 1:
            raise ValueError(f"smoothing_radius must be >= 1, got {self.smoothing_radius}")
        if self.erosion_iterations < 0:
            raise ValueError(f"erosion_iterations must be >= 0, got {self.erosion_iterations}")
        self.smoothing_border = BorderPolicy(self.smoothing_border)

    @classmethod
    def from_settings(cls, settings=None, **overrides) -> "TerrainConfig":
        """Build a config from application settings, with keyword overrides."""
        if settings is None:
            from ..config import settings

        values = dict(
            width=settings.default_width,
            height=settings.default_height,
            noise=NoiseParameters(
                octaves=settings.noise_octaves,
                persistence=settings.noise_persistence,
                lacunarity=settings.noise_lacunarity,
                scale=settings.noise_scale,
            ),
            smoothing_radius=settings.smoothing_radius,
            smoothing_border=settings.smoothing_border,
            erosion=ErosionParameters(
                radius=settings.erosion_radius,
                strength=settings.erosion_strength,
            ),
            erosion_iterations=settings.erosion_iterations,
            height_scale=settings.height_scale,
        )
        values.update(overrides)
        return cls(**values)


@dataclass
class TerrainResult:
    """Output of one generation: the final heightfield and its mesh."""

    heights: np.ndarray
    mesh: Mesh
    noise_params: NoiseParameters
    height_scale: float
    elapsed_seconds: float
    seed: Optional[Seed] = None

    @property
    def width(self) -> int:
        return self.heights.shape[0]

    @property
    def height(self) -> int:
        return self.heights.shape[1]

    def height_at(self, x: int, y: int) -> float:
        """World-space terrain height (normalized height * height_scale) at a cell."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"({x}, {y}) is outside the {self.width}x{self.height} terrain"
            )
        return float(self.heights[x, y] * self.height_scale)


class TerrainGenerator:
    """
    Generates terrain meshes and caches the latest result.

    This is the single entry point callers use to trigger generation; any
    event source (HTTP request, timer, test) calls ``generate``.
    """

    def __init__(self, config: Optional[TerrainConfig] = None, noise: Optional[PerlinNoise] = None):
        self.config = config or TerrainConfig()
        self.noise = noise or PerlinNoise()
        self._generation_lock = threading.Lock()
        self._cache_lock = threading.Lock()
        self._last_result: Optional[TerrainResult] = None

    @property
    def is_busy(self) -> bool:
        """True while a generation is running."""
        return self._generation_lock.locked()

    @property
    def last_result(self) -> Optional[TerrainResult]:
        """The most recently completed result, or None."""
        with self._cache_lock:
            return self._last_result

    def generate_heightfield(self, noise_params: NoiseParameters) -> np.ndarray:
        """
        Run the heightfield stages (noise, normalize, smooth, erode).

        Args:
            noise_params: Noise parameters including the offset pair

        Returns:
            Final normalized, smoothed and eroded heightfield
        """
        config = self.config

        noise_field = NoiseField(noise_params, self.noise)
        raw = noise_field.generate(config.width, config.height)
        logger.debug(
            "Noise field generated",
            min_height=noise_field.min_height,
            max_height=noise_field.max_height,
        )

        heights = normalize_heights(raw, noise_field.min_height, noise_field.max_height)
        heights = smooth_heights(heights, config.smoothing_radius, config.smoothing_border)
        heights = ErosionSimulator(config.erosion).run(heights, config.erosion_iterations)

        return heights

    def generate(
        self,
        seed: Optional[Seed] = None,
        offsets: Optional[Tuple[float, float]] = None,
    ) -> TerrainResult:
        """
        Generate a new terrain and make it the cached result.

        Args:
            seed: Optional seed for the noise offsets
            offsets: Explicit (offset_x, offset_y); takes precedence over seed

        Returns:
            The new TerrainResult

        Raises:
            GenerationInProgressError: another generation is still running
        """
        if not self._generation_lock.acquire(blocking=False):
            raise GenerationInProgressError("Terrain generation already in progress")

        try:
            started = time.perf_counter()
            if offsets is None:
                offsets = random_offsets(seed)
            noise_params = self.config.noise.with_offsets(*offsets)

            logger.info(
                "Generating terrain",
                width=self.config.width,
                height=self.config.height,
                offset_x=noise_params.offset_x,
                offset_y=noise_params.offset_y,
            )

            heights = self.generate_heightfield(noise_params)
            mesh = MeshBuilder(self.config.height_scale).build(heights)
            heights.flags.writeable = False

            result = TerrainResult(
                heights=heights,
                mesh=mesh,
                noise_params=noise_params,
                height_scale=self.config.height_scale,
                elapsed_seconds=time.perf_counter() - started,
                seed=seed,
            )

            with self._cache_lock:
                self._last_result = result

            logger.info(
                "Terrain generation complete",
                vertices=mesh.vertex_count,
                triangles=mesh.triangle_count,
                elapsed_seconds=round(result.elapsed_seconds, 4),
            )
            return result
        finally:
            self._generation_lock.release()

    def height_at(self, x: int, y: int) -> float:
        """
        Sample the cached terrain height without regenerating.

        Raises:
            TerrainNotGeneratedError: nothing has been generated yet
            IndexError: (x, y) is outside the terrain
        """
        result = self.last_result
        if result is None:
            raise TerrainNotGeneratedError("No terrain has been generated yet")
        return result.height_at(x, y)
