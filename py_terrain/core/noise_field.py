"""
Fractal noise synthesis for terrain heightfields.

This module builds the raw (unnormalized) heightfield by summing several
octaves of 2D gradient noise. Each octave samples the noise at

    x / width * scale * frequency + offset_x
    y / height * scale * frequency + offset_y

remaps the sample from [0, 1] to [-1, 1] and weights it by the current
amplitude. Amplitude decays by ``persistence`` and frequency grows by
``lacunarity`` after every octave. The running min/max of the accumulated
field is recorded for the normalization stage.
"""

import numpy as np
import structlog
from dataclasses import dataclass
from typing import Optional, Tuple

from .heightfield import validate_dimensions

logger = structlog.get_logger()

# Unit-ish gradient directions for the 2D lattice
_GRADIENTS = np.array(
    [
        (1.0, 0.0),
        (-1.0, 0.0),
        (0.0, 1.0),
        (0.0, -1.0),
        (1.0, 1.0),
        (-1.0, 1.0),
        (1.0, -1.0),
        (-1.0, -1.0),
    ],
    dtype=np.float64,
)


@dataclass(frozen=True)
class NoiseParameters:
    """Fractal noise settings for one generation pass."""

    octaves: int = 4
    persistence: float = 0.3
    lacunarity: float = 2.0
    scale: float = 10.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self):
        if isinstance(self.octaves, bool) or int(self.octaves) != self.octaves:
            raise ValueError(f"octaves must be an integer, got {self.octaves!r}")
        if self.octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {self.octaves}")
        if not self.scale > 0:
            raise ValueError(f"scale must be > 0, got {self.scale}")
        for name in ("persistence", "lacunarity", "offset_x", "offset_y"):
            if not np.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite")

    def with_offsets(self, offset_x: float, offset_y: float) -> "NoiseParameters":
        """Copy of these parameters with a new offset pair."""
        return NoiseParameters(
            octaves=self.octaves,
            persistence=self.persistence,
            lacunarity=self.lacunarity,
            scale=self.scale,
            offset_x=float(offset_x),
            offset_y=float(offset_y),
        )


def _fade(t: np.ndarray) -> np.ndarray:
    """Quintic smoothstep 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


class PerlinNoise:
    """
    Classic 2D gradient noise on a 256-cell permutation lattice.

    Sampling is vectorized over NumPy arrays. Results lie nominally in
    [0, 1]; integer lattice points sample to exactly 0.5.
    """

    def __init__(self, seed: int = 0):
        # RandomState keeps the permutation stable across NumPy releases
        permutation = np.random.RandomState(seed).permutation(256)
        self.seed = seed
        self._perm = np.concatenate([permutation, permutation]).astype(np.int64)

    def _gradient(self, hashes: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        g = _GRADIENTS[hashes & 7]
        return g[..., 0] * x + g[..., 1] * y

    def sample(self, x, y) -> np.ndarray:
        """Sample the noise at coordinate arrays ``x`` and ``y``."""
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        x_floor = np.floor(x)
        y_floor = np.floor(y)
        xf = x - x_floor
        yf = y - y_floor
        xi = x_floor.astype(np.int64) & 255
        yi = y_floor.astype(np.int64) & 255

        perm = self._perm
        h00 = perm[perm[xi] + yi]
        h01 = perm[perm[xi] + yi + 1]
        h10 = perm[perm[xi + 1] + yi]
        h11 = perm[perm[xi + 1] + yi + 1]

        g00 = self._gradient(h00, xf, yf)
        g10 = self._gradient(h10, xf - 1.0, yf)
        g01 = self._gradient(h01, xf, yf - 1.0)
        g11 = self._gradient(h11, xf - 1.0, yf - 1.0)

        u = _fade(xf)
        v = _fade(yf)
        value = _lerp(_lerp(g00, g10, u), _lerp(g01, g11, u), v)

        return value * 0.5 + 0.5


class NoiseField:
    """
    Generates raw heightfields from multi-octave noise.

    After ``generate`` the observed extremes are available as
    ``min_height`` and ``max_height``.
    """

    def __init__(self, params: NoiseParameters, noise: Optional[PerlinNoise] = None):
        self.params = params
        self.noise = noise or PerlinNoise()
        self.min_height: Optional[float] = None
        self.max_height: Optional[float] = None

    def generate(self, width: int, height: int) -> np.ndarray:
        """
        Build a raw heightfield of shape (width, height).

        Args:
            width: Number of cells along x
            height: Number of cells along y

        Returns:
            Unnormalized float64 heightfield
        """
        validate_dimensions(width, height)
        params = self.params

        logger.debug(
            "Generating noise field",
            width=width,
            height=height,
            octaves=params.octaves,
            scale=params.scale,
        )

        xs = np.arange(width, dtype=np.float64) / width
        ys = np.arange(height, dtype=np.float64) / height
        grid_x, grid_y = np.meshgrid(xs, ys, indexing="ij")

        heights = np.zeros((width, height), dtype=np.float64)
        amplitude = 1.0
        frequency = 1.0

        for _ in range(params.octaves):
            sample_x = grid_x * params.scale * frequency + params.offset_x
            sample_y = grid_y * params.scale * frequency + params.offset_y
            value = self.noise.sample(sample_x, sample_y) * 2.0 - 1.0
            heights += value * amplitude

            amplitude *= params.persistence
            frequency *= params.lacunarity

        self.min_height = float(heights.min())
        self.max_height = float(heights.max())

        return heights


def generate_noise_field(
    width: int,
    height: int,
    params: NoiseParameters,
    noise: Optional[PerlinNoise] = None,
) -> Tuple[np.ndarray, float, float]:
    """
    Generate a raw heightfield and its observed range.

    Returns:
        Tuple of (heights, min_height, max_height)
    """
    field = NoiseField(params, noise)
    heights = field.generate(width, height)
    return heights, field.min_height, field.max_height
