"""
Map normalized heights to terrain color bands.

Bands use strict ``>`` thresholds, so a height of exactly 0.8 is rock,
not snow.
"""

import numpy as np
from enum import Enum
from typing import Tuple

Color = Tuple[float, float, float, float]


class TerrainBand(str, Enum):
    WATER = "water"
    SAND = "sand"
    GRASS = "grass"
    ROCK = "rock"
    SNOW = "snow"


BAND_COLORS = {
    TerrainBand.SNOW: (0.8, 0.8, 0.8, 1.0),  # light gray
    TerrainBand.ROCK: (0.5, 0.5, 0.5, 1.0),  # gray
    TerrainBand.GRASS: (0.2, 0.6, 0.2, 1.0),  # dark green
    TerrainBand.SAND: (0.6, 0.5, 0.2, 1.0),  # brown
    TerrainBand.WATER: (0.2, 0.4, 0.6, 1.0),  # dark blue
}

# Lower bounds, highest first
BAND_THRESHOLDS = (
    (0.8, TerrainBand.SNOW),
    (0.6, TerrainBand.ROCK),
    (0.4, TerrainBand.GRASS),
    (0.2, TerrainBand.SAND),
)

_BAND_ORDER = [band for _, band in BAND_THRESHOLDS] + [TerrainBand.WATER]
_COLOR_TABLE = np.array([BAND_COLORS[band] for band in _BAND_ORDER], dtype=np.float64)


def classify_height(height: float) -> TerrainBand:
    """Band for a single normalized height."""
    for threshold, band in BAND_THRESHOLDS:
        if height > threshold:
            return band
    return TerrainBand.WATER


def color_for_height(height: float) -> Color:
    """RGBA color for a single normalized height."""
    return BAND_COLORS[classify_height(height)]


def _band_indices(heights: np.ndarray) -> np.ndarray:
    heights = np.asarray(heights, dtype=np.float64)
    conditions = [heights > threshold for threshold, _ in BAND_THRESHOLDS]
    choices = list(range(len(BAND_THRESHOLDS)))
    return np.select(conditions, choices, default=len(BAND_THRESHOLDS))


def classify_heights(heights: np.ndarray) -> np.ndarray:
    """Array of TerrainBand values with the same shape as ``heights``."""
    indices = _band_indices(heights)
    return np.array(_BAND_ORDER, dtype=object)[indices]


def colors_for_heights(heights: np.ndarray) -> np.ndarray:
    """RGBA colors, shape ``heights.shape + (4,)``."""
    return _COLOR_TABLE[_band_indices(heights)]
