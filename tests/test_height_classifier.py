"""
Tests for height band classification.
"""

import pytest
import numpy as np
from py_terrain.core.height_classifier import (
    BAND_COLORS,
    TerrainBand,
    classify_height,
    classify_heights,
    color_for_height,
    colors_for_heights,
)


class TestClassifyHeight:
    """Test the scalar classifier."""

    @pytest.mark.parametrize(
        "height,band",
        [
            (1.0, TerrainBand.SNOW),
            (0.81, TerrainBand.SNOW),
            (0.8, TerrainBand.ROCK),
            (0.61, TerrainBand.ROCK),
            (0.6, TerrainBand.GRASS),
            (0.45, TerrainBand.GRASS),
            (0.4, TerrainBand.SAND),
            (0.3, TerrainBand.SAND),
            (0.2, TerrainBand.WATER),
            (0.0, TerrainBand.WATER),
        ],
    )
    def test_bands(self, height, band):
        assert classify_height(height) is band

    def test_colors(self):
        assert color_for_height(0.9) == (0.8, 0.8, 0.8, 1.0)
        assert color_for_height(0.7) == (0.5, 0.5, 0.5, 1.0)
        assert color_for_height(0.5) == (0.2, 0.6, 0.2, 1.0)
        assert color_for_height(0.3) == (0.6, 0.5, 0.2, 1.0)
        assert color_for_height(0.1) == (0.2, 0.4, 0.6, 1.0)

    def test_every_band_has_opaque_color(self):
        for band in TerrainBand:
            assert BAND_COLORS[band][3] == 1.0


class TestClassifyHeights:
    """Test the vectorized classifier against the scalar one."""

    @pytest.fixture
    def heights(self):
        values = np.random.default_rng(2).uniform(0.0, 1.0, size=(9, 7))
        values[0, :5] = [0.2, 0.4, 0.6, 0.8, 1.0]  # exact thresholds
        return values

    def test_matches_scalar(self, heights):
        bands = classify_heights(heights)
        assert bands.shape == heights.shape
        for (x, y), value in np.ndenumerate(heights):
            assert bands[x, y] is classify_height(value)

    def test_colors_match_scalar(self, heights):
        colors = colors_for_heights(heights)
        assert colors.shape == heights.shape + (4,)
        for (x, y), value in np.ndenumerate(heights):
            assert tuple(colors[x, y]) == color_for_height(value)

    def test_flat_input(self):
        colors = colors_for_heights(np.array([0.0, 0.85]))
        assert colors.shape == (2, 4)
        assert tuple(colors[1]) == BAND_COLORS[TerrainBand.SNOW]
