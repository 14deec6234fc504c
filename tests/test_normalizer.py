"""
Tests for height normalization.
"""

import pytest
import numpy as np
from py_terrain.core.exceptions import InvalidDimensionsError
from py_terrain.core.normalizer import normalize_heights


class TestNormalizeHeights:
    """Test rescaling to [0, 1]."""

    def test_range_hits_both_ends(self):
        rng = np.random.default_rng(3)
        field = rng.normal(size=(12, 9)) * 7.0 - 3.0
        normalized = normalize_heights(field)

        assert normalized.min() == 0.0
        assert normalized.max() == 1.0
        assert normalized.shape == field.shape

    def test_preserves_ordering(self):
        field = np.array([[-2.0, 0.0], [1.0, 6.0]])
        normalized = normalize_heights(field)
        expected = np.array([[0.0, 0.25], [0.375, 1.0]])
        assert np.allclose(normalized, expected)

    @pytest.mark.parametrize("value", [0.0, 0.42, -3.5])
    def test_flat_field_normalizes_to_zero(self, value):
        """A field with no height range maps to all zeros."""
        field = np.full((5, 4), value)
        normalized = normalize_heights(field)
        assert np.array_equal(normalized, np.zeros((5, 4)))

    def test_uses_tracked_range(self):
        """Explicit min/max are used and values outside them are clipped."""
        field = np.array([[0.0, 5.0, 10.0]])
        normalized = normalize_heights(field, min_observed=2.0, max_observed=8.0)
        assert np.allclose(normalized, [[0.0, 0.5, 1.0]])

    def test_tracked_degenerate_range(self):
        field = np.array([[1.0, 2.0], [3.0, 4.0]])
        normalized = normalize_heights(field, min_observed=2.0, max_observed=2.0)
        assert not normalized.any()

    def test_input_not_modified(self):
        field = np.array([[1.0, 3.0], [5.0, 9.0]])
        original = field.copy()
        normalize_heights(field)
        assert np.array_equal(field, original)

    def test_single_cell(self):
        assert normalize_heights(np.array([[7.0]]))[0, 0] == 0.0

    def test_rejects_non_2d(self):
        with pytest.raises(InvalidDimensionsError):
            normalize_heights(np.zeros(5))
