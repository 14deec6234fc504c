"""
Heightfield helpers shared by the pipeline stages.

A heightfield is a 2D float64 NumPy array of shape (width, height),
indexed as ``field[x, y]``.
"""

import numpy as np
from typing import Tuple

from .exceptions import InvalidDimensionsError


def validate_dimensions(width: int, height: int) -> None:
    """Raise InvalidDimensionsError unless both dimensions are integers >= 1."""
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidDimensionsError(f"{name} must be an integer, got {value!r}")
        if value < 1:
            raise InvalidDimensionsError(f"{name} must be >= 1, got {value}")


def as_heightfield(field) -> np.ndarray:
    """Coerce input to a 2D float64 heightfield, validating its shape."""
    heights = np.asarray(field, dtype=np.float64)
    if heights.ndim != 2:
        raise InvalidDimensionsError(
            f"Heightfield must be 2-dimensional, got shape {heights.shape}"
        )
    validate_dimensions(*heights.shape)
    return heights


def has_interior(shape: Tuple[int, int], radius: int) -> bool:
    """True when a square window of this radius fits around at least one cell."""
    width, height = shape
    return width > 2 * radius and height > 2 * radius


def interior(radius: int) -> Tuple[slice, slice]:
    """Index of the cells at least ``radius`` away from every edge."""
    return (slice(radius, -radius), slice(radius, -radius))
