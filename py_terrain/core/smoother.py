"""
Box-average smoothing of heightfields.

Interior cells (at least ``radius`` cells from every edge) are replaced by
the mean of the (2 * radius + 1)^2 window around them. Border cells are not
averaged; what they hold afterwards depends on the BorderPolicy.
"""

import numpy as np
import structlog
from enum import Enum
from scipy.ndimage import uniform_filter

from .heightfield import as_heightfield, has_interior, interior

logger = structlog.get_logger()


class BorderPolicy(str, Enum):
    """What smoothed border cells hold."""

    COPY = "copy"  # input border passes through unchanged
    ZERO = "zero"  # border left at zero


def smooth_heights(
    field: np.ndarray, radius: int = 2, border: BorderPolicy = BorderPolicy.COPY
) -> np.ndarray:
    """
    Smooth a heightfield with a square box filter.

    Args:
        field: Heightfield to smooth (not modified)
        radius: Window half-width, >= 1
        border: Treatment of the cells within ``radius`` of an edge

    Returns:
        New smoothed heightfield
    """
    if radius < 1:
        raise ValueError(f"radius must be >= 1, got {radius}")
    heights = as_heightfield(field)
    border = BorderPolicy(border)

    if border is BorderPolicy.COPY:
        smoothed = heights.copy()
    else:
        smoothed = np.zeros_like(heights)

    if not has_interior(heights.shape, radius):
        logger.warning(
            "No interior cells",
            stage="smooth",
            shape=heights.shape,
            radius=radius,
        )
        return smoothed

    window_mean = uniform_filter(heights, size=2 * radius + 1, mode="nearest")
    inner = interior(radius)
    smoothed[inner] = window_mean[inner]

    return smoothed
