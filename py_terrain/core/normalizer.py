"""
Rescale raw heightfields into the [0, 1] range.
"""

import numpy as np
import structlog
from typing import Optional

from .heightfield import as_heightfield

logger = structlog.get_logger()


def normalize_heights(
    field: np.ndarray,
    min_observed: Optional[float] = None,
    max_observed: Optional[float] = None,
) -> np.ndarray:
    """
    Map every cell to (value - min) / (max - min), clipped to [0, 1].

    A flat field (max == min) has no range to stretch and normalizes to
    all zeros.

    Args:
        field: Raw heightfield
        min_observed: Minimum tracked during generation (computed if omitted)
        max_observed: Maximum tracked during generation (computed if omitted)

    Returns:
        New normalized heightfield
    """
    heights = as_heightfield(field)
    low = float(heights.min()) if min_observed is None else float(min_observed)
    high = float(heights.max()) if max_observed is None else float(max_observed)

    if high == low:
        logger.debug("Degenerate height range, normalizing to zero", value=low)
        return np.zeros_like(heights)

    normalized = (heights - low) / (high - low)
    return np.clip(normalized, 0.0, 1.0)
