"""
Neighbor-diffusion erosion.

Each pass looks at every interior cell and the square window of neighbors
around it. Neighbors lower than the cell contribute their height
difference; the cell is lowered by ``strength`` times the average of those
positive differences. Cells with no lower neighbor (local minima) keep their
height. Cells are updated in place in scan order, so a cell sees the
already eroded heights of neighbors visited before it. One call is one
pass; repeated passes compound.
"""

import numpy as np
import structlog
from dataclasses import dataclass
from typing import Optional

from .heightfield import as_heightfield, has_interior

logger = structlog.get_logger()


@dataclass(frozen=True)
class ErosionParameters:
    """Erosion neighborhood and strength."""

    radius: int = 3
    strength: float = 0.01

    def __post_init__(self):
        if isinstance(self.radius, bool) or int(self.radius) != self.radius:
            raise ValueError(f"radius must be an integer, got {self.radius!r}")
        if self.radius < 1:
            raise ValueError(f"radius must be >= 1, got {self.radius}")
        if not 0.0 <= self.strength <= 1.0:
            raise ValueError(f"strength must be in [0, 1], got {self.strength}")


def erode_heights(field: np.ndarray, radius: int = 3, strength: float = 0.01) -> np.ndarray:
    """
    Apply one erosion pass in place.

    Cells are visited with x as the outer loop and y as the inner loop, and
    each cell is lowered before the next one is read. Later cells therefore
    see the already eroded heights of earlier neighbors.

    Args:
        field: float64 heightfield, modified in place
        radius: Neighborhood half-width
        strength: Fraction of the average downhill difference removed

    Returns:
        The eroded heightfield (the same array when ``field`` is float64)
    """
    params = ErosionParameters(radius=radius, strength=strength)
    heights = as_heightfield(field)
    radius = int(params.radius)

    if not has_interior(heights.shape, radius):
        logger.warning(
            "No interior cells",
            stage="erode",
            shape=heights.shape,
            radius=radius,
        )
        return heights

    width, height = heights.shape
    for x in range(radius, width - radius):
        for y in range(radius, height - radius):
            current = heights[x, y]
            window = heights[x - radius : x + radius + 1, y - radius : y + radius + 1]
            # The cell itself has zero difference and never counts as downhill
            difference = current - window
            downhill = difference > 0
            count = np.count_nonzero(downhill)
            if count:
                heights[x, y] = current - difference[downhill].sum() / count * params.strength

    return heights


class ErosionSimulator:
    """Runs erosion passes with fixed parameters."""

    def __init__(self, params: Optional[ErosionParameters] = None):
        self.params = params or ErosionParameters()

    def run(self, field: np.ndarray, iterations: int = 1) -> np.ndarray:
        """Apply ``iterations`` passes in place and return the field."""
        if iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {iterations}")

        heights = as_heightfield(field)
        for _ in range(iterations):
            heights = erode_heights(heights, self.params.radius, self.params.strength)

        logger.debug(
            "Erosion complete",
            iterations=iterations,
            radius=self.params.radius,
            strength=self.params.strength,
        )
        return heights
