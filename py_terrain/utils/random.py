"""
Random number generation utilities.

Terrain generation draws randomness once per generation: the noise offset
pair. Seeds may be integers or strings; string seeds are hashed so the same
text always selects the same offsets.
"""

import hashlib
import numpy as np
from typing import Optional, Tuple, Union

Seed = Union[int, str]

MAX_OFFSET = 9999.0

# Global generator used when no seed is given
_rng: Optional[np.random.Generator] = None


def seed_to_int(seed: Seed) -> int:
    """Convert a seed to a non-negative integer accepted by NumPy."""
    if isinstance(seed, str):
        digest = hashlib.sha256(seed.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "little")
    return int(seed) & 0xFFFFFFFFFFFFFFFF


def set_random_seed(seed: Seed) -> None:
    """
    Reseed the global generator.

    Args:
        seed: Integer or string seed
    """
    global _rng
    _rng = np.random.default_rng(seed_to_int(seed))


def get_rng() -> np.random.Generator:
    """
    Get the global generator, creating an entropy-seeded one on first use.

    Returns:
        numpy Generator instance
    """
    global _rng
    if _rng is None:
        _rng = np.random.default_rng()
    return _rng


def random_offsets(
    seed: Optional[Seed] = None, max_offset: float = MAX_OFFSET
) -> Tuple[float, float]:
    """
    Draw the per-generation noise offset pair in [0, max_offset).

    With a seed the pair is reproducible; without one it comes from the
    global generator.
    """
    rng = np.random.default_rng(seed_to_int(seed)) if seed is not None else get_rng()
    offset_x, offset_y = rng.uniform(0.0, max_offset, size=2)
    return float(offset_x), float(offset_y)
