"""
Exceptions raised by the terrain pipeline.
"""


class InvalidDimensionsError(ValueError):
    """Width or height is not a positive integer."""


class GenerationInProgressError(RuntimeError):
    """A generation was requested while another one is still running."""


class TerrainNotGeneratedError(RuntimeError):
    """A height query was made before any terrain was generated."""
