"""
Presentation-side wrapper around a terrain generator.

A scene owns the render settings (fog, terrain material) and the weather
controller. The renderer consumes SceneUpdate values; the core pipeline
never sees assets.
"""

import structlog
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from ..core.terrain_generator import TerrainGenerator, TerrainResult
from ..utils.random import Seed
from .assets import TERRAIN_MATERIAL, AssetResolver, resolve_optional
from .weather import WeatherController

logger = structlog.get_logger()


class FogMode(str, Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    EXPONENTIAL_SQUARED = "exponential_squared"


@dataclass(frozen=True)
class FogSettings:
    """Fog render settings."""

    enabled: bool = True
    color: Tuple[float, float, float] = (0.7, 0.7, 0.7)
    mode: FogMode = FogMode.EXPONENTIAL_SQUARED
    density: float = 0.1


@dataclass
class SceneUpdate:
    """Everything the renderer needs to apply one regeneration atomically."""

    result: TerrainResult
    material: Optional[Any]
    fog: FogSettings = field(default_factory=FogSettings)


class TerrainScene:
    """Regenerates terrain and pairs it with its render settings."""

    def __init__(
        self,
        generator: TerrainGenerator,
        resolver: AssetResolver,
        fog: Optional[FogSettings] = None,
        weather_duration: float = 10.0,
    ):
        self.generator = generator
        self.resolver = resolver
        self.fog = fog or FogSettings()
        self.weather = WeatherController(generator, resolver, weather_duration)

    def regenerate(self, seed: Optional[Seed] = None) -> SceneUpdate:
        """Generate a new terrain and resolve its material."""
        result = self.generator.generate(seed=seed)
        material = resolve_optional(self.resolver, TERRAIN_MATERIAL, "terrain material")
        logger.debug("Scene regenerated", material_loaded=material is not None, fog=self.fog.enabled)
        return SceneUpdate(result=result, material=material, fog=self.fog)
