"""
Timed weather effects placed over the generated terrain.

Rain and snow are particle effects that play for a fixed duration and then
stop. Each runs as an asyncio task that can be cancelled with ``stop``;
starting an effect that is already running restarts it. Wind has no visual
and is only logged.
"""

import asyncio
import structlog
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Tuple

from ..core.terrain_generator import TerrainGenerator
from .assets import RAIN_EFFECT, RAIN_MATERIAL, SNOW_EFFECT, AssetResolver, resolve_optional

logger = structlog.get_logger()

RAIN_START_COLOR = (0.5, 0.5, 1.0, 0.5)
EFFECT_HEIGHT_ABOVE_TERRAIN = 50.0
EFFECT_DEPTH = -20.0

Position = Tuple[float, float, float]


class WeatherKind(str, Enum):
    RAIN = "rain"
    SNOW = "snow"
    WIND = "wind"


class ParticleEffect(Protocol):
    def set_material(self, material: Any) -> None: ...

    def set_start_color(self, color: Tuple[float, float, float, float]) -> None: ...

    def play(self) -> None: ...

    def stop(self) -> None: ...


class ParticlePrefab(Protocol):
    def instantiate(self, position: Position) -> ParticleEffect: ...


class WeatherController:
    """Starts and stops weather effects for one terrain generator."""

    def __init__(
        self,
        generator: TerrainGenerator,
        resolver: AssetResolver,
        duration: float = 10.0,
    ):
        self.generator = generator
        self.resolver = resolver
        self.duration = duration
        self._tasks: Dict[WeatherKind, asyncio.Task] = {}

    @property
    def active(self) -> Tuple[WeatherKind, ...]:
        """Effects currently playing."""
        return tuple(kind for kind, task in self._tasks.items() if not task.done())

    def effect_position(self) -> Position:
        """Spawn point above the middle of the terrain."""
        config = self.generator.config
        center_x = config.width // 2
        center_y = config.height // 2
        terrain_height = self.generator.height_at(center_x, center_y)
        return (float(center_x), terrain_height + EFFECT_HEIGHT_ABOVE_TERRAIN, EFFECT_DEPTH)

    def start(self, kind: WeatherKind) -> Optional[asyncio.Task]:
        """
        Start an effect. Must be called from a running event loop.

        Returns:
            The task playing the effect, or None for wind and for effects
            whose assets are missing
        """
        kind = WeatherKind(kind)
        if kind is WeatherKind.WIND:
            self.apply_wind()
            return None

        self.stop(kind)
        effect = self._spawn(kind)
        if effect is None:
            return None

        task = asyncio.get_running_loop().create_task(self._play(kind, effect))
        self._tasks[kind] = task
        return task

    def stop(self, kind: Optional[WeatherKind] = None) -> None:
        """Cancel one effect, or all of them when ``kind`` is None."""
        kinds = list(self._tasks) if kind is None else [WeatherKind(kind)]
        for k in kinds:
            task = self._tasks.pop(k, None)
            if task is not None and not task.done():
                task.cancel()

    def apply_wind(self) -> None:
        logger.info("Wind effect applied")

    def _spawn(self, kind: WeatherKind) -> Optional[ParticleEffect]:
        if kind is WeatherKind.RAIN:
            prefab = resolve_optional(self.resolver, RAIN_EFFECT, "rain particle system")
        else:
            prefab = resolve_optional(self.resolver, SNOW_EFFECT, "snow particle system")
        if prefab is None:
            return None

        effect = prefab.instantiate(self.effect_position())

        if kind is WeatherKind.RAIN:
            material = resolve_optional(self.resolver, RAIN_MATERIAL, "rain material")
            if material is not None:
                effect.set_material(material)
            effect.set_start_color(RAIN_START_COLOR)

        return effect

    async def _play(self, kind: WeatherKind, effect: ParticleEffect) -> None:
        logger.info("Weather effect started", effect=kind.value, duration=self.duration)
        effect.play()
        try:
            await asyncio.sleep(self.duration)
        finally:
            effect.stop()
            if self._tasks.get(kind) is asyncio.current_task():
                del self._tasks[kind]
            logger.info("Weather effect stopped", effect=kind.value)
