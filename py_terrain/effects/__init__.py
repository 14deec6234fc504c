"""
Presentation-layer collaborators: assets, weather and scene settings.
"""

from .assets import AssetResolver, DictAssetResolver, resolve_optional
from .weather import WeatherKind, WeatherController
from .scene import FogMode, FogSettings, SceneUpdate, TerrainScene

__all__ = ['AssetResolver', 'DictAssetResolver', 'resolve_optional',
           'WeatherKind', 'WeatherController',
           'FogMode', 'FogSettings', 'SceneUpdate', 'TerrainScene']
