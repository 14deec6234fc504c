"""
Asset lookup for the presentation layer.

Resolvers return ``None`` for missing assets instead of raising. A missing
asset is never fatal: callers log a warning and carry on without the
optional visual.
"""

import structlog
from typing import Any, Dict, Mapping, Optional, Protocol

logger = structlog.get_logger()

TERRAIN_MATERIAL = "materials/terrain"
RAIN_MATERIAL = "materials/rain"
RAIN_EFFECT = "effects/rain"
SNOW_EFFECT = "effects/snow"


class AssetResolver(Protocol):
    def resolve(self, path: str) -> Optional[Any]:
        """Return the asset stored at ``path`` or None."""
        ...


class DictAssetResolver:
    """Resolver backed by an in-memory mapping of path to asset."""

    def __init__(self, assets: Optional[Mapping[str, Any]] = None):
        self._assets: Dict[str, Any] = dict(assets or {})

    def register(self, path: str, asset: Any) -> None:
        self._assets[path] = asset

    def resolve(self, path: str) -> Optional[Any]:
        return self._assets.get(path)


def resolve_optional(resolver: AssetResolver, path: str, label: str) -> Optional[Any]:
    """Resolve an asset, logging a warning when it is missing."""
    asset = resolver.resolve(path)
    if asset is None:
        logger.warning("Asset not found", asset=label, path=path)
    return asset
