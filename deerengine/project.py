"""The shared systems of a running project: assets, the scene and its serializer."""

from __future__ import annotations

from typing import Mapping, Optional

from .assets import AssetManager, Loader
from .scene import Scene
from .serialization import SceneSerializer


class Project:
    """Owns the asset manager, the scene and the serializer bound to them."""

    def __init__(self, loaders: Optional[Mapping[str, Loader]] = None) -> None:
        self.loaders = dict(loaders or {})
        self.asset_manager: Optional[AssetManager] = None
        self.scene: Optional[Scene] = None
        self.scene_serializer: Optional[SceneSerializer] = None

    @property
    def is_initialized(self) -> bool:
        return self.scene is not None

    def initialize(self) -> None:
        """Create fresh systems, replacing any that exist."""
        self.asset_manager = AssetManager()
        self.scene = Scene()
        self.scene_serializer = SceneSerializer(self.scene, self.asset_manager, self.loaders)

    def release(self) -> None:
        """Drop every system."""
        self.asset_manager = None
        self.scene = None
        self.scene_serializer = None

    def __enter__(self) -> "Project":
        self.initialize()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()