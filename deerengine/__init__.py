"""Core of a small game engine: events, layers, buffer layouts, transforms, scene graph, assets and scene serialization."""

__version__ = "0.1.0"

__all__ = [
    "events",
    "layers",
    "buffer",
    "transform",
    "camera",
    "components",
    "assets",
    "environment",
    "scene",
    "serialization",
    "project",
]