"""Data components attached to scene entities."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .transform import compose_matrix, identity_quat, perspective, quat_from_euler, quat_to_euler

MAX_TEXTURE_BINDINGS = 4


@dataclass
class TagComponent:
    """Display name and unique id of an entity."""

    tag: str = ""
    entity_uid: int = 0


@dataclass
class ScriptComponent:
    """Script attached to an entity and its running instance, if any."""

    script_id: str = ""
    instance: Any = None


@dataclass
class RelationshipComponent:
    """Parent id and child ids of an entity; 0 means no parent."""

    parent_uid: int = 0
    children: list[int] = field(default_factory=list)


@dataclass(eq=False)
class TransformComponent:
    """Local placement of an entity; euler angles are in degrees."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))
    rotation: np.ndarray = field(default_factory=identity_quat)

    def __post_init__(self) -> None:
        self.position = np.array(self.position, dtype=float)
        self.scale = np.array(self.scale, dtype=float)
        self.rotation = np.array(self.rotation, dtype=float)

    @property
    def euler_angles(self) -> np.ndarray:
        return np.degrees(quat_to_euler(self.rotation))

    @euler_angles.setter
    def euler_angles(self, degrees) -> None:
        self.rotation = quat_from_euler(np.radians(np.asarray(degrees, dtype=float)))

    def matrix(self) -> np.ndarray:
        """Matrix relative to the parent entity."""
        return compose_matrix(self.position, self.rotation, self.scale)


@dataclass
class MeshRenderComponent:
    """Mesh and shader asset ids; 0 means none."""

    mesh_asset_id: int = 0
    shader_asset_id: int = 0


@dataclass
class TextureBindingComponent:
    """Up to MAX_TEXTURE_BINDINGS texture assets and the slots they bind to."""

    texture_asset_ids: list[int] = field(
        default_factory=lambda: [0] * MAX_TEXTURE_BINDINGS
    )
    texture_bind_ids: list[int] = field(
        default_factory=lambda: [0] * MAX_TEXTURE_BINDINGS
    )


@dataclass
class CameraComponent:
    """Lens of a camera entity; fov is in radians."""

    fov: float = math.radians(50.0)
    aspect: float = 1.0
    near_z: float = 0.1
    far_z: float = 100.0

    def matrix(self) -> np.ndarray:
        """Perspective projection of this lens."""
        return perspective(self.fov, self.aspect, self.near_z, self.far_z)