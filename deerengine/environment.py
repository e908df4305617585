"""Entities, their parent/child hierarchy, and the environment holding them."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional, Union

import numpy as np

from .components import (
    CameraComponent,
    MeshRenderComponent,
    RelationshipComponent,
    TagComponent,
    TextureBindingComponent,
    TransformComponent,
)
from .transform import scale_matrix

logger = logging.getLogger(__name__)

_INVERT_Z = scale_matrix([1.0, 1.0, -1.0])
_INVERT_Y = scale_matrix([1.0, -1.0, 1.0])


class EntityError(Exception):
    """An entity operation that the hierarchy or component rules forbid."""


def _view_projection(projection: np.ndarray, camera_world: np.ndarray) -> np.ndarray:
    # The z axis is inverted so that cameras look along +z.
    return _INVERT_Y @ projection @ _INVERT_Z @ np.linalg.inv(camera_world)


@dataclass
class VirtualCamera:
    """A camera that is not part of any environment, such as an editor view."""

    transform: TransformComponent = field(default_factory=TransformComponent)
    camera: CameraComponent = field(default_factory=CameraComponent)

    def view_projection_matrix(self) -> np.ndarray:
        """Matrix taking world points to clip space for this camera."""
        return _view_projection(self.camera.matrix(), self.transform.matrix())


class Entity:
    """A node of an environment, holding at most one component of each type."""

    def __init__(self, environment: "Environment", uid: int) -> None:
        self._environment: Optional[Environment] = environment
        self._uid = uid
        self._components: dict[type, Any] = {}
        self._is_root = False

    @property
    def uid(self) -> int:
        return self._uid

    @property
    def environment(self) -> Optional["Environment"]:
        return self._environment

    @property
    def is_root(self) -> bool:
        return self._is_root

    @property
    def is_valid(self) -> bool:
        env = self._environment
        return self._uid != 0 and env is not None and env._entities.get(self._uid) is self

    @property
    def name(self) -> str:
        return self.get_component(TagComponent).tag

    @property
    def parent_uid(self) -> int:
        relation = self._components.get(RelationshipComponent)
        return relation.parent_uid if relation is not None else 0

    @property
    def parent(self) -> "Entity":
        return self._require_environment().get_entity(self.parent_uid)

    @property
    def children(self) -> list[int]:
        return self.get_component(RelationshipComponent).children

    def _require_environment(self) -> "Environment":
        if self._environment is None:
            raise EntityError("entity does not belong to an environment")
        return self._environment

    def add_component(self, component: Any) -> Any:
        """Attach a component; an entity holds one component per type."""
        self._require_environment()
        component_type = type(component)
        if component_type in self._components:
            raise EntityError(f"entity already has component {component_type.__name__}")
        self._components[component_type] = component
        return component

    def get_component(self, component_type: type) -> Any:
        self._require_environment()
        try:
            return self._components[component_type]
        except KeyError:
            raise EntityError(f"entity has no component {component_type.__name__}") from None

    def has_component(self, component_type: type) -> bool:
        return component_type in self._components

    def remove_component(self, component_type: type) -> None:
        self._require_environment()
        if component_type not in self._components:
            raise EntityError(
                f"entity does not have component {component_type.__name__}"
            )
        del self._components[component_type]

    def _remove_child(self, child: "Entity") -> bool:
        if child.environment is not self._environment:
            raise EntityError("cannot remove children from a different environment")
        children = self.children
        if child.uid in children:
            children.remove(child.uid)
            return True
        return False

    def set_parent(self, parent: "Entity") -> None:
        """Move this entity under parent; a move that would make a cycle is ignored."""
        if parent.environment is not self._environment:
            raise EntityError("cannot set a parent from a different environment")
        if self._is_root:
            raise EntityError("cannot set the parent of the root")
        if not parent.is_valid:
            raise EntityError("parent is not valid")

        relation = self.get_component(RelationshipComponent)
        if relation.parent_uid == parent.uid:
            return
        if relation.parent_uid != 0:
            if parent.is_descendant(self):
                return
            self.parent._remove_child(self)

        relation.parent_uid = parent.uid
        parent.children.append(self._uid)

    def is_descendant(self, parent: "Entity") -> bool:
        """Whether this entity is parent or lies below it."""
        node = self
        while True:
            if node.uid == parent.uid:
                return True
            if node.is_root:
                return False
            node = node.parent

    def duplicate(self) -> "Entity":
        """A new sibling copying this entity's transform and render components."""
        env = self._require_environment()
        tag = self.get_component(TagComponent)
        parent = self.parent
        creation = env.create_entity(tag.tag + " (duplicated)")
        creation._components[TransformComponent] = copy.deepcopy(
            self.get_component(TransformComponent)
        )
        creation.set_parent(parent)
        for component_type in (MeshRenderComponent, CameraComponent, TextureBindingComponent):
            if self.has_component(component_type):
                creation.add_component(copy.deepcopy(self._components[component_type]))
        return creation

    def destroy(self) -> None:
        """Remove this entity and all its descendants from the environment."""
        env = self._require_environment()
        if self._is_root:
            raise EntityError("cannot destroy the root")
        self.parent._remove_child(self)

        if env.main_camera_uid == self._uid:
            env.set_main_camera(None)

        for child_uid in list(self.children):
            env.get_entity(child_uid).destroy()

        env._entities.pop(self._uid, None)
        self._environment = None
        self._uid = 0
        self._components.clear()

    def world_matrix(self) -> np.ndarray:
        """Matrix placing the entity in the world, through all its ancestors."""
        if self._is_root:
            return np.identity(4)
        return self.parent.world_matrix() @ self.relative_matrix()

    def relative_matrix(self) -> np.ndarray:
        """Matrix placing the entity relative to its parent."""
        return self.get_component(TransformComponent).matrix()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self._environment is other._environment and self._uid == other._uid

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Entity(uid={self._uid})"


class Environment:
    """A tree of entities below a single root, addressed by uid."""

    def __init__(self, root_name: str = "root") -> None:
        logger.debug("Creating environment with root: %s", root_name)
        self.root_name = root_name
        self._entities: dict[int, Entity] = {}
        self._root: Optional[Entity] = None
        self._id_offset = 0
        self.main_camera_uid = 0
        self.clear()

    @property
    def root(self) -> Entity:
        assert self._root is not None
        return self._root

    def _allocate_uid(self) -> int:
        while True:
            self._id_offset += 1
            if self._id_offset not in self._entities:
                return self._id_offset

    def clear(self) -> None:
        """Drop every entity and start again with a fresh root."""
        for entity in self._entities.values():
            entity._environment = None
        self._entities = {}
        self._root = None
        self._id_offset = 0
        self.main_camera_uid = 0

        uid = self._allocate_uid()
        root = Entity(self, uid)
        root.add_component(TagComponent(self.root_name, uid))
        root.add_component(RelationshipComponent())
        root.add_component(TransformComponent())
        root._is_root = True
        self._entities[uid] = root
        self._root = root

    def get_entity(self, uid: int) -> Entity:
        try:
            return self._entities[uid]
        except KeyError:
            raise EntityError(f"entity id {uid} does not exist") from None

    def create_entity(self, name: str = "") -> Entity:
        """A new entity with a tag, relationship and transform, under the root."""
        uid = self._allocate_uid()
        entity = Entity(self, uid)
        entity.add_component(TagComponent(name, uid))
        entity.add_component(RelationshipComponent())
        entity.add_component(TransformComponent())
        self._entities[uid] = entity
        entity.set_parent(self.root)
        return entity

    def restore_entity(self, uid: int, components: Iterable[Any]) -> Entity:
        """Put back an entity with a known uid and its components as they were.

        Hierarchy links are taken from its relationship component as given. An
        entity with no parent becomes the root, replacing the current one.
        """
        if uid == 0:
            raise EntityError("entity uid must not be zero")
        entity = Entity(self, uid)
        for component in components:
            entity.add_component(component)
        if entity.has_component(TagComponent):
            entity.get_component(TagComponent).entity_uid = uid
        else:
            entity.add_component(TagComponent("", uid))
        if not entity.has_component(RelationshipComponent):
            entity.add_component(RelationshipComponent())
        if not entity.has_component(TransformComponent):
            entity.add_component(TransformComponent())

        previous = self._entities.get(uid)
        if previous is not None:
            previous._environment = None

        if entity.parent_uid == 0:
            entity._is_root = True
            old_root = self._root
            if old_root is not None and old_root.uid != uid:
                self._entities.pop(old_root.uid, None)
                old_root._environment = None
            self._root = entity

        self._entities[uid] = entity
        return entity

    def set_main_camera(self, entity: Optional[Entity]) -> None:
        """Make entity the main camera; None or an invalid entity clears it."""
        if entity is None or not entity.is_valid:
            self.main_camera_uid = 0
        else:
            self.main_camera_uid = entity.uid

    def camera_view_projection(self, camera: Union[Entity, VirtualCamera]) -> np.ndarray:
        """Matrix taking world points to clip space for a camera entity or view."""
        if isinstance(camera, VirtualCamera):
            return camera.view_projection_matrix()
        if not camera.is_valid:
            raise EntityError("rendering camera is not valid")
        lens = camera.get_component(CameraComponent)
        return _view_projection(lens.matrix(), camera.world_matrix())

    def __iter__(self) -> Iterator[Entity]:
        return iter(sorted(self._entities.values(), key=lambda entity: entity.uid))

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, uid: object) -> bool:
        return uid in self._entities