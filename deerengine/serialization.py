"""Saving and loading scenes as JSON documents or a compact binary form."""

from __future__ import annotations

import json
import struct
from pathlib import Path
from typing import Any, Mapping, Optional

from .assets import AssetManager, Loader
from .components import (
    MAX_TEXTURE_BINDINGS,
    CameraComponent,
    MeshRenderComponent,
    RelationshipComponent,
    ScriptComponent,
    TagComponent,
    TextureBindingComponent,
    TransformComponent,
)
from .environment import Entity, Environment
from .scene import Scene

UNINITIALIZED_PATH = "_NO_INITIALIZED_"

_BINARY_MAGIC = b"DEERSCN1"


def _vec3_to_dict(vector) -> dict[str, float]:
    x, y, z = (float(component) for component in vector)
    return {"x": x, "y": y, "z": z}


def _vec3_from_dict(data: Mapping[str, Any]) -> list[float]:
    return [float(data["x"]), float(data["y"]), float(data["z"])]


def _quat_to_dict(quat) -> dict[str, float]:
    w, x, y, z = (float(component) for component in quat)
    return {"x": x, "y": y, "z": z, "w": w}


def _quat_from_dict(data: Mapping[str, Any]) -> list[float]:
    return [float(data["w"]), float(data["x"]), float(data["y"]), float(data["z"])]


def _location(asset_manager: AssetManager, asset_id: int) -> str:
    return asset_manager.asset_location(asset_id).as_posix()


def entity_to_dict(entity: Entity, asset_manager: AssetManager) -> dict[str, Any]:
    """Plain data describing one entity; asset ids are stored as their locations."""
    transform = entity.get_component(TransformComponent)
    relation = entity.get_component(RelationshipComponent)
    data: dict[str, Any] = {
        "id": entity.uid,
        "name": entity.get_component(TagComponent).tag,
        "transform": {
            "position": _vec3_to_dict(transform.position),
            "scale": _vec3_to_dict(transform.scale),
            "rotation": _quat_to_dict(transform.rotation),
        },
        "relationship": {
            "parentUID": relation.parent_uid,
            "childrensUIDs": [int(child) for child in relation.children],
        },
    }

    data["hasMeshRenderComponent"] = entity.has_component(MeshRenderComponent)
    if data["hasMeshRenderComponent"]:
        mesh_render = entity.get_component(MeshRenderComponent)
        data["meshRenderComponent"] = {
            "mesh": _location(asset_manager, mesh_render.mesh_asset_id),
            "shader": _location(asset_manager, mesh_render.shader_asset_id),
        }

    data["hasCameraComponent"] = entity.has_component(CameraComponent)
    if data["hasCameraComponent"]:
        camera = entity.get_component(CameraComponent)
        data["cameraComponent"] = {
            "aspect": float(camera.aspect),
            "fov": float(camera.fov),
            "farZ": float(camera.far_z),
            "nearZ": float(camera.near_z),
        }

    data["hasTextureBindingComponent"] = entity.has_component(TextureBindingComponent)
    if data["hasTextureBindingComponent"]:
        binding = entity.get_component(TextureBindingComponent)
        bindings = [
            {"texturePath": _location(asset_manager, asset_id), "bindingID": int(bind_id)}
            for asset_id, bind_id in zip(binding.texture_asset_ids, binding.texture_bind_ids)
            if asset_id != 0
        ]
        bindings.sort(key=lambda item: item["bindingID"])
        data["textureBindingComponent"] = {"bindings": bindings}

    data["hasScriptComponent"] = entity.has_component(ScriptComponent)
    if data["hasScriptComponent"]:
        script = entity.get_component(ScriptComponent)
        data["scriptComponent"] = {"scriptID": script.script_id}

    return data


def environment_to_dict(environment: Environment, asset_manager: AssetManager) -> dict[str, Any]:
    """Plain data describing every entity, ordered by uid, and the main camera."""
    return {
        "entities": [entity_to_dict(entity, asset_manager) for entity in environment],
        "mainCameraUID": environment.main_camera_uid,
    }


def _components_from_dict(
    data: Mapping[str, Any],
    asset_manager: AssetManager,
    loaders: Mapping[str, Loader],
) -> tuple[int, list[Any]]:
    uid = int(data["id"])
    transform_data = data["transform"]
    relation_data = data["relationship"]
    components: list[Any] = [
        TagComponent(str(data["name"]), uid),
        TransformComponent(
            position=_vec3_from_dict(transform_data["position"]),
            scale=_vec3_from_dict(transform_data["scale"]),
            rotation=_quat_from_dict(transform_data["rotation"]),
        ),
        RelationshipComponent(
            int(relation_data["parentUID"]),
            [int(child) for child in relation_data["childrensUIDs"]],
        ),
    ]

    if data["hasMeshRenderComponent"]:
        mesh_data = data["meshRenderComponent"]
        components.append(
            MeshRenderComponent(
                mesh_asset_id=asset_manager.load_asset(mesh_data["mesh"], loaders.get("mesh")),
                shader_asset_id=asset_manager.load_asset(
                    mesh_data["shader"], loaders.get("shader")
                ),
            )
        )

    if data["hasCameraComponent"]:
        camera_data = data["cameraComponent"]
        components.append(
            CameraComponent(
                fov=float(camera_data["fov"]),
                aspect=float(camera_data["aspect"]),
                near_z=float(camera_data["nearZ"]),
                far_z=float(camera_data["farZ"]),
            )
        )

    if data["hasTextureBindingComponent"]:
        binding = TextureBindingComponent()
        bindings = data["textureBindingComponent"]["bindings"]
        for slot, item in enumerate(bindings[:MAX_TEXTURE_BINDINGS]):
            binding.texture_asset_ids[slot] = asset_manager.load_asset(
                item["texturePath"], loaders.get("texture")
            )
            binding.texture_bind_ids[slot] = int(item["bindingID"])
        components.append(binding)

    if data["hasScriptComponent"]:
        components.append(ScriptComponent(str(data["scriptComponent"]["scriptID"])))

    return uid, components


def environment_from_dict(
    data: Mapping[str, Any],
    environment: Environment,
    asset_manager: AssetManager,
    loaders: Optional[Mapping[str, Loader]] = None,
) -> Environment:
    """Replace the environment's contents with the entities described by data.

    loaders maps "mesh", "shader" and "texture" to the functions that load
    assets of that kind. Raises ValueError if data lacks a required field.
    """
    loaders = loaders or {}
    try:
        restored = [
            _components_from_dict(entity_data, asset_manager, loaders)
            for entity_data in data["entities"]
        ]
        main_camera_uid = int(data["mainCameraUID"])
    except (KeyError, TypeError) as error:
        raise ValueError(f"malformed scene data: {error}") from error

    environment.clear()
    for uid, components in restored:
        environment.restore_entity(uid, components)
    if main_camera_uid != 0:
        environment.set_main_camera(environment.get_entity(main_camera_uid))
    return environment


def _encode(value: Any, out: bytearray) -> None:
    if value is None:
        out += b"N"
    elif isinstance(value, bool):
        out += b"T" if value else b"F"
    elif isinstance(value, int):
        out += b"I" + struct.pack("<q", value)
    elif isinstance(value, float):
        out += b"D" + struct.pack("<d", value)
    elif isinstance(value, str):
        out += b"S"
        _encode_text(value, out)
    elif isinstance(value, (list, tuple)):
        out += b"L" + struct.pack("<I", len(value))
        for item in value:
            _encode(item, out)
    elif isinstance(value, dict):
        out += b"M" + struct.pack("<I", len(value))
        for key, item in value.items():
            _encode_text(str(key), out)
            _encode(item, out)
    else:
        raise TypeError(f"cannot encode value of type {type(value).__name__}")


def _encode_text(text: str, out: bytearray) -> None:
    raw = text.encode("utf-8")
    out += struct.pack("<I", len(raw)) + raw


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def take(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise ValueError("binary scene data is truncated")
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def unpack(self, fmt: str) -> Any:
        return struct.unpack(fmt, self.take(struct.calcsize(fmt)))[0]

    def text(self) -> str:
        try:
            return self.take(self.unpack("<I")).decode("utf-8")
        except UnicodeDecodeError as error:
            raise ValueError("binary scene data holds invalid text") from error

    def value(self) -> Any:
        tag = self.take(1)
        if tag == b"N":
            return None
        if tag == b"T":
            return True
        if tag == b"F":
            return False
        if tag == b"I":
            return self.unpack("<q")
        if tag == b"D":
            return self.unpack("<d")
        if tag == b"S":
            return self.text()
        if tag == b"L":
            return [self.value() for _ in range(self.unpack("<I"))]
        if tag == b"M":
            result = {}
            for _ in range(self.unpack("<I")):
                key = self.text()
                result[key] = self.value()
            return result
        raise ValueError(f"unknown tag {tag!r} in binary scene data")

    @property
    def exhausted(self) -> bool:
        return self._offset == len(self._data)


def _to_binary(document: Any) -> bytes:
    out = bytearray(_BINARY_MAGIC)
    _encode(document, out)
    return bytes(out)


def _from_binary(data: bytes) -> Any:
    if not data.startswith(_BINARY_MAGIC):
        raise ValueError("not a binary scene file")
    reader = _Reader(data[len(_BINARY_MAGIC):])
    document = reader.value()
    if not reader.exhausted:
        raise ValueError("trailing bytes after binary scene data")
    return document


class SceneSerializer:
    """Writes a scene to files and reads it back, remembering the last path used."""

    def __init__(
        self,
        scene: Scene,
        asset_manager: AssetManager,
        loaders: Optional[Mapping[str, Loader]] = None,
    ) -> None:
        self.scene = scene
        self.asset_manager = asset_manager
        self.loaders = dict(loaders or {})
        self.current_scene_path = UNINITIALIZED_PATH

    @property
    def scene_executing(self) -> bool:
        return self.scene.is_executing

    def _document(self) -> dict[str, Any]:
        return {
            "scene": {
                "main_environment": environment_to_dict(
                    self.scene.environment, self.asset_manager
                )
            }
        }

    def _load_document(self, document: Any) -> None:
        try:
            data = document["scene"]["main_environment"]
        except (KeyError, TypeError) as error:
            raise ValueError(f"malformed scene data: {error}") from error
        environment_from_dict(data, self.scene.environment, self.asset_manager, self.loaders)

    def serialize(self, file_path) -> None:
        """Write the scene as JSON."""
        self.current_scene_path = str(file_path)
        text = json.dumps(self._document(), indent=4)
        Path(file_path).write_text(text, encoding="utf-8")

    def deserialize(self, file_path) -> None:
        """Replace the scene's contents with a JSON file written by serialize."""
        text = Path(file_path).read_text(encoding="utf-8")
        self.current_scene_path = str(file_path)
        try:
            document = json.loads(text)
        except json.JSONDecodeError as error:
            raise ValueError(f"invalid scene file: {error}") from error
        self._load_document(document)

    def serialize_binary(self, file_path) -> None:
        """Write the scene in the compact binary form."""
        self.current_scene_path = str(file_path)
        Path(file_path).write_bytes(_to_binary(self._document()))

    def deserialize_binary(self, file_path) -> None:
        """Replace the scene's contents with a file written by serialize_binary."""
        data = Path(file_path).read_bytes()
        self.current_scene_path = str(file_path)
        self._load_document(_from_binary(data))