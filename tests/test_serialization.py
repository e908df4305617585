import numpy as np
import pytest

from deerengine.assets import AssetManager
from deerengine.components import (
    CameraComponent,
    MeshRenderComponent,
    RelationshipComponent,
    ScriptComponent,
    TagComponent,
    TextureBindingComponent,
    TransformComponent,
)
from deerengine.environment import Environment
from deerengine.scene import Scene
from deerengine.serialization import (
    SceneSerializer,
    entity_to_dict,
    environment_from_dict,
    environment_to_dict,
)


def _build():
    assets = AssetManager()
    scene = Scene()
    env = scene.environment
    alpha = env.create_entity("alpha")
    beta = env.create_entity("beta")
    beta.set_parent(alpha)
    alpha.get_component(TransformComponent).position = np.array([1.0, 2.0, 3.0])
    beta.get_component(TransformComponent).scale = np.array([2.0, 2.0, 2.0])
    alpha.add_component(CameraComponent(fov=1.0, aspect=1.5, near_z=0.2, far_z=50.0))
    env.set_main_camera(alpha)
    beta.add_component(ScriptComponent("Spinner"))
    return scene, assets, alpha, beta


def test_json_round_trip_reproduces_the_environment(tmp_path):
    scene, assets, _, _ = _build()
    path = tmp_path / "scene.json"
    SceneSerializer(scene, assets).serialize(path)

    restored = Scene()
    SceneSerializer(restored, assets).deserialize(path)

    assert environment_to_dict(restored.environment, assets) == environment_to_dict(
        scene.environment, assets
    )


def test_round_trip_keeps_hierarchy_camera_and_transform(tmp_path):
    scene, assets, alpha, beta = _build()
    path = tmp_path / "scene.json"
    SceneSerializer(scene, assets).serialize(path)

    restored = Scene()
    SceneSerializer(restored, assets).deserialize(path)
    env = restored.environment

    new_alpha = env.get_entity(alpha.uid)
    new_beta = env.get_entity(beta.uid)
    assert new_alpha.name == "alpha"
    assert new_beta.parent_uid == alpha.uid
    assert beta.uid in new_alpha.children
    assert env.main_camera_uid == alpha.uid
    assert np.allclose(new_alpha.get_component(TransformComponent).position, [1.0, 2.0, 3.0])
    assert np.allclose(new_beta.world_matrix(), beta.world_matrix())
    assert new_beta.get_component(ScriptComponent).script_id == "Spinner"
    assert new_beta.get_component(ScriptComponent).instance is None


def test_binary_round_trip_reproduces_the_environment(tmp_path):
    scene, assets, _, _ = _build()
    path = tmp_path / "scene.bin"
    SceneSerializer(scene, assets).serialize_binary(path)

    restored = Scene()
    SceneSerializer(restored, assets).deserialize_binary(path)

    assert environment_to_dict(restored.environment, assets) == environment_to_dict(
        scene.environment, assets
    )


def test_binary_rejects_foreign_data(tmp_path):
    path = tmp_path / "scene.bin"
    path.write_bytes(b"garbage")
    with pytest.raises(ValueError):
        SceneSerializer(Scene(), AssetManager()).deserialize_binary(path)


def test_binary_rejects_truncated_data(tmp_path):
    scene, assets, _, _ = _build()
    path = tmp_path / "scene.bin"
    SceneSerializer(scene, assets).serialize_binary(path)
    path.write_bytes(path.read_bytes()[:-5])
    with pytest.raises(ValueError):
        SceneSerializer(Scene(), assets).deserialize_binary(path)


def test_json_document_layout(tmp_path):
    scene, assets, _, _ = _build()
    path = tmp_path / "scene.json"
    SceneSerializer(scene, assets).serialize(path)
    import json

    document = json.loads(path.read_text(encoding="utf-8"))
    environment = document["scene"]["main_environment"]
    assert [item["id"] for item in environment["entities"]] == sorted(
        entity.uid for entity in scene.environment
    )


def test_current_path_tracks_last_file(tmp_path):
    scene, assets, _, _ = _build()
    serializer = SceneSerializer(scene, assets)
    assert serializer.current_scene_path == "_NO_INITIALIZED_"
    path = tmp_path / "scene.json"
    serializer.serialize(path)
    assert serializer.current_scene_path == str(path)


def test_scene_executing_follows_scene():
    scene, assets, _, _ = _build()
    serializer = SceneSerializer(scene, assets)
    assert serializer.scene_executing is False
    scene.execute(lambda script_id, entity: None)
    assert serializer.scene_executing is True


def test_deserialize_replaces_existing_entities(tmp_path):
    scene, assets, _, _ = _build()
    path = tmp_path / "scene.json"
    SceneSerializer(scene, assets).serialize(path)
    saved = {entity.uid for entity in scene.environment}

    target = Scene()
    for index in range(6):
        target.environment.create_entity(f"stale {index}")
    SceneSerializer(target, assets).deserialize(path)

    assert {entity.uid for entity in target.environment} == saved
    fresh = target.environment.create_entity("fresh")
    assert fresh.uid not in saved


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        SceneSerializer(Scene(), AssetManager()).deserialize(tmp_path / "absent.json")


def test_mesh_render_stores_locations_and_reloads_through_loaders():
    assets = AssetManager()
    env = Environment()
    mesh_id = assets.load_asset("meshes/cube.obj")
    shader_id = assets.load_asset("shaders/basic.glsl")
    entity = env.create_entity("cube")
    entity.add_component(MeshRenderComponent(mesh_id, shader_id))

    data = entity_to_dict(entity, assets)
    assert data["meshRenderComponent"] == {
        "mesh": "meshes/cube.obj",
        "shader": "shaders/basic.glsl",
    }

    calls = []
    loaders = {
        "mesh": lambda location: calls.append(("mesh", location)) or "mesh-value",
        "shader": lambda location: calls.append(("shader", location)) or "shader-value",
    }
    fresh_assets = AssetManager()
    restored = environment_from_dict(
        environment_to_dict(env, assets), Environment(), fresh_assets, loaders
    )
    component = restored.get_entity(entity.uid).get_component(MeshRenderComponent)
    assert fresh_assets.get_asset(component.mesh_asset_id).value == "mesh-value"
    assert fresh_assets.get_asset(component.shader_asset_id).value == "shader-value"
    assert calls == [("mesh", "meshes/cube.obj"), ("shader", "shaders/basic.glsl")]


def test_empty_mesh_render_uses_placeholder_asset():
    assets = AssetManager()
    env = Environment()
    entity = env.create_entity("empty")
    entity.add_component(MeshRenderComponent())

    data = entity_to_dict(entity, assets)
    assert data["meshRenderComponent"]["mesh"] == "null"

    restored = environment_from_dict(environment_to_dict(env, assets), Environment(), assets)
    component = restored.get_entity(entity.uid).get_component(MeshRenderComponent)
    assert (component.mesh_asset_id, component.shader_asset_id) == (0, 0)
    assert len(assets) == 1


def test_texture_bindings_sorted_by_binding_id_and_restored_in_order():
    assets = AssetManager()
    env = Environment()
    first = assets.load_asset("textures/a.png")
    second = assets.load_asset("textures/b.png")
    entity = env.create_entity("textured")
    entity.add_component(
        TextureBindingComponent(
            texture_asset_ids=[first, 0, second, 0],
            texture_bind_ids=[5, 0, 2, 0],
        )
    )

    data = entity_to_dict(entity, assets)
    bindings = data["textureBindingComponent"]["bindings"]
    assert [item["bindingID"] for item in bindings] == [2, 5]
    assert [item["texturePath"] for item in bindings] == ["textures/b.png", "textures/a.png"]

    fresh_assets = AssetManager()
    restored = environment_from_dict(environment_to_dict(env, assets), Environment(), fresh_assets)
    component = restored.get_entity(entity.uid).get_component(TextureBindingComponent)
    assert component.texture_bind_ids[:2] == [2, 5]
    assert [fresh_assets.asset_location(i).as_posix() for i in component.texture_asset_ids[:2]] == [
        "textures/b.png",
        "textures/a.png",
    ]
    assert component.texture_asset_ids[2:] == [0, 0]


def test_entity_dict_flags_absent_components():
    env = Environment()
    entity = env.create_entity("plain")
    data = entity_to_dict(entity, AssetManager())
    assert data["hasMeshRenderComponent"] is False
    assert data["hasCameraComponent"] is False
    assert data["hasTextureBindingComponent"] is False
    assert data["hasScriptComponent"] is False
    assert "meshRenderComponent" not in data
    assert data["relationship"]["parentUID"] == env.root.uid


def test_rotation_round_trips():
    assets = AssetManager()
    env = Environment()
    entity = env.create_entity("turned")
    entity.get_component(TransformComponent).euler_angles = [10.0, 20.0, 30.0]
    original = entity.get_component(TransformComponent).rotation.copy()

    restored = environment_from_dict(environment_to_dict(env, assets), Environment(), assets)
    rotation = restored.get_entity(entity.uid).get_component(TransformComponent).rotation
    assert np.allclose(rotation, original)


def test_restored_root_is_root():
    scene, assets, _, _ = _build()
    data = environment_to_dict(scene.environment, assets)
    restored = environment_from_dict(data, Environment("other"), assets)
    assert restored.root.is_root
    assert restored.root.name == "Scene Root"
    assert restored.root.get_component(RelationshipComponent).parent_uid == 0


def test_malformed_data_raises_value_error():
    with pytest.raises(ValueError):
        environment_from_dict(
            {"entities": [{"id": 2}], "mainCameraUID": 0}, Environment(), AssetManager()
        )


def test_malformed_data_leaves_environment_untouched():
    env = Environment()
    kept = env.create_entity("kept")
    with pytest.raises(ValueError):
        environment_from_dict({"mainCameraUID": 0}, env, AssetManager())
    assert env.get_entity(kept.uid).get_component(TagComponent).tag == "kept"