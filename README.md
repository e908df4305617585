# deerengine

The core of a small game engine as a plain Python library. It covers events,
layers, vertex buffer layouts, transform maths, an entity scene graph, assets
and saving scenes. numpy is its only dependency. It needs Python 3.10 or newer.

## Modules

- `deerengine.events`: `EventType`, `EventCategory` (bit flags), `Key` and
  `MouseButton` codes, the window, key and mouse event classes
  (`WindowResizeEvent`, `WindowCloseEvent`, `KeyPressedEvent`,
  `KeyReleasedEvent`, `KeyTypedEvent`, `MouseMovedEvent`,
  `MouseScrolledEvent`, `MouseButtonPressedEvent`,
  `MouseButtonReleasedEvent`, `MouseButtonDownEvent`) and `EventDispatcher`.
- `deerengine.layers`: `Timestep`, `Layer` with its `on_attach`,
  `on_detach`, `on_update`, `on_render`, `on_imgui` and `on_event` hooks, and
  `LayerStack`.
- `deerengine.buffer`: `DataType`, `IndexDataType`, `ShaderDataType`,
  `data_type_size`, `data_type_count`, `index_data_type_size`, `index_count`,
  `BufferElement` and `BufferLayout`. A layout works out each element's offset
  and the stride.
- `deerengine.transform`: quaternions in `(w, x, y, z)` order
  (`identity_quat`, `quat_from_euler`, `quat_to_euler`, `quat_to_matrix`),
  4x4 matrices (`translation_matrix`, `scale_matrix`, `perspective`,
  `compose_matrix`) and `Transform`.
- `deerengine.camera`: `Camera`. Its fov is in degrees and
  `recalculate_matrices` rebuilds its matrices.
- `deerengine.components`: `TagComponent`, `ScriptComponent`,
  `RelationshipComponent`, `TransformComponent`, `MeshRenderComponent`,
  `TextureBindingComponent` (up to `MAX_TEXTURE_BINDINGS` = 4) and
  `CameraComponent`.
- `deerengine.environment`: `Entity`, `Environment`, `VirtualCamera` and
  `EntityError`.
- `deerengine.scene`: `Scene` and `SceneStateError`.
- `deerengine.assets`: `Asset` and `AssetManager`.
- `deerengine.serialization`: `entity_to_dict`, `environment_to_dict`,
  `environment_from_dict` and `SceneSerializer`.
- `deerengine.project`: `Project`. It holds the asset manager, the scene and
  the scene serializer.

## Events

```python
from deerengine.events import EventCategory, EventDispatcher, WindowResizeEvent

event = WindowResizeEvent(1280, 720)
assert event.is_in_category(EventCategory.APPLICATION)
print(event)                       # WindowResizeEvent: 1280, 720

dispatcher = EventDispatcher(event)
dispatcher.dispatch(WindowResizeEvent, lambda e: True)
assert event.handled               # the handler's result marks it handled
```

`dispatch` calls the handler only when the event is of the given kind and has
not been handled yet. It returns whether the handler was called.

## Layers

```python
from deerengine.layers import Layer, LayerStack

stack = LayerStack()
stack.push_layer(Layer("world"))
stack.push_overlay(Layer("hud"))
stack.push_layer(Layer("background"))

print([layer.name for layer in stack])   # ['background', 'world', 'hud']
```

A pushed layer goes in front of every layer pushed before it. Overlays are
appended after everything else. `pop_layer` and `pop_overlay` do nothing if
the layer is not in the stack.

## Buffer layouts

```python
from deerengine.buffer import BufferElement, BufferLayout, DataType

layout = BufferLayout([
    BufferElement("a_Position", DataType.FLOAT3),
    BufferElement("a_Color", DataType.FLOAT4),
])
print(layout.stride)                          # 28
print([e.offset for e in layout])             # [0, 12]
```

Unknown data types raise `ValueError`.

## Building a scene

```python
from deerengine.components import CameraComponent, TransformComponent
from deerengine.environment import Environment

env = Environment("root")
player = env.create_entity("player")
sword = env.create_entity("sword")
sword.set_parent(player)

player.get_component(TransformComponent).position[:] = (1.0, 0.0, 0.0)
print(sword.world_matrix())

camera = env.create_entity("camera")
camera.add_component(CameraComponent())
env.set_main_camera(camera)
print(env.camera_view_projection(camera))
```

An entity holds at most one component of each type. Adding a second one, or
reading a component that is missing, raises `EntityError`. Moving an entity
under one of its own descendants is ignored. `duplicate` makes a sibling with
copies of the transform, mesh, camera and texture components. `destroy`
removes the entity and everything below it.

## Running scripts

`Scene.execute(instantiate)` calls `instantiate(script_id, entity)` for every
entity that has a `ScriptComponent`. The result must have an `update()`
method. `Scene.update()` calls each instance once. `Scene.stop()` drops the
instances. Starting a scene that is already running, or stopping one that is
not running, raises `SceneStateError`.

## Assets

`AssetManager.load_asset(location, loader)` returns the id of the asset at
that location. It calls `loader` only the first time it sees a location, and
`loader` receives the location with forward slashes. Id 0 is a placeholder
that means "no asset".

## Saving and loading

```python
from deerengine.project import Project

with Project() as project:
    serializer = project.scene_serializer
    serializer.serialize("level.json")
    serializer.deserialize("level.json")
    serializer.serialize_binary("level.bin")
    serializer.deserialize_binary("level.bin")
```

Mesh, shader and texture references are saved as asset locations. To load
assets again, pass `loaders` to `Project` or `SceneSerializer`: a mapping
from `"mesh"`, `"shader"` and `"texture"` to loader functions. The binary
form is the package's own compact encoding of the same document. Malformed
files raise `ValueError`.

## What this package does not do

It opens no window and does not draw. It has no GPU buffers, shaders,
textures or frame buffers, and it does not read input devices. It has no
script language. Script instances and asset values are whatever your
`instantiate` and loader functions return. It has no application main loop
and no command-line program. You drive layers, scenes and serializers from
your own code.

## Installation

```
pip install deerengine
```

The `test` extra installs pytest for running the test suite.