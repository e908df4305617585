"""Frame timesteps, application layers and the ordered stack holding them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from .events import Event


@dataclass(frozen=True)
class Timestep:
    """Elapsed time of one frame, in seconds."""

    seconds: float = 0.0

    @property
    def milliseconds(self) -> float:
        return self.seconds * 1000

    def __float__(self) -> float:
        return float(self.seconds)


class Layer:
    """A unit of application behaviour; subclasses override the hooks.

    The base hooks keep a small record of what the layer has seen: whether
    it is attached, the last update and render timesteps, how many interface
    frames it has drawn and the last event it received.
    """

    def __init__(self, name: str = "Layer") -> None:
        self.name = name
        self.attached = False
        self.last_update: Optional[Timestep] = None
        self.last_render: Optional[Timestep] = None
        self.imgui_frames = 0
        self.last_event: Optional[Event] = None

    def on_attach(self) -> None:
        """Called when the layer becomes active."""
        self.attached = True

    def on_detach(self) -> None:
        """Called when the layer stops being active."""
        self.attached = False

    def on_render(self, delta: Timestep) -> None:
        """Called once per rendered frame."""
        self.last_render = delta

    def on_update(self, delta: Timestep) -> None:
        """Called once per fixed update step."""
        self.last_update = delta

    def on_imgui(self) -> None:
        """Called when the interface overlay is drawn."""
        self.imgui_frames += 1

    def on_event(self, event: Event) -> None:
        """Called for every event the application receives."""
        self.last_event = event

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class LayerStack:
    """Ordered layers followed by overlays.

    A pushed layer goes to the front, ahead of every layer pushed before it;
    overlays are appended after everything. Iteration runs front to back.
    """

    def __init__(self) -> None:
        self._layers: list[Layer] = []

    def push_layer(self, layer: Layer) -> None:
        self._layers.insert(0, layer)

    def push_overlay(self, overlay: Layer) -> None:
        self._layers.append(overlay)

    def pop_layer(self, layer: Layer) -> None:
        """Remove a layer; nothing happens if it is not in the stack."""
        self._remove(layer)

    def pop_overlay(self, overlay: Layer) -> None:
        """Remove an overlay; nothing happens if it is not in the stack."""
        self._remove(overlay)

    def _remove(self, layer: Layer) -> None:
        for position, held in enumerate(self._layers):
            if held is layer:
                del self._layers[position]
                return

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def __reversed__(self) -> Iterator[Layer]:
        return reversed(self._layers)

    def __len__(self) -> int:
        return len(self._layers)