"""A scene: the main environment plus the running state of its scripts."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .components import ScriptComponent
from .environment import Entity, Environment

logger = logging.getLogger(__name__)

Instantiate = Callable[[str, Entity], Any]


class SceneStateError(RuntimeError):
    """The scene was started while running, or stopped while not running."""


class Scene:
    """Holds the main environment and runs the scripts attached to its entities."""

    def __init__(self) -> None:
        logger.debug("Creating scene")
        self.environment = Environment("Scene Root")
        self.is_executing = False

    def _script_components(self):
        for entity in self.environment:
            if entity.has_component(ScriptComponent):
                yield entity, entity.get_component(ScriptComponent)

    def execute(self, instantiate: Instantiate) -> None:
        """Start running: create a script instance for every scripted entity.

        instantiate(script_id, entity) returns an object with an update() method.
        """
        if self.is_executing:
            raise SceneStateError("scene is already executing")
        self.is_executing = True
        logger.info("Executing Scene...")
        for entity, script in self._script_components():
            script.instance = instantiate(script.script_id, entity)

    def update(self) -> None:
        """Advance every live script instance by one step."""
        for _, script in self._script_components():
            if script.instance is not None:
                script.instance.update()

    def stop(self) -> None:
        """Stop running and drop every script instance."""
        if not self.is_executing:
            raise SceneStateError("scene is not executing")
        self.is_executing = False
        for _, script in self._script_components():
            script.instance = None
        logger.info("Stopping Scene...")

    def clear(self) -> None:
        self.environment.clear()