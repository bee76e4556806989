"""
Declarative scenes - YAML files naming the elements a registry should hold.

Example YAML:
    elements:
      title:
        tag: h1
        innerText: Hello
      go:
        tag: button
        pos: [10, 20]
        innerText: Go

Loading creates elements for new names and patches known ones in place.
YAML cannot carry callbacks; attach those with ``Scene.bind``.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional

import yaml
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .element import (
    ELEMENT_TYPES,
    Element,
    ElementOptions,
    InvalidConfigurationError,
    build_element,
)
from .registry import ElementRegistry

logger = logging.getLogger(__name__)


class Scene:
    """Named view over the elements a registry created from scene data."""

    def __init__(self, registry: ElementRegistry):
        self.registry = registry
        self._ids: dict[str, int] = {}

    def apply(self, data: Optional[dict]) -> tuple[list[str], list[str]]:
        """
        Create or patch elements from parsed scene data.

        Every definition is checked before any element is created or
        patched, so an invalid scene leaves the registry and its log as
        they were.

        Args:
            data: Mapping with an ``elements`` mapping of name -> options

        Returns:
            Tuple of (created names, patched names)
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfigurationError(
                f"Scene must be a mapping, got {type(data).__name__}"
            )
        definitions = data.get("elements") or {}
        if not isinstance(definitions, dict):
            raise InvalidConfigurationError("Scene 'elements' must be a mapping of names")

        staged: list[tuple[str, ElementOptions]] = []
        for name, definition in definitions.items():
            if not isinstance(definition, dict):
                definition = {}
            options = ElementOptions.from_dict(definition)
            if name in self._ids:
                self._check_patch(name, self.element(name), options)
            else:
                # Dry run; raises SerializationError under the reject policy
                self.registry.serialize(build_element(options))
            staged.append((name, options))

        created, patched = [], []
        for name, options in staged:
            if name in self._ids:
                self._patch(self.element(name), options)
                patched.append(name)
            else:
                element = self.registry.create_from_options(options)
                self._ids[name] = element.id
                created.append(name)

        return created, patched

    def _check_patch(self, name: str, element: Element, options: ElementOptions) -> None:
        # An element's class is fixed at creation; tags needing another variant are refused
        if options.tag is None or options.tag == element.tag:
            return
        variant = ELEMENT_TYPES.get(options.tag, Element) if isinstance(options.tag, str) else Element
        if variant is not type(element):
            raise InvalidConfigurationError(
                f"Cannot change {name!r} from {element.tag!r} to {options.tag!r}: "
                f"{type(element).__name__} cannot become {variant.__name__}"
            )

    def _patch(self, element: Element, options: ElementOptions) -> None:
        if options.pos is not None:
            element.pos.set(options.pos.x, options.pos.y)
        if options.inner_text is not None:
            element.inner_text = options.inner_text
        if options.tag is not None and element.fixed_tag is None:
            element.tag = options.tag

    def load(self, path: Path) -> list[str]:
        """
        Read a scene file and apply it.

        Patched elements are pushed with a full registry update.

        Returns:
            Names of newly created elements
        """
        path = Path(path)
        data = yaml.safe_load(path.read_text())
        created, patched = self.apply(data)
        if patched:
            self.registry.update()
        logger.info("Loaded scene %s (%d created, %d patched)", path, len(created), len(patched))
        return created

    def element(self, name: str) -> Element:
        """Element created for ``name``."""
        if name not in self._ids:
            raise KeyError(f"Unknown scene element: {name}")
        return self.registry.get(self._ids[name])

    def bind(self, name: str, event: str, callback: Callable[..., Any]) -> None:
        """Attach a host-side callback to a named element."""
        self.element(name).events[event] = callback

    def names(self) -> list[str]:
        return list(self._ids.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._ids


class SceneChangeHandler(FileSystemEventHandler):
    """Watchdog handler that reloads the watched scene file."""

    def __init__(self, watcher: "SceneWatcher"):
        self.watcher = watcher

    def on_modified(self, event):
        if event.is_directory:
            return
        if self.watcher.matches(event.src_path):
            self.watcher.reload()

    def on_created(self, event):
        if event.is_directory:
            return
        if self.watcher.matches(event.src_path):
            self.watcher.reload()


class SceneWatcher:
    """
    Reloads a scene file whenever it changes on disk.

    Reloads run on the watchdog thread. They hold ``lock`` while touching
    the registry; hosts that also write to the registry should share it.

    Usage:
        watcher = SceneWatcher(scene, "ui.yaml")
        watcher.start()
        with watcher.lock:
            registry.update()
    """

    def __init__(self, scene: Scene, path, lock: Optional[threading.RLock] = None):
        self.scene = scene
        self.path = Path(path)
        self.lock = lock or threading.RLock()
        self._observer: Optional[Observer] = None

    def matches(self, src_path: str) -> bool:
        return Path(src_path).resolve() == self.path.resolve()

    def reload(self) -> None:
        with self.lock:
            try:
                self.scene.load(self.path)
            except (yaml.YAMLError, IOError, ValueError) as e:
                # Keep the last good scene on bad edits
                logger.warning("Failed to reload scene %s: %s", self.path, e)

    def start(self) -> None:
        """Start watching the scene file's directory."""
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(SceneChangeHandler(self), str(self.path.parent), recursive=False)
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None

    @property
    def watching(self) -> bool:
        return self._observer is not None
