"""
Element model, registry, and declarative scenes.

The registry is the only stateful piece: it numbers elements and keeps the
instruction log a renderer replays.
"""

from .element import (
    ELEMENT_TYPES,
    Button,
    Element,
    ElementOptions,
    InvalidConfigurationError,
    SerializationError,
    build_element,
    register_element_type,
)
from .registry import ElementRegistry
from .scene import Scene, SceneWatcher

__all__ = [
    "Element",
    "Button",
    "ElementOptions",
    "ELEMENT_TYPES",
    "build_element",
    "register_element_type",
    "ElementRegistry",
    "Scene",
    "SceneWatcher",
    "InvalidConfigurationError",
    "SerializationError",
]
