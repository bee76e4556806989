"""
dombridge - declare UI elements in Python, replay them in a renderer.

Elements and their positions live in an ElementRegistry, which records an
append-only log of createElement/updateElement instructions for an external
renderer (a browser page, a canvas host) to execute.
"""

from .config import BridgeConfig, CallbackPolicy, setup_logging
from .core import DegenerateVectorError, Vector2d
from .elements import (
    Button,
    Element,
    ElementOptions,
    ElementRegistry,
    InvalidConfigurationError,
    Scene,
    SceneWatcher,
    SerializationError,
    register_element_type,
)

__all__ = [
    # Config
    "BridgeConfig",
    "CallbackPolicy",
    "setup_logging",
    # Vectors
    "Vector2d",
    "DegenerateVectorError",
    # Elements
    "Element",
    "Button",
    "ElementOptions",
    "register_element_type",
    "ElementRegistry",
    "Scene",
    "SceneWatcher",
    # Errors
    "InvalidConfigurationError",
    "SerializationError",
]
