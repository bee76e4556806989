"""Shared test fixtures."""

import json

import pytest

from dombridge.config import BridgeConfig, CallbackPolicy
from dombridge.elements.registry import ElementRegistry


@pytest.fixture
def registry():
    """Registry with default config."""
    return ElementRegistry()


@pytest.fixture
def names_registry():
    """Registry that lists bound event names on the wire."""
    return ElementRegistry(BridgeConfig(callback_policy=CallbackPolicy.NAMES))


@pytest.fixture
def parse_instruction():
    """Split a log entry into (verb, id or None, decoded record)."""
    def parse(line: str):
        assert line.endswith(");")
        verb, _, rest = line.partition("(")
        body = rest[:-2]
        if verb == "updateElement":
            element_id, _, payload = body.partition(",")
            return verb, int(element_id), json.loads(payload)
        return verb, None, json.loads(body)
    return parse


@pytest.fixture
def scene_file(tmp_path):
    """A small scene YAML file."""
    path = tmp_path / "scene.yaml"
    path.write_text(
        "elements:\n"
        "  title:\n"
        "    tag: h1\n"
        "    innerText: Hello\n"
        "  go:\n"
        "    tag: button\n"
        "    pos: [10, 20]\n"
        "    innerText: Go\n"
    )
    return path
