"""
Element registry - owns element identity, storage, and the instruction log.

The log is a list of strings an external renderer replays in order:

    createElement({"id":0,"pos":{"x":0,"y":0},"tag":"button","innerText":"Go"});
    updateElement(0,{"id":0,"pos":{"x":5,"y":0},"tag":"button","innerText":"Go"});

Entries are only ever appended. Delivering them is up to the host, either by
reading ``instructions_since`` or by subscribing with ``on_instruction``.
"""

from __future__ import annotations

import json
import logging
import re
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence

from ..config import BridgeConfig
from ..core.vector import Vector2d
from .element import (
    Element,
    ElementOptions,
    InvalidConfigurationError,
    build_element,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


class ElementRegistry:
    """
    Creates elements, hands out ids, and records what the renderer must do.

    Usage:
        registry = ElementRegistry()
        go = registry.create_element(["tag", "innerText"], "button", "Go")
        go.pos.add(Vector2d(5, 0))
        registry.update()

        for line in registry.instructions:
            renderer.run(line)

    Not thread-safe; a host with several writers must serialize calls.
    """

    def __init__(self, config: Optional[BridgeConfig] = None):
        self.config = config or BridgeConfig()
        self._next_id = 0
        self._elements: dict[int, Element] = {}
        self._instructions: list[str] = []
        self._listeners: list[Callable[[str], None]] = []
        # Last payload sent per id, for update_changed()
        self._sent: dict[int, str] = {}

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def elements(self) -> Mapping[int, Element]:
        """Read-only view of stored elements by id."""
        return MappingProxyType(self._elements)

    @property
    def instructions(self) -> tuple[str, ...]:
        return tuple(self._instructions)

    def instructions_since(self, index: int) -> list[str]:
        """Entries appended at or after ``index``, for incremental consumers."""
        return self._instructions[index:]

    # -- log -----------------------------------------------------------------

    def instruct(self, instruction: str) -> None:
        """Append a raw instruction to the log and notify listeners."""
        self._instructions.append(instruction)
        logger.debug("instruct %s", instruction)

        for listener in self._listeners.copy():
            try:
                listener(instruction)
            except Exception as e:
                logger.warning("Instruction listener failed: %s", e)

    def on_instruction(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """
        Subscribe to appended instructions.

        Args:
            callback: Called with each instruction string as it is appended

        Returns:
            Unsubscribe function
        """
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def serialize(self, element: Element) -> str:
        """JSON text of an element's wire record under this registry's config."""
        return json.dumps(
            element.to_dict(self.config.callback_policy),
            separators=self.config.json_separators,
            allow_nan=False,
        )

    # -- creation ------------------------------------------------------------

    def create_element(self, keys: Sequence[str], *values: Any) -> Element:
        """
        Create an element from parallel key and value lists.

        Whitespace inside keys is stripped, so ``" inner Text"`` names
        ``innerText``. Keys without a value are left unset and take their
        defaults (an error under ``strict_options``). Values without a key
        are an error.

        Args:
            keys: Option names (tag, pos, innerText, click, or anything else)
            *values: One value per key, in order

        Returns:
            The live element, already stored and logged
        """
        if len(values) > len(keys):
            raise InvalidConfigurationError(
                f"{len(values)} values given for {len(keys)} keys"
            )
        if len(values) < len(keys):
            missing = [_WHITESPACE.sub("", k) for k in keys[len(values):]]
            if self.config.strict_options:
                raise InvalidConfigurationError(f"No values for keys: {', '.join(missing)}")
            logger.debug("No values for %s, using defaults", missing)

        raw: dict[str, Any] = {}
        for key, value in zip(keys, values):
            raw[_WHITESPACE.sub("", key)] = value

        return self.create_from_options(ElementOptions.from_dict(raw))

    def create(
        self,
        tag: Optional[str] = None,
        pos: Optional[Vector2d] = None,
        inner_text: Optional[str] = None,
        click: Optional[Callable[..., Any]] = None,
        **extra: Any,
    ) -> Element:
        """Keyword form of create_element."""
        options = ElementOptions(tag=tag, pos=pos, inner_text=inner_text, click=click, extra=extra)
        return self.create_from_options(options)

    def create_from_options(self, options: ElementOptions) -> Element:
        """Build, number, store, and log an element."""
        element = build_element(options)
        element.id = self._next_id
        # Serialize before storing so a rejected element leaves no trace
        payload = self.serialize(element)

        self._next_id += 1
        self._elements[element.id] = element
        self._sent[element.id] = payload
        logger.debug("Created %r", element)
        self.instruct(f"createElement({payload});")
        return element

    # -- updates -------------------------------------------------------------

    def update(self) -> int:
        """
        Append one updateElement entry per stored element, changed or not.

        Every element is serialized before anything is appended, so a
        SerializationError leaves the log untouched.

        Returns:
            Number of entries appended
        """
        batch = self._serialize_all()
        for element, payload in batch:
            self._send_update(element, payload)
        return len(batch)

    def update_changed(self) -> int:
        """
        Like update(), but skip elements whose payload matches the last one sent.

        Returns:
            Number of entries appended
        """
        batch = [
            (element, payload)
            for element, payload in self._serialize_all()
            if self._sent.get(element.id) != payload
        ]
        for element, payload in batch:
            self._send_update(element, payload)
        return len(batch)

    def _serialize_all(self) -> list[tuple[Element, str]]:
        return [(element, self.serialize(element)) for element in list(self._elements.values())]

    def _send_update(self, element: Element, payload: str) -> None:
        self._sent[element.id] = payload
        self.instruct(f"updateElement({element.id},{payload});")

    # -- lookup & events -----------------------------------------------------

    def get(self, element_id: int) -> Optional[Element]:
        return self._elements.get(element_id)

    def dispatch(self, element_id: int, event: str, *args) -> bool:
        """
        Run an element's callback for an event reported by the renderer.

        Returns:
            True if a callback ran, False for unknown elements or events
        """
        element = self._elements.get(element_id)
        if element is None:
            logger.warning("Event %r for unknown element %s", event, element_id)
            return False
        return element.dispatch(event, *args)

    def __contains__(self, element_id: int) -> bool:
        return element_id in self._elements

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(list(self._elements.values()))
