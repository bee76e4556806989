"""
Element records and the tag-keyed variant factory.

Elements only hold data. Identity and the instruction log belong to the
registry; callbacks stay host-side and never appear in the wire record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from ..config import CallbackPolicy
from ..core.vector import Vector2d

logger = logging.getLogger(__name__)

UNASSIGNED_ID = -1

# Option names as they appear on the wire / in loose key lists
RECOGNIZED_OPTIONS = ("tag", "pos", "innerText", "click")


class InvalidConfigurationError(ValueError):
    """Raised when element options cannot be turned into an element."""


class SerializationError(ValueError):
    """Raised when an element cannot be sent under the active callback policy."""


def _noop(*args, **kwargs) -> None:
    pass


@dataclass
class ElementOptions:
    """Construction options with explicit defaulting.

    ``None`` means "not given"; each variant decides the default. Keys not in
    RECOGNIZED_OPTIONS are kept in ``extra`` untouched.
    """
    tag: Optional[str] = None
    pos: Optional[Vector2d] = None
    inner_text: Optional[str] = None
    click: Optional[Callable[..., Any]] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.pos is not None and not isinstance(self.pos, Vector2d):
            try:
                self.pos = Vector2d.from_value(self.pos)
            except (TypeError, ValueError) as e:
                raise InvalidConfigurationError(f"Invalid pos: {e}") from e
        if self.click is not None and not callable(self.click):
            raise InvalidConfigurationError(f"click must be callable, got {type(self.click).__name__}")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "ElementOptions":
        """Build from wire-style names (``innerText``); unknown keys go to ``extra``."""
        return cls(
            tag=d.get("tag"),
            pos=d.get("pos"),
            inner_text=d.get("innerText"),
            click=d.get("click"),
            extra={k: v for k, v in d.items() if k not in RECOGNIZED_OPTIONS},
        )


class Element:
    """A tagged UI element with a position."""

    # Variants that pin their tag set this; the tag then ignores options
    fixed_tag: Optional[str] = None

    def __init__(self, options: Optional[ElementOptions] = None):
        options = options or ElementOptions()
        if self.fixed_tag is not None:
            options = replace(options, tag=self.fixed_tag)

        self.id: int = UNASSIGNED_ID
        self.tag = options.tag if options.tag is not None else ""
        # Owned copy; callers keep their own vector
        self.pos = options.pos.copy() if options.pos is not None else Vector2d()
        self.inner_text = options.inner_text if options.inner_text is not None else ""
        self.events: dict[str, Callable[..., Any]] = {}
        self.options = options

    def to_dict(self, callback_policy: CallbackPolicy = CallbackPolicy.OMIT) -> dict[str, Any]:
        """Wire record for this element. Callbacks are never included."""
        d = {
            "id": self.id,
            "pos": self.pos.to_dict(),
            "tag": self.tag,
            "innerText": self.inner_text,
        }
        if callback_policy == CallbackPolicy.NAMES:
            d["events"] = sorted(self.events)
        elif callback_policy == CallbackPolicy.REJECT and self.events:
            raise SerializationError(
                f"Element {self.id} has callbacks bound ({', '.join(sorted(self.events))})"
            )
        return d

    def dispatch(self, event: str, *args) -> bool:
        """Run the callback bound to ``event``. Returns False if none is bound."""
        handler = self.events.get(event)
        if handler is None:
            logger.debug("No %r handler on element %s", event, self.id)
            return False
        logger.info("Dispatching %r to element %s", event, self.id)
        handler(*args)
        return True

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id} tag={self.tag!r}>"


# =============================================================================
# Variant factory
# =============================================================================

ELEMENT_TYPES: dict[str, type[Element]] = {}


def register_element_type(tag: str) -> Callable[[type[Element]], type[Element]]:
    """Class decorator routing ``tag`` to the decorated Element subclass."""
    def decorator(cls: type[Element]) -> type[Element]:
        ELEMENT_TYPES[tag] = cls
        return cls
    return decorator


def build_element(options: ElementOptions) -> Element:
    """Construct the variant registered for ``options.tag`` (base Element otherwise)."""
    element_cls = Element
    if isinstance(options.tag, str):
        element_cls = ELEMENT_TYPES.get(options.tag, Element)
    return element_cls(options)


@register_element_type("button")
class Button(Element):
    """A button; its tag is always "button" and it always has a click handler."""

    fixed_tag = "button"

    def __init__(self, options: Optional[ElementOptions] = None):
        options = options or ElementOptions()
        super().__init__(options)
        self.events["click"] = options.click if options.click is not None else _noop
