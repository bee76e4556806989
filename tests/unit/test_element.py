"""Tests for the element model and variant factory."""

from unittest.mock import MagicMock

import pytest

from dombridge.config import CallbackPolicy
from dombridge.core.vector import Vector2d
from dombridge.elements.element import (
    ELEMENT_TYPES,
    UNASSIGNED_ID,
    Button,
    Element,
    ElementOptions,
    InvalidConfigurationError,
    SerializationError,
    build_element,
    register_element_type,
)


class TestElementOptions:
    """Tests for ElementOptions."""

    def test_defaults_are_unset(self):
        options = ElementOptions()
        assert options.tag is None
        assert options.pos is None
        assert options.inner_text is None
        assert options.click is None
        assert options.extra == {}

    def test_from_dict_wire_names(self):
        options = ElementOptions.from_dict({"tag": "p", "innerText": "hi"})
        assert options.tag == "p"
        assert options.inner_text == "hi"

    def test_from_dict_keeps_unknown_keys(self):
        options = ElementOptions.from_dict({"tag": "p", "color": "red"})
        assert options.extra == {"color": "red"}

    def test_pos_coerced_from_list(self):
        options = ElementOptions(pos=[3, 4])
        assert options.pos == Vector2d(3, 4)

    def test_bad_pos_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            ElementOptions(pos="center")

    def test_non_callable_click_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            ElementOptions(click="alert('hi')")


class TestElement:
    """Tests for the base Element."""

    def test_defaults(self):
        e = Element()
        assert e.id == UNASSIGNED_ID
        assert e.tag == ""
        assert e.pos == Vector2d(0, 0)
        assert e.inner_text == ""
        assert e.events == {}

    def test_default_positions_not_shared(self):
        a, b = Element(), Element()
        a.pos.add(Vector2d(1, 1))
        assert b.pos == Vector2d(0, 0)

    def test_pos_is_owned_copy(self):
        pos = Vector2d(1, 2)
        e = Element(ElementOptions(pos=pos))
        pos.x = 99
        assert e.pos == Vector2d(1, 2)

    def test_click_ignored_on_base_element(self):
        e = Element(ElementOptions(tag="div", click=lambda: None))
        assert e.events == {}

    def test_to_dict(self):
        e = Element(ElementOptions(tag="p", pos=Vector2d(1.5, 2), inner_text="x"))
        e.id = 3
        assert e.to_dict() == {
            "id": 3,
            "pos": {"x": 1.5, "y": 2},
            "tag": "p",
            "innerText": "x",
        }

    def test_dispatch_without_handler(self):
        assert Element().dispatch("click") is False


class TestButton:
    """Tests for Button."""

    def test_tag_forced(self):
        b = Button(ElementOptions(tag="a", inner_text="Go"))
        assert b.tag == "button"
        assert b.inner_text == "Go"

    def test_default_click_is_noop(self):
        b = Button()
        assert callable(b.events["click"])
        assert b.events["click"]() is None

    def test_click_bound(self):
        handler = MagicMock()
        b = Button(ElementOptions(click=handler))
        assert b.dispatch("click") is True
        handler.assert_called_once_with()

    def test_dispatch_passes_args(self):
        handler = MagicMock()
        b = Button(ElementOptions(click=handler))
        b.dispatch("click", {"button": 0})
        handler.assert_called_once_with({"button": 0})

    def test_omit_policy_hides_events(self):
        b = Button()
        assert "events" not in b.to_dict(CallbackPolicy.OMIT)

    def test_names_policy_lists_events(self):
        b = Button()
        assert b.to_dict(CallbackPolicy.NAMES)["events"] == ["click"]

    def test_reject_policy_raises(self):
        with pytest.raises(SerializationError):
            Button().to_dict(CallbackPolicy.REJECT)

    def test_reject_policy_allows_plain_elements(self):
        assert "events" not in Element().to_dict(CallbackPolicy.REJECT)


class TestFactory:
    """Tests for tag-keyed construction."""

    def test_button_tag_builds_button(self):
        assert isinstance(build_element(ElementOptions(tag="button")), Button)

    def test_other_tags_build_element(self):
        e = build_element(ElementOptions(tag="div"))
        assert type(e) is Element
        assert e.tag == "div"

    def test_missing_tag_builds_element(self):
        assert type(build_element(ElementOptions())) is Element

    def test_non_string_tag_builds_element(self):
        assert type(build_element(ElementOptions(tag=["button"]))) is Element

    def test_register_new_variant(self):
        @register_element_type("slider")
        class Slider(Element):
            fixed_tag = "slider"

        try:
            e = build_element(ElementOptions(tag="slider"))
            assert isinstance(e, Slider)
            assert e.tag == "slider"
        finally:
            ELEMENT_TYPES.pop("slider", None)
