"""Tooltip state machine and its widget side effects."""

from __future__ import annotations

import ipywidgets as widgets
import pytest
from jinja2 import Template

from choropleth_toolkit.errors import MissingDataError
from choropleth_toolkit.map_config import MapConfig
from choropleth_toolkit.map_layout import HIDE_CLASS, has_class
from choropleth_toolkit.map_tooltip import (
    HIDDEN,
    Hidden,
    TooltipController,
    Visible,
    compile_template,
    enter,
    leave,
    move,
)

CONTENT = {
    "CA": {"data": 12, "label": "Metric A", "state": "California"},
    "NV": {"data": 3, "label": "Metric A", "state": "Nevada"},
}


def _content_for(region_id):
    try:
        return CONTENT[region_id]
    except KeyError:
        raise MissingDataError(region_id) from None


def _tooltip(template="{{ state }}|{{ label }}|{{ data }}") -> tuple[TooltipController, widgets.HTML]:
    widget = widgets.HTML()
    return TooltipController(widget, _content_for, template=template, config=MapConfig()), widget


def test_pure_transitions() -> None:
    shown = enter(HIDDEN, "CA", 10, 20)

    assert shown == Visible("CA", 10.0, 20.0)
    assert move(shown, "CA", 11, 21) == Visible("CA", 11.0, 21.0)
    assert move(HIDDEN, "CA", 11, 21) is HIDDEN
    assert isinstance(leave(shown), Hidden)


def test_hidden_before_any_pointer_event() -> None:
    ctrl, widget = _tooltip()

    assert ctrl.state == HIDDEN
    assert has_class(widget, HIDE_CLASS)
    assert widget.layout.display == "none"


def test_enter_fills_content_reveals_and_positions() -> None:
    ctrl, widget = _tooltip()

    state = ctrl.show("CA", 100, 300)

    assert state == Visible("CA", 100.0, 300.0)
    assert widget.value == "California|Metric A|12"
    assert not has_class(widget, HIDE_CLASS)
    assert widget.layout.display is None
    assert widget.layout.left == "105px"
    assert widget.layout.top == "280px"


def test_move_repositions_without_touching_content() -> None:
    ctrl, widget = _tooltip()
    ctrl.show("CA", 100, 300)
    widget.value = "sentinel"

    ctrl.move("CA", 200, 150)

    assert widget.value == "sentinel"
    assert widget.layout.left == "205px"
    assert widget.layout.top == "130px"


def test_move_to_another_region_reloads_content() -> None:
    ctrl, widget = _tooltip()
    ctrl.show("CA", 0, 0)

    ctrl.move("NV", 40, 80)

    assert ctrl.is_showing("NV")
    assert widget.value == "Nevada|Metric A|3"


def test_move_while_hidden_is_ignored() -> None:
    ctrl, widget = _tooltip()

    ctrl.move("CA", 10, 10)

    assert ctrl.state == HIDDEN
    assert widget.value == ""


def test_leave_hides() -> None:
    ctrl, widget = _tooltip()
    ctrl.show("CA", 1, 1)

    ctrl.hide()

    assert not ctrl.is_visible
    assert has_class(widget, HIDE_CLASS)
    assert widget.layout.display == "none"


def test_missing_datum_keeps_tooltip_hidden(caplog) -> None:
    ctrl, _ = _tooltip()
    ctrl.show("CA", 1, 1)

    ctrl.show("TX", 5, 5)

    assert ctrl.state == HIDDEN
    assert "not shown" in caplog.text


def test_default_template_escapes_markup() -> None:
    widget = widgets.HTML()
    ctrl = TooltipController(
        widget, lambda _rid: {"data": 1, "label": "<b>x</b>", "state": "S"}
    )

    ctrl.show("any", 0, 0)

    assert "&lt;b&gt;x&lt;/b&gt;" in widget.value
    assert "<strong>S</strong>" in widget.value


def test_compile_template_accepts_jinja_objects_and_callables() -> None:
    content = {"data": 2, "label": "L", "state": "S"}

    assert compile_template(Template("{{ state }}={{ data }}"))(content) == "S=2"
    assert compile_template(lambda c: f"{c['label']}")(content) == "L"
    with pytest.raises(TypeError):
        compile_template(42)


def test_position_uses_configured_offsets() -> None:
    widget = widgets.HTML()
    config = MapConfig(tooltip_offset_x=10, tooltip_offset_y=20, tooltip_height=50)
    ctrl = TooltipController(widget, _content_for, config=config)

    assert ctrl.position_for(100, 100) == (110, 70)
