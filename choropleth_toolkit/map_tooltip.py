"""Hover tooltip: state records, pure transitions and the widget controller.

Concepts and structure
----------------------
The tooltip is a two-state machine, ``Hidden`` ⇄ ``Visible``:

- pointer-enter over a region → ``Visible`` with freshly expanded content,
- pointer-move while visible → same region, new position, content unchanged,
- pointer-leave → ``Hidden``.

:func:`enter`, :func:`move` and :func:`leave` compute the next state and have
no side effects. :class:`TooltipController` applies their results to the
tooltip widget (content, ``hide`` class, position).

Content is produced by a template-expansion callable that receives
``{"data": value, "label": label_text, "state": region_name}``. A plain string
is compiled as an autoescaped ``jinja2`` template.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

import ipywidgets as widgets
from jinja2 import Environment

from .errors import MissingDataError
from .map_config import MapConfig
from .map_layout import HIDE_CLASS, has_class

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

DEFAULT_TOOLTIP_TEMPLATE = (
    '<div class="tooltip-state"><strong>{{ state }}</strong></div>'
    '<div class="tooltip-value">{{ label }}: {{ data }}</div>'
)

TemplateLike = Union[str, Callable[[Mapping[str, Any]], str], Any]

_ENV = Environment(autoescape=True)


@dataclass(frozen=True)
class Hidden:
    """Tooltip not shown."""


@dataclass(frozen=True)
class Visible:
    """Tooltip shown for ``region_id`` with the pointer at ``(x, y)``."""

    region_id: Any
    x: float
    y: float


TooltipState = Union[Hidden, Visible]

HIDDEN = Hidden()


def enter(state: TooltipState, region_id: Any, x: float, y: float) -> Visible:
    return Visible(region_id, float(x), float(y))


def move(state: TooltipState, region_id: Any, x: float, y: float) -> TooltipState:
    """Follow the pointer while visible; a hidden tooltip stays hidden."""
    if isinstance(state, Hidden):
        return state
    return Visible(region_id, float(x), float(y))


def leave(state: TooltipState) -> Hidden:
    return HIDDEN


def compile_template(template: TemplateLike) -> Callable[[Mapping[str, Any]], str]:
    """Return a ``content -> markup`` callable for ``template``.

    Accepts a jinja2 source string, an object with a jinja2-style
    ``render(**content)`` method, or a callable taking the content mapping.
    """
    if isinstance(template, str):
        compiled = _ENV.from_string(template)
        return lambda content: compiled.render(**content)
    render = getattr(template, "render", None)
    if callable(render):
        return lambda content: render(**content)
    if callable(template):
        return template
    raise TypeError(f"Unsupported tooltip template: {type(template).__name__}")


class TooltipController:
    """Show, hide, position and populate the hover tooltip.

    Parameters
    ----------
    tooltip : ipywidgets.HTML
        The tooltip element.
    content_for : callable
        ``region_id -> {"data", "label", "state"}`` for the current date and
        label. May raise :class:`MissingDataError`.
    template : str or callable, optional
        Template-expansion collaborator; see :func:`compile_template`.
    config : MapConfig, optional
        Supplies the offsets and tooltip height.
    """

    def __init__(
        self,
        tooltip: widgets.HTML,
        content_for: Callable[[Any], Mapping[str, Any]],
        template: TemplateLike = DEFAULT_TOOLTIP_TEMPLATE,
        config: Optional[MapConfig] = None,
    ) -> None:
        self._tooltip = tooltip
        self._content_for = content_for
        self._expand = compile_template(template)
        self._config = config or MapConfig()
        self.state: TooltipState = HIDDEN
        self._apply_hidden()

    @property
    def is_visible(self) -> bool:
        return isinstance(self.state, Visible)

    def is_showing(self, region_id: Any) -> bool:
        """Whether the tooltip is visible for ``region_id``."""
        return isinstance(self.state, Visible) and self.state.region_id == region_id

    def show(self, region_id: Any, x: float = 0.0, y: float = 0.0) -> TooltipState:
        """Handle pointer-enter: populate, reveal and position the tooltip."""
        try:
            content = self._content_for(region_id)
        except MissingDataError as exc:
            logger.warning("tooltip for %r not shown: %s", region_id, exc)
            return self.hide()
        self._tooltip.value = self._expand(content)
        self.state = enter(self.state, region_id, x, y)
        self._apply_visible()
        self._apply_position(self.state)
        logger.debug("tooltip shown for %r", region_id)
        return self.state

    def move(self, region_id: Any, x: float, y: float) -> TooltipState:
        """Handle pointer-move: reposition only, unless the region changed."""
        if isinstance(self.state, Visible) and self.state.region_id != region_id:
            return self.show(region_id, x, y)
        self.state = move(self.state, region_id, x, y)
        if isinstance(self.state, Visible):
            self._apply_position(self.state)
        return self.state

    def hide(self) -> TooltipState:
        """Handle pointer-leave."""
        self.state = leave(self.state)
        self._apply_hidden()
        return self.state

    def position_for(self, x: float, y: float) -> tuple[float, float]:
        """Return the ``(left, top)`` pixel position for a pointer at ``(x, y)``."""
        cfg = self._config
        left = x + cfg.tooltip_offset_x
        top = y - (cfg.tooltip_height - cfg.tooltip_offset_y)
        return left, top

    def _apply_position(self, state: Visible) -> None:
        left, top = self.position_for(state.x, state.y)
        self._tooltip.layout.left = f"{left:g}px"
        self._tooltip.layout.top = f"{top:g}px"

    def _apply_visible(self) -> None:
        if has_class(self._tooltip, HIDE_CLASS):
            self._tooltip.remove_class(HIDE_CLASS)
        self._tooltip.layout.display = None

    def _apply_hidden(self) -> None:
        if not has_class(self._tooltip, HIDE_CLASS):
            self._tooltip.add_class(HIDE_CLASS)
        self._tooltip.layout.display = "none"


__all__ = [
    "DEFAULT_TOOLTIP_TEMPLATE",
    "HIDDEN",
    "Hidden",
    "TooltipController",
    "TooltipState",
    "Visible",
    "compile_template",
    "enter",
    "leave",
    "move",
]
