"""Widget tree for the choropleth map.

This module builds the notebook widget tree used by :class:`MapController`
and plays the part of a DOM: every element the controller needs is
registered under a string identifier and looked up with :meth:`MapLayout.query`.

Layout, top to bottom:

- filter container (one button per label, filled in by ``FilterController``),
- current-date text,
- shell: the date slider (inserted by ``DateNavigator``), the map host, the
  tooltip and the hidden pointer driver (appended by ``MapController``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional

import ipywidgets as widgets

from .map_config import MapConfig

HIDE_CLASS = "hide"
SHELL_CLASS = "choropleth-shell"
ACTIVE_CLASS = "active"

_STYLE = r"""
<style>
.choropleth-shell { position: relative; }
.choropleth-tooltip {
  position: absolute !important;
  z-index: 10;
  pointer-events: none;
  padding: 4px 8px;
  background: rgba(255,255,255,0.95);
  border: 1px solid rgba(15,23,42,0.15);
  border-radius: 4px;
  font-size: 12px;
}
.choropleth-tooltip.hide { display: none !important; }
.btn-filter.active { font-weight: bold; }
</style>
"""


def has_class(widget: Any, name: str) -> bool:
    """Return whether ``widget`` carries the DOM class ``name``."""
    return name in tuple(getattr(widget, "_dom_classes", ()))


def insert_before(container: widgets.Box, child: widgets.Widget, reference: Optional[widgets.Widget]) -> None:
    """Insert ``child`` into ``container`` ahead of ``reference``.

    When ``reference`` is ``None`` or not a child of ``container`` the child
    is appended.
    """
    children = tuple(container.children)
    if reference is None or reference not in children:
        container.children = children + (child,)
        return
    i = children.index(reference)
    container.children = children[:i] + (child,) + children[i:]


class MapLayout:
    """
    Build and own the widgets of one map.

    Responsibilities:
    - Building the VBox/HBox structure.
    - Registering elements by identifier so the controller can look them up.
    - Injecting the small CSS block the tooltip and filter buttons rely on.

    Examples
    --------
    >>> layout = MapLayout()  # doctest: +SKIP
    >>> layout.query("js-tooltip")  # doctest: +SKIP
    HTML(value='', ...)
    """

    def __init__(self, config: Optional[MapConfig] = None) -> None:
        config = config or MapConfig()
        self._elements: Dict[str, widgets.Widget] = {}

        self.style_html = widgets.HTML(_STYLE)

        self.filter_container = widgets.HBox(
            layout=widgets.Layout(flex_flow="row wrap", gap="4px", margin="0 0 6px 0")
        )
        self.current_date = widgets.HTML(
            value="", layout=widgets.Layout(margin="0 0 4px 0")
        )
        self.map_box = widgets.Box(
            layout=widgets.Layout(width="100%", margin="0px", padding="0px")
        )
        self.tooltip = widgets.HTML(
            value="",
            layout=widgets.Layout(display="none", height=f"{int(config.tooltip_height)}px"),
        )
        self.tooltip.add_class("choropleth-tooltip")
        self.tooltip.add_class(HIDE_CLASS)

        self.shell = widgets.VBox(
            [self.map_box, self.tooltip],
            layout=widgets.Layout(width="100%"),
        )
        self.shell.add_class(SHELL_CLASS)

        self.root_widget = widgets.VBox(
            [self.style_html, self.filter_container, self.current_date, self.shell],
            layout=widgets.Layout(width="100%"),
        )

        self.register(config.filter_container_id, self.filter_container)
        self.register(config.current_date_id, self.current_date)
        self.register(config.map_id, self.map_box)
        self.register(config.shell_id, self.shell)
        self.register(config.tooltip_id, self.tooltip)

    @property
    def elements(self) -> Mapping[str, widgets.Widget]:
        """Registered elements keyed by identifier (a shallow copy)."""
        return dict(self._elements)

    def register(self, element_id: str, widget: widgets.Widget) -> None:
        """Make ``widget`` addressable as ``element_id``."""
        self._elements[str(element_id)] = widget

    def unregister(self, element_id: str) -> None:
        self._elements.pop(str(element_id), None)

    def query(self, element_id: str) -> Optional[widgets.Widget]:
        """Return the element registered as ``element_id``, or ``None``."""
        return self._elements.get(str(element_id))

    def add_child(self, widget: widgets.Widget) -> None:
        """Append a helper widget (such as a hidden driver) to the root."""
        self.root_widget.children = tuple(self.root_widget.children) + (widget,)


__all__ = ["ACTIVE_CLASS", "HIDE_CLASS", "MapLayout", "SHELL_CLASS", "has_class", "insert_before"]
