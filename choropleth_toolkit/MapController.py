"""Interactive choropleth orchestration.

Purpose
-------
This module provides :class:`MapController`, which binds a time-indexed,
per-region dataset to region shapes and lets a user switch metrics (filter
buttons), scrub dates (slider and arrow keys) and inspect values through a
hover tooltip.

Concepts and structure
----------------------
The implementation is composition-based:

- ``DatasetIndex`` derives the date axis, label set and color domain.
- ``FilterController`` owns the filter buttons and the active label.
- ``DateNavigator`` owns the slider, the current-date text and the date index.
- ``MapRenderer`` owns the Plotly figure and the region-to-shape table.
- ``TooltipController`` owns the hover tooltip state machine.
- ``MapLayout`` owns the widget tree and exposes its elements by id.

Architecture notes
------------------
Every input goes through :meth:`MapController.dispatch`, which looks the
event kind up in an explicit dispatch table. Widget callbacks only translate
their payloads into :class:`InputEvent` objects, so the whole state machine can
be driven from tests without a browser.

Important gotchas
-----------------
- The color domain is always computed from the *first* date of the axis, not
  the selected one. Later dates can hold values outside the domain; they are
  clamped to the ends of the color scale.
- Plotly hover callbacks only say which region is under the pointer. The
  pointer position comes from :class:`PointerDriver`, relative to the shell
  the tooltip is positioned in.

Examples
--------
>>> from choropleth_toolkit import MapController, Dataset  # doctest: +SKIP
>>> data = Dataset.from_records(records)  # doctest: +SKIP
>>> ctrl = MapController(data, features, mesh)  # doctest: +SKIP
>>> ctrl  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Hashable, Iterable, Mapping
from types import MappingProxyType
from typing import Any, Callable, Dict, Optional, Tuple, Union

from IPython.display import display

from .color_scale import ColorDomain
from .dataset import Dataset, DatasetIndex, Region, label_text
from .errors import ConfigurationError, MissingDataError
from .InputEvent import (
    CHANGE,
    CLICK,
    KEYDOWN,
    MOUSEMOVE,
    MOUSEOUT,
    MOUSEOVER,
    InputEvent,
)
from .KeyboardDriver import KeyboardDriver
from .map_config import SLIDER_ID, MapConfig
from .map_dates import DateNavigator
from .map_filters import FilterController
from .map_layout import SHELL_CLASS, MapLayout, has_class
from .map_renderer import MapRenderer
from .map_tooltip import DEFAULT_TOOLTIP_TEMPLATE, TemplateLike, TooltipController, TooltipState
from .MapEvent import MapEvent
from .PointerDriver import PointerDriver
from .projection import region_feature
from .SelectionSnapshot import SelectionSnapshot

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

DatasetLike = Union[Dataset, Iterable[Region], Iterable[Mapping[str, Any]]]


def _as_dataset(data: DatasetLike) -> Dataset:
    if isinstance(data, Dataset):
        return data
    items = list(data)
    if items and isinstance(items[0], Mapping):
        return Dataset.from_records(items)
    return Dataset(items)


class MapController:
    """
    An interactive choropleth map driven by a per-region, per-date dataset.

    Key features
    ------------
    - One filter button per metric; exactly one is active.
    - A date slider plus left/right arrow keys for stepping through dates.
    - A hover tooltip showing the region, metric and value at the current date.
    - Hooks notified after every re-render.

    Parameters
    ----------
    dataset : Dataset, sequence of Region, or sequence of records
        Region data; order must match ``features``.
    features : FeatureCollection mapping or sequence, optional
        Region boundary geometries in dataset order. Defaults to each
        region's ``geometry``.
    mesh : geometry, optional
        Border mesh drawn over the regions.
    layout : MapLayout or compatible, optional
        Element host exposing ``query(element_id)``. A fresh
        :class:`MapLayout` is built when omitted.
    config : MapConfig, optional
        Named constants (canvas, colors, key codes, tooltip offsets).
    feature_for : callable, optional
        Geometry collaborator, ``(feature, region_id) -> GeoJSON Feature``.
        Plotly projects the result with ``config.projection_type``.
    tooltip_template : str or callable, optional
        Template-expansion collaborator receiving ``{data, label, state}``.
    text_transform : callable, optional
        Label display-text transform.
    keyboard : bool, optional
        Whether to attach the browser keyboard driver.
    pointer : bool, optional
        Whether to attach the pointer driver that positions the tooltip.

    Raises
    ------
    MissingDataError
        If the dataset has no regions, dates or labels.
    ConfigurationError
        If a required layout element is missing or the features do not match
        the dataset one-to-one.
    """

    def __init__(
        self,
        dataset: DatasetLike,
        features: Any = None,
        mesh: Any = None,
        *,
        layout: Optional[Any] = None,
        config: Optional[MapConfig] = None,
        feature_for: Callable[[Any, Any], Dict[str, Any]] = region_feature,
        tooltip_template: TemplateLike = DEFAULT_TOOLTIP_TEMPLATE,
        text_transform: Callable[[str], str] = label_text,
        keyboard: bool = True,
        pointer: bool = True,
    ) -> None:
        self.config = config or MapConfig()
        cfg = self.config

        data = _as_dataset(dataset)
        self._index = DatasetIndex(data, text_transform=text_transform)
        if len(data) == 0 or self._index.date_count == 0:
            raise MissingDataError("MapController needs at least one region with dated values.")
        if self._index.label_count == 0:
            raise MissingDataError("MapController needs at least one label in the dataset.")

        self._layout = layout if layout is not None else MapLayout(cfg)
        self._elements = self._require_elements()

        self._features = features if features is not None else [region.geometry for region in data]
        self._mesh = mesh

        self._filters = FilterController(
            self._index.labels,
            [self._index.label_text(i) for i in range(self._index.label_count)],
            self._elements[cfg.filter_container_id],
            on_select=self._on_label_selected,
        )
        self._navigator = DateNavigator(
            self._index.dates,
            date_label=self._elements[cfg.current_date_id],
            on_change=self._on_date_changed,
        )
        self._renderer = MapRenderer(self._index, cfg, feature_for=feature_for)
        self._tooltip = TooltipController(
            self._elements[cfg.tooltip_id],
            self._tooltip_content,
            template=tooltip_template,
            config=cfg,
        )
        self._keyboard: Optional[KeyboardDriver] = (
            KeyboardDriver(key_codes=list(cfg.arrow_keys)) if keyboard else None
        )
        self._pointer: Optional[PointerDriver] = PointerDriver() if pointer else None
        self._pointer_xy: Optional[Tuple[float, float]] = None
        self._hovered_region: Any = None

        self._domain: Optional[ColorDomain] = self._compute_domain(0)
        self._hooks: Dict[Hashable, Callable[[MapEvent], Any]] = {}
        self._hook_counter = 0
        self._current_trigger: Optional[InputEvent] = None

        self._dispatch_table: Dict[str, Callable[[InputEvent], None]] = {
            CLICK: self._handle_click,
            CHANGE: self._handle_change,
            KEYDOWN: self._handle_keydown,
            MOUSEOVER: self._handle_mouseover,
            MOUSEMOVE: self._handle_mousemove,
            MOUSEOUT: self._handle_mouseout,
        }

        self.init()

    # --- Startup ---

    def init(self) -> None:
        """Build filters, slider and map, then bind listeners."""
        self._filters.build()
        slider = self._navigator.build(
            self._elements[self.config.shell_id],
            before=self._elements[self.config.map_id],
        )
        register = getattr(self._layout, "register", None)
        if callable(register):
            register(SLIDER_ID, slider)
        self._renderer.build(
            self._features,
            self._mesh,
            label_index=self._filters.current_index,
            date_index=self._navigator.index,
            domain=self._domain,
            host=self._elements[self.config.map_id],
        )
        self._attach_event_handlers()

    def _require_elements(self) -> Dict[str, Any]:
        """Look up every required element on the layout or fail."""
        query = getattr(self._layout, "query", None)
        if not callable(query):
            raise ConfigurationError("layout must provide query(element_id).")
        elements: Dict[str, Any] = {}
        missing = []
        for element_id in self.config.required_element_ids:
            element = query(element_id)
            if element is None:
                missing.append(element_id)
            else:
                elements[element_id] = element
        if missing:
            raise ConfigurationError(
                f"Required map elements are missing: {', '.join(missing)}."
            )
        return elements

    def _attach_event_handlers(self) -> None:
        """Translate widget callbacks into dispatched input events."""
        for button in self._filters.buttons:
            button.on_click(
                lambda b: self.dispatch(InputEvent(CLICK, target=b.label_index, raw=b))
            )

        self._navigator.slider.observe(
            lambda change: self.dispatch(InputEvent(CHANGE, value=change["new"], raw=change)),
            names="value",
        )

        if self._keyboard is not None:
            self._keyboard.on_keydown(
                lambda code, raw: self.dispatch(InputEvent(KEYDOWN, key_code=code, raw=raw))
            )
            add_child = getattr(self._layout, "add_child", None)
            if callable(add_child):
                add_child(self._keyboard)

        if self._pointer is not None:
            self._pointer.on_pointer(self._on_pointer)
            shell = self._elements[self.config.shell_id]
            if not has_class(shell, SHELL_CLASS):
                shell.add_class(SHELL_CLASS)
            shell.children = tuple(shell.children) + (self._pointer,)

        self._renderer.bind_pointer(self._on_region_hover, self._on_region_unhover)

    # Plotly hover says which region is under the pointer; the pointer driver
    # says where the pointer is. The tooltip follows the latest of both.

    def _pointer_event(self, kind: str, region_id: Any, raw: Any) -> InputEvent:
        event = InputEvent(kind, target=region_id, raw=raw)
        if self._pointer_xy is not None:
            event.offset_x, event.offset_y = self._pointer_xy
        if isinstance(raw, Mapping):
            event.page_x = float(raw.get("pageX") or 0.0)
            event.page_y = float(raw.get("pageY") or 0.0)
        return event

    def _on_region_hover(self, region_id: Any, raw: Any) -> None:
        self._hovered_region = region_id
        kind = MOUSEMOVE if self._tooltip.is_showing(region_id) else MOUSEOVER
        self.dispatch(self._pointer_event(kind, region_id, raw))

    def _on_region_unhover(self, region_id: Any, raw: Any) -> None:
        if self._hovered_region is not None and self._hovered_region != region_id:
            logger.debug("ignoring stale unhover of %r", region_id)
            return
        self._hovered_region = None
        self.dispatch(self._pointer_event(MOUSEOUT, region_id, raw))

    def _on_pointer(self, kind: str, x: float, y: float, raw: Any) -> None:
        self._pointer_xy = (x, y)
        if kind == MOUSEOUT:
            region_id, self._hovered_region = self._hovered_region, None
            if self._tooltip.is_visible:
                self.dispatch(self._pointer_event(MOUSEOUT, region_id, raw))
            return
        if self._hovered_region is not None:
            self.dispatch(self._pointer_event(MOUSEMOVE, self._hovered_region, raw))

    # --- Dispatch ---

    @property
    def dispatch_table(self) -> Mapping[str, Callable[[InputEvent], None]]:
        """Read-only view of ``event kind -> handler``."""
        return MappingProxyType(self._dispatch_table)

    def dispatch(self, event: InputEvent) -> None:
        """Run the handler registered for ``event.kind`` to completion.

        Raises
        ------
        ValueError
            If no handler is registered for the event kind.
        """
        handler = self._dispatch_table.get(event.kind)
        if handler is None:
            raise ValueError(f"No handler for input event kind {event.kind!r}.")
        logger.debug("dispatch %s target=%r", event.kind, event.target)
        previous = self._current_trigger
        self._current_trigger = event
        try:
            handler(event)
        finally:
            self._current_trigger = previous

    def _handle_click(self, event: InputEvent) -> None:
        event.prevent_default()
        self._filters.select_label(int(event.target))

    def _handle_change(self, event: InputEvent) -> None:
        try:
            index = int(event.value)
        except (TypeError, ValueError):
            logger.debug("ignoring slider value %r", event.value)
            return
        self._navigator.set_index(index)

    def _handle_keydown(self, event: InputEvent) -> None:
        delta = self.config.arrow_keys.get(event.key_code)
        if delta is None:
            return
        event.prevent_default()
        self._navigator.step(delta)

    def _handle_mouseover(self, event: InputEvent) -> None:
        self._tooltip.show(event.target, *event.position)

    def _handle_mousemove(self, event: InputEvent) -> None:
        self._tooltip.move(event.target, *event.position)

    def _handle_mouseout(self, event: InputEvent) -> None:
        self._tooltip.hide()

    # --- State transitions ---

    def _compute_domain(self, label_index: int) -> Optional[ColorDomain]:
        try:
            return self._index.domain(label_index)
        except MissingDataError as exc:
            logger.warning("color domain unavailable: %s", exc)
            return None

    def _on_label_selected(self, label_index: int) -> None:
        self._domain = self._compute_domain(label_index)
        self._refresh("label_change")

    def _on_date_changed(self, date_index: int) -> None:
        self._refresh("date_change")

    def _refresh(self, reason: str) -> None:
        self._renderer.refresh(
            label_index=self._filters.current_index,
            date_index=self._navigator.index,
            domain=self._domain,
        )
        self._run_hooks(MapEvent(reason=reason, snapshot=self.snapshot(), trigger=self._current_trigger))

    def _tooltip_content(self, region_id: Any) -> Dict[str, Any]:
        try:
            region = self._index.dataset.by_id(region_id)
        except KeyError:
            raise MissingDataError(f"Unknown region {region_id!r}.") from None
        date = self._navigator.current_date
        label = self._filters.current_label
        region.value(date, label)
        return {
            "data": region.dates[date][label],
            "label": self._filters.current_label_text,
            "state": region.name,
        }

    # --- Public API ---

    def select_label(self, index: int) -> None:
        """Activate label ``index`` (same as clicking its filter button)."""
        self._filters.select_label(index)

    def set_date_index(self, index: int) -> bool:
        """Jump to date ``index``; out-of-range values are clamped."""
        return self._navigator.set_index(index)

    def step_date(self, delta: int) -> bool:
        """Step the date by ``delta``; ignored at the ends of the axis."""
        return self._navigator.step(delta)

    def add_hook(self, callback: Callable[[MapEvent], Any], hook_id: Optional[Hashable] = None) -> Hashable:
        """
        Register a callback run after every re-render.

        Parameters
        ----------
        callback : callable
            Receives a :class:`MapEvent`.
        hook_id : hashable, optional
            Identifier; generated when omitted. Re-using an id replaces the hook.

        Returns
        -------
        Hashable
            The hook id.
        """
        if hook_id is None:
            self._hook_counter += 1
            hook_id = f"hook:{self._hook_counter}"
        self._hooks[hook_id] = callback
        return hook_id

    def remove_hook(self, hook_id: Hashable) -> None:
        self._hooks.pop(hook_id, None)

    def _run_hooks(self, event: MapEvent) -> None:
        for h_id, callback in list(self._hooks.items()):
            try:
                callback(event)
            except Exception as e:
                warnings.warn(f"Hook {h_id} failed: {e}")

    def snapshot(self) -> SelectionSnapshot:
        """Return the current selection as an immutable record."""
        return SelectionSnapshot(
            label_index=self._filters.current_index,
            label=self._filters.current_label,
            label_text=self._filters.current_label_text,
            date_index=self._navigator.index,
            date=self._navigator.current_date,
            domain=self._domain,
        )

    # --- Properties ---

    @property
    def index(self) -> DatasetIndex:
        return self._index

    @property
    def dataset(self) -> Dataset:
        return self._index.dataset

    @property
    def layout(self) -> Any:
        return self._layout

    @property
    def filters(self) -> FilterController:
        return self._filters

    @property
    def navigator(self) -> DateNavigator:
        return self._navigator

    @property
    def renderer(self) -> MapRenderer:
        return self._renderer

    @property
    def tooltip(self) -> TooltipController:
        return self._tooltip

    @property
    def keyboard(self) -> Optional[KeyboardDriver]:
        return self._keyboard

    @property
    def pointer(self) -> Optional[PointerDriver]:
        return self._pointer

    @property
    def figure_widget(self) -> Any:
        return self._renderer.figure_widget

    @property
    def current_label_index(self) -> int:
        return self._filters.current_index

    @property
    def current_date_index(self) -> int:
        return self._navigator.index

    @property
    def current_label(self) -> str:
        return self._filters.current_label

    @property
    def current_date(self) -> str:
        return self._navigator.current_date

    @property
    def domain(self) -> Optional[ColorDomain]:
        """Color domain of the active label, from the first date."""
        return self._domain

    @property
    def tooltip_state(self) -> TooltipState:
        return self._tooltip.state

    def _ipython_display_(self, **kwargs: Any) -> None:
        """Display the layout's root widget."""
        display(getattr(self._layout, "root_widget", self._layout))


__all__ = ["MapController"]
