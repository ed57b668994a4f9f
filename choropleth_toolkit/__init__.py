"""Top-level public API for the ``choropleth_toolkit`` package.

This module re-exports the notebook-facing surface so users can import from a
single namespace, for example:

>>> from choropleth_toolkit import Dataset, MapController  # doctest: +SKIP

It exposes both the high-level controller and the lower-level building blocks
(color scale, dataset index, tooltip state machine, projection) for custom
integrations and tests.
"""

from .color_scale import ColorDomain, fill_color, hsl, lightness
from .dataset import Dataset, DatasetIndex, Region, label_names, label_text
from .errors import ConfigurationError, MissingDataError
from .InputEvent import (
    CHANGE,
    CLICK,
    EVENT_KINDS,
    KEYDOWN,
    MOUSEMOVE,
    MOUSEOUT,
    MOUSEOVER,
    InputEvent,
)
from .KeyboardDriver import KeyboardDriver
from .map_config import MapConfig
from .map_dates import DateNavigator
from .map_filters import FilterController
from .map_layout import MapLayout
from .map_renderer import MapRenderer
from .map_tooltip import (
    DEFAULT_TOOLTIP_TEMPLATE,
    HIDDEN,
    Hidden,
    TooltipController,
    Visible,
)
from .MapController import MapController
from .MapEvent import MapEvent
from .PointerDriver import PointerDriver
from .projection import ALBERS_USA_SCALE, GeoLines, features_of, geo_layout, line_path, region_feature
from .SelectionSnapshot import SelectionSnapshot

__all__ = [
    "ALBERS_USA_SCALE",
    "CHANGE",
    "CLICK",
    "ColorDomain",
    "ConfigurationError",
    "DEFAULT_TOOLTIP_TEMPLATE",
    "Dataset",
    "DatasetIndex",
    "DateNavigator",
    "EVENT_KINDS",
    "FilterController",
    "GeoLines",
    "HIDDEN",
    "Hidden",
    "InputEvent",
    "KEYDOWN",
    "KeyboardDriver",
    "MOUSEMOVE",
    "MOUSEOUT",
    "MOUSEOVER",
    "MapConfig",
    "MapController",
    "MapEvent",
    "MapLayout",
    "MapRenderer",
    "MissingDataError",
    "PointerDriver",
    "Region",
    "SelectionSnapshot",
    "TooltipController",
    "Visible",
    "features_of",
    "fill_color",
    "geo_layout",
    "hsl",
    "label_names",
    "label_text",
    "lightness",
    "line_path",
    "region_feature",
]
