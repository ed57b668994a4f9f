"""Per-controller configuration constants.

``MapConfig`` gathers every fixed number the map uses (figure size, color
constants, key codes, tooltip offsets) plus the identifiers of the layout
elements the controller requires. Each :class:`MapController` owns its own
instance so components can be exercised in isolation with different values.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

CURRENT_DATE_ID = "js-current-date"
FILTER_CONTAINER_ID = "js-filter-container"
MAP_ID = "js-map"
SHELL_ID = "js-shell"
TOOLTIP_ID = "js-tooltip"
SLIDER_ID = "js-slider"
BORDERS_ID = "js-state-borders"


@dataclass(frozen=True)
class MapConfig:
    """Named constants for one map controller.

    Parameters
    ----------
    width, height : int
        Figure size in pixels.
    projection_type : str
        Plotly geo projection. ``"albers usa"`` insets Alaska and Hawaii.
    projection_scale : float
        d3-style projection scale; 1070 is the default fit of the lower 48
        states in a 960x500 canvas.
    hue, saturation : float
        Fixed HSL hue (degrees) and saturation (percent) of every fill.
    color_offset : float
        Lightness offset; fills use ``color_offset - lightness`` so larger
        values render darker.
    left_arrow, right_arrow : int
        Key codes that step the date backwards/forwards.
    tooltip_offset_x : int
        Horizontal offset of the tooltip from the pointer, in pixels.
    tooltip_offset_y : int
        Vertical correction: the tooltip top is placed at
        ``pointer_y - (tooltip_height - tooltip_offset_y)``.
    tooltip_height : int
        Rendered tooltip height in pixels.
    transition_ms : int
        Duration of the fill transition. ``0`` disables animation.
    missing_fill : str
        Fill used for a region whose datum is missing.
    """

    width: int = 960
    height: int = 500
    projection_type: str = "albers usa"
    projection_scale: float = 1070.0
    hue: float = 216.0
    saturation: float = 86.0
    color_offset: float = 90.0
    left_arrow: int = 37
    right_arrow: int = 39
    tooltip_offset_x: int = 5
    tooltip_offset_y: int = 60
    tooltip_height: int = 80
    transition_ms: int = 500
    transition_easing: str = "cubic-in-out"
    missing_fill: str = "#d9d9d9"
    border_color: str = "#ffffff"
    border_width: float = 0.5
    background_color: str = "#ffffff"
    current_date_id: str = CURRENT_DATE_ID
    filter_container_id: str = FILTER_CONTAINER_ID
    map_id: str = MAP_ID
    shell_id: str = SHELL_ID
    tooltip_id: str = TOOLTIP_ID

    @property
    def required_element_ids(self) -> tuple[str, ...]:
        """Identifiers the controller looks up on its layout at construction."""
        return (
            self.current_date_id,
            self.filter_container_id,
            self.map_id,
            self.shell_id,
            self.tooltip_id,
        )

    @property
    def arrow_keys(self) -> dict[int, int]:
        """Map arrow key codes to their date step."""
        return {self.left_arrow: -1, self.right_arrow: 1}

    def replace(self, **changes: Any) -> "MapConfig":
        """Return a copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)


__all__ = [
    "BORDERS_ID",
    "CURRENT_DATE_ID",
    "FILTER_CONTAINER_ID",
    "MAP_ID",
    "MapConfig",
    "SHELL_ID",
    "SLIDER_ID",
    "TOOLTIP_ID",
]
