"""Normalized input events routed through the controller's dispatch table.

Widget callbacks (button clicks, slider changes, browser key presses, Plotly
hover callbacks and the pointer driver) are translated into :class:`InputEvent` objects and handed to
:meth:`MapController.dispatch`. Tests build the same events directly, so the
state machine runs without a browser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

CLICK = "click"
CHANGE = "change"
KEYDOWN = "keydown"
MOUSEOVER = "mouseover"
MOUSEMOVE = "mousemove"
MOUSEOUT = "mouseout"

EVENT_KINDS = (CLICK, CHANGE, KEYDOWN, MOUSEOVER, MOUSEMOVE, MOUSEOUT)


@dataclass
class InputEvent:
    """One user input, in the shape of a DOM event.

    Parameters
    ----------
    kind : str
        One of :data:`EVENT_KINDS`.
    target : Any, optional
        Identifier of the element the listener was bound to (the
        ``currentTarget`` analogue): a label index for ``click``, a region id
        for pointer events.
    value : Any, optional
        New control value for ``change`` events.
    key_code : int, optional
        Key code for ``keydown`` events.
    page_x, page_y : float, optional
        Pointer position on the page for pointer events.
    offset_x, offset_y : float, optional
        Pointer position relative to the map shell, the box the tooltip is
        positioned in. Preferred over ``page_x``/``page_y`` when set.
    raw : Any, optional
        Original widget payload, kept for debugging.

    Examples
    --------
    >>> InputEvent(KEYDOWN, key_code=39)  # doctest: +SKIP
    >>> InputEvent(MOUSEOVER, target="CA", page_x=120, page_y=340)  # doctest: +SKIP
    """

    kind: str
    target: Any = None
    value: Any = None
    key_code: Optional[int] = None
    page_x: float = 0.0
    page_y: float = 0.0
    offset_x: Optional[float] = None
    offset_y: Optional[float] = None
    raw: Any = None
    default_prevented: bool = False

    @property
    def position(self) -> Tuple[float, float]:
        """Pointer position used for tooltip placement."""
        if self.offset_x is None or self.offset_y is None:
            return float(self.page_x), float(self.page_y)
        return float(self.offset_x), float(self.offset_y)

    def prevent_default(self) -> None:
        """Mark the event's default action as suppressed."""
        self.default_prevented = True


__all__ = [
    "CHANGE",
    "CLICK",
    "EVENT_KINDS",
    "InputEvent",
    "KEYDOWN",
    "MOUSEMOVE",
    "MOUSEOUT",
    "MOUSEOVER",
]
