"""Payload delivered to map hooks after each refresh.

This module defines ``MapEvent``, the immutable structure passed to callbacks
registered with :meth:`MapController.add_hook`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .InputEvent import InputEvent
from .SelectionSnapshot import SelectionSnapshot


@dataclass(frozen=True)
class MapEvent:
    """Notification that the map was re-rendered.

    Parameters
    ----------
    reason : str
        ``"label_change"`` or ``"date_change"``.
    snapshot : SelectionSnapshot
        Selection state after the refresh.
    trigger : InputEvent or None
        Input that caused the refresh, when there was one.

    Notes
    -----
    Consumers should prefer ``snapshot`` for stable semantics and use
    ``trigger`` only for debugging.
    """

    reason: str
    snapshot: SelectionSnapshot
    trigger: Optional[InputEvent] = None
