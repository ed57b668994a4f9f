"""Immutable snapshot of the map's selection state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .color_scale import ColorDomain


@dataclass(frozen=True)
class SelectionSnapshot:
    """Selected label/date pair and the color domain in effect.

    ``domain`` is ``None`` when no region had a value to build it from.
    """

    label_index: int
    label: str
    label_text: str
    date_index: int
    date: str
    domain: Optional[ColorDomain]
