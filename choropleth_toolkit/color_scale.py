"""Value-to-color mapping for choropleth fills.

Every fill shares one hue and saturation; only the lightness varies. A value
is first placed on a 0..100 scale relative to the current :class:`ColorDomain`
and the percentage is then subtracted from a fixed offset, so larger values
render darker.

Examples
--------
>>> domain = ColorDomain(10.0, 30.0)
>>> lightness(20.0, domain.min, domain.max)
50.0
>>> fill_color(30.0, domain)
'hsl(216, 86%, 0%)'
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .map_config import MapConfig

_DEGENERATE_LIGHTNESS = 50.0


@dataclass(frozen=True)
class ColorDomain:
    """Numeric ``(min, max)`` range mapped onto the lightness scale."""

    min: float
    max: float

    @property
    def is_degenerate(self) -> bool:
        """Whether the domain collapses to a single value."""
        return self.min == self.max

    def contains(self, value: float) -> bool:
        """Return ``True`` when ``value`` lies inside the closed domain."""
        return self.min <= value <= self.max

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


def lightness(value: float, domain_min: float, domain_max: float) -> float:
    """Place ``value`` on a 0..100 scale relative to ``[domain_min, domain_max]``.

    The mapping is linear and clamped, so values outside the domain saturate
    at 0 or 100. A degenerate domain (``domain_min == domain_max``) yields 50
    for every value.

    Parameters
    ----------
    value : float
        Datum to place.
    domain_min, domain_max : float
        Bounds of the color domain.

    Returns
    -------
    float
        Percentage in ``[0, 100]``.
    """
    value = float(value)
    if math.isnan(value):
        raise ValueError("lightness() received NaN; missing values have no color.")
    if domain_min == domain_max:
        return _DEGENERATE_LIGHTNESS
    percentage = (value - domain_min) / (domain_max - domain_min) * 100.0
    return min(100.0, max(0.0, percentage))


def fill_color(value: float, domain: ColorDomain, config: Optional[MapConfig] = None) -> str:
    """Return the HSL fill string for ``value`` under ``domain``.

    The lightness component is ``config.color_offset - lightness(...)``,
    bounded to the CSS range ``[0, 100]``.
    """
    config = config or MapConfig()
    level = config.color_offset - lightness(value, domain.min, domain.max)
    level = min(100.0, max(0.0, level))
    return hsl(config.hue, config.saturation, level)


def hsl(hue: float, saturation: float, level: float) -> str:
    """Format an ``hsl()`` color string Plotly accepts."""
    return f"hsl({hue:g}, {saturation:g}%, {round(level, 2):g}%)"


__all__ = ["ColorDomain", "fill_color", "hsl", "lightness"]
