"""Geographic plumbing between region geometries and Plotly's ``geo`` subplot.

Projection happens in the browser. Region shapes are ``go.Choropleth`` traces
on a ``geo`` subplot whose projection is Plotly's built-in ``"albers usa"``
composite: conic equal-area for the lower 48 states with Alaska and Hawaii
inset, the same layout as d3's ``albersUsa``. This module only prepares data
for it:

- :func:`geo_layout` builds the ``layout.geo`` settings from a :class:`MapConfig`.
- :func:`region_feature` normalizes one boundary geometry into the GeoJSON
  feature a single-region choropleth trace is keyed on.
- :func:`line_path` flattens line geometries (the border mesh) into the
  ``lon``/``lat`` arrays a ``Scattergeo`` line trace takes, with ``None``
  separating the parts.

Examples
--------
>>> geo_layout(MapConfig())["projection"]
{'type': 'albers usa', 'scale': 1.0}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .map_config import MapConfig

# Scale at which d3's albersUsa fits the lower 48 into a 960x500 canvas; Plotly's
# default "albers usa" fit corresponds to it.
ALBERS_USA_SCALE = 1070.0

POLYGON_TYPES = ("Polygon", "MultiPolygon")


def geo_layout(config: Optional[MapConfig] = None) -> Dict[str, Any]:
    """Return ``layout.geo`` settings: projection, zoom and a bare background."""
    cfg = config or MapConfig()
    return dict(
        projection=dict(
            type=cfg.projection_type,
            scale=cfg.projection_scale / ALBERS_USA_SCALE,
        ),
        showland=False,
        showlakes=False,
        showcoastlines=False,
        showcountries=False,
        showsubunits=False,
        showframe=False,
        bgcolor=cfg.background_color,
    )


def features_of(collection: Any) -> List[Any]:
    """Return the ordered feature list of a GeoJSON-like collection.

    A plain sequence is returned as a list unchanged.
    """
    if isinstance(collection, Mapping):
        if collection.get("type") == "FeatureCollection":
            return list(collection.get("features", ()))
        raise ValueError("Expected a FeatureCollection mapping or a sequence of features.")
    return list(collection)


def region_feature(feature: Any, region_id: Any) -> Dict[str, Any]:
    """Wrap ``feature`` as a GeoJSON Feature whose ``id`` is ``str(region_id)``.

    Accepts a Feature or a bare Polygon/MultiPolygon geometry. Properties of an
    incoming Feature are kept; the geometry itself is passed through untouched.

    Raises
    ------
    ValueError
        If there is no polygonal geometry to fill.
    """
    if not isinstance(feature, Mapping):
        raise ValueError(f"Expected a GeoJSON mapping, got {type(feature).__name__}.")
    if feature.get("type") == "Feature":
        geometry = feature.get("geometry")
        properties = dict(feature.get("properties") or {})
    else:
        geometry = feature
        properties = {}
    kind = geometry.get("type") if isinstance(geometry, Mapping) else None
    if kind not in POLYGON_TYPES:
        raise ValueError(f"Region geometry must be a Polygon or MultiPolygon, got {kind!r}.")
    return {
        "type": "Feature",
        "id": str(region_id),
        "properties": properties,
        "geometry": geometry,
    }


@dataclass(frozen=True)
class GeoLines:
    """Longitude/latitude arrays with ``None`` between separate parts."""

    lon: Tuple[Optional[float], ...] = ()
    lat: Tuple[Optional[float], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.lon


def line_path(geometry: Any) -> GeoLines:
    """Flatten a geometry's lines and rings into :class:`GeoLines`."""
    lon: List[Optional[float]] = []
    lat: List[Optional[float]] = []
    for part in _parts(geometry):
        if len(part) == 0:
            continue
        if lon:
            lon.append(None)
            lat.append(None)
        for point in part:
            lon.append(float(point[0]))
            lat.append(float(point[1]))
    return GeoLines(tuple(lon), tuple(lat))


def _parts(geometry: Any) -> Iterable[Sequence[Sequence[float]]]:
    if geometry is None:
        return
    if not isinstance(geometry, Mapping):
        raise TypeError(f"Unsupported geometry object: {type(geometry).__name__}")
    kind = geometry.get("type")
    if kind == "Feature":
        yield from _parts(geometry.get("geometry"))
    elif kind == "FeatureCollection":
        for feature in geometry.get("features", ()):
            yield from _parts(feature)
    elif kind == "GeometryCollection":
        for part in geometry.get("geometries", ()):
            yield from _parts(part)
    elif kind in ("Polygon", "MultiLineString"):
        yield from geometry["coordinates"]
    elif kind == "MultiPolygon":
        for polygon in geometry["coordinates"]:
            yield from polygon
    elif kind == "LineString":
        yield geometry["coordinates"]
    elif kind in ("Point", "MultiPoint"):
        return
    else:
        raise ValueError(f"Unsupported geometry type: {kind!r}")


__all__ = [
    "ALBERS_USA_SCALE",
    "GeoLines",
    "features_of",
    "geo_layout",
    "line_path",
    "region_feature",
]
