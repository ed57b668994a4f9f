"""Region shapes and their fills on a Plotly ``FigureWidget``.

Purpose
-------
:class:`MapRenderer` draws one single-location ``Choropleth`` trace per region
plus a border-mesh line trace on a ``geo`` subplot, and recolors the region
traces whenever the selected date or label changes.

Architecture notes
------------------
- Plotly projects the geometries (``layout.geo.projection``); see
  :mod:`choropleth_toolkit.projection`.
- Each region trace is painted with a solid two-stop colorscale, so its fill
  is exactly the ``hsl()`` string the color scale produced.
- Region-to-shape binding is an explicit table (region id → trace) built once
  by :meth:`MapRenderer.build`. The dataset order and the feature order must
  match; a length mismatch is a configuration error.
- :meth:`MapRenderer.refresh` only rewrites the colorscales; shapes are never
  re-created. Changes are sent with ``FigureWidget.batch_animate`` and not
  awaited. A later refresh simply overwrites the target values.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import ipywidgets as widgets
import plotly.graph_objects as go

from .color_scale import ColorDomain, fill_color
from .dataset import DatasetIndex
from .errors import ConfigurationError, MissingDataError
from .map_config import BORDERS_ID, MapConfig
from .projection import features_of, geo_layout, line_path, region_feature

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

RegionCallback = Callable[[Any, Any], None]
FeatureFor = Callable[[Any, Any], Dict[str, Any]]


def solid_colorscale(fill: str) -> List[List[Any]]:
    """Colorscale that paints every ``z`` with ``fill``."""
    return [[0, fill], [1, fill]]


class MapRenderer:
    """
    Own the map's ``FigureWidget`` and the region-to-trace table.

    Parameters
    ----------
    index : DatasetIndex
        Provides the regions, dates and labels.
    config : MapConfig, optional
        Figure size, projection, color constants and transition settings.
    feature_for : callable, optional
        ``(feature, region_id) -> GeoJSON Feature`` keyed by the region id.
        Defaults to :func:`~choropleth_toolkit.projection.region_feature`.
    """

    def __init__(
        self,
        index: DatasetIndex,
        config: Optional[MapConfig] = None,
        feature_for: FeatureFor = region_feature,
    ) -> None:
        self._index = index
        self._config = config or MapConfig()
        self._feature_for = feature_for
        self.figure_widget = go.FigureWidget()
        self._shapes: Dict[Any, Any] = {}
        self._built = False
        self._refresh_count = 0
        self._refresh_info_last_log_t = 0.0

    @property
    def is_built(self) -> bool:
        return self._built

    @property
    def region_ids(self) -> List[Any]:
        return list(self._shapes)

    def shape_for(self, region_id: Any) -> Any:
        """Return the trace bound to ``region_id``."""
        return self._shapes[region_id]

    def fills(self) -> Dict[Any, str]:
        """Current fill per region id."""
        return {rid: trace.colorscale[0][1] for rid, trace in self._shapes.items()}

    def build(
        self,
        features: Any,
        mesh: Any,
        *,
        label_index: int,
        date_index: int,
        domain: Optional[ColorDomain],
        host: Optional[widgets.Box] = None,
    ) -> go.FigureWidget:
        """Bind every feature to its region and draw the initial fills.

        Parameters
        ----------
        features : FeatureCollection mapping or sequence
            Boundary geometries in dataset order.
        mesh : geometry or None
            Border mesh drawn on top of the regions.
        host : ipywidgets.Box, optional
            Container the figure widget is appended to.

        Raises
        ------
        ConfigurationError
            If called twice, if feature and region counts differ, or if a
            region has no polygonal geometry.
        """
        if self._built:
            raise ConfigurationError("MapRenderer.build() may only run once.")
        feature_list = features_of(features)
        regions = list(self._index.dataset)
        if len(feature_list) != len(regions):
            raise ConfigurationError(
                f"Got {len(feature_list)} features for {len(regions)} regions; "
                "feature order must match dataset order one-to-one."
            )

        cfg = self._config
        fig = self.figure_widget
        fills = self._compute_fills(label_index, date_index, domain)

        traces = []
        for region, feature in zip(regions, feature_list):
            try:
                geo_feature = self._feature_for(feature, region.id)
            except ValueError as exc:
                raise ConfigurationError(f"Region {region.id!r}: {exc}") from None
            traces.append(
                go.Choropleth(
                    geojson={"type": "FeatureCollection", "features": [geo_feature]},
                    locations=[geo_feature["id"]],
                    featureidkey="id",
                    z=[1],
                    zmin=0,
                    zmax=1,
                    colorscale=solid_colorscale(fills[region.id]),
                    showscale=False,
                    marker=dict(line=dict(color=cfg.border_color, width=cfg.border_width)),
                    hoverinfo="none",
                    name=str(region.name),
                    meta=str(region.id),
                )
            )
        if mesh is not None:
            border = line_path(mesh)
            traces.append(
                go.Scattergeo(
                    lon=list(border.lon),
                    lat=list(border.lat),
                    mode="lines",
                    line=dict(color=cfg.border_color, width=cfg.border_width * 2),
                    hoverinfo="skip",
                    name=BORDERS_ID,
                    showlegend=False,
                )
            )

        fig.update_layout(
            width=cfg.width,
            height=cfg.height,
            margin=dict(l=0, r=0, t=0, b=0),
            showlegend=False,
            dragmode=False,
            paper_bgcolor=cfg.background_color,
            geo=geo_layout(cfg),
        )
        fig.add_traces(traces)

        self._shapes = {region.id: fig.data[i] for i, region in enumerate(regions)}
        self._built = True
        if host is not None:
            host.children = tuple(host.children) + (fig,)
        logger.info("built map with %d regions", len(regions))
        return fig

    def refresh(self, *, label_index: int, date_index: int, domain: Optional[ColorDomain]) -> Dict[Any, str]:
        """Recolor every region for ``(date_index, label_index)`` under ``domain``.

        Returns the fills that were written.
        """
        if not self._built:
            raise RuntimeError("MapRenderer.refresh() called before build().")
        fills = self._compute_fills(label_index, date_index, domain)
        cfg = self._config
        fig = self.figure_widget
        if cfg.transition_ms > 0:
            batch = fig.batch_animate(duration=cfg.transition_ms, easing=cfg.transition_easing)
        else:
            batch = fig.batch_update()
        with batch:
            for region_id, fill in fills.items():
                self._shapes[region_id].colorscale = solid_colorscale(fill)
        self._refresh_count += 1
        self._log_refresh(label_index, date_index, domain)
        return fills

    def bind_pointer(self, on_hover: RegionCallback, on_unhover: RegionCallback) -> None:
        """Forward Plotly hover callbacks as ``(region_id, (points, state))`` calls.

        Plotly only reports which region is under the pointer; the pointer
        position itself comes from :class:`~choropleth_toolkit.PointerDriver`.
        """
        for region_id, trace in self._shapes.items():
            trace.on_hover(
                lambda _trace, points, state, rid=region_id: on_hover(rid, (points, state))
            )
            trace.on_unhover(
                lambda _trace, points, state, rid=region_id: on_unhover(rid, (points, state))
            )

    def _compute_fills(
        self, label_index: int, date_index: int, domain: Optional[ColorDomain]
    ) -> Dict[Any, str]:
        cfg = self._config
        regions = self._index.dataset
        if domain is None:
            logger.warning("no color domain; painting %d regions as missing", len(regions))
            return {region.id: cfg.missing_fill for region in regions}

        date = self._index.dates[date_index]
        label = self._index.label(label_index)
        fills: Dict[Any, str] = {}
        for region in regions:
            try:
                fills[region.id] = fill_color(region.value(date, label), domain, cfg)
            except MissingDataError as exc:
                logger.warning("%s", exc)
                fills[region.id] = cfg.missing_fill
        return fills

    def _log_refresh(self, label_index: int, date_index: int, domain: Optional[ColorDomain]) -> None:
        now = time.monotonic()
        if logger.isEnabledFor(logging.INFO) and (now - self._refresh_info_last_log_t) > 1.0:
            self._refresh_info_last_log_t = now
            logger.info(
                "refresh #%d label=%s date=%s domain=%s",
                self._refresh_count,
                self._index.label(label_index),
                self._index.dates[date_index],
                None if domain is None else domain.as_tuple(),
            )


__all__ = ["MapRenderer", "solid_colorscale"]
