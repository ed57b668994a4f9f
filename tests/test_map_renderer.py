"""MapRenderer: region-to-trace binding, fills and pointer forwarding."""

from __future__ import annotations

import logging
from types import SimpleNamespace

import ipywidgets as widgets
import plotly.graph_objects as go
import pytest

from choropleth_toolkit.color_scale import ColorDomain
from choropleth_toolkit.dataset import Dataset, DatasetIndex, Region
from choropleth_toolkit.errors import ConfigurationError
from choropleth_toolkit.map_config import BORDERS_ID, MapConfig
from choropleth_toolkit.map_renderer import MapRenderer
from choropleth_toolkit.projection import region_feature

DOMAIN = ColorDomain(10.0, 30.0)


def _built(dataset, features, mesh=None, config=None, host=None) -> MapRenderer:
    renderer = MapRenderer(DatasetIndex(dataset), config or MapConfig(transition_ms=0))
    renderer.build(features, mesh, label_index=0, date_index=0, domain=DOMAIN, host=host)
    return renderer


def test_build_binds_one_trace_per_region(two_region_dataset, two_region_features, border_mesh) -> None:
    host = widgets.Box()
    renderer = _built(two_region_dataset, two_region_features, border_mesh, host=host)
    fig = renderer.figure_widget

    assert renderer.is_built
    assert renderer.region_ids == ["R1", "R2"]
    assert len(fig.data) == 3
    assert renderer.shape_for("R1") is fig.data[0]
    assert renderer.shape_for("R2").name == "Region Two"
    assert isinstance(fig.data[0], go.Choropleth)
    assert fig.data[-1].name == BORDERS_ID
    assert isinstance(fig.data[-1], go.Scattergeo)
    assert fig.data[-1].lon[2] is None
    assert tuple(host.children) == (fig,)


def test_build_applies_albers_usa_geo_layout(two_region_dataset, two_region_features) -> None:
    fig = _built(two_region_dataset, two_region_features).figure_widget

    assert fig.layout.width == 960
    assert fig.layout.height == 500
    assert fig.layout.geo.projection.type == "albers usa"
    assert fig.layout.geo.projection.scale == pytest.approx(1.0)


def test_projection_scale_zooms_the_geo_subplot(two_region_dataset, two_region_features) -> None:
    config = MapConfig(transition_ms=0, projection_scale=2140.0)
    fig = _built(two_region_dataset, two_region_features, config=config).figure_widget

    assert fig.layout.geo.projection.scale == pytest.approx(2.0)


def test_region_trace_is_keyed_on_its_own_feature(two_region_dataset, two_region_features) -> None:
    trace = _built(two_region_dataset, two_region_features).shape_for("R2")

    assert tuple(trace.locations) == ("R2",)
    assert trace.featureidkey == "id"
    (feature,) = trace.geojson["features"]
    assert feature["id"] == "R2"
    assert feature["geometry"] == two_region_features["features"][1]["geometry"]
    assert trace.showscale is False


def test_alaska_stays_on_the_map(two_region_features) -> None:
    alaska = {
        "type": "Polygon",
        "coordinates": [[[-168.0, 54.0], [-141.0, 60.0], [-141.0, 70.0], [-165.0, 68.0], [-168.0, 54.0]]],
    }
    data = Dataset(
        [
            Region("AK", "Alaska", {"2013-01-01": {"m": 10}}),
            Region("KS", "Kansas", {"2013-01-01": {"m": 30}}),
        ]
    )
    features = [alaska, two_region_features["features"][0]]

    renderer = _built(data, features)

    # albers usa insets Alaska; the geometry is handed to Plotly as-is
    assert renderer.figure_widget.layout.geo.projection.type == "albers usa"
    assert renderer.shape_for("AK").geojson["features"][0]["geometry"] == alaska
    assert renderer.fills()["AK"] == "hsl(216, 86%, 90%)"


def test_initial_fills_use_first_date(two_region_dataset, two_region_features) -> None:
    renderer = _built(two_region_dataset, two_region_features)

    assert renderer.fills() == {"R1": "hsl(216, 86%, 90%)", "R2": "hsl(216, 86%, 0%)"}


def test_refresh_reads_selected_date_against_given_domain(two_region_dataset, two_region_features) -> None:
    renderer = _built(two_region_dataset, two_region_features)

    fills = renderer.refresh(label_index=0, date_index=1, domain=DOMAIN)

    assert fills == {"R1": "hsl(216, 86%, 40%)", "R2": "hsl(216, 86%, 0%)"}
    assert renderer.fills() == fills


def test_refresh_with_animation_still_writes_fills(two_region_dataset, two_region_features) -> None:
    renderer = _built(
        two_region_dataset, two_region_features, config=MapConfig(transition_ms=250)
    )

    renderer.refresh(label_index=0, date_index=1, domain=DOMAIN)

    assert renderer.fills()["R1"] == "hsl(216, 86%, 40%)"


def test_feature_count_mismatch_is_a_configuration_error(two_region_dataset, two_region_features) -> None:
    renderer = MapRenderer(DatasetIndex(two_region_dataset))
    one_feature = two_region_features["features"][:1]

    with pytest.raises(ConfigurationError, match="1 features for 2 regions"):
        renderer.build(one_feature, None, label_index=0, date_index=0, domain=DOMAIN)


def test_build_twice_is_rejected(two_region_dataset, two_region_features) -> None:
    renderer = _built(two_region_dataset, two_region_features)

    with pytest.raises(ConfigurationError, match="only run once"):
        renderer.build(two_region_features, None, label_index=0, date_index=0, domain=DOMAIN)


def test_refresh_before_build_fails(two_region_dataset) -> None:
    with pytest.raises(RuntimeError, match="before build"):
        MapRenderer(DatasetIndex(two_region_dataset)).refresh(
            label_index=0, date_index=0, domain=DOMAIN
        )


def test_missing_value_gets_missing_fill(two_region_features, caplog) -> None:
    data = Dataset(
        [
            Region("R1", "One", {"2013-01-01": {"m": 10}}),
            Region("R2", "Two", {"2013-01-01": {"m": None}}),
        ]
    )
    config = MapConfig(transition_ms=0, missing_fill="#eeeeee")

    with caplog.at_level(logging.WARNING):
        renderer = _built(data, two_region_features, config=config)

    assert renderer.fills()["R2"] == "#eeeeee"
    assert renderer.fills()["R1"].startswith("hsl(")
    assert "null value" in caplog.text


def test_no_domain_paints_everything_missing(two_region_dataset, two_region_features) -> None:
    renderer = _built(two_region_dataset, two_region_features)

    renderer.refresh(label_index=0, date_index=0, domain=None)

    assert set(renderer.fills().values()) == {MapConfig().missing_fill}


def test_bind_pointer_forwards_region_and_plotly_payload(two_region_dataset, two_region_features) -> None:
    renderer = _built(two_region_dataset, two_region_features)
    hovers: list[tuple] = []
    unhovers: list[tuple] = []
    renderer.bind_pointer(
        lambda rid, raw: hovers.append((rid, raw)),
        lambda rid, raw: unhovers.append((rid, raw)),
    )
    trace = renderer.shape_for("R2")
    points = SimpleNamespace(point_inds=[0])

    trace._dispatch_on_hover(points, None)
    trace._dispatch_on_unhover(points, None)

    assert hovers == [("R2", (points, None))]
    assert unhovers == [("R2", (points, None))]


def test_custom_feature_collaborator_is_used(two_region_dataset) -> None:
    seen = []

    def feature_for(geometry, region_id):
        seen.append((geometry, region_id))
        return region_feature({"type": "Polygon", "coordinates": []}, region_id)

    renderer = MapRenderer(
        DatasetIndex(two_region_dataset), MapConfig(transition_ms=0), feature_for=feature_for
    )
    renderer.build(["g1", "g2"], None, label_index=0, date_index=0, domain=DOMAIN)

    assert seen == [("g1", "R1"), ("g2", "R2")]
    assert isinstance(renderer.figure_widget, go.FigureWidget)
    assert len(renderer.figure_widget.data) == 2


def test_non_polygon_region_is_a_configuration_error(two_region_dataset, two_region_features) -> None:
    features = [
        two_region_features["features"][0],
        {"type": "LineString", "coordinates": [[-90, 30], [-89, 31]]},
    ]
    renderer = MapRenderer(DatasetIndex(two_region_dataset))

    with pytest.raises(ConfigurationError, match="'R2'.*Polygon or MultiPolygon"):
        renderer.build(features, None, label_index=0, date_index=0, domain=DOMAIN)
