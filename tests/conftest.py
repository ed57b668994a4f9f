from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT))

from choropleth_toolkit.dataset import Dataset  # noqa: E402
from choropleth_toolkit.map_config import MapConfig  # noqa: E402


def square(x0: float, y0: float, size: float = 1.0) -> dict:
    """Closed square polygon in lon/lat degrees."""
    ring = [
        [x0, y0],
        [x0 + size, y0],
        [x0 + size, y0 + size],
        [x0, y0 + size],
        [x0, y0],
    ]
    return {"type": "Polygon", "coordinates": [ring]}


@pytest.fixture
def two_region_records() -> list[dict]:
    return [
        {
            "id": "R1",
            "name": "Region One",
            "dates": {
                "2013-02-01": {"metricA": 20, "metricB": 5},
                "2013-01-01": {"metricA": 10, "metricB": 1},
            },
        },
        {
            "id": "R2",
            "name": "Region Two",
            "dates": {
                "2013-01-01": {"metricA": 30, "metricB": 3},
                "2013-02-01": {"metricA": 40, "metricB": 9},
            },
        },
    ]


@pytest.fixture
def two_region_dataset(two_region_records) -> Dataset:
    return Dataset.from_records(two_region_records)


@pytest.fixture
def two_region_features() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "id": "R1", "geometry": square(-100.0, 35.0, 2.0)},
            {"type": "Feature", "id": "R2", "geometry": square(-95.0, 38.0, 2.0)},
        ],
    }


@pytest.fixture
def border_mesh() -> dict:
    return {
        "type": "MultiLineString",
        "coordinates": [[[-98.0, 35.0], [-98.0, 37.0]], [[-95.0, 38.0], [-93.0, 38.0]]],
    }


@pytest.fixture
def static_config() -> MapConfig:
    """Config with fill transitions disabled."""
    return MapConfig(transition_ms=0)
