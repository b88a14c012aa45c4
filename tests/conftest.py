from __future__ import annotations

import pytest
from pyproj import Geod

from apfusion.models import PositionEstimate

_GEOD = Geod(ellps="WGS84")

BASE_LAT = 52.370216
BASE_LON = 4.895168


def offset(lat: float, lon: float, bearing: float, meters: float) -> tuple[float, float]:
    """Point `meters` away from (lat, lon) along `bearing` degrees."""
    out_lon, out_lat, _ = _GEOD.fwd(lon, lat, bearing, meters)
    return float(out_lat), float(out_lon)


def make_estimate(
    identifier: str,
    east: float = 0.0,
    north: float = 0.0,
    accuracy: float = 20.0,
    signal_level: int = -60,
    altitude: float | None = None,
) -> PositionEstimate:
    lat, lon = offset(BASE_LAT, BASE_LON, 90.0, east)
    lat, lon = offset(lat, lon, 0.0, north)
    return PositionEstimate(
        identifier=identifier,
        latitude=lat,
        longitude=lon,
        accuracy=accuracy,
        signal_level=signal_level,
        altitude=altitude,
    )


@pytest.fixture
def estimate():
    return make_estimate
