"""Geodesic helpers on the WGS-84 ellipsoid."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from pyproj import Geod

_GEOD = Geod(ellps="WGS84")


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Geodesic distance in meters between two points."""
    _, _, dist = _GEOD.inv(lon1, lat1, lon2, lat2)
    return float(dist)


def initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial bearing from point 1 to point 2 (degrees clockwise from north, 0..360)."""
    az, _, _ = _GEOD.inv(lon1, lat1, lon2, lat2)
    return float(az) % 360.0


def distance_and_bearing(
    lat: float,
    lon: float,
    lats: Sequence[float],
    lons: Sequence[float],
) -> tuple[np.ndarray, np.ndarray]:
    """Distances (m) and initial bearings (deg) from one origin to many points."""
    lats_arr = np.asarray(lats, dtype=np.float64)
    lons_arr = np.asarray(lons, dtype=np.float64)
    if lats_arr.size == 0:
        return np.zeros(0), np.zeros(0)
    origin_lats = np.full_like(lats_arr, lat)
    origin_lons = np.full_like(lons_arr, lon)
    az, _, dist = _GEOD.inv(origin_lons, origin_lats, lons_arr, lats_arr)
    return np.asarray(dist, dtype=np.float64), np.mod(np.asarray(az, dtype=np.float64), 360.0)


def distance_matrix(lats: Sequence[float], lons: Sequence[float]) -> np.ndarray:
    """Symmetric n x n matrix of pairwise geodesic distances (meters)."""
    lats_arr = np.asarray(lats, dtype=np.float64)
    lons_arr = np.asarray(lons, dtype=np.float64)
    n = lats_arr.size
    matrix = np.zeros((n, n), dtype=np.float64)
    if n < 2:
        return matrix

    rows, cols = np.triu_indices(n, k=1)
    _, _, dist = _GEOD.inv(lons_arr[rows], lats_arr[rows], lons_arr[cols], lats_arr[cols])
    matrix[rows, cols] = dist
    matrix[cols, rows] = dist
    return matrix
