"""Signal-weighted centroid of access point locations."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

import numpy as np

from apfusion.config import FusionConfig
from apfusion.models import SOURCE_WIFI, FusedLocation, PositionEstimate
from apfusion.signal import signal_fraction

log = logging.getLogger(__name__)

# Floor for an AP with zero claimed coverage (a point fix). It gets the largest
# finite weight instead of dividing by zero.
MIN_ASSUMED_RANGE = 0.01


def assumed_range(estimate: PositionEstimate, max_assumed_coverage: float) -> float:
    """Likely distance between the device and the AP given its current signal.

    The AP's coverage radius, capped at `max_assumed_coverage`, scaled by the
    share of signal lost: a full-strength signal puts the device next to the
    AP, a signal at the noise floor puts it at the edge of coverage.
    """
    coverage = min(estimate.accuracy, max_assumed_coverage)
    rng = (1.0 - signal_fraction(estimate.signal_level)) * coverage
    if rng <= 0.0:
        log.warning(
            "%s: zero assumed range (accuracy=%.1f), clamping to %.2fm",
            estimate.identifier, estimate.accuracy, MIN_ASSUMED_RANGE,
        )
        return MIN_ASSUMED_RANGE
    return max(rng, MIN_ASSUMED_RANGE)


def weights(estimates: Sequence[PositionEstimate], config: FusionConfig) -> np.ndarray:
    """Inverse assumed range: nearer, stronger APs dominate."""
    ranges = np.array(
        [assumed_range(est, config.max_assumed_coverage) for est in estimates],
        dtype=np.float64,
    )
    return 1.0 / ranges


def average(
    estimates: Sequence[PositionEstimate],
    config: FusionConfig,
    clock: Callable[[], float] = time.time,
) -> FusedLocation:
    """Weighted centroid with a provisional (weighted mean) accuracy."""
    if not estimates:
        raise ValueError("cannot average an empty set of estimates")

    w = weights(estimates, config)
    lats = np.array([est.latitude for est in estimates], dtype=np.float64)
    lons = np.array([est.longitude for est in estimates], dtype=np.float64)
    accs = np.array([est.accuracy for est in estimates], dtype=np.float64)

    for est, wgt in zip(estimates, w):
        log.debug(
            "using %s weight=%f signal=%d accuracy=%.1f lat=%f lon=%f",
            est.identifier, wgt, est.signal_level, est.accuracy, est.latitude, est.longitude,
        )

    total = float(np.sum(w))
    latitude = float(np.sum(lats * w) / total)
    longitude = float(np.sum(lons * w) / total)
    accuracy = float(np.sum(accs * w) / total)

    # Altitude has its own weight total: only APs that know theirs contribute.
    altitude: float | None = None
    alt_pairs = [
        (est.altitude, wgt) for est, wgt in zip(estimates, w) if est.altitude is not None
    ]
    if alt_pairs:
        alts = np.array([alt for alt, _ in alt_pairs], dtype=np.float64)
        alt_w = np.array([wgt for _, wgt in alt_pairs], dtype=np.float64)
        altitude = float(np.sum(alts * alt_w) / np.sum(alt_w))

    log.debug("location est lat=%f lon=%f acc=%.1f", latitude, longitude, accuracy)
    return FusedLocation(
        latitude=latitude,
        longitude=longitude,
        altitude=altitude,
        accuracy=accuracy,
        sample_count=len(estimates),
        source=SOURCE_WIFI,
        timestamp=clock(),
    )
