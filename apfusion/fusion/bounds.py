"""Accuracy re-estimation from overlapping AP coverage.

Intersecting coverage circles is awkward; intersecting boxes is not. Each AP
is treated as covering a square of half-width equal to its accuracy, centred on
its recorded location in a local plane around the centroid. The smallest box
shared by all of them bounds the device position.

If the centroid falls outside any AP's claimed coverage the coverage data is
not self-consistent, and the provisional accuracy is kept.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from apfusion.geodesy import distance_and_bearing
from apfusion.models import FusedLocation, PositionEstimate

log = logging.getLogger(__name__)


def refine(centroid: FusedLocation, estimates: Sequence[PositionEstimate]) -> float:
    """Shrink the provisional accuracy to the common bounding box, in meters."""
    provisional = centroid.accuracy
    if not estimates:
        return provisional

    ranges, bearings = distance_and_bearing(
        centroid.latitude,
        centroid.longitude,
        [est.latitude for est in estimates],
        [est.longitude for est in estimates],
    )
    radii = np.array([est.accuracy for est in estimates], dtype=np.float64)

    outside = radii < ranges
    if np.any(outside):
        idx = int(np.argmax(outside))
        log.debug(
            "%s: distance %.1fm greater than coverage %.1fm, keeping accuracy %.1fm",
            estimates[idx].identifier, ranges[idx], radii[idx], provisional,
        )
        return provisional

    theta = np.radians(bearings)
    dx = ranges * np.cos(theta)
    dy = ranges * np.sin(theta)

    max_x = min(provisional, float(np.min(dx + radii)))
    min_x = max(-provisional, float(np.max(dx - radii)))
    max_y = min(provisional, float(np.min(dy + radii)))
    min_y = max(-provisional, float(np.max(dy - radii)))
    log.debug("box max_x=%f min_x=%f max_y=%f min_y=%f", max_x, min_x, max_y, min_y)

    guess = max(abs(max_x), abs(min_x), abs(max_y), abs(min_y))
    log.debug("revised accuracy from %.1f to %.1f", provisional, guess)
    return guess
