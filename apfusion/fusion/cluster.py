"""Outlier rejection: keep the largest group of mutually consistent APs.

Access points get moved. An AP whose recorded location is far from the others
seen in the same scan would drag the fused location towards wherever it used
to be. Estimates are greedily grouped so that every pair inside a group has
overlapping coverage circles (allowing `tolerance` meters of slack), and the
largest group wins. An estimate may join several groups.

The grouping is order dependent, so estimates are always visited sorted by
identifier (input position breaks ties between equal identifiers).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from apfusion.geodesy import distance, distance_matrix
from apfusion.models import EstimateGroup, PositionEstimate

log = logging.getLogger(__name__)

MIN_GROUP_SIZE = 2


def _margin(separation: float, accuracy_a: float, accuracy_b: float) -> float:
    return separation - accuracy_a - accuracy_b


def compatible(a: PositionEstimate, b: PositionEstimate, tolerance: float) -> bool:
    """True when the coverage circles of a and b overlap within tolerance."""
    separation = distance(a.latitude, a.longitude, b.latitude, b.longitude)
    return _margin(separation, a.accuracy, b.accuracy) <= tolerance


def ordered(estimates: Iterable[PositionEstimate]) -> list[PositionEstimate]:
    """Snapshot estimates into the fixed visiting order used for grouping."""
    return sorted(estimates, key=lambda est: est.identifier)


def _margins(estimates: list[PositionEstimate]) -> np.ndarray:
    separations = distance_matrix(
        [est.latitude for est in estimates],
        [est.longitude for est in estimates],
    )
    accuracies = np.array([est.accuracy for est in estimates], dtype=np.float64)
    return separations - accuracies[:, None] - accuracies[None, :]


def divide_in_groups(
    estimates: list[PositionEstimate],
    tolerance: float,
) -> list[EstimateGroup]:
    """Greedy first-fit grouping over estimates in the given order."""
    margins = _margins(estimates)
    groups: list[EstimateGroup] = []

    for idx, est in enumerate(estimates):
        used = False
        for group in groups:
            # Test against current membership, which grows as the pass proceeds.
            worst = float(np.max(margins[idx, group.members]))
            if worst <= tolerance:
                group.add(idx)
                used = True
            log.debug(
                "%s vs group %d (%d members): worst margin %.1fm, tolerance %.1fm",
                est.identifier, group.seed, len(group), worst, tolerance,
            )
        if not used:
            log.debug("%s starts group %d", est.identifier, len(groups))
            groups.append(EstimateGroup(seed=len(groups), members=[idx]))
    return groups


def largest_group(groups: list[EstimateGroup]) -> EstimateGroup | None:
    """Largest group; among equal sizes, the one created first."""
    best: EstimateGroup | None = None
    for group in groups:
        if best is None or len(group) > len(best):
            best = group
    return best


def cull(
    estimates: Iterable[PositionEstimate],
    tolerance: float,
) -> list[PositionEstimate]:
    """Return the largest mutually compatible subset, or [] if it has fewer than 2."""
    visiting = ordered(estimates)
    if not visiting:
        return []

    groups = divide_in_groups(visiting, tolerance)
    best = largest_group(groups)
    if log.isEnabledFor(logging.DEBUG):
        sizes = sorted((len(group) for group in groups), reverse=True)
        log.debug("cull: %d estimates in %d groups, sizes %s", len(visiting), len(groups), sizes)

    if best is None or len(best) < MIN_GROUP_SIZE:
        return []

    kept = [visiting[idx] for idx in best.members]
    dropped = len(visiting) - len(kept)
    if dropped:
        kept_ids = set(best.members)
        outliers = [est.identifier for idx, est in enumerate(visiting) if idx not in kept_ids]
        log.info("discarding %d inconsistent access point(s): %s", dropped, ", ".join(outliers))
    return kept
