"""Scan results -> fused device location: cull, average, bound."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from apfusion.config import FusionConfig
from apfusion.fusion.average import average
from apfusion.fusion.bounds import refine
from apfusion.fusion.cluster import MIN_GROUP_SIZE, cull
from apfusion.models import FusedLocation, PositionEstimate

log = logging.getLogger(__name__)

# identifier -> recorded AP location (signal_level of the stored record is ignored)
LocationLookup = Callable[[str], PositionEstimate | None]


@dataclass(frozen=True)
class ScanObservation:
    identifier: str
    signal_level: int


def fuse(
    estimates: Iterable[PositionEstimate] | None,
    config: FusionConfig,
    clock: Callable[[], float] = time.time,
) -> tuple[list[PositionEstimate], FusedLocation | None]:
    """Fuse a snapshot of estimates, also returning the estimates that were used.

    The location is None when there is nothing worth reporting.
    """
    if estimates is None:
        log.debug("resolve: no estimates")
        return [], None
    snapshot = list(estimates)
    if not snapshot:
        log.debug("resolve: no estimates")
        return [], None

    survivors = cull(snapshot, config.tolerance)
    if len(survivors) < MIN_GROUP_SIZE:
        log.debug(
            "resolve: insufficient number of access points to resolve location (%d known)",
            len(snapshot),
        )
        return [], None

    location = average(survivors, config, clock=clock)
    location.accuracy = refine(location, survivors)
    log.info(
        "fused %d/%d access points: lat=%f lon=%f acc=%.1fm",
        location.sample_count, len(snapshot), location.latitude, location.longitude,
        location.accuracy,
    )
    return survivors, location


def resolve(
    estimates: Iterable[PositionEstimate] | None,
    config: FusionConfig,
    clock: Callable[[], float] = time.time,
) -> FusedLocation | None:
    """Fuse a snapshot of estimates. None when there is nothing worth reporting."""
    _, location = fuse(estimates, config, clock=clock)
    return location


def locate_observations(
    observations: Iterable[ScanObservation],
    lookup: LocationLookup,
) -> list[PositionEstimate]:
    """Attach live signal levels to the recorded locations of the APs we know."""
    located: list[PositionEstimate] = []
    for obs in observations:
        known = lookup(obs.identifier)
        if known is None:
            continue
        located.append(known.with_signal(obs.signal_level))
    return located


class Resolver:
    """Holds the configuration and resolves scans one snapshot at a time."""

    def __init__(
        self,
        config: FusionConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or FusionConfig()
        self._clock = clock

    def resolve(self, estimates: Iterable[PositionEstimate] | None) -> FusedLocation | None:
        return resolve(estimates, self.config, clock=self._clock)

    def resolve_scan(
        self,
        observations: Iterable[ScanObservation] | None,
        lookup: LocationLookup,
    ) -> FusedLocation | None:
        if observations is None:
            return None
        located = locate_observations(observations, lookup)
        if not located:
            log.debug("resolve_scan: no access points with known locations")
            return None
        return self.resolve(located)
