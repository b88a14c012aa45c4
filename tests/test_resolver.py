from __future__ import annotations

import pytest

from apfusion.config import FusionConfig
from apfusion.fusion.resolver import (
    Resolver,
    ScanObservation,
    fuse,
    locate_observations,
    resolve,
)


def test_resolve_drops_moved_access_point(estimate) -> None:
    near_1 = estimate("near-1", east=0.0, accuracy=20.0, signal_level=-60)
    near_2 = estimate("near-2", east=50.0, accuracy=20.0, signal_level=-60)
    moved = estimate("moved", east=5000.0, accuracy=20.0, signal_level=-60)

    fused = resolve([near_1, near_2, moved], FusionConfig(tolerance=50.0), clock=lambda: 10.0)

    assert fused is not None
    assert fused.sample_count == 2
    assert fused.timestamp == 10.0
    midpoint = estimate("mid", east=25.0)
    assert fused.latitude == pytest.approx(midpoint.latitude, abs=1e-7)
    assert fused.longitude == pytest.approx(midpoint.longitude, abs=1e-7)
    # Centroid lies outside each 20m coverage circle, so the weighted accuracy stands.
    assert fused.accuracy == pytest.approx(20.0)


def test_resolve_single_estimate_produces_nothing(estimate) -> None:
    assert resolve([estimate("solo")], FusionConfig()) is None


def test_resolve_empty_input_produces_nothing() -> None:
    assert resolve([], FusionConfig()) is None
    assert resolve(None, FusionConfig()) is None


def test_resolve_refines_accuracy(estimate) -> None:
    estimates = [
        estimate("a", east=0.0, accuracy=60.0),
        estimate("b", east=30.0, accuracy=60.0),
        estimate("c", north=30.0, accuracy=60.0),
    ]
    fused = resolve(estimates, FusionConfig())
    assert fused is not None
    assert fused.sample_count == 3
    assert 0.0 <= fused.accuracy < 60.0


def test_resolve_accepts_generator(estimate) -> None:
    fused = resolve((estimate(f"ap-{i}", east=10.0 * i) for i in range(3)), FusionConfig())
    assert fused is not None
    assert fused.sample_count == 3


def test_locate_observations_attaches_live_signal(estimate) -> None:
    recorded = {
        "aa:aa": estimate("aa:aa", east=0.0, signal_level=-100),
        "bb:bb": estimate("bb:bb", east=20.0, signal_level=-100),
    }
    observations = [
        ScanObservation("aa:aa", -48),
        ScanObservation("cc:cc", -50),
        ScanObservation("bb:bb", -71),
    ]
    located = locate_observations(observations, recorded.get)
    assert [(est.identifier, est.signal_level) for est in located] == [
        ("aa:aa", -48),
        ("bb:bb", -71),
    ]


def test_resolver_resolve_scan(estimate) -> None:
    recorded = {
        "aa:aa": estimate("aa:aa", east=0.0),
        "bb:bb": estimate("bb:bb", east=20.0),
    }
    resolver = Resolver(FusionConfig(tolerance=50.0), clock=lambda: 99.0)

    fused = resolver.resolve_scan(
        [ScanObservation("aa:aa", -60), ScanObservation("bb:bb", -60)],
        recorded.get,
    )
    assert fused is not None
    assert fused.sample_count == 2
    assert fused.timestamp == 99.0

    assert resolver.resolve_scan([ScanObservation("zz:zz", -60)], recorded.get) is None
    assert resolver.resolve_scan([], recorded.get) is None
    assert resolver.resolve_scan(None, recorded.get) is None


def test_fuse_returns_the_estimates_it_used(estimate) -> None:
    near_1 = estimate("near-1", east=0.0)
    near_2 = estimate("near-2", east=50.0)
    moved = estimate("moved", east=5000.0)

    survivors, fused = fuse([moved, near_2, near_1], FusionConfig(tolerance=50.0))
    assert fused is not None
    assert [est.identifier for est in survivors] == ["near-1", "near-2"]
    assert survivors[0] is near_1

    assert fuse([near_1], FusionConfig()) == ([], None)
