"""Received signal strength to a 0..1 fraction."""

from __future__ import annotations

# Platform quantisation of RSSI into display levels.
RSSI_MIN = -100
RSSI_MAX = -55
LEVELS = 100


def signal_level(dbm: float, levels: int = LEVELS) -> int:
    """Quantise dBm into 0..levels-1, the way the platform reports signal bars."""
    if levels < 2:
        raise ValueError(f"levels must be >= 2, got {levels}")
    if dbm <= RSSI_MIN:
        return 0
    if dbm >= RSSI_MAX:
        return levels - 1
    return int((dbm - RSSI_MIN) * (levels - 1) / (RSSI_MAX - RSSI_MIN))


def signal_fraction(dbm: float) -> float:
    """Monotonic transform of dBm into [0, 1); weaker signals approach 0."""
    return signal_level(dbm) / LEVELS
