"""Position estimates, estimate groups and fused locations."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field

MIN_SIGNAL_LEVEL = -200
SOURCE_WIFI = "wifi"


class EstimateDataError(ValueError):
    """A position estimate is missing fields or carries unusable values."""


def _finite(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise EstimateDataError(f"{name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise EstimateDataError(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class PositionEstimate:
    """One access point's recorded location plus its live signal reading."""

    identifier: str
    latitude: float
    longitude: float
    accuracy: float
    signal_level: int
    altitude: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.identifier, str) or not self.identifier:
            raise EstimateDataError(f"identifier must be a non-empty string, got {self.identifier!r}")
        lat = _finite("latitude", self.latitude)
        lon = _finite("longitude", self.longitude)
        acc = _finite("accuracy", self.accuracy)
        signal = _finite("signal_level", self.signal_level)
        if not -90.0 <= lat <= 90.0:
            raise EstimateDataError(f"{self.identifier}: latitude {lat} out of range")
        if not -180.0 <= lon <= 180.0:
            raise EstimateDataError(f"{self.identifier}: longitude {lon} out of range")
        if acc < 0:
            raise EstimateDataError(f"{self.identifier}: accuracy must be >= 0, got {acc}")
        if signal < MIN_SIGNAL_LEVEL:
            raise EstimateDataError(
                f"{self.identifier}: signal level {signal} below floor {MIN_SIGNAL_LEVEL} dBm"
            )
        if not signal.is_integer():
            raise EstimateDataError(
                f"{self.identifier}: signal level must be a whole number of dBm, got {signal}"
            )
        # Frozen dataclass: normalise types in place.
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)
        object.__setattr__(self, "accuracy", acc)
        object.__setattr__(self, "signal_level", int(signal))
        if self.altitude is not None:
            object.__setattr__(self, "altitude", _finite("altitude", self.altitude))

    @property
    def has_altitude(self) -> bool:
        return self.altitude is not None

    def with_signal(self, signal_level: int) -> PositionEstimate:
        return PositionEstimate(
            identifier=self.identifier,
            latitude=self.latitude,
            longitude=self.longitude,
            accuracy=self.accuracy,
            signal_level=signal_level,
            altitude=self.altitude,
        )

    def to_dict(self) -> dict:
        d = {
            "identifier": self.identifier,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy": self.accuracy,
            "signal_level": self.signal_level,
        }
        if self.altitude is not None:
            d["altitude"] = self.altitude
        return d

    @classmethod
    def from_dict(cls, d: dict) -> PositionEstimate:
        if not isinstance(d, dict):
            raise EstimateDataError(f"estimate must be an object, got {type(d).__name__}")
        missing = [
            key
            for key in ("identifier", "latitude", "longitude", "accuracy", "signal_level")
            if d.get(key) is None
        ]
        if missing:
            raise EstimateDataError(f"estimate missing required fields: {', '.join(missing)}")
        return cls(
            identifier=str(d["identifier"]),
            latitude=d["latitude"],
            longitude=d["longitude"],
            accuracy=d["accuracy"],
            signal_level=d["signal_level"],
            altitude=d.get("altitude"),
        )


@dataclass
class EstimateGroup:
    """Indices of mutually compatible estimates.

    Membership is by index into the clusterer's ordered estimate list, so one
    estimate may sit in several groups without any equality checks.
    """

    seed: int
    members: list[int] = field(default_factory=list)

    def add(self, index: int) -> None:
        self.members.append(index)

    def __len__(self) -> int:
        return len(self.members)


@dataclass
class FusedLocation:
    latitude: float
    longitude: float
    accuracy: float
    sample_count: int
    altitude: float | None = None
    source: str = SOURCE_WIFI
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "altitude": self.altitude,
            "accuracy": self.accuracy,
            "source": self.source,
            "timestamp": self.timestamp,
            "sample_count": self.sample_count,
        }
