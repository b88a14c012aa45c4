"""Runtime configuration for apfusion."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class FusionConfig:
    # Clustering slack (meters) before two APs are treated as inconsistent,
    # i.e. one of them has probably been moved.
    tolerance: float = 500.0
    # Ceiling on any AP's assumed coverage radius (meters).
    max_assumed_coverage: float = 100.0

    debug: bool = False

    data_dir: Path = field(default_factory=lambda: Path.home() / ".apfusion")

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.max_assumed_coverage <= 0:
            raise ValueError(
                f"max_assumed_coverage must be > 0, got {self.max_assumed_coverage}"
            )

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.toml"


def load_config_file(path: Path) -> dict:
    """Load config overrides from a TOML file. Returns empty dict if not found."""
    if not path.exists():
        return {}
    import tomllib
    return tomllib.loads(path.read_text())


def apply_overrides(config: FusionConfig, overrides: dict) -> FusionConfig:
    """Apply dict overrides (from TOML or CLI) onto a config."""
    for key, value in overrides.items():
        if value is None:
            continue
        if key in ("tolerance", "max_assumed_coverage"):
            if isinstance(value, str):
                value = parse_distance(value)
            setattr(config, key, float(value))
        elif key == "data_dir" and isinstance(value, str):
            config.data_dir = Path(value)
        elif hasattr(config, key):
            setattr(config, key, value)
    config.validate()
    return config


def parse_distance(s: str) -> float:
    """Parse a distance string like '500', '500m' or '1.5km' into meters."""
    s = s.lower().strip()
    if s.endswith("km"):
        return float(s[:-2]) * 1000
    if s.endswith("m"):
        return float(s[:-1])
    return float(s)
