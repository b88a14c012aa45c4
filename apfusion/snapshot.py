"""JSON snapshots of position estimates."""

from __future__ import annotations

import json
from pathlib import Path

from apfusion.models import EstimateDataError, PositionEstimate


def estimates_from_data(data: object) -> list[PositionEstimate]:
    """Accept either a bare list of estimates or {"estimates": [...]}."""
    if isinstance(data, dict):
        data = data.get("estimates")
    if not isinstance(data, list):
        raise EstimateDataError("snapshot must be a list of estimates or an object with 'estimates'")
    estimates: list[PositionEstimate] = []
    for idx, item in enumerate(data):
        try:
            estimates.append(PositionEstimate.from_dict(item))
        except EstimateDataError as e:
            raise EstimateDataError(f"estimate #{idx}: {e}") from e
    return estimates


def loads(text: str) -> list[PositionEstimate]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise EstimateDataError(f"malformed snapshot JSON: {e}") from e
    return estimates_from_data(data)


def load(path: Path) -> list[PositionEstimate]:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise EstimateDataError(f"snapshot is not UTF-8 text: {e}") from e
    return loads(text)


def save(estimates: list[PositionEstimate], path: Path) -> None:
    data = {"estimates": [est.to_dict() for est in estimates]}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")
