"""Command line entry point: snapshot file -> cull -> average -> bound -> report."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from apfusion import snapshot
from apfusion.config import FusionConfig, apply_overrides, load_config_file
from apfusion.fusion.resolver import fuse
from apfusion.models import EstimateDataError, PositionEstimate
from apfusion.ui.report import render

log = logging.getLogger("apfusion")

EXIT_OK = 0
EXIT_NO_LOCATION = 1
EXIT_BAD_INPUT = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="apfusion",
        description="Fuse Wi-Fi access point locations into one device location",
    )
    parser.add_argument("snapshot", help="JSON snapshot of position estimates, '-' for stdin")
    parser.add_argument("--tolerance", type=str, default=None, help="Clustering slack, e.g. 500 or 1km")
    parser.add_argument(
        "--max-coverage", type=str, default=None, help="Ceiling on AP coverage radius (m)"
    )
    parser.add_argument("--config", type=Path, default=None, help="TOML config file")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--debug", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> FusionConfig:
    config = FusionConfig()

    # Load from config file
    config_path = args.config or config.config_path
    apply_overrides(config, load_config_file(config_path))

    # Apply CLI overrides
    apply_overrides(
        config,
        {"tolerance": args.tolerance, "max_assumed_coverage": args.max_coverage},
    )
    if args.debug:
        config.debug = True
    return config


def _read_snapshot(source: str) -> list[PositionEstimate]:
    if source == "-":
        try:
            text = sys.stdin.read()
        except UnicodeDecodeError as e:
            raise EstimateDataError(f"snapshot is not valid text: {e}") from e
        return snapshot.loads(text)
    return snapshot.load(Path(source))


def run(args: argparse.Namespace) -> int:
    try:
        config = build_config(args)
    except (ValueError, OSError) as e:
        log.error("invalid configuration: %s", e)
        return EXIT_BAD_INPUT

    logging.getLogger().setLevel(logging.DEBUG if config.debug else logging.INFO)

    try:
        estimates = _read_snapshot(args.snapshot)
    except EstimateDataError as e:
        log.error("invalid snapshot: %s", e)
        return EXIT_BAD_INPUT
    except OSError as e:
        log.error("cannot read snapshot: %s", e)
        return EXIT_BAD_INPUT

    survivors, location = fuse(estimates, config)

    if args.json:
        print(json.dumps(location.to_dict() if location is not None else None))
    else:
        render(estimates, survivors, location, config)

    return EXIT_OK if location is not None else EXIT_NO_LOCATION


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    sys.exit(run(args))


if __name__ == "__main__":
    main()
