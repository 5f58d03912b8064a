"""CLI entrypoints for the swing scoring engine."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import default_project_config, resolve_output_dir
from .ingest import CsvFetchError, CsvFetcher, sniff_file_family
from .logging_config import setup_logging
from .pipeline import (
    ENERGY_RESOURCE,
    KINEMATICS_RESOURCE,
    PlayerProfile,
    ScoringRequest,
    score_session,
)
from .presentation import build_score_summary_text, score_table
from .presets import preferred_scoring_model
from .results_contract import write_results_contract

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Score swings from momentum-energy and inverse-kinematics CSV exports."
    )
    parser.add_argument("--me", action="append", default=[], help="Momentum-energy CSV path or URL.")
    parser.add_argument("--ik", action="append", default=[], help="Inverse-kinematics CSV path or URL.")
    parser.add_argument(
        "--csv",
        action="append",
        default=[],
        help="CSV path or URL of either family; routed by its header row.",
    )
    parser.add_argument("--player-id", default="local-player")
    parser.add_argument("--hand", default="R", help="Dominant hand: L or R.")
    parser.add_argument("--level", default="hs", help="youth, hs, college, or pro.")
    parser.add_argument("--height-in", type=float, default=None)
    parser.add_argument("--weight-lbs", type=float, default=None)
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Write results.json here (default: print only).",
    )
    parser.add_argument("--text", action="store_true", help="Print a coach summary instead of JSON.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = default_project_config()
    setup_logging(config.logging.level, config.logging.log_file)

    fetcher = CsvFetcher(timeout_s=config.fetch.timeout_s)
    me_sources = list(args.me)
    ik_sources = list(args.ik)
    for locator in args.csv:
        try:
            family = sniff_file_family(locator, fetcher, config.fetch.max_chars)
        except CsvFetchError as exc:
            logger.warning("Could not read %s (%s); skipping", locator, exc)
            continue
        if family == "me":
            me_sources.append(locator)
        elif family == "ik":
            ik_sources.append(locator)
        else:
            logger.warning("Could not identify export family for %s; skipping", locator)

    request = ScoringRequest(
        player_id=args.player_id,
        download_urls={ENERGY_RESOURCE: me_sources, KINEMATICS_RESOURCE: ik_sources},
    )
    player = PlayerProfile(
        handedness=args.hand,
        level=args.level,
        height_inches=args.height_in,
        weight_lbs=args.weight_lbs,
    )
    model = preferred_scoring_model()
    result = score_session(
        request, player, source=fetcher, fetch_settings=config.fetch, model=model
    )

    if args.output_dir is not None:
        path = write_results_contract(
            result,
            model=model,
            output_dir=resolve_output_dir(args.output_dir),
            inputs={ENERGY_RESOURCE: me_sources, KINEMATICS_RESOURCE: ik_sources},
        )
        logger.info("Wrote %s", path)

    if args.text:
        print(build_score_summary_text(result))
        print()
        print(score_table(result).to_string(index=False))
    else:
        print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
