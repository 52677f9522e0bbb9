"""Command-line interface for minute bar conversion."""

from __future__ import annotations

import argparse
import sys

from eodbars.config import Settings, parse_clock, parse_date_value
from eodbars.errors import ConfigError
from eodbars.runtime import run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Aggregate minute bars into N-minute bars or pseudo end-of-day records"
    )
    parser.add_argument("--source", type=str, help="Minute-bar CSV file or directory")
    parser.add_argument("--output-dir", type=str, help="Directory for converted files")
    parser.add_argument("--events-dir", type=str, help="Run outputs directory")
    parser.add_argument("--mode", choices=["bars", "eod"], help="Output mode")
    parser.add_argument("--width", type=int, help="Bar width in minutes")
    parser.add_argument("--session-start", type=str, help="Session start, HH:MM")
    parser.add_argument("--session-end", type=str, help="Session end, HH:MM")
    parser.add_argument("--anchor-date", type=str, help="Most recent date mapped, YYYY-MM-DD")
    parser.add_argument("--calendar", type=str, help="CSV file listing trading dates")
    parser.add_argument(
        "--keep-weekends",
        action="store_true",
        help="Do not skip Saturday/Sunday when attributing trading dates",
    )
    parser.add_argument(
        "--no-aux",
        action="store_true",
        help="Omit split/secondary/dividend columns in bars mode output",
    )
    parser.add_argument("--first-instrument-id", type=int, help="Instrument id of the first file")
    parser.add_argument("--log-level", type=str, help="Logging level")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    requested_mode = args.mode or settings.output_mode
    if args.no_aux and requested_mode != "bars":
        raise ConfigError("--no-aux requires --mode bars")

    overrides: dict[str, object] = {}
    if args.source:
        overrides["source_path"] = args.source
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if args.events_dir:
        overrides["events_dir"] = args.events_dir
    if args.mode:
        overrides["output_mode"] = args.mode
    if args.width is not None:
        overrides["width_minutes"] = args.width
    if args.session_start:
        overrides["session_start"] = parse_clock(args.session_start, field_name="--session-start")
    if args.session_end:
        overrides["session_end"] = parse_clock(args.session_end, field_name="--session-end")
    if args.anchor_date:
        overrides["anchor_date"] = parse_date_value(args.anchor_date, field_name="--anchor-date")
    if args.calendar:
        overrides["calendar_path"] = args.calendar
    if args.keep_weekends:
        overrides["skip_weekends"] = False
    if args.no_aux:
        overrides["include_aux_fields"] = False
    if args.first_instrument_id is not None:
        overrides["first_instrument_id"] = args.first_instrument_id
    if args.log_level:
        overrides["log_level"] = args.log_level.strip().upper()
    return settings.with_overrides(**overrides)


def main() -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args()
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
