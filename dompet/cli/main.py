#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Sequence
from datetime import date

from dompet.runtime import set_log_level
from dompet.runtime.transaction_store import DEFAULT_USER_ID


def _iso_date(raw: str) -> str:
    try:
        date.fromisoformat(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date {raw!r}, expected YYYY-MM-DD") from exc
    return raw


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def _add_store_arguments(parser: argparse.ArgumentParser, with_goals: bool = True) -> None:
    parser.add_argument("--transactions", required=True, help="Transactions CSV file")
    parser.add_argument("--categories", required=True, help="Categories CSV file")
    if with_goals:
        parser.add_argument("--goals", default=None, help="Savings goals CSV file")
    parser.add_argument("--user", default=DEFAULT_USER_ID, help=f"User id (default: {DEFAULT_USER_ID})")
    parser.add_argument("--as-of", type=_iso_date, default=None, help="Reference date YYYY-MM-DD (default: today)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dompet",
        description="Receipt parsing and spending advice",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse <file>               Parse a receipt (text file or image) into candidates
  recommend                  Spending, savings and goal recommendations
  insights                   Short observations about recent finances
  report                     Monthly income/expense report

Environment:
  DOMPET_CONFIG_DIR          Directory holding receipt_rules.toml / recommendation_rules.toml
  DOMPET_OCR_URL             OCR service URL
  DOMPET_AI_API_KEY          Enables AI receipt parsing
  DOMPET_LOG_LEVEL           DEBUG, INFO, WARNING or ERROR
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse a receipt into transaction candidates")
    parse_parser.add_argument("file", help="Receipt text file or image")
    parse_parser.add_argument("--categories", default=None, help="Categories CSV file")
    parse_parser.add_argument("--user", default=DEFAULT_USER_ID, help=f"User id (default: {DEFAULT_USER_ID})")
    parse_parser.add_argument("--ocr-url", default=None, help="OCR service URL (default: $DOMPET_OCR_URL)")
    parse_parser.add_argument("--no-ai", action="store_true", help="Skip the AI parser even when configured")

    recommend_parser = subparsers.add_parser("recommend", help="Generate recommendations")
    _add_store_arguments(recommend_parser)
    recommend_parser.add_argument("--window", type=_positive_int, default=30, help="Window in days (default: 30)")

    insights_parser = subparsers.add_parser("insights", help="Generate insights")
    _add_store_arguments(insights_parser)
    insights_parser.add_argument("--window", type=_positive_int, default=30, help="Window in days (default: 30)")

    report_parser = subparsers.add_parser("report", help="Monthly cashflow report")
    _add_store_arguments(report_parser, with_goals=False)
    report_parser.add_argument("--months", type=_positive_int, default=6, help="Months to include (default: 6)")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(logging.DEBUG)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "parse":
        from dompet.cli.receipt import cmd_parse

        return cmd_parse(args)
    elif args.command == "recommend":
        from dompet.cli.advice import cmd_recommend

        return cmd_recommend(args)
    elif args.command == "insights":
        from dompet.cli.advice import cmd_insights

        return cmd_insights(args)
    elif args.command == "report":
        from dompet.cli.advice import cmd_report

        return cmd_report(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
