"""Advice and report command handlers used by the CLI."""

import argparse
import json
from dataclasses import asdict
from datetime import date
from typing import Any

from dompet.application.advice import build_insights, monthly_cashflow, synthesize
from dompet.runtime import DataFrameTransactionStore


def _load_store(args: argparse.Namespace) -> DataFrameTransactionStore:
    return DataFrameTransactionStore.from_csv(
        args.categories,
        transactions_path=args.transactions,
        goals_path=getattr(args, "goals", None),
    )


def _as_of(args: argparse.Namespace) -> date | None:
    return date.fromisoformat(args.as_of) if args.as_of else None


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def cmd_recommend(args: argparse.Namespace) -> int:
    records = synthesize(args.user, store=_load_store(args), window_days=args.window, as_of=_as_of(args))
    _print_json([record.to_dict() for record in records])
    return 0


def cmd_insights(args: argparse.Namespace) -> int:
    insights = build_insights(args.user, store=_load_store(args), window_days=args.window, as_of=_as_of(args))
    _print_json([insight.to_dict() for insight in insights])
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    """Print income, expense and balance per month."""
    buckets = monthly_cashflow(args.user, store=_load_store(args), months=args.months, as_of=_as_of(args))
    _print_json([{**asdict(bucket), "balance": bucket.balance} for bucket in buckets])
    return 0
