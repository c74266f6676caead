"""Composable rule-based receipt text parser components."""

from .common import normalize_receipt_text, parse_receipt_date
from .line_items_parser import (
    LineItemExtraction,
    LineMatch,
    LinePattern,
    build_line_patterns,
    dedupe_line_matches,
    extract_line_items,
)
from .totals_parser import extract_totals

__all__ = [
    "LineItemExtraction",
    "LineMatch",
    "LinePattern",
    "build_line_patterns",
    "dedupe_line_matches",
    "extract_line_items",
    "extract_totals",
    "normalize_receipt_text",
    "parse_receipt_date",
]
