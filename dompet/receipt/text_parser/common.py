"""Shared constants and helpers for receipt text parsing."""

import hashlib
import re
from collections.abc import Sequence
from datetime import date

from dompet.domain.receipt import DEFAULT_CURRENCY_MARKERS

# Day-first numeric dates such as 12/03/2024, 1-3-24 or 12.03.2024
DATE_PATTERN = re.compile(r"(?<!\d)(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2,4})(?!\d)")


def _currency_marker_pattern(markers: Sequence[str]) -> re.Pattern[str] | None:
    # Longest first so "Rp." wins over "Rp".
    cleaned = sorted({m.strip() for m in markers if m.strip()}, key=len, reverse=True)
    if not cleaned:
        return None
    alternation = "|".join(re.escape(m) for m in cleaned)
    return re.compile(rf"(?<![A-Za-z])(?:{alternation})[ \t]*(?=\d)", re.IGNORECASE)


def normalize_receipt_text(text: str, currency_markers: Sequence[str] = DEFAULT_CURRENCY_MARKERS) -> str:
    """Normalize line endings and spaces, and drop currency markers before amounts."""
    if not text:
        return ""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    normalized = normalized.replace("\u00a0", " ").replace("\u202f", " ")
    marker_re = _currency_marker_pattern(currency_markers)
    if marker_re is not None:
        normalized = marker_re.sub("", normalized)
    return normalized


def parse_receipt_date(text: str, today: date | None = None) -> date:
    """Return the first day-first date in text, or today when none parses."""
    fallback = today or date.today()
    match = DATE_PATTERN.search(text)
    if not match:
        return fallback

    day, month, year = (int(g) for g in match.groups())
    if year < 100:
        year += 2000
    try:
        return date(year, month, day)
    except ValueError:
        return fallback


def candidate_id(prefix: str, raw_text: str) -> str:
    """Stable identifier derived from the matched text."""
    digest = hashlib.sha1(raw_text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}_{digest}"


def within_bounds(amount: int, bounds: tuple[int, int]) -> bool:
    low, high = bounds
    return low <= amount <= high
