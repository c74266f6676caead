"""Line-item extraction from plain receipt text.

Extraction runs as explicit stages:

1. every LinePattern scans the whole (normalized) text line by line;
2. dedupe_line_matches() keeps the first match for each matched substring;
3. each survivor is filtered (denylist, name shape, amount bounds);
4. survivors become candidates; with none left, the receipt total becomes
   a single whole-receipt candidate.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache

from dompet.domain.category import CategoryRef
from dompet.domain.keywords import contains_any
from dompet.domain.receipt import AmountFormat, ParsedTransactionCandidate, ReceiptTotals
from dompet.receipt.category_matcher import match_category
from dompet.receipt.keyword_rules import ReceiptKeywordRules, get_default_receipt_rules

from .common import candidate_id, normalize_receipt_text, parse_receipt_date, within_bounds
from .totals_parser import extract_totals

MIN_NAME_LENGTH = 3


@dataclass(frozen=True)
class LineMatch:
    """One pattern hit: the matched line plus its name and price fields."""

    pattern: str
    start: int
    raw_text: str
    product_name: str
    price_text: str
    confidence: float


@dataclass(frozen=True)
class LinePattern:
    """A named candidate extractor; the last capture group is always the price."""

    name: str
    regex: re.Pattern[str]
    confidence: float

    def find(self, text: str) -> list[LineMatch]:
        matches = []
        for m in self.regex.finditer(text):
            matches.append(
                LineMatch(
                    pattern=self.name,
                    start=m.start(),
                    raw_text=m.group(0),
                    product_name=m.group(1).strip(),
                    price_text=m.group(m.lastindex or 1),
                    confidence=self.confidence,
                )
            )
        return matches


@dataclass(frozen=True)
class RejectedLine:
    raw_text: str
    reason: str


@dataclass(frozen=True)
class LineItemExtraction:
    transactions: list[ParsedTransactionCandidate]
    totals: ReceiptTotals
    receipt_date: date
    rejected: tuple[RejectedLine, ...] = field(default=())
    used_fallback: bool = False


@lru_cache(maxsize=8)
def build_line_patterns(
    amount_format: AmountFormat,
    structured_confidence: float,
    bare_confidence: float,
) -> tuple[LinePattern, ...]:
    """Build the ordered line patterns for an amount format."""
    amt = amount_format.pattern
    flags = re.MULTILINE
    return (
        # "Indomie Goreng 2 3.500 7.000": name, quantity, unit price, line total
        LinePattern(
            "name_qty_unit_total",
            re.compile(rf"^(.+?)[ \t]+(\d+)[ \t]+({amt})[ \t]+({amt})$", flags),
            structured_confidence,
        ),
        # "Es Teh Manis   5.000"
        LinePattern("name_price", re.compile(rf"^(.+?)[ \t]+({amt})$", flags), bare_confidence),
        LinePattern("name_price_trailing_space", re.compile(rf"^(.+?)[ \t]+({amt})[ \t]*$", flags), bare_confidence),
        LinePattern(
            "alnum_name_price",
            re.compile(rf"^([A-Za-z0-9 \t.\-]+?)[ \t]+({amt})[ \t]*$", flags),
            bare_confidence,
        ),
    )


def dedupe_line_matches(matches: Iterable[LineMatch]) -> list[LineMatch]:
    """Keep the first match for each exact matched substring."""
    seen: set[str] = set()
    unique = []
    for match in matches:
        if match.raw_text in seen:
            continue
        seen.add(match.raw_text)
        unique.append(match)
    return unique


def rejection_reason(
    product_name: str,
    amount: int,
    rules: ReceiptKeywordRules,
) -> str | None:
    """Return why a line match is not an item, or None to keep it."""
    if contains_any(product_name, rules.denylist):
        return "denylisted"
    if len(product_name) < MIN_NAME_LENGTH:
        return "name_too_short"
    if product_name.isdigit():
        return "numeric_name"
    if not within_bounds(amount, rules.item_bounds):
        return "amount_out_of_bounds"
    return None


def _category_id(text: str, categories: Sequence[CategoryRef], rules: ReceiptKeywordRules) -> str | None:
    category = match_category(text, categories, rules.families)
    return category.id if category is not None else None


def _fallback_candidate(
    normalized: str,
    totals: ReceiptTotals,
    receipt_date: date,
    categories: Sequence[CategoryRef],
    rules: ReceiptKeywordRules,
) -> ParsedTransactionCandidate | None:
    amount = totals.net_total if totals.net_total is not None else totals.gross_total
    if amount is None or not within_bounds(amount, rules.fallback_bounds):
        return None
    return ParsedTransactionCandidate(
        id=candidate_id("total", normalized),
        description=rules.fallback_description,
        amount=amount,
        date=receipt_date,
        confidence=rules.fallback_confidence,
        raw_text=normalized,
        category_id=_category_id(rules.fallback_keyword, categories, rules),
    )


def extract_line_items(
    text: str,
    categories: Sequence[CategoryRef],
    config: ReceiptKeywordRules | None = None,
    today: date | None = None,
) -> LineItemExtraction:
    """
    Extract transaction candidates from receipt text.

    Args:
        text: Raw OCR or uploaded receipt text
        categories: The user's categories, used for category matching
        config: Keyword tables and bounds; built-in tables when omitted
        today: Date used when the receipt has no parseable date

    Returns:
        LineItemExtraction with candidates (in receipt order), totals and date.
        Repeated calls on the same text give identical candidates.
    """
    rules = config or get_default_receipt_rules()
    normalized = normalize_receipt_text(text, rules.currency_markers)
    receipt_date = parse_receipt_date(normalized, today=today)
    totals = extract_totals(normalized, rules)
    if not normalized.strip():
        return LineItemExtraction(transactions=[], totals=totals, receipt_date=receipt_date)

    patterns = build_line_patterns(rules.amount_format, rules.structured_confidence, rules.bare_confidence)
    all_matches: list[LineMatch] = []
    for pattern in patterns:
        all_matches.extend(pattern.find(normalized))

    transactions: list[ParsedTransactionCandidate] = []
    rejected: list[RejectedLine] = []
    for match in sorted(dedupe_line_matches(all_matches), key=lambda m: m.start):
        try:
            amount = rules.amount_format.parse(match.price_text)
        except ValueError:
            rejected.append(RejectedLine(match.raw_text, "unparseable_amount"))
            continue

        reason = rejection_reason(match.product_name, amount, rules)
        if reason is not None:
            rejected.append(RejectedLine(match.raw_text, reason))
            continue

        transactions.append(
            ParsedTransactionCandidate(
                id=candidate_id("item", match.raw_text),
                description=match.product_name,
                amount=amount,
                date=receipt_date,
                confidence=match.confidence,
                raw_text=match.raw_text,
                category_id=_category_id(match.product_name, categories, rules),
            )
        )

    if transactions:
        return LineItemExtraction(
            transactions=transactions,
            totals=totals,
            receipt_date=receipt_date,
            rejected=tuple(rejected),
        )

    fallback = _fallback_candidate(normalized, totals, receipt_date, categories, rules)
    return LineItemExtraction(
        transactions=[fallback] if fallback is not None else [],
        totals=totals,
        receipt_date=receipt_date,
        rejected=tuple(rejected),
        used_fallback=fallback is not None,
    )
