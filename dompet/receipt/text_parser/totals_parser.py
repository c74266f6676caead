"""Gross/discount/net total extraction from whole receipt text."""

import re
from dataclasses import dataclass
from functools import lru_cache

from dompet.domain.receipt import AmountFormat, ReceiptTotals
from dompet.receipt.keyword_rules import ReceiptKeywordRules, get_default_receipt_rules

from .common import normalize_receipt_text

# Label followed directly by the amount, optionally with a colon
_LABEL_SEP = r"\s*:?\s*"

GROSS_LABELS = (r"harga\s+jual", r"\bgross", r"\bsub[\s\-]*total")
NET_LABELS = (r"\btotal", r"\bjumlah", r"\bamount", r"\bnet")
# Discount labels may carry extra words ("Voucher Member") and a parenthesized value.
DISCOUNT_LABELS = (r"\bvoucher", r"\bdiskon", r"\bdiscount", r"\bpotongan", r"\banda\s+hemat", r"\byou\s+saved")

# A net label directly after "sub" (any run of spaces or dashes) is a subtotal.
_SUB_PREFIX = re.compile(r"sub[\s\-]*$", re.IGNORECASE)


@dataclass(frozen=True)
class TotalsPatterns:
    gross: tuple[re.Pattern[str], ...]
    discount: tuple[re.Pattern[str], ...]
    net: tuple[re.Pattern[str], ...]


@lru_cache(maxsize=8)
def build_totals_patterns(amount_format: AmountFormat) -> TotalsPatterns:
    amount = rf"({amount_format.pattern})(?![\d%])"
    flags = re.IGNORECASE

    def direct(label: str) -> re.Pattern[str]:
        return re.compile(rf"{label}{_LABEL_SEP}{amount}", flags)

    def discounted(label: str) -> re.Pattern[str]:
        return re.compile(rf"{label}[^:\n\d]*?:?[ \t]*\(?[ \t]*{amount}", flags)

    return TotalsPatterns(
        gross=tuple(direct(label) for label in GROSS_LABELS),
        discount=tuple(discounted(label) for label in DISCOUNT_LABELS),
        net=tuple(direct(label) for label in NET_LABELS),
    )


def _follows_sub(text: str, start: int) -> bool:
    return _SUB_PREFIX.search(text[max(start - 16, 0) : start]) is not None


def _first_amount(
    text: str,
    patterns: tuple[re.Pattern[str], ...],
    amount_format: AmountFormat,
    skip_subtotals: bool = False,
) -> int | None:
    """Return the amount from the first pattern (in family order) that matches."""
    for pattern in patterns:
        for match in pattern.finditer(text):
            if skip_subtotals and _follows_sub(text, match.start()):
                continue
            try:
                return amount_format.parse(match.group(1))
            except ValueError:
                continue
    return None


def extract_totals(text: str, config: ReceiptKeywordRules | None = None) -> ReceiptTotals:
    """
    Extract receipt totals from the full text.

    Each family (gross, discount, net) is searched independently; absence of
    any figure is a normal result. Net is derived from gross and discount
    only when it was not printed.
    """
    rules = config or get_default_receipt_rules()
    normalized = normalize_receipt_text(text, rules.currency_markers)
    if not normalized.strip():
        return ReceiptTotals()

    fmt = rules.amount_format
    patterns = build_totals_patterns(fmt)
    totals = ReceiptTotals(
        gross_total=_first_amount(normalized, patterns.gross, fmt),
        discount=_first_amount(normalized, patterns.discount, fmt),
        net_total=_first_amount(normalized, patterns.net, fmt, skip_subtotals=True),
    )
    return totals.reconciled()
