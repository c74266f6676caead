"""Prompt building and defensive parsing for AI-assisted receipt parsing."""

import json
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from dompet.domain.category import CategoryRef
from dompet.domain.receipt import ParsedTransactionCandidate
from dompet.receipt.category_matcher import match_category
from dompet.receipt.keyword_rules import ReceiptKeywordRules
from dompet.receipt.text_parser.common import candidate_id
from dompet.receipt.text_parser.line_items_parser import rejection_reason

AI_CONFIDENCE = 0.9

SYSTEM_PROMPT = "You are a receipt parsing assistant that returns concise JSON only."

RECEIPT_PROMPT = """Extract the purchased items from the receipt text below.
Return ONLY a JSON array of objects {{"description", "amount", "date", "category"}} and nothing else.

Rules:
- amount: integer in {currency} without separators (e.g. 25.000 -> 25000)
- date: ISO date (YYYY-MM-DD) if printed on the receipt, otherwise null
- category: one of the names below, or null
- skip store names, totals, taxes, payments, change and footer lines

Categories: {categories}

Receipt:
{text}
"""


def build_receipt_prompt(text: str, categories: Sequence[CategoryRef], currency: str = "IDR") -> str:
    names = ", ".join(c.name for c in categories) or "(none)"
    return RECEIPT_PROMPT.format(currency=currency, categories=names, text=text.strip())


def extract_json_array(text: str) -> list[Any]:
    """
    Extract a JSON array from free-form completion output.

    Tries the whole text first, then the substring from the first ``[`` to
    the last ``]``. Anything that does not parse to a list gives ``[]``.
    """
    if not text or not text.strip():
        return []
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, list):
        return parsed

    start = text.find("[")
    end = text.rfind("]")
    if start < 0 or end <= start:
        return []
    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return []
    return parsed if isinstance(parsed, list) else []


def _coerce_amount(raw: Any, rules: ReceiptKeywordRules) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(round(raw))
    if isinstance(raw, str):
        try:
            return rules.amount_format.parse(raw)
        except ValueError:
            return None
    return None


def _coerce_date(raw: Any, default: date) -> date:
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw.strip()[:10])
        except ValueError:
            return default
    return default


def _resolve_category(
    raw: Any,
    description: str,
    categories: Sequence[CategoryRef],
    rules: ReceiptKeywordRules,
) -> str | None:
    if isinstance(raw, str) and raw.strip():
        wanted = raw.strip().lower()
        for category in categories:
            if category.id == raw.strip() or category.name.lower() == wanted:
                return category.id
    category = match_category(description, categories, rules.families)
    return category.id if category is not None else None


def candidates_from_ai_items(
    items: Sequence[Any],
    categories: Sequence[CategoryRef],
    rules: ReceiptKeywordRules,
    default_date: date,
) -> list[ParsedTransactionCandidate]:
    """Convert parsed AI items into candidates, dropping anything malformed.

    Items pass the same denylist, name and amount checks as text-parsed lines.
    """
    candidates: list[ParsedTransactionCandidate] = []
    seen: set[str] = set()
    for item in items:
        if not isinstance(item, Mapping):
            continue
        description = str(item.get("description") or item.get("name") or "").strip()
        amount = _coerce_amount(item.get("amount"), rules)
        if amount is None or rejection_reason(description, amount, rules) is not None:
            continue

        raw_text = json.dumps(dict(item), ensure_ascii=False, sort_keys=True, default=str)
        if raw_text in seen:
            continue
        seen.add(raw_text)
        candidates.append(
            ParsedTransactionCandidate(
                id=candidate_id("ai", raw_text),
                description=description,
                amount=amount,
                date=_coerce_date(item.get("date"), default_date),
                confidence=AI_CONFIDENCE,
                raw_text=raw_text,
                category_id=_resolve_category(item.get("category"), description, categories, rules),
            )
        )
    return candidates
