"""Receipt text to transaction candidates: AI parse first, rule-based extraction as fallback."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal, Protocol

from dompet.domain.category import CategoryRef
from dompet.domain.receipt import ParsedTransactionCandidate, ReceiptTotals
from dompet.domain.stores import CategoryStore
from dompet.receipt.ai_response import build_receipt_prompt, candidates_from_ai_items, extract_json_array
from dompet.receipt.keyword_rules import ReceiptKeywordRules
from dompet.receipt.text_parser import extract_line_items, extract_totals, parse_receipt_date
from dompet.runtime import get_logger, load_receipt_keyword_rules
from dompet.runtime.ai_completion import AICompletionUnavailable

logger = get_logger(__name__)

ParseStrategy = Literal["ai", "rules", "failed"]
AIParseStatus = Literal["parsed", "disabled", "unavailable", "malformed", "empty"]


class CompletionClient(Protocol):
    def complete(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class AIParseOutcome:
    """Result of one AI parse attempt; only ``parsed`` carries candidates."""

    status: AIParseStatus
    transactions: list[ParsedTransactionCandidate] = field(default_factory=list)
    error: str | None = None


class AIReceiptParser:
    """Ask a completion service for receipt items and validate what comes back."""

    def __init__(self, completion: CompletionClient | None, currency: str = "IDR") -> None:
        self.completion = completion
        self.currency = currency

    def parse(
        self,
        text: str,
        categories: Sequence[CategoryRef],
        rules: ReceiptKeywordRules,
        default_date: date,
    ) -> AIParseOutcome:
        if self.completion is None:
            return AIParseOutcome(status="disabled")

        prompt = build_receipt_prompt(text, categories, currency=self.currency)
        try:
            content = self.completion.complete(prompt)
        except AICompletionUnavailable as exc:
            return AIParseOutcome(status="unavailable", error=str(exc))

        items = extract_json_array(content)
        if not items:
            status: AIParseStatus = "malformed" if content.strip() else "empty"
            return AIParseOutcome(status=status)

        candidates = candidates_from_ai_items(items, categories, rules, default_date)
        if not candidates:
            return AIParseOutcome(status="empty", error=f"{len(items)} item(s) failed validation")
        return AIParseOutcome(status="parsed", transactions=candidates)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parse_transactions(); ``strategy`` tells which path produced it."""

    transactions: list[ParsedTransactionCandidate]
    receipt_total: int | None = None
    receipt_date: date | None = None
    strategy: ParseStrategy = "rules"
    fallback_reason: str | None = None
    totals: ReceiptTotals = field(default_factory=ReceiptTotals)

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "receiptTotal": self.receipt_total,
            "receiptDate": self.receipt_date.isoformat() if self.receipt_date else None,
            "totals": self.totals.to_dict(),
            "strategy": self.strategy,
            "fallbackReason": self.fallback_reason,
        }


def _try_ai_parse(
    ai_parser: AIReceiptParser,
    text: str,
    categories: Sequence[CategoryRef],
    rules: ReceiptKeywordRules,
    default_date: date,
) -> AIParseOutcome:
    try:
        return ai_parser.parse(text, categories, rules, default_date)
    except Exception as exc:  # any AI-side failure falls through to the rules
        logger.exception("AI receipt parse failed")
        return AIParseOutcome(status="unavailable", error=str(exc))


def parse_transactions(
    text: str,
    user_id: str,
    *,
    category_store: CategoryStore,
    ai_parser: AIReceiptParser | None = None,
    config: ReceiptKeywordRules | None = None,
    today: date | None = None,
) -> ParseResult:
    """
    Parse receipt text into candidate transactions. Never raises.

    The AI parser is tried first when given; any non-``parsed`` outcome falls
    back to rule-based line-item extraction. Unexpected errors yield an empty
    ``failed`` result.
    """
    try:
        categories = category_store.list_categories(user_id)
        rules = config or load_receipt_keyword_rules()

        fallback_reason: str | None = None
        if ai_parser is not None and text.strip():
            receipt_date = parse_receipt_date(text, today=today)
            outcome = _try_ai_parse(ai_parser, text, categories, rules, receipt_date)
            if outcome.status == "parsed":
                totals = extract_totals(text, rules)
                logger.info("AI parse produced %d candidates for user %s", len(outcome.transactions), user_id)
                return ParseResult(
                    transactions=outcome.transactions,
                    receipt_total=totals.net_total,
                    receipt_date=receipt_date,
                    strategy="ai",
                    totals=totals,
                )
            fallback_reason = f"ai_{outcome.status}"
            if outcome.error:
                fallback_reason = f"{fallback_reason}: {outcome.error}"
            logger.info("Falling back to rule-based parsing (%s)", fallback_reason)

        extraction = extract_line_items(text, categories, config=rules, today=today)
        for rejected in extraction.rejected:
            logger.debug("Rejected line %r (%s)", rejected.raw_text, rejected.reason)
        logger.info(
            "Rule-based parse produced %d candidates (%d rejected lines, fallback=%s)",
            len(extraction.transactions),
            len(extraction.rejected),
            extraction.used_fallback,
        )

        return ParseResult(
            transactions=list(extraction.transactions or []),
            receipt_total=extraction.totals.net_total,
            receipt_date=extraction.receipt_date,
            strategy="rules",
            fallback_reason=fallback_reason,
            totals=extraction.totals,
        )
    except Exception:
        logger.exception("Receipt parsing failed for user %s", user_id)
        return ParseResult(transactions=[], strategy="failed", fallback_reason="internal_error")
