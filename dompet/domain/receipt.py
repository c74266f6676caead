"""Data models for receipt parsing."""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True)
class ReceiptTotals:
    """Gross/discount/net figures printed on a receipt.

    All fields are optional; absence is a normal outcome of text matching.
    """

    gross_total: int | None = None
    discount: int | None = None
    net_total: int | None = None

    def reconciled(self) -> "ReceiptTotals":
        """Fill net_total as gross - discount when only the other two are known.

        A negative result is kept as-is; it signals bad OCR input rather than
        a value to correct.
        """
        if self.net_total is None and self.gross_total is not None and self.discount is not None:
            return ReceiptTotals(
                gross_total=self.gross_total,
                discount=self.discount,
                net_total=self.gross_total - self.discount,
            )
        return self

    def to_dict(self) -> dict[str, int | None]:
        return {
            "grossTotal": self.gross_total,
            "discount": self.discount,
            "netTotal": self.net_total,
        }


@dataclass(frozen=True)
class ParsedTransactionCandidate:
    """An unconfirmed transaction proposal extracted from receipt text."""

    id: str
    description: str
    amount: int  # smallest currency unit
    date: date
    confidence: float
    raw_text: str
    category_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "date": self.date.isoformat(),
            "categoryId": self.category_id,
            "confidence": self.confidence,
            "rawText": self.raw_text,
        }


DEFAULT_CURRENCY_MARKERS = ("Rp", "Rp.", "IDR")


@dataclass(frozen=True)
class AmountFormat:
    """How printed amounts are grouped and converted to minor units.

    The default fits Rupiah receipts: ``.`` or ``,`` group thousands and
    there are no minor digits, so ``25.000`` parses to ``25000``. For a
    decimal currency use e.g. ``AmountFormat(",", ".", 2)`` and ``1,234.50``
    parses to ``123450``.
    """

    thousands_separators: str = ".,"
    decimal_separator: str | None = None
    minor_digits: int = 0

    @property
    def pattern(self) -> str:
        """Regex fragment (no capture groups) matching one printed amount."""
        seps = re.escape(self.thousands_separators) if self.thousands_separators else ""
        grouped = rf"\d{{1,3}}(?:[{seps}]\d{{3}})+" if seps else r"\d+"
        body = rf"(?:{grouped}|\d+)"
        if self.decimal_separator and self.minor_digits > 0:
            body += rf"(?:{re.escape(self.decimal_separator)}\d{{1,{self.minor_digits}}})?"
        return body

    def parse(self, raw: str) -> int:
        """Return the amount in minor units; raises ValueError on garbage."""
        text = raw.strip()
        fraction = ""
        if self.decimal_separator and self.minor_digits > 0 and self.decimal_separator in text:
            text, fraction = text.rsplit(self.decimal_separator, 1)
        for sep in self.thousands_separators:
            text = text.replace(sep, "")
        if not text.isdigit() or (fraction and not fraction.isdigit()):
            raise ValueError(f"Not an amount: {raw!r}")
        if self.minor_digits <= 0:
            return int(text)
        fraction = fraction[: self.minor_digits].ljust(self.minor_digits, "0")
        return int(text) * 10**self.minor_digits + int(fraction)
