"""Tests for gross/discount/net total extraction."""

from __future__ import annotations

import pytest

from dompet.domain.receipt import ReceiptTotals
from dompet.receipt.keyword_rules import build_receipt_keyword_rules
from dompet.receipt.text_parser import extract_totals


def test_gross_and_discount_reconcile_to_net() -> None:
    totals = extract_totals("Harga Jual 150.000\nVoucher (20.000)")

    assert totals == ReceiptTotals(gross_total=150_000, discount=20_000, net_total=130_000)


def test_printed_net_is_not_overwritten_by_reconciliation() -> None:
    totals = extract_totals("Subtotal 150.000\nDiskon 20.000\nTotal 125.000")

    assert totals.gross_total == 150_000
    assert totals.discount == 20_000
    assert totals.net_total == 125_000


def test_negative_reconciliation_is_kept() -> None:
    totals = extract_totals("Gross 10.000\nPotongan 20.000")

    assert totals.net_total == -10_000


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("TOTAL Rp 30.000", 30_000),
        ("Total: Rp. 45.500", 45_500),
        ("JUMLAH 12.500", 12_500),
        ("Total   30.000", 30_000),
    ],
)
def test_net_total_labels_and_currency_markers(text: str, expected: int) -> None:
    assert extract_totals(text).net_total == expected


@pytest.mark.parametrize("label", ["SUB TOTAL", "Sub-Total", "Sub  Total", "sub - total"])
def test_sub_total_is_not_read_as_net_total(label: str) -> None:
    totals = extract_totals(f"{label} 80.000")

    assert totals.gross_total == 80_000
    assert totals.net_total is None


def test_spaced_sub_total_still_reconciles_with_discount() -> None:
    totals = extract_totals("Sub  Total 150.000\nVoucher (20.000)")

    assert totals == ReceiptTotals(gross_total=150_000, discount=20_000, net_total=130_000)


def test_percentage_is_never_taken_as_discount_amount() -> None:
    assert extract_totals("Diskon 10% 5.000").discount is None


def test_missing_totals_are_a_normal_result() -> None:
    assert extract_totals("Selamat datang\nTerima kasih") == ReceiptTotals()
    assert extract_totals("") == ReceiptTotals()


def test_decimal_amount_format_parses_minor_units() -> None:
    rules = build_receipt_keyword_rules(
        [{"amounts": {"thousands_separators": ",", "decimal_separator": ".", "minor_digits": 2}}]
    )

    totals = extract_totals("TOTAL 1,234.50", rules)

    assert totals.net_total == 123_450
