"""CLI wiring tests: arguments in, JSON on stdout."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dompet.cli.main import main


@pytest.fixture
def csv_files(tmp_path: Path) -> dict[str, Path]:
    categories = tmp_path / "categories.csv"
    categories.write_text(
        "id,name,type\ncat_salary,Gaji,income\ncat_transport,Transportation,expense\ncat_food,Makanan,expense\n",
        encoding="utf-8",
    )
    transactions = tmp_path / "transactions.csv"
    transactions.write_text(
        "category_id,amount,date,description\n"
        "cat_salary,10000000,2024-06-01,Gaji\n"
        "cat_transport,2500000,2024-06-10,Bensin\n"
        "cat_food,1000000,2024-06-11,Belanja dapur\n"
        "cat_food,800000,2024-05-11,Belanja dapur\n",
        encoding="utf-8",
    )
    goals = tmp_path / "goals.csv"
    goals.write_text(
        "id,name,target_amount,current_amount,target_date,is_active\ng1,Laptop,10000000,9000000,,true\n",
        encoding="utf-8",
    )
    return {"categories": categories, "transactions": transactions, "goals": goals}


def _store_args(files: dict[str, Path]) -> list[str]:
    return ["--categories", str(files["categories"]), "--transactions", str(files["transactions"])]


def test_no_command_prints_help() -> None:
    assert main([]) == 1


def test_recommend_prints_json(csv_files: dict[str, Path], capsys) -> None:
    code = main(["recommend", *_store_args(csv_files), "--as-of", "2024-06-30"])

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload[0]["category"] == "Transportation"
    assert payload[0]["priority"] == "high"
    assert payload[0]["suggestedCutPercent"] == 15


def test_insights_prints_json(csv_files: dict[str, Path], capsys) -> None:
    code = main(
        ["insights", *_store_args(csv_files), "--goals", str(csv_files["goals"]), "--as-of", "2024-06-30"]
    )

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert {"insightType", "title", "message", "priority"} <= set(payload[0])
    assert "Almost there: Laptop" in [i["title"] for i in payload]


def test_report_prints_monthly_buckets(csv_files: dict[str, Path], capsys) -> None:
    code = main(["report", *_store_args(csv_files), "--as-of", "2024-06-30", "--months", "2"])

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload == [
        {"month": "2024-05", "income": 0.0, "expense": 800000.0, "balance": -800000.0},
        {"month": "2024-06", "income": 10000000.0, "expense": 3500000.0, "balance": 6500000.0},
    ]


def test_parse_text_receipt(csv_files: dict[str, Path], tmp_path: Path, capsys) -> None:
    receipt = tmp_path / "receipt.txt"
    receipt.write_text("Nasi Goreng Spesial   25.000\nEs Teh Manis   5.000\nTotal   30.000\n", encoding="utf-8")

    code = main(["parse", str(receipt), "--categories", str(csv_files["categories"]), "--no-ai"])

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["strategy"] == "rules"
    assert payload["receiptTotal"] == 30_000
    assert [(t["description"], t["amount"], t["categoryId"]) for t in payload["transactions"]] == [
        ("Nasi Goreng Spesial", 25_000, "cat_food"),
        ("Es Teh Manis", 5_000, "cat_transport"),
    ]


def test_parse_missing_file(tmp_path: Path, capsys) -> None:
    assert main(["parse", str(tmp_path / "missing.txt")]) == 1
    assert "file not found" in capsys.readouterr().out


def test_invalid_as_of_is_rejected(csv_files: dict[str, Path]) -> None:
    with pytest.raises(SystemExit):
        main(["report", *_store_args(csv_files), "--as-of", "30/06/2024"])
