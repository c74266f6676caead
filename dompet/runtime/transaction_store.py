"""In-memory transaction store backed by pandas DataFrames.

Implements the category, aggregation and batch store protocols so the CLI
and tests can run the full pipeline from CSV files or plain records.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd

from dompet.domain.aggregates import CategorySpend, GoalProgress, MonthlyCashflow
from dompet.domain.batch import TransactionDraft
from dompet.domain.category import CategoryRef, CategoryType
from dompet.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_USER_ID = "local"

CATEGORY_COLUMNS = ["id", "user_id", "name", "type"]
TRANSACTION_COLUMNS = ["id", "user_id", "category_id", "amount", "date", "description", "currency"]
GOAL_COLUMNS = ["id", "user_id", "name", "target_amount", "current_amount", "target_date", "is_active"]

_TRUE_STRINGS = {"1", "true", "yes", "y"}


def _frame(records: Iterable[Mapping[str, Any]] | pd.DataFrame | None, columns: list[str]) -> pd.DataFrame:
    df = records.copy() if isinstance(records, pd.DataFrame) else pd.DataFrame(list(records or []))
    for column in columns:
        if column not in df.columns:
            df[column] = None
    return df[columns]


def _text_or_none(value: Any) -> str | None:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any) -> bool:
    """Parse an ``is_active`` cell; blank means active."""
    text = _text_or_none(value)
    if text is None:
        return True
    if isinstance(value, str):
        return text.lower() in _TRUE_STRINGS
    return bool(value)


class DataFrameTransactionStore:
    """Categories, transactions and goals held as three DataFrames.

    Rows without a ``user_id`` belong to DEFAULT_USER_ID.
    """

    def __init__(
        self,
        categories: Iterable[Mapping[str, Any]] | pd.DataFrame | None = None,
        transactions: Iterable[Mapping[str, Any]] | pd.DataFrame | None = None,
        goals: Iterable[Mapping[str, Any]] | pd.DataFrame | None = None,
    ) -> None:
        self.categories = self._prepare_categories(_frame(categories, CATEGORY_COLUMNS))
        self.transactions = self._prepare_transactions(_frame(transactions, TRANSACTION_COLUMNS))
        self.goals = self._prepare_goals(_frame(goals, GOAL_COLUMNS))

    @classmethod
    def from_records(
        cls,
        categories: Iterable[Mapping[str, Any]] | None = None,
        transactions: Iterable[Mapping[str, Any]] | None = None,
        goals: Iterable[Mapping[str, Any]] | None = None,
    ) -> DataFrameTransactionStore:
        return cls(categories=categories, transactions=transactions, goals=goals)

    @classmethod
    def from_csv(
        cls,
        categories_path: Path | str,
        transactions_path: Path | str | None = None,
        goals_path: Path | str | None = None,
    ) -> DataFrameTransactionStore:
        """Load CSV files; every column is read as text and converted here."""

        def read(path: Path | str | None) -> pd.DataFrame | None:
            if path is None:
                return None
            return pd.read_csv(path, dtype=str, keep_default_na=False)

        store = cls(categories=read(categories_path), transactions=read(transactions_path), goals=read(goals_path))
        logger.info(
            "Loaded %d categories, %d transactions, %d goals",
            len(store.categories),
            len(store.transactions),
            len(store.goals),
        )
        return store

    # --- Normalization ---
    @staticmethod
    def _fill_user(df: pd.DataFrame) -> pd.DataFrame:
        df["user_id"] = df["user_id"].map(lambda v: _text_or_none(v) or DEFAULT_USER_ID)
        return df

    def _prepare_categories(self, df: pd.DataFrame) -> pd.DataFrame:
        df = self._fill_user(df)
        df["id"] = df["id"].astype(str)
        df["name"] = df["name"].fillna("").astype(str)
        df["type"] = df["type"].map(lambda v: (_text_or_none(v) or CategoryType.EXPENSE.value).lower())
        return df.reset_index(drop=True)

    def _prepare_transactions(self, df: pd.DataFrame) -> pd.DataFrame:
        df = self._fill_user(df)
        df["id"] = df["id"].map(lambda v: _text_or_none(v) or f"txn_{uuid.uuid4().hex[:12]}")
        df["category_id"] = df["category_id"].map(_text_or_none)
        df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0).astype(float)
        df["date"] = pd.to_datetime(df["date"], errors="coerce")
        df["description"] = df["description"].fillna("").astype(str)
        df["currency"] = df["currency"].map(lambda v: _text_or_none(v) or "IDR")
        dropped = int(df["date"].isna().sum())
        if dropped:
            logger.warning("Dropping %d transaction rows without a valid date", dropped)
        return df[df["date"].notna()].reset_index(drop=True)

    def _prepare_goals(self, df: pd.DataFrame) -> pd.DataFrame:
        df = self._fill_user(df)
        df["id"] = df["id"].astype(str)
        df["name"] = df["name"].fillna("").astype(str)
        df["target_amount"] = pd.to_numeric(df["target_amount"], errors="coerce").fillna(0.0).astype(float)
        df["current_amount"] = pd.to_numeric(df["current_amount"], errors="coerce").fillna(0.0).astype(float)
        df["target_date"] = pd.to_datetime(df["target_date"], errors="coerce")
        df["is_active"] = df["is_active"].map(_as_bool).astype(bool)
        return df.reset_index(drop=True)

    # --- Category store ---
    def list_categories(self, user_id: str) -> list[CategoryRef]:
        rows = self.categories[self.categories["user_id"] == user_id]
        return [
            CategoryRef.from_mapping({"id": row.id, "name": row.name, "type": row.type})
            for row in rows.itertuples(index=False)
        ]

    # --- Aggregation store ---
    def _window(self, user_id: str, start: date, end: date) -> pd.DataFrame:
        txns = self.transactions
        mask = (
            (txns["user_id"] == user_id)
            & (txns["date"] >= pd.Timestamp(start))
            & (txns["date"] <= pd.Timestamp(end))
        )
        window = txns[mask]
        cats = self.categories[self.categories["user_id"] == user_id][["id", "name", "type"]]
        return window.merge(cats, how="left", left_on="category_id", right_on="id", suffixes=("", "_category"))

    def sum_by_category(self, user_id: str, start: date, end: date) -> list[CategorySpend]:
        window = self._window(user_id, start, end)
        if window.empty:
            return []
        window = window.assign(
            name=window["name"].fillna("Uncategorized"),
            type=window["type"].fillna(CategoryType.EXPENSE.value),
        )
        grouped = window.groupby(["category_id", "name", "type"], dropna=False)["amount"].sum().reset_index()
        return [
            CategorySpend(
                category_id=None if pd.isna(row.category_id) else str(row.category_id),
                name=str(row.name),
                type=CategoryType(row.type),
                amount=float(row.amount),
            )
            for row in grouped.itertuples(index=False)
        ]

    def sum_by_type(self, user_id: str, start: date, end: date) -> dict[CategoryType, float]:
        totals = {category_type: 0.0 for category_type in CategoryType}
        for spend in self.sum_by_category(user_id, start, end):
            totals[spend.type] += spend.amount
        return totals

    def sum_by_month(self, user_id: str, start: date, end: date) -> list[MonthlyCashflow]:
        window = self._window(user_id, start, end)
        if window.empty:
            return []
        window = window.assign(
            month=window["date"].dt.to_period("M").astype(str),
            type=window["type"].fillna(CategoryType.EXPENSE.value),
        )
        pivot = window.pivot_table(index="month", columns="type", values="amount", aggfunc="sum", fill_value=0.0)
        return [
            MonthlyCashflow(
                month=str(month),
                income=float(row.get(CategoryType.INCOME.value, 0.0)),
                expense=float(row.get(CategoryType.EXPENSE.value, 0.0)),
            )
            for month, row in pivot.sort_index().iterrows()
        ]

    def active_goals(self, user_id: str) -> list[GoalProgress]:
        goals = self.goals[(self.goals["user_id"] == user_id) & self.goals["is_active"]]
        return [
            GoalProgress(
                id=str(row.id),
                name=str(row.name),
                target_amount=float(row.target_amount),
                current_amount=float(row.current_amount),
                target_date=None if pd.isna(row.target_date) else row.target_date.date(),
                is_active=True,
            )
            for row in goals.itertuples(index=False)
        ]

    # --- Batch store ---
    def apply_batch(
        self,
        user_id: str,
        drafts: Sequence[TransactionDraft],
        goal_increments: Mapping[str, float],
        description: str | None = None,
    ) -> list[str]:
        """Append drafts and increment goals; both frames are swapped in together."""
        unknown = set(goal_increments) - set(self.goals.loc[self.goals["user_id"] == user_id, "id"])
        if unknown:
            raise KeyError(f"Unknown goals for user {user_id}: {sorted(unknown)}")

        ids = [f"txn_{uuid.uuid4().hex[:12]}" for _ in drafts]
        new_rows = pd.DataFrame(
            [
                {
                    "id": txn_id,
                    "user_id": user_id,
                    "category_id": draft.category_id,
                    "amount": float(draft.amount),
                    "date": pd.Timestamp(draft.date),
                    "description": draft.description or description or "",
                    "currency": draft.currency,
                }
                for txn_id, draft in zip(ids, drafts, strict=True)
            ],
            columns=TRANSACTION_COLUMNS,
        )
        transactions = pd.concat([self.transactions, new_rows], ignore_index=True) if ids else self.transactions

        goals = self.goals.copy()
        for goal_id, increment in goal_increments.items():
            mask = (goals["id"] == goal_id) & (goals["user_id"] == user_id)
            goals.loc[mask, "current_amount"] = goals.loc[mask, "current_amount"] + float(increment)

        self.transactions, self.goals = transactions, goals
        logger.info("Applied batch of %d transactions and %d goal increments", len(ids), len(goal_increments))
        return ids
