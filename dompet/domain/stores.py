"""Collaborator protocols for category lookup, aggregation and batch writes."""

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Protocol

from dompet.domain.aggregates import CategorySpend, GoalProgress, MonthlyCashflow
from dompet.domain.batch import TransactionDraft
from dompet.domain.category import CategoryRef, CategoryType


class CategoryStore(Protocol):
    def list_categories(self, user_id: str) -> list[CategoryRef]: ...


class AggregationStore(Protocol):
    """Read-only sums over a user's transactions; date ranges are inclusive."""

    def sum_by_category(self, user_id: str, start: date, end: date) -> list[CategorySpend]: ...

    def sum_by_type(self, user_id: str, start: date, end: date) -> dict[CategoryType, float]: ...

    def sum_by_month(self, user_id: str, start: date, end: date) -> list[MonthlyCashflow]: ...

    def active_goals(self, user_id: str) -> list[GoalProgress]: ...


class BatchStore(Protocol):
    def apply_batch(
        self,
        user_id: str,
        drafts: Sequence[TransactionDraft],
        goal_increments: Mapping[str, float],
        description: str | None = None,
    ) -> list[str]:
        """Write all drafts and goal increments as one unit; return new transaction ids."""
        ...
