"""Recommendation and insight records produced by the advice heuristics."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class RecommendationType(StrEnum):
    SPENDING_OPTIMIZATION = "spending_optimization"
    SAVINGS_IMPROVEMENT = "savings_improvement"
    GOAL_ACCELERATION = "goal_acceleration"
    BUDGET_ADVICE = "budget_advice"
    INVESTMENT_ADVICE = "investment_advice"


class InsightType(StrEnum):
    WARNING = "warning"
    SUCCESS = "success"
    TIP = "tip"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


@dataclass(frozen=True)
class RecommendationRecord:
    """One actionable recommendation; callers decide persistence and dedup."""

    type: RecommendationType
    title: str
    message: str
    priority: Priority
    category: str | None = None
    amount: float | None = None
    suggested_cut_percent: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.type),
            "title": self.title,
            "message": self.message,
            "priority": str(self.priority),
            "category": self.category,
            "amount": self.amount,
            "suggestedCutPercent": self.suggested_cut_percent,
        }


@dataclass(frozen=True)
class InsightRecord:
    """A short observation about the user's finances."""

    insight_type: InsightType
    title: str
    message: str
    priority: Priority

    def to_dict(self) -> dict[str, Any]:
        return {
            "insightType": str(self.insight_type),
            "title": self.title,
            "message": self.message,
            "priority": str(self.priority),
        }


def format_rupiah(amount: float) -> str:
    """Format an amount the Indonesian way, e.g. ``Rp 2.500.000``."""
    rounded = int(round(amount))
    sign = "-" if rounded < 0 else ""
    return f"{sign}Rp {abs(rounded):,}".replace(",", ".")
