"""Recommendation, insight and cashflow workflows over a user's aggregates."""

from __future__ import annotations

from datetime import date, timedelta

from dompet.domain.advice import InsightRecord, RecommendationRecord
from dompet.domain.aggregates import MonthlyCashflow, SpendingSnapshot
from dompet.domain.category import CategoryType
from dompet.domain.insights import generate_insights
from dompet.domain.recommendations import RecommendationThresholds, synthesize_recommendations
from dompet.domain.stores import AggregationStore
from dompet.runtime import get_logger, load_recommendation_thresholds

logger = get_logger(__name__)

DEFAULT_WINDOW_DAYS = 30
DEFAULT_HISTORY_MONTHS = 6


def window_bounds(as_of: date, window_days: int) -> tuple[date, date]:
    """Inclusive (start, end) covering the ``window_days`` days ending on as_of."""
    if window_days <= 0:
        raise ValueError(f"window_days must be positive, got {window_days}")
    return as_of - timedelta(days=window_days - 1), as_of


def history_start(as_of: date, months: int) -> date:
    """First day of the month ``months - 1`` months before as_of."""
    index = as_of.year * 12 + (as_of.month - 1) - max(months - 1, 0)
    return date(index // 12, index % 12 + 1, 1)


def build_spending_snapshot(
    user_id: str,
    *,
    store: AggregationStore,
    window_days: int = DEFAULT_WINDOW_DAYS,
    as_of: date | None = None,
    history_months: int = DEFAULT_HISTORY_MONTHS,
) -> SpendingSnapshot:
    """Collect the aggregates the heuristics need for one user."""
    as_of = as_of or date.today()
    start, end = window_bounds(as_of, window_days)
    by_type = store.sum_by_type(user_id, start, end)
    return SpendingSnapshot(
        as_of=as_of,
        window_days=window_days,
        income=float(by_type.get(CategoryType.INCOME, 0.0)),
        expense=float(by_type.get(CategoryType.EXPENSE, 0.0)),
        category_spend=tuple(store.sum_by_category(user_id, start, end)),
        goals=tuple(store.active_goals(user_id)),
        monthly=tuple(store.sum_by_month(user_id, history_start(as_of, history_months), as_of)),
    )


def synthesize(
    user_id: str,
    *,
    store: AggregationStore,
    window_days: int = DEFAULT_WINDOW_DAYS,
    as_of: date | None = None,
    thresholds: RecommendationThresholds | None = None,
) -> list[RecommendationRecord]:
    """Recommendations for one user; repeated calls on unchanged data give the same list."""
    snapshot = build_spending_snapshot(user_id, store=store, window_days=window_days, as_of=as_of)
    records = synthesize_recommendations(snapshot, thresholds or load_recommendation_thresholds())
    logger.info(
        "Synthesized %d recommendations for user %s (income=%.0f, expense=%.0f, window=%dd)",
        len(records),
        user_id,
        snapshot.income,
        snapshot.expense,
        window_days,
    )
    return records


def build_insights(
    user_id: str,
    *,
    store: AggregationStore,
    window_days: int = DEFAULT_WINDOW_DAYS,
    as_of: date | None = None,
) -> list[InsightRecord]:
    snapshot = build_spending_snapshot(user_id, store=store, window_days=window_days, as_of=as_of)
    insights = generate_insights(snapshot)
    logger.info("Generated %d insights for user %s", len(insights), user_id)
    return insights


def monthly_cashflow(
    user_id: str,
    *,
    store: AggregationStore,
    months: int = DEFAULT_HISTORY_MONTHS,
    as_of: date | None = None,
) -> list[MonthlyCashflow]:
    """Income and expense per calendar month, oldest first."""
    as_of = as_of or date.today()
    return store.sum_by_month(user_id, history_start(as_of, months), as_of)
