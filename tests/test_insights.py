"""Tests for insight generation."""

from __future__ import annotations

from datetime import date

from dompet.domain.advice import InsightType, Priority
from dompet.domain.aggregates import CategorySpend, GoalProgress, MonthlyCashflow, SpendingSnapshot
from dompet.domain.category import CategoryType
from dompet.domain.insights import generate_insights


def _snapshot(income: float, expense: float, **kwargs) -> SpendingSnapshot:
    return SpendingSnapshot(as_of=date(2024, 6, 30), window_days=30, income=income, expense=expense, **kwargs)


def _spend(name: str, amount: float) -> CategorySpend:
    return CategorySpend(category_id=name, name=name, type=CategoryType.EXPENSE, amount=amount)


def test_low_savings_rate_is_a_warning() -> None:
    [insight] = generate_insights(_snapshot(10_000_000, 9_500_000))

    assert insight.insight_type == InsightType.WARNING
    assert insight.priority == Priority.HIGH


def test_healthy_savings_rate_is_a_success() -> None:
    [insight] = generate_insights(_snapshot(10_000_000, 7_000_000))

    assert insight.insight_type == InsightType.SUCCESS
    assert insight.priority == Priority.LOW


def test_middle_savings_rate_and_no_income_are_quiet() -> None:
    assert generate_insights(_snapshot(10_000_000, 8_500_000)) == []
    assert generate_insights(_snapshot(0, 500_000)) == []


def test_dominant_category_is_a_tip() -> None:
    spends = (_spend("Transport", 600_000), _spend("Makanan", 300_000), _spend("Hiburan", 100_000))

    insights = generate_insights(_snapshot(0, 1_000_000, category_spend=spends))

    assert [(i.insight_type, i.title) for i in insights] == [(InsightType.TIP, "Transport dominates your spending")]


def test_first_active_goal_progress() -> None:
    nearly_done = GoalProgress("g1", "Laptop", 10_000_000, 8_500_000)
    just_started = GoalProgress("g2", "Rumah", 100_000_000, 5_000_000)

    [done] = generate_insights(_snapshot(0, 0, goals=(nearly_done, just_started)))
    [started] = generate_insights(_snapshot(0, 0, goals=(just_started, nearly_done)))

    assert (done.insight_type, done.priority) == (InsightType.SUCCESS, Priority.LOW)
    assert (started.insight_type, started.priority) == (InsightType.TIP, Priority.MEDIUM)


def test_expense_growth_between_last_two_months() -> None:
    rising = (MonthlyCashflow("2024-04", 0, 1_000_000), MonthlyCashflow("2024-05", 0, 1_200_000))
    flat = (MonthlyCashflow("2024-04", 0, 1_000_000), MonthlyCashflow("2024-05", 0, 1_050_000))

    [insight] = generate_insights(_snapshot(0, 0), monthly_buckets=rising)

    assert insight.title == "Spending is trending up"
    assert "20%" in insight.message
    assert generate_insights(_snapshot(0, 0), monthly_buckets=flat) == []
    assert generate_insights(_snapshot(0, 0, monthly=rising))[0].title == "Spending is trending up"


def test_insight_order_is_fixed() -> None:
    snapshot = _snapshot(
        10_000_000,
        9_500_000,
        category_spend=(_spend("Transport", 9_000_000), _spend("Makanan", 500_000)),
        goals=(GoalProgress("g1", "Laptop", 10_000_000, 9_000_000),),
        monthly=(MonthlyCashflow("2024-05", 0, 1_000_000), MonthlyCashflow("2024-06", 0, 2_000_000)),
    )

    types = [i.insight_type for i in generate_insights(snapshot)]

    assert types == [InsightType.WARNING, InsightType.TIP, InsightType.SUCCESS, InsightType.TIP]
