"""Short financial insights derived from a spending snapshot."""

from collections.abc import Sequence

from dompet.domain.advice import InsightRecord, InsightType, Priority, format_rupiah
from dompet.domain.aggregates import MonthlyCashflow, SpendingSnapshot

LOW_SAVINGS_RATE = 0.10
GOOD_SAVINGS_RATE = 0.20
TOP_CATEGORY_SHARE = 0.30
GOAL_NEARLY_DONE = 0.80
GOAL_JUST_STARTED = 0.20
EXPENSE_GROWTH = 1.10


def _savings_insight(snapshot: SpendingSnapshot) -> InsightRecord | None:
    rate = snapshot.savings_rate
    if rate is None:
        return None
    if rate < LOW_SAVINGS_RATE:
        return InsightRecord(
            insight_type=InsightType.WARNING,
            title="Low savings rate",
            message=f"You are saving only {rate:.1%} of your income. Aim for at least {GOOD_SAVINGS_RATE:.0%}.",
            priority=Priority.HIGH,
        )
    if rate >= GOOD_SAVINGS_RATE:
        return InsightRecord(
            insight_type=InsightType.SUCCESS,
            title="Healthy savings rate",
            message=f"Great job! You are saving {rate:.1%} of your income.",
            priority=Priority.LOW,
        )
    return None


def _top_category_insight(snapshot: SpendingSnapshot) -> InsightRecord | None:
    expenses = snapshot.expense_categories()
    total = sum(c.amount for c in expenses)
    if total <= 0:
        return None
    top = min(expenses, key=lambda c: (-c.amount, c.name))
    share = top.amount / total
    if share <= TOP_CATEGORY_SHARE:
        return None
    return InsightRecord(
        insight_type=InsightType.TIP,
        title=f"{top.name} dominates your spending",
        message=(
            f"{top.name} accounts for {share:.0%} of your expenses ({format_rupiah(top.amount)}). "
            "Review it for possible savings."
        ),
        priority=Priority.MEDIUM,
    )


def _goal_insight(snapshot: SpendingSnapshot) -> InsightRecord | None:
    active = [g for g in snapshot.goals if g.is_active]
    if not active:
        return None
    goal = active[0]
    progress = goal.progress
    if progress >= GOAL_NEARLY_DONE:
        return InsightRecord(
            insight_type=InsightType.SUCCESS,
            title=f"Almost there: {goal.name}",
            message=f"You have reached {progress:.0%} of your '{goal.name}' goal.",
            priority=Priority.LOW,
        )
    if progress < GOAL_JUST_STARTED:
        return InsightRecord(
            insight_type=InsightType.TIP,
            title=f"Get started on {goal.name}",
            message=(
                f"Your '{goal.name}' goal is at {progress:.0%}. "
                f"A small monthly transfer helps cover the remaining {format_rupiah(goal.remaining)}."
            ),
            priority=Priority.MEDIUM,
        )
    return None


def _trend_insight(monthly: Sequence[MonthlyCashflow]) -> InsightRecord | None:
    if len(monthly) < 2:
        return None
    ordered = sorted(monthly, key=lambda m: m.month)
    previous, latest = ordered[-2], ordered[-1]
    if previous.expense <= 0 or latest.expense <= previous.expense * EXPENSE_GROWTH:
        return None
    growth = latest.expense / previous.expense - 1
    return InsightRecord(
        insight_type=InsightType.TIP,
        title="Spending is trending up",
        message=(
            f"Expenses in {latest.month} were {growth:.0%} higher than in {previous.month} "
            f"({format_rupiah(latest.expense)} vs {format_rupiah(previous.expense)})."
        ),
        priority=Priority.MEDIUM,
    )


def generate_insights(
    snapshot: SpendingSnapshot,
    monthly_buckets: Sequence[MonthlyCashflow] | None = None,
) -> list[InsightRecord]:
    """Return insights in a fixed order: savings, top category, goal, trend."""
    monthly = snapshot.monthly if monthly_buckets is None else monthly_buckets
    candidates = (
        _savings_insight(snapshot),
        _top_category_insight(snapshot),
        _goal_insight(snapshot),
        _trend_insight(monthly),
    )
    return [insight for insight in candidates if insight is not None]
