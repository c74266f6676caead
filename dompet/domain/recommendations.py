"""Rule-based recommendation synthesis over aggregated spending.

Every recommendation is derived from one ratio compared against banded
thresholds, so priority moves monotonically with the ratio:

- essential categories (food/groceries) are checked against a floor and
  flagged when the user spends *less* than the floor;
- other categories are checked against a share of monthly income;
- the savings rate is compared with a target rate;
- goals due within the horizon are turned into a required monthly amount.

The thresholds are empirically chosen; they live in RecommendationThresholds
so a project can override them from ``recommendation_rules.toml``.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from dompet.domain.advice import Priority, RecommendationRecord, RecommendationType, format_rupiah
from dompet.domain.aggregates import CategorySpend, GoalProgress, SpendingSnapshot
from dompet.domain.keywords import contains_any


@dataclass(frozen=True)
class SpendBand:
    """Lower bound of a band plus the priority and cut it implies."""

    min_value: float
    priority: Priority
    cut_percent: int


DEFAULT_RATIO_BANDS: tuple[SpendBand, ...] = (
    SpendBand(0.20, Priority.HIGH, 15),
    SpendBand(0.10, Priority.MEDIUM, 10),
    SpendBand(0.03, Priority.LOW, 5),
)

# Used instead of ratio bands when there is no income to divide by.
DEFAULT_ABSOLUTE_BANDS: tuple[SpendBand, ...] = (
    SpendBand(5_000_000, Priority.HIGH, 15),
    SpendBand(2_000_000, Priority.MEDIUM, 10),
    SpendBand(500_000, Priority.LOW, 5),
)


@dataclass(frozen=True)
class RecommendationThresholds:
    essential_keywords: tuple[str, ...] = ("food", "makanan", "grocer", "sembako", "dapur")
    essential_floor_ratio: float = 0.08
    essential_absolute_minimum: float = 300_000
    deficit_high: float = 0.30
    deficit_low: float = 0.10
    ratio_bands: tuple[SpendBand, ...] = DEFAULT_RATIO_BANDS
    absolute_bands: tuple[SpendBand, ...] = DEFAULT_ABSOLUTE_BANDS
    savings_target: float = 0.20
    savings_gap_high: float = 0.10
    savings_gap_medium: float = 0.05
    goal_horizon_months: int = 12
    goal_high_ratio: float = 0.20


def _parse_bands(raw: Any, value_key: str) -> tuple[SpendBand, ...] | None:
    if not isinstance(raw, list):
        return None
    bands = []
    for entry in raw:
        if not isinstance(entry, Mapping) or value_key not in entry:
            continue
        bands.append(
            SpendBand(
                min_value=float(entry[value_key]),
                priority=Priority(str(entry.get("priority", "low")).lower()),
                cut_percent=int(entry.get("cut_percent", 0)),
            )
        )
    if not bands:
        return None
    return tuple(sorted(bands, key=lambda b: b.min_value, reverse=True))


def build_recommendation_thresholds(config: Mapping[str, Any] | None = None) -> RecommendationThresholds:
    """Apply an in-memory (TOML-shaped) override on top of the defaults."""
    thresholds = RecommendationThresholds()
    if not config:
        return thresholds

    updates: dict[str, Any] = {}

    essential = config.get("essential", {})
    if isinstance(essential, Mapping):
        keywords = essential.get("keywords")
        if isinstance(keywords, list):
            updates["essential_keywords"] = tuple(str(k).strip() for k in keywords if str(k).strip())
        for key, attr in (
            ("floor_ratio", "essential_floor_ratio"),
            ("absolute_minimum", "essential_absolute_minimum"),
            ("deficit_high", "deficit_high"),
            ("deficit_low", "deficit_low"),
        ):
            if key in essential:
                updates[attr] = float(essential[key])

    ratio_bands = _parse_bands(config.get("ratio_bands"), "min_ratio")
    if ratio_bands:
        updates["ratio_bands"] = ratio_bands
    absolute_bands = _parse_bands(config.get("absolute_bands"), "min_amount")
    if absolute_bands:
        updates["absolute_bands"] = absolute_bands

    savings = config.get("savings", {})
    if isinstance(savings, Mapping):
        for key, attr in (
            ("target", "savings_target"),
            ("gap_high", "savings_gap_high"),
            ("gap_medium", "savings_gap_medium"),
        ):
            if key in savings:
                updates[attr] = float(savings[key])

    goals = config.get("goals", {})
    if isinstance(goals, Mapping):
        if "horizon_months" in goals:
            updates["goal_horizon_months"] = int(goals["horizon_months"])
        if "high_ratio" in goals:
            updates["goal_high_ratio"] = float(goals["high_ratio"])

    return replace(thresholds, **updates)


def _band_for(value: float, bands: Sequence[SpendBand]) -> SpendBand | None:
    for band in bands:
        if value >= band.min_value:
            return band
    return None


def is_essential_category(name: str, thresholds: RecommendationThresholds) -> bool:
    return contains_any(name, thresholds.essential_keywords)


def deficit_priority(deficit: float, thresholds: RecommendationThresholds) -> Priority:
    """Map an under-spend fraction of the floor to a priority."""
    if deficit >= thresholds.deficit_high:
        return Priority.HIGH
    if deficit <= thresholds.deficit_low:
        return Priority.LOW
    return Priority.MEDIUM


def savings_gap_priority(gap: float, thresholds: RecommendationThresholds) -> Priority:
    if gap >= thresholds.savings_gap_high:
        return Priority.HIGH
    if gap >= thresholds.savings_gap_medium:
        return Priority.MEDIUM
    return Priority.LOW


def _essential_recommendation(
    spend: CategorySpend,
    monthly_spend: float,
    snapshot: SpendingSnapshot,
    thresholds: RecommendationThresholds,
) -> RecommendationRecord | None:
    baseline = max(thresholds.essential_absolute_minimum, snapshot.monthly_income * thresholds.essential_floor_ratio)
    if baseline <= 0 or monthly_spend >= baseline:
        return None

    shortfall = baseline - monthly_spend
    deficit = shortfall / baseline
    return RecommendationRecord(
        type=RecommendationType.BUDGET_ADVICE,
        title=f"Increase your {spend.name} budget",
        message=(
            f"You spent {format_rupiah(monthly_spend)} on {spend.name} per month, "
            f"{deficit:.0%} below the recommended minimum of {format_rupiah(baseline)}. "
            f"Consider allocating about {format_rupiah(shortfall)} more so essential needs stay covered."
        ),
        priority=deficit_priority(deficit, thresholds),
        category=spend.name,
        amount=round(shortfall, 2),
    )


def _spending_recommendation(
    spend: CategorySpend,
    monthly_spend: float,
    snapshot: SpendingSnapshot,
    thresholds: RecommendationThresholds,
) -> RecommendationRecord | None:
    income = snapshot.monthly_income
    if income > 0:
        ratio = monthly_spend / income
        band = _band_for(ratio, thresholds.ratio_bands)
        share = f"{ratio:.1%} of your monthly income ({format_rupiah(monthly_spend)})"
    else:
        band = _band_for(monthly_spend, thresholds.absolute_bands)
        share = f"{format_rupiah(monthly_spend)} per month with no recorded income"

    # Below the lowest band the category is not significant enough to mention.
    if band is None:
        return None

    saving = monthly_spend * band.cut_percent / 100
    return RecommendationRecord(
        type=RecommendationType.SPENDING_OPTIMIZATION,
        title=f"Reduce spending on {spend.name} by {band.cut_percent}%",
        message=(
            f"{spend.name} took {share}. "
            f"Cutting it by {band.cut_percent}% would free up about {format_rupiah(saving)} per month."
        ),
        priority=band.priority,
        category=spend.name,
        amount=round(saving, 2),
        suggested_cut_percent=band.cut_percent,
    )


def category_recommendations(
    snapshot: SpendingSnapshot, thresholds: RecommendationThresholds
) -> list[RecommendationRecord]:
    records: list[RecommendationRecord] = []
    ordered = sorted(snapshot.expense_categories(), key=lambda c: (-c.amount, c.name))
    for spend in ordered:
        monthly_spend = spend.amount * snapshot.month_scale
        if is_essential_category(spend.name, thresholds):
            record = _essential_recommendation(spend, monthly_spend, snapshot, thresholds)
        else:
            record = _spending_recommendation(spend, monthly_spend, snapshot, thresholds)
        if record is not None:
            records.append(record)
    return records


def savings_recommendations(
    snapshot: SpendingSnapshot, thresholds: RecommendationThresholds
) -> list[RecommendationRecord]:
    rate = snapshot.savings_rate
    if rate is None:
        return []

    if rate >= thresholds.savings_target:
        surplus = snapshot.monthly_income - snapshot.monthly_expense
        return [
            RecommendationRecord(
                type=RecommendationType.INVESTMENT_ADVICE,
                title="Put your surplus to work",
                message=(
                    f"You are saving {rate:.1%} of your income. Once your emergency fund is in place, "
                    f"consider investing part of the {format_rupiah(surplus)} monthly surplus."
                ),
                priority=Priority.LOW,
                amount=round(surplus, 2),
            )
        ]

    gap = thresholds.savings_target - rate
    gap_amount = gap * snapshot.monthly_income
    return [
        RecommendationRecord(
            type=RecommendationType.SAVINGS_IMPROVEMENT,
            title="Raise your savings rate",
            message=(
                f"Your savings rate is {rate:.1%}, below the {thresholds.savings_target:.0%} target. "
                f"Setting aside an extra {format_rupiah(gap_amount)} per month closes the gap."
            ),
            priority=savings_gap_priority(gap, thresholds),
            amount=round(gap_amount, 2),
        )
    ]


def months_until(start: date, end: date) -> int:
    """Whole months from start to end, counting a started month as one."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day > start.day:
        months += 1
    return months


def _goal_recommendation(
    goal: GoalProgress, snapshot: SpendingSnapshot, thresholds: RecommendationThresholds
) -> RecommendationRecord | None:
    if not goal.is_active or goal.target_date is None or goal.remaining <= 0:
        return None

    months = months_until(snapshot.as_of, goal.target_date)
    if months > thresholds.goal_horizon_months:
        return None
    # Overdue goals need the whole remainder now.
    months = max(1, months)

    required = goal.remaining / months
    income = snapshot.monthly_income
    if income <= 0 or required / income >= thresholds.goal_high_ratio:
        priority = Priority.HIGH
    else:
        priority = Priority.MEDIUM

    return RecommendationRecord(
        type=RecommendationType.GOAL_ACCELERATION,
        title=f"Speed up your goal '{goal.name}'",
        message=(
            f"{format_rupiah(goal.remaining)} is still needed for '{goal.name}'. "
            f"Save {format_rupiah(required)} per month for the next {months} month(s) "
            f"to reach it by {goal.target_date.isoformat()}."
        ),
        priority=priority,
        category=goal.name,
        amount=round(required, 2),
    )


def goal_recommendations(
    snapshot: SpendingSnapshot, thresholds: RecommendationThresholds
) -> list[RecommendationRecord]:
    records = []
    for goal in sorted(snapshot.goals, key=lambda g: (g.target_date or date.max, g.name)):
        record = _goal_recommendation(goal, snapshot, thresholds)
        if record is not None:
            records.append(record)
    return records


def synthesize_recommendations(
    snapshot: SpendingSnapshot,
    thresholds: RecommendationThresholds | None = None,
) -> list[RecommendationRecord]:
    """Build all recommendations for a snapshot.

    Sections are independent and additive; nothing is deduplicated or
    truncated here. The same snapshot always yields the same list.
    """
    thresholds = thresholds or RecommendationThresholds()
    return [
        *category_recommendations(snapshot, thresholds),
        *savings_recommendations(snapshot, thresholds),
        *goal_recommendations(snapshot, thresholds),
    ]
