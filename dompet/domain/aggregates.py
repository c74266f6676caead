"""Read-only aggregate snapshots consumed by the advice heuristics."""

from dataclasses import dataclass, field
from datetime import date

from dompet.domain.category import CategoryType


@dataclass(frozen=True)
class CategorySpend:
    """Summed transaction amount for one category over a window."""

    category_id: str | None
    name: str
    type: CategoryType
    amount: float


@dataclass(frozen=True)
class MonthlyCashflow:
    """Income/expense sums for one ``YYYY-MM`` bucket."""

    month: str
    income: float
    expense: float

    @property
    def balance(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True)
class GoalProgress:
    """Savings goal target and current amount."""

    id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: date | None = None
    is_active: bool = True

    @property
    def remaining(self) -> float:
        return max(0.0, self.target_amount - self.current_amount)

    @property
    def progress(self) -> float:
        """Progress as a fraction of the target (0 when the target is not positive)."""
        if self.target_amount <= 0:
            return 0.0
        return self.current_amount / self.target_amount


@dataclass(frozen=True)
class SpendingSnapshot:
    """Everything the heuristics need about one user over a trailing window."""

    as_of: date
    window_days: int
    income: float
    expense: float
    category_spend: tuple[CategorySpend, ...] = ()
    goals: tuple[GoalProgress, ...] = ()
    monthly: tuple[MonthlyCashflow, ...] = field(default=())

    @property
    def month_scale(self) -> float:
        """Factor turning a window sum into a 30-day figure."""
        if self.window_days <= 0:
            return 1.0
        return 30.0 / self.window_days

    @property
    def monthly_income(self) -> float:
        return self.income * self.month_scale

    @property
    def monthly_expense(self) -> float:
        return self.expense * self.month_scale

    @property
    def savings_rate(self) -> float | None:
        """(income - expense) / income, or None when there is no income."""
        if self.income <= 0:
            return None
        return (self.income - self.expense) / self.income

    def expense_categories(self) -> list[CategorySpend]:
        return [c for c in self.category_spend if c.type == CategoryType.EXPENSE and c.amount > 0]
