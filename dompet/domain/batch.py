"""Batch transaction drafts and goal-allocation validation."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from dompet.domain.category import CategoryType
from dompet.domain.receipt import ParsedTransactionCandidate


class GoalAllocationExceeded(ValueError):
    """Raised when a draft allocates more to goals than its own amount."""

    def __init__(self, index: int, allocated: float, amount: float) -> None:
        super().__init__(
            f"Transaction #{index + 1}: goal allocations ({allocated:g}) exceed transaction amount ({amount:g})"
        )
        self.index = index
        self.allocated = allocated
        self.amount = amount


@dataclass(frozen=True)
class GoalAllocation:
    goal_id: str
    amount: float


@dataclass(frozen=True)
class TransactionDraft:
    """A transaction ready to be written, possibly funding savings goals."""

    description: str
    amount: float
    date: date
    type: CategoryType = CategoryType.EXPENSE
    category_id: str | None = None
    currency: str = "IDR"
    goal_allocations: tuple[GoalAllocation, ...] = field(default=())

    @property
    def allocated(self) -> float:
        return sum(a.amount for a in self.goal_allocations)


def validate_batch_allocations(drafts: Sequence[TransactionDraft]) -> None:
    """Raise GoalAllocationExceeded for the first over-allocated draft."""
    for index, draft in enumerate(drafts):
        allocated = draft.allocated
        if allocated > draft.amount:
            raise GoalAllocationExceeded(index, allocated, draft.amount)


def goal_increments(drafts: Iterable[TransactionDraft]) -> dict[str, float]:
    """Sum allocations per goal across a batch."""
    totals: dict[str, float] = defaultdict(float)
    for draft in drafts:
        for allocation in draft.goal_allocations:
            totals[allocation.goal_id] += allocation.amount
    return dict(totals)


def candidates_to_drafts(
    candidates: Iterable[ParsedTransactionCandidate], currency: str = "IDR"
) -> list[TransactionDraft]:
    """Turn confirmed receipt candidates into expense drafts."""
    return [
        TransactionDraft(
            description=candidate.description,
            amount=float(candidate.amount),
            date=candidate.date,
            type=CategoryType.EXPENSE,
            category_id=candidate.category_id,
            currency=currency,
        )
        for candidate in candidates
    ]
