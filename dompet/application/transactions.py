"""Atomic batch creation of transactions with savings-goal allocations."""

from __future__ import annotations

from collections.abc import Sequence

from dompet.domain.batch import (
    TransactionDraft,
    candidates_to_drafts,
    goal_increments,
    validate_batch_allocations,
)
from dompet.domain.stores import BatchStore
from dompet.runtime import get_logger

logger = get_logger(__name__)

__all__ = ["candidates_to_drafts", "create_batch"]


def create_batch(
    store: BatchStore,
    user_id: str,
    drafts: Sequence[TransactionDraft],
    description: str | None = None,
) -> list[str]:
    """
    Write a batch of drafts as one all-or-nothing unit.

    Every draft's goal allocations are checked before anything is written;
    GoalAllocationExceeded aborts the whole batch.
    """
    if not drafts:
        return []

    validate_batch_allocations(drafts)
    increments = goal_increments(drafts)
    ids = store.apply_batch(user_id, drafts, increments, description=description)
    logger.info("Created %d transactions for user %s", len(ids), user_id)
    return ids
