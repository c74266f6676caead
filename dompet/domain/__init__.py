"""Core domain models for dompet.

This module provides the data models shared by the receipt parser, the
advice heuristics and the batch writer:
- ParsedTransactionCandidate, ReceiptTotals: receipt extraction output
- CategoryRef, CategoryType: user categories
- RecommendationRecord, InsightRecord: advice output
- TransactionDraft, GoalAllocation: batch creation input

Usage:
    from dompet.domain import CategoryRef, ParsedTransactionCandidate
"""

from dompet.domain.advice import InsightRecord, InsightType, Priority, RecommendationRecord, RecommendationType
from dompet.domain.aggregates import CategorySpend, GoalProgress, MonthlyCashflow, SpendingSnapshot
from dompet.domain.batch import GoalAllocation, GoalAllocationExceeded, TransactionDraft
from dompet.domain.category import CategoryRef, CategoryType
from dompet.domain.receipt import AmountFormat, ParsedTransactionCandidate, ReceiptTotals

__all__ = [
    "AmountFormat",
    "CategoryRef",
    "CategorySpend",
    "CategoryType",
    "GoalAllocation",
    "GoalAllocationExceeded",
    "GoalProgress",
    "InsightRecord",
    "InsightType",
    "MonthlyCashflow",
    "ParsedTransactionCandidate",
    "Priority",
    "ReceiptTotals",
    "RecommendationRecord",
    "RecommendationType",
    "SpendingSnapshot",
    "TransactionDraft",
]
