"""Runtime infrastructure for dompet.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Config path resolution via get_paths(), ProjectPaths
- TOML rule loading for receipt keywords and recommendation thresholds
- HTTP clients for the OCR and AI completion collaborators
- A pandas-backed transaction store

Usage:
    from dompet.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.config, paths.receipt_rules)
"""

from dompet.runtime.ai_completion import AICompletionClient, AICompletionUnavailable, AISettings
from dompet.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from dompet.runtime.ocr_client import DEFAULT_OCR_URL, OCRServiceUnavailable, call_ocr_service
from dompet.runtime.paths import ProjectPaths, get_paths, reset_paths
from dompet.runtime.receipt_rules import load_receipt_keyword_rules
from dompet.runtime.recommendation_rules import load_recommendation_thresholds
from dompet.runtime.transaction_store import DataFrameTransactionStore

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Rules
    "load_receipt_keyword_rules",
    "load_recommendation_thresholds",
    # Collaborators
    "AICompletionClient",
    "AICompletionUnavailable",
    "AISettings",
    "DEFAULT_OCR_URL",
    "OCRServiceUnavailable",
    "call_ocr_service",
    "DataFrameTransactionStore",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
