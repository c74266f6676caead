"""Receipt upload workflow: raw upload bytes to parsed candidates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import PurePath
from typing import Literal

import httpx

from dompet.domain.stores import CategoryStore
from dompet.receipt.keyword_rules import ReceiptKeywordRules
from dompet.receipt.ocr_helpers import ocr_detections_to_text
from dompet.runtime import get_logger
from dompet.runtime.ocr_client import OCRServiceUnavailable, call_ocr_service, ocr_url_from_env

from .parse import AIReceiptParser, ParseResult, parse_transactions

logger = get_logger(__name__)

TEXT_SUFFIXES = {".txt", ".text"}

UploadStatus = Literal["parsed", "no_text"]


def is_text_upload(filename: str, content_type: str | None = None) -> bool:
    if content_type and content_type.split(";")[0].strip().lower().startswith("text/"):
        return True
    return PurePath(filename).suffix.lower() in TEXT_SUFFIXES


def extract_upload_text(
    data: bytes,
    filename: str,
    content_type: str | None = None,
    *,
    ocr_url: str | None = None,
    client: httpx.Client | None = None,
) -> str:
    """
    Return the text of an upload.

    Text uploads are decoded as UTF-8. Images go through the OCR service;
    any OCR failure gives an empty string rather than an error.
    """
    if is_text_upload(filename, content_type):
        return data.decode("utf-8", errors="replace")

    try:
        raw_result = call_ocr_service(data, filename, ocr_url or ocr_url_from_env(), client=client)
    except OCRServiceUnavailable as exc:
        logger.warning("OCR unavailable for %s: %s", filename, exc)
        return ""
    try:
        return ocr_detections_to_text(raw_result)
    except (TypeError, ValueError) as exc:
        logger.warning("Malformed OCR result for %s: %s", filename, exc)
        return ""


@dataclass(frozen=True)
class ReceiptUploadRequest:
    """Inputs for the receipt upload workflow."""

    data: bytes
    filename: str
    user_id: str
    content_type: str | None = None
    ocr_url: str | None = None


@dataclass(frozen=True)
class ReceiptUploadResult:
    """An unreadable upload is not an error: it yields zero candidates."""

    status: UploadStatus
    text: str
    result: ParseResult


def run_receipt_upload(
    request: ReceiptUploadRequest,
    *,
    category_store: CategoryStore,
    ai_parser: AIReceiptParser | None = None,
    config: ReceiptKeywordRules | None = None,
    today: date | None = None,
    client: httpx.Client | None = None,
) -> ReceiptUploadResult:
    """Run upload flow: extract text -> parse -> candidates."""
    text = extract_upload_text(
        request.data,
        request.filename,
        request.content_type,
        ocr_url=request.ocr_url,
        client=client,
    )
    if not text.strip():
        return ReceiptUploadResult(
            status="no_text",
            text="",
            result=ParseResult(transactions=[], strategy="rules", fallback_reason="no_text"),
        )

    result = parse_transactions(
        text,
        request.user_id,
        category_store=category_store,
        ai_parser=ai_parser,
        config=config,
        today=today,
    )
    return ReceiptUploadResult(status="parsed", text=text, result=result)
