"""Runtime client for the external OCR text-extraction service."""

import os
import time
from typing import Any

import httpx

from dompet.receipt.ocr_helpers import resize_image_bytes
from dompet.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OCR_URL = "http://localhost:8001"
OCR_TIMEOUT_SECONDS = 60.0


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def ocr_url_from_env() -> str:
    return os.environ.get("DOMPET_OCR_URL", "").strip() or DEFAULT_OCR_URL


def call_ocr_service(
    image_bytes: bytes,
    filename: str,
    ocr_url: str = DEFAULT_OCR_URL,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """
    Send an image to the OCR service and return its raw JSON result.

    The image is resized and padded before upload; ocr_detections_to_text()
    expects the same padding when mapping detections back.
    """
    ocr_url = ocr_url.rstrip("/")
    logger.info("Sending receipt to OCR service at %s...", ocr_url)

    try:
        resized_bytes = resize_image_bytes(image_bytes)
    except OSError as e:
        raise OCRServiceUnavailable(f"Unreadable image {filename}: {e}") from e

    files = {"file": (filename, resized_bytes, "image/jpeg")}
    try:
        start_time = time.time()
        if client is not None:
            response = client.post(f"{ocr_url}/ocr", files=files, timeout=OCR_TIMEOUT_SECONDS)
        else:
            response = httpx.post(f"{ocr_url}/ocr", files=files, timeout=OCR_TIMEOUT_SECONDS)
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
    except httpx.HTTPError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    if response.status_code != 200:
        # Body may contain receipt text; log the status only.
        logger.error("OCR service error: %s", response.status_code)
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

    try:
        result = response.json()
    except ValueError as e:
        raise OCRServiceUnavailable("OCR service returned invalid JSON") from e
    if not isinstance(result, dict):
        raise OCRServiceUnavailable("OCR service returned an unexpected payload")
    return result
