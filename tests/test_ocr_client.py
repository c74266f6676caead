"""Tests for the OCR service client and the upload text workflow."""

from __future__ import annotations

import io
from datetime import date

import httpx
import pytest
from PIL import Image

from dompet.application.receipts import ReceiptUploadRequest, extract_upload_text, run_receipt_upload
from dompet.domain.category import CategoryRef
from dompet.runtime import OCRServiceUnavailable, call_ocr_service

OCR_RESULT = {
    "status": "success",
    "image_width": 1100,
    "image_height": 400,
    "detections": [
        [[[70, 150], [350, 150], [350, 180], [70, 180]], ["Roti Tawar", 0.98]],
        [[[870, 151], [1000, 151], [1000, 179], [870, 179]], ["12.000", 0.97]],
    ],
}


def _png_bytes(size: tuple[int, int] = (60, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, "white").save(buffer, format="PNG")
    return buffer.getvalue()


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class FakeCategoryStore:
    def __init__(self, categories: list[CategoryRef]) -> None:
        self.categories = categories

    def list_categories(self, user_id: str) -> list[CategoryRef]:
        return self.categories


def test_call_ocr_service_posts_multipart_image() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, json=OCR_RESULT)

    result = call_ocr_service(_png_bytes(), "receipt.png", "http://ocr.local/", client=_client(handler))

    assert result == OCR_RESULT
    assert seen["path"] == "/ocr"
    assert seen["content_type"].startswith("multipart/form-data")


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(503, text="busy"),
        lambda request: httpx.Response(200, text="<html>"),
        lambda request: httpx.Response(200, json=["not", "a", "dict"]),
    ],
)
def test_bad_ocr_responses_raise(handler) -> None:
    with pytest.raises(OCRServiceUnavailable):
        call_ocr_service(_png_bytes(), "receipt.png", "http://ocr.local", client=_client(handler))


def test_connection_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(OCRServiceUnavailable, match="Failed to connect"):
        call_ocr_service(_png_bytes(), "receipt.png", "http://ocr.local", client=_client(handler))


def test_unreadable_image_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(OCRServiceUnavailable, match="Unreadable image"):
        call_ocr_service(b"not an image", "receipt.png", "http://ocr.local", client=_client(handler))


def test_extract_upload_text_decodes_text_uploads() -> None:
    assert extract_upload_text("Roti Tawar 12.000".encode(), "receipt.txt") == "Roti Tawar 12.000"
    assert extract_upload_text(b"Susu 8.000", "upload", content_type="text/plain; charset=utf-8") == "Susu 8.000"


def test_extract_upload_text_uses_ocr_for_images() -> None:
    client = _client(lambda request: httpx.Response(200, json=OCR_RESULT))

    text = extract_upload_text(_png_bytes(), "receipt.png", ocr_url="http://ocr.local", client=client)

    assert text == "Roti Tawar   12.000"


def test_ocr_failure_gives_empty_text() -> None:
    client = _client(lambda request: httpx.Response(500))

    assert extract_upload_text(_png_bytes(), "receipt.jpg", ocr_url="http://ocr.local", client=client) == ""


@pytest.mark.parametrize(
    "payload",
    [
        {"image_width": 1100, "detections": None},
        {"image_width": 1100, "detections": [[[[70, 150], [350, 150], [350, 180], [70, 180]], ["Roti", "0.9"]]]},
        {"image_width": "n/a"},
        {"image_width": 1100, "detections": [[[["x", 150], [350, "y"]], ["Roti Tawar", 0.98]]]},
    ],
)
def test_malformed_ocr_payload_gives_empty_text(payload: dict) -> None:
    client = _client(lambda request: httpx.Response(200, json=payload))

    assert extract_upload_text(_png_bytes(), "receipt.png", ocr_url="http://ocr.local", client=client) == ""


def test_malformed_detections_are_skipped_not_fatal() -> None:
    payload = {
        "image_width": "n/a",
        "detections": [
            [[[70, 150], [350, 150], [350, 180], [70, 180]], ["Roti Tawar", 0.98]],
            [[[870, 151], [1000, 151]], ["12.000", None]],
            "garbage",
        ],
    }
    client = _client(lambda request: httpx.Response(200, json=payload))

    assert extract_upload_text(_png_bytes(), "receipt.png", ocr_url="http://ocr.local", client=client) == "Roti Tawar"


def test_run_receipt_upload_image_to_candidates(categories: list[CategoryRef]) -> None:
    client = _client(lambda request: httpx.Response(200, json=OCR_RESULT))
    request = ReceiptUploadRequest(
        data=_png_bytes(), filename="receipt.jpg", user_id="user-1", ocr_url="http://ocr.local"
    )

    upload = run_receipt_upload(
        request, category_store=FakeCategoryStore(categories), today=date(2024, 6, 1), client=client
    )

    assert upload.status == "parsed"
    assert [(t.description, t.amount, t.category_id) for t in upload.result.transactions] == [
        ("Roti Tawar", 12_000, "cat_food"),
    ]


def test_unreadable_upload_is_not_an_error(categories: list[CategoryRef]) -> None:
    client = _client(lambda request: httpx.Response(503))
    request = ReceiptUploadRequest(data=_png_bytes(), filename="receipt.jpg", user_id="user-1")

    upload = run_receipt_upload(request, category_store=FakeCategoryStore(categories), client=client)

    assert upload.status == "no_text"
    assert upload.result.transactions == []
    assert upload.result.fallback_reason == "no_text"
