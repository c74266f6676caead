"""Tests for OCR transformation helpers."""

import io

from PIL import Image

from dompet.receipt.ocr_helpers import ocr_detections_to_text, resize_image_bytes


def _bbox(x0: int, y0: int, x1: int, y1: int) -> list[list[int]]:
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1]]


def test_detections_are_grouped_into_name_price_lines() -> None:
    raw_result = {
        "image_width": 1000,
        "image_height": 600,
        "detections": [
            [_bbox(20, 150, 300, 180), ["Es Teh Manis", 0.96]],
            [_bbox(820, 151, 950, 179), ["5.000", 0.97]],
            [_bbox(20, 100, 300, 130), ["Nasi Goreng", 0.99]],
            [_bbox(800, 102, 950, 128), ["25.000", 0.99]],
            [_bbox(500, 101, 520, 129), ["1", 0.95]],
            [_bbox(20, 300, 300, 330), ["smudge", 0.30]],
        ],
    }

    text = ocr_detections_to_text(raw_result, padding=0)

    assert text.splitlines() == ["Nasi Goreng   1   25.000", "Es Teh Manis   5.000"]


def test_full_text_is_used_when_present() -> None:
    assert ocr_detections_to_text({"full_text": "Roti 12.000", "detections": []}) == "Roti 12.000"


def test_empty_or_malformed_detections_give_empty_text() -> None:
    assert ocr_detections_to_text({"image_width": 1000, "detections": []}, padding=0) == ""
    assert ocr_detections_to_text({"image_width": 1000, "detections": [["bad"], None]}, padding=0) == ""


def test_resize_image_bytes_limits_size_and_pads() -> None:
    buffer = io.BytesIO()
    Image.new("RGB", (4000, 1000), "white").save(buffer, format="PNG")

    resized = Image.open(io.BytesIO(resize_image_bytes(buffer.getvalue())))

    assert resized.format == "JPEG"
    assert resized.size == (3100, 850)


def test_small_image_is_only_padded() -> None:
    buffer = io.BytesIO()
    Image.new("L", (200, 100), 255).save(buffer, format="PNG")

    resized = Image.open(io.BytesIO(resize_image_bytes(buffer.getvalue(), padding=10)))

    assert resized.size == (220, 120)
    assert resized.mode == "RGB"
