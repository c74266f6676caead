"""Pure OCR payload helpers: image preparation and detection-to-text grouping."""

import io
from typing import Any

MAX_IMAGE_DIMENSION = 3000  # Resize if either dimension exceeds this
OCR_IMAGE_PADDING = 50  # White padding around image to prevent edge truncation

MIN_DETECTION_CONFIDENCE = 0.7
MIN_TEXT_LENGTH = 1
LEFT_ZONE = 0.3
RIGHT_ZONE = 0.7
MIN_Y_OVERLAP = 0.3


def resize_image_bytes(
    image_bytes: bytes, max_dimension: int = MAX_IMAGE_DIMENSION, padding: int = OCR_IMAGE_PADDING
) -> bytes:
    """Prepare a receipt photo for OCR and return it as JPEG bytes.

    The photo is turned upright from its EXIF orientation, shrunk so neither
    side exceeds ``max_dimension`` and framed with ``padding`` white pixels.
    Raises OSError (PIL.UnidentifiedImageError) for bytes that are not an image.
    """
    from PIL import Image, ImageOps

    with Image.open(io.BytesIO(image_bytes)) as original:
        photo = ImageOps.exif_transpose(original)
    if max(photo.size) > max_dimension:
        photo.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
    if padding > 0:
        photo = ImageOps.expand(photo, border=padding, fill="white")

    out = io.BytesIO()
    photo.convert("RGB").save(out, format="JPEG", quality=95)
    return out.getvalue()


def _boxes_overlap_y(det1: dict, det2: dict, min_overlap_ratio: float = MIN_Y_OVERLAP) -> bool:
    """Check if two detection boxes overlap vertically by at least min_overlap_ratio of the smaller one."""
    overlap_start = max(det1["y_min"], det2["y_min"])
    overlap_end = min(det1["y_max"], det2["y_max"])
    if overlap_start >= overlap_end:
        return False

    smaller_height = min(det1["y_max"] - det1["y_min"], det2["y_max"] - det2["y_min"])
    if smaller_height <= 0:
        return False
    return (overlap_end - overlap_start) / smaller_height >= min_overlap_ratio


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _image_width(raw_result: dict[str, Any], padding: int) -> float:
    try:
        width = float(raw_result.get("image_width") or 0)
    except (TypeError, ValueError):
        width = 0.0
    return max(width - 2 * padding, 1.0)


def _detection_rows(raw_result: dict[str, Any], padding: int) -> tuple[list[dict], float]:
    """Flatten raw detections into position dicts, dropping low-quality or malformed ones."""
    raw_detections = raw_result.get("detections")
    if not isinstance(raw_detections, list):
        return [], _image_width(raw_result, padding)

    rows = []
    for detection in raw_detections:
        try:
            bbox, (text, confidence) = detection
            points = [(_number(p[0]), _number(p[1])) for p in bbox]
        except (TypeError, ValueError, IndexError):
            continue
        confidence = _number(confidence)
        text = str(text).strip()
        if confidence is None or confidence < MIN_DETECTION_CONFIDENCE or len(text) < MIN_TEXT_LENGTH:
            continue
        if not points or any(x is None or y is None for x, y in points):
            continue

        xs = [x - padding for x, _ in points]
        ys = [y - padding for _, y in points]
        rows.append(
            {
                "text": text,
                "min_x": min(xs),
                "y_min": min(ys),
                "y_max": max(ys),
                "center_y": sum(ys) / len(ys),
            }
        )
    return rows, _image_width(raw_result, padding)


def group_detections_into_lines(detections: list[dict], image_width: float) -> list[list[dict]]:
    """Group detections into printed lines.

    Item names on the left are paired with the first unassigned price on the
    right that overlaps them vertically; everything else joins the line it
    overlaps most, or starts a new line.
    """
    left = sorted((d for d in detections if d["min_x"] / image_width < LEFT_ZONE), key=lambda d: d["center_y"])
    right = sorted((d for d in detections if d["min_x"] / image_width > RIGHT_ZONE), key=lambda d: d["center_y"])
    middle = [d for d in detections if LEFT_ZONE <= d["min_x"] / image_width <= RIGHT_ZONE]

    lines: list[list[dict]] = []
    assigned: set[int] = set()
    for left_det in left:
        line = [left_det]
        for idx, right_det in enumerate(right):
            if idx not in assigned and _boxes_overlap_y(left_det, right_det):
                line.append(right_det)
                assigned.add(idx)
                break
        lines.append(line)
    lines.extend([det] for idx, det in enumerate(right) if idx not in assigned)

    for mid_det in sorted(middle, key=lambda d: d["center_y"]):
        target = next((line for line in lines if any(_boxes_overlap_y(mid_det, d) for d in line)), None)
        if target is None:
            lines.append([mid_det])
        else:
            target.append(mid_det)

    for line in lines:
        line.sort(key=lambda d: d["min_x"])
    lines.sort(key=lambda line: sum(d["center_y"] for d in line) / len(line))
    return lines


def ocr_detections_to_text(raw_result: dict[str, Any], padding: int = OCR_IMAGE_PADDING) -> str:
    """
    Turn a raw OCR response into plain receipt text, one printed line per row.

    The OCR service returns ``{"image_width", "image_height", "detections":
    [[bbox, [text, confidence]], ...]}`` for the padded image; columns on the
    same row are joined with three spaces so the text parser sees
    ``name   price``. A response that already carries ``full_text`` is used
    as-is.
    """
    full_text = raw_result.get("full_text")
    if isinstance(full_text, str) and full_text.strip():
        return full_text

    detections, image_width = _detection_rows(raw_result, padding)
    if not detections:
        return ""

    lines = group_detections_into_lines(detections, image_width)
    return "\n".join("   ".join(d["text"] for d in line) for line in lines)
