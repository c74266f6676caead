"""Pure receipt parsing: text extraction rules, category matching, OCR/AI payload helpers."""
