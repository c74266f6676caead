"""Receipt workflows."""

from dompet.application.receipts.parse import (
    AIParseOutcome,
    AIReceiptParser,
    ParseResult,
    parse_transactions,
)
from dompet.application.receipts.upload import (
    ReceiptUploadRequest,
    ReceiptUploadResult,
    extract_upload_text,
    run_receipt_upload,
)

__all__ = [
    "AIParseOutcome",
    "AIReceiptParser",
    "ParseResult",
    "parse_transactions",
    "ReceiptUploadRequest",
    "ReceiptUploadResult",
    "extract_upload_text",
    "run_receipt_upload",
]
