"""Receipt command handlers used by the CLI."""

import argparse
import json
from pathlib import Path

from dompet.application.receipts import AIReceiptParser, ReceiptUploadRequest, run_receipt_upload
from dompet.receipt.ai_response import SYSTEM_PROMPT
from dompet.runtime import AICompletionClient, AISettings, DataFrameTransactionStore, get_logger

logger = get_logger(__name__)


def _ai_parser(args: argparse.Namespace) -> AIReceiptParser | None:
    if args.no_ai:
        return None
    settings = AISettings.from_env()
    if not settings.enabled:
        logger.debug("DOMPET_AI_API_KEY not set; using rule-based parsing only")
        return None
    return AIReceiptParser(AICompletionClient(settings, system_prompt=SYSTEM_PROMPT))


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a receipt text file or image and print the candidates as JSON."""
    receipt_path = Path(args.file)
    if not receipt_path.is_file():
        print(f"Error: file not found: {receipt_path}")
        return 1

    store = DataFrameTransactionStore.from_csv(args.categories) if args.categories else DataFrameTransactionStore()
    result = run_receipt_upload(
        ReceiptUploadRequest(
            data=receipt_path.read_bytes(),
            filename=receipt_path.name,
            user_id=args.user,
            ocr_url=args.ocr_url,
        ),
        category_store=store,
        ai_parser=_ai_parser(args),
    )

    if result.status == "no_text":
        logger.warning("No text could be read from %s", receipt_path)

    print(json.dumps(result.result.to_dict(), indent=2, ensure_ascii=False))
    return 0
