"""Public smoke tests for basic module wiring.

Keep these minimal and free of any real-world data.
"""

from __future__ import annotations


def test_imports() -> None:
    import dompet
    import dompet.application.advice
    import dompet.application.receipts
    import dompet.application.transactions
    import dompet.cli.main
    import dompet.domain
    import dompet.receipt
    import dompet.runtime

    assert dompet is not None
    assert dompet.application.advice is not None
    assert dompet.application.receipts is not None
    assert dompet.application.transactions is not None
    assert dompet.cli.main is not None
    assert dompet.domain is not None
    assert dompet.receipt is not None
    assert dompet.runtime is not None


def test_packaged_receipt_rules_exist() -> None:
    from dompet.runtime import get_paths

    assert get_paths().default_receipt_rules.is_file()


def test_loggers_share_the_package_namespace() -> None:
    from dompet.runtime import get_logger

    assert get_logger("dompet.receipt.x").name == "dompet.receipt.x"
    assert get_logger("scripts.tool").name == "dompet.scripts.tool"
