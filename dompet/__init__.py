"""dompet: receipt parsing and spending advice for personal finance."""

__version__ = "0.1.0"
