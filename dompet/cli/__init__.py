"""Command-line interface for dompet.

Usage:
    dompet parse <file> [--categories CSV] [--ocr-url URL]
    dompet recommend --transactions CSV --categories CSV [--goals CSV]
    dompet insights --transactions CSV --categories CSV [--goals CSV]
    dompet report --transactions CSV --categories CSV
"""
