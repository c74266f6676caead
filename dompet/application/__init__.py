"""Application workflows: receipt parsing, advice and batch transaction creation."""
