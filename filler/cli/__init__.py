"""Command-line entry point (``pdf-batch-filler`` / ``python -m filler.cli``)."""

from .__main__ import main

__all__ = ["main"]
