"""Wantok — community translation task queue and review workflow."""

__version__ = "0.1.0"
