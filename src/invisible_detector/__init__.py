"""Detect invisible, confusable and text-reordering Unicode in source files."""

__version__ = "0.1.0"
