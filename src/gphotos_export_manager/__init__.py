"""Reorganize Google Photos takeout exports into an album tree with repaired metadata."""

__version__ = "0.1.0"
