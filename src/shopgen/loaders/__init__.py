"""Data loaders for generated e-commerce files.

This module provides loaders for persisting generated data:
- SqliteLoader: Load the text files into SQLite with enforced foreign keys
"""

from __future__ import annotations

from shopgen.loaders.sqlite import LoadResult, SqliteLoader

__all__ = ["LoadResult", "SqliteLoader"]
