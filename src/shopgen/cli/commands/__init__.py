"""CLI command modules.

This package contains the implementation of the shopgen subcommands:
generate, load and report.
"""

from __future__ import annotations

__all__: list[str] = []
