"""Command-line interface for shopgen."""

from __future__ import annotations

from shopgen.cli.main import cli

__all__ = ["cli"]
