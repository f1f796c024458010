"""Rich console output utilities for shopgen.

This module provides formatted console output with Rich, supporting colored
success messages, the report table, and the NO_COLOR
environment variable.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from shopgen.loaders.sqlite import LoadResult
    from shopgen.report import ReportRow

# Rich automatically respects NO_COLOR, but we also support --no-color flag
_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Rich Console instance with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(force_terminal=force_terminal, no_color=no_color or _force_no_color)


# Default console instance
console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("Database loaded")
        ✓ Database loaded
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print an informational message."""
    console.print(message, **kwargs)


def print_load_results(results: Sequence[LoadResult]) -> None:
    """Print one line per loaded table."""
    table = Table(title="Loaded tables")
    table.add_column("Table")
    table.add_column("Rows", justify="right")
    table.add_column("Source")
    for result in results:
        table.add_row(result.table_name, str(result.rows_loaded), result.source_path)
    console.print(table)


def print_report(rows: Sequence[ReportRow]) -> None:
    """Print the order report as a table.

    Args:
        rows: Report rows in display order.
    """
    if not rows:
        info("No rows returned.")
        return

    table = Table(title="Order report")
    table.add_column("CustomerName")
    table.add_column("OrderDate")
    table.add_column("ProductName")
    table.add_column("CategoryName")
    table.add_column("Quantity", justify="right")
    table.add_column("TotalPrice", justify="right")
    for row in rows:
        table.add_row(
            row.customer_name,
            row.order_date,
            row.product_name,
            row.category_name,
            str(row.quantity),
            f"{row.total_price:.2f}",
        )
    console.print(table)


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors.

    Args:
        no_color: If True, disable colored output.

    Note:
        This updates the module-level console instance.
    """
    global console
    console = create_console(no_color=no_color)
