"""shopgen report command - Order report over the loaded database."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from shopgen.cli.errors import handle_errors
from shopgen.cli.output import info, print_report, success
from shopgen.config import ShopgenSettings


@click.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.pass_obj
def report(settings: ShopgenSettings, output: Path | None) -> None:
    """Print the order report, or save it as CSV when OUTPUT is given.

    Joins orders, customers, order lines, products and categories, newest
    orders first.

    Examples:

        shopgen report

        shopgen report data/order_report.csv
    """
    from shopgen.report import fetch_order_report, write_report

    with handle_errors("report"):
        rows = asyncio.run(fetch_order_report(settings.database_path))

    if output is None:
        print_report(rows)
        info("\nPass a file path to save results as CSV:\n  shopgen report data/order_report.csv")
        return

    resolved = output.resolve()
    with handle_errors("report"):
        write_report(rows, resolved)
    success(f"Report written to {resolved}")
