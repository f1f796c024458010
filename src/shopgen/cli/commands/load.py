"""shopgen load command - Rebuild the SQLite database from the CSV files."""

from __future__ import annotations

import asyncio

import click

from shopgen.cli.errors import handle_errors
from shopgen.cli.output import print_load_results, success
from shopgen.config import ShopgenSettings


@click.command()
@click.pass_obj
def load(settings: ShopgenSettings) -> None:
    """Load the generated CSV files into SQLite.

    Deletes any existing database file, creates the schema with foreign
    keys enforced, and loads each table in one transaction.

    Examples:

        shopgen load
    """
    from shopgen.loaders.sqlite import SqliteLoader

    with handle_errors("load"):
        results = asyncio.run(SqliteLoader(settings).load_all())

    print_load_results(results)
    success(f"Database written to {settings.database_path}")
