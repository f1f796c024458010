"""CLI entry point for shopgen.

This module defines the main CLI group using the LazyGroup pattern so that
``shopgen --help`` does not import SQLAlchemy or the generators.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from shopgen import __version__
from shopgen.cli.errors import handle_errors
from shopgen.cli.output import set_no_color
from shopgen.config import ShopgenSettings
from shopgen.observability import configure_logging

# Configure rich-click for better help formatting
rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that loads commands lazily.

    Commands are only imported when actually invoked, not at import time.

    Attributes:
        lazy_subcommands: Mapping of command names to module paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize LazyGroup.

        Args:
            *args: Positional arguments for parent class.
            lazy_subcommands: Mapping of command name to module path.
                Format: {"load": "shopgen.cli.commands.load.load"}
            **kwargs: Keyword arguments for parent class.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return sorted command names, lazy and directly registered."""
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, importing it on first use.

        Args:
            ctx: Click context.
            cmd_name: Name of the command to get.

        Returns:
            Click Command instance, or None if not found.
        """
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_path = self.lazy_subcommands[cmd_name]
        module_name, attr_name = module_path.rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "generate": "shopgen.cli.commands.generate.generate",
    "load": "shopgen.cli.commands.load.load",
    "report": "shopgen.cli.commands.report.report",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="shopgen")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log pipeline progress (DEBUG level) to stderr.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """shopgen - synthetic e-commerce data, loaded into SQLite.

    Paths and the seed come from `SHOPGEN_*` environment variables or `.env`.

    **Steps:**

    - `shopgen generate` - Write the five CSV files to the data directory
    - `shopgen load` - Rebuild the SQLite database from the CSV files
    - `shopgen report [OUTPUT]` - Print the order report, or save it as CSV
    """
    with handle_errors("configuration"):
        settings = ShopgenSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


if __name__ == "__main__":
    cli()
