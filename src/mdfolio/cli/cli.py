"""CLI entrypoint: Typer app definition, logging setup, and command registration"""

import logging
from typing import Annotated

import typer

from mdfolio.config import load_config
from mdfolio.cli.commands import check_cmd, export_cmd, init_cmd, list_cmd, migrate_cmd, show_cmd


app = typer.Typer(name="mdfolio", no_args_is_help=True, help="Markdown portfolio content checks and migration")


@app.callback()
def main(
    verbose: Annotated[int, typer.Option("--verbose", "-v", count=True, help="-v for info, -vv for debug")] = 0,
    ):
    """Configure logging for the invoked command."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        try:
            level = load_config().log_level
        except ValueError:
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


app.command(name="check")(check_cmd)
app.command(name="list")(list_cmd)
app.command(name="show")(show_cmd)
app.command(name="migrate")(migrate_cmd)
app.command(name="export")(export_cmd)
app.command(name="init")(init_cmd)
