"""CLI commands package."""

import click

from ..ui import setup_logging
from .debug import debug
from .reference import reference
from .validate import validate


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity")
def cli(verbose: int) -> None:
    """Solr bundle configuration tools."""
    setup_logging(verbose)


cli.add_command(debug)
cli.add_command(reference)
cli.add_command(validate)
