"""Reference command: print every supported option with its default."""

import click
import yaml

from ...config import reference_config


@click.command()
def reference() -> None:
    """Print the reference configuration."""
    click.echo(yaml.safe_dump(reference_config(), sort_keys=False), nl=False)
