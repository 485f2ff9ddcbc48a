"""
Validate Command for the Solr bundle CLI

Loads a configuration file, validates it and prints the canonical
configuration with every default filled in. Deprecated options are
reported as warnings; an invalid configuration exits with status 1.

Example Usage:
    $ solr-bundle validate config/solr_bundle.yaml
    $ solr-bundle validate --format json
    $ solr-bundle validate --library-version 6.3.0 legacy.yaml
"""

import json
from pathlib import Path
from typing import Optional

import click
import yaml

from ...config import ConfigurationError, get_config
from ...constants import ROOT_KEY
from ..ui import console


@click.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--library-version",
    help="Client library version to validate against",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    help="Output format",
)
def validate(
    path: Optional[Path], library_version: Optional[str], output_format: str
) -> None:
    """Validate a configuration file and print the result.

    Args:
        path: Configuration file
        library_version: Client library version
        output_format: Output format
    """
    try:
        result = get_config(path, library=library_version)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    document = {ROOT_KEY: result.config.to_dict()}
    if output_format == "json":
        click.echo(json.dumps(document, indent=2))
    else:
        click.echo(yaml.safe_dump(document, sort_keys=False), nl=False)

    if result.deprecations:
        console.print(
            f"[yellow]Configuration is valid with {len(result.deprecations)} "
            "deprecation(s)[/yellow]"
        )
    else:
        console.print("[green]Configuration is valid[/green]")
