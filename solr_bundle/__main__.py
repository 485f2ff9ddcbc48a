"""
Main Entry Point for the Solr bundle

Runs the configuration CLI when the package is executed as a module.

Example Usage:
    $ python -m solr_bundle validate config/solr_bundle.yaml
    $ python -m solr_bundle reference
    $ python -m solr_bundle debug config/solr_bundle.yaml
"""

import sys
from typing import Optional, Sequence

import click

from .cli import cli


def main(args: Optional[Sequence[str]] = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments.
            Defaults to sys.argv[1:].

    Returns:
        Exit code.
    """
    try:
        cli.main(args=args, prog_name="solr-bundle", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
