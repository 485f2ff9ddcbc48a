"""Debug command: show how a configuration is wired."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ...config import ConfigurationError, get_config
from ...di import build_container, effective_sections, select_endpoint
from ...endpoint import Endpoint

console = Console()


@click.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
def debug(path: Optional[Path]) -> None:
    """List the clients wired for a configuration file.

    Args:
        path: Configuration file
    """
    try:
        config = get_config(path).config
        # Wiring checks endpoint, service and class references
        build_container(config)
        endpoints, clients = effective_sections(config)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    table = Table(
        title="Solr clients",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Name", style="cyan")
    table.add_column("Class", style="green")
    table.add_column("URL", style="blue")
    table.add_column("Load balancer")
    table.add_column("Plugins")

    for name, client in clients.items():
        endpoint_name = select_endpoint(client, endpoints)
        url = Endpoint.from_config(endpoint_name, endpoints[endpoint_name]).url

        load_balancer = "-"
        if client.load_balancer.enabled:
            load_balancer = ", ".join(
                f"{endpoint} ({weight})"
                for endpoint, weight in client.load_balancer.endpoints.items()
            )

        label = f"{name} (default)" if name == config.default_client else name
        table.add_row(
            label,
            client.client_class,
            url,
            load_balancer,
            ", ".join(client.plugins) or "-",
        )

    console.print(table)
