"""Container wiring for the Solr bundle."""

from .container import (
    build_container,
    create_container,
    effective_sections,
    select_endpoint,
)

__all__ = [
    "build_container",
    "create_container",
    "effective_sections",
    "select_endpoint",
]
