"""Shared test fixtures."""

import logging

import pytest

from solr_bundle.constants import ENV_CONFIG_PATH, ENV_LIBRARY_VERSION


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep bundle environment variables and root logging per test."""
    # setenv first so that values written by load_dotenv are undone too
    for name in (ENV_CONFIG_PATH, ENV_LIBRARY_VERSION, "LOG_LEVEL"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def write_config(tmp_path):
    """Write a configuration file and return its path."""
    import yaml

    def write(document, name="solr_bundle.yaml"):
        path = tmp_path / name
        path.write_text(yaml.safe_dump(document))
        return path

    return write
