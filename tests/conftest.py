"""Pytest configuration and shared fixtures."""

import pytest

from wampark_cli.config import Config


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Point every test at a private configuration directory."""
    config_dir = tmp_path / "wampark-home"
    monkeypatch.setattr(Config, "CONFIG_DIR", config_dir)
    for name in ("WAMPARK_HOME", "WAMPARK_TEMPLATE_REPO", "WAMPARK_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    return config_dir


@pytest.fixture
def store(isolated_config_dir):
    """Connection store backed by the isolated configuration directory."""
    return Config.load().connection_store()
