"""Shared fixtures."""

import pytest

from mathtex.compiler import MathCompiler
from mathtex.config import ConfigManager


@pytest.fixture
def compiler():
    """Compiler with the bundled symbol definitions."""
    return MathCompiler()


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
    """Isolated global config manager stored under tmp_path."""
    manager = ConfigManager(tmp_path / "config")
    monkeypatch.setattr("mathtex.config._config_manager", manager)
    return manager
