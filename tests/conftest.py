"""
Shared pytest fixtures for the fillprefix test suite.

Usage in tests:
    def test_something(registry_factory):
        ctx = registry_factory.context("a.txt")
        registry_factory.registry.register_add(("<li>", "bullet"), ctx)

    def test_small(small_factory):
        # same, but the host ships SMALL_TABLE instead of DEFAULT_TABLE
"""

import pytest

from tests.factories import RegistryTestFactory, SMALL_TABLE


@pytest.fixture
def registry_factory(tmp_path):
    """Fresh uninitialized host with the built-in table, plus a registry."""
    return RegistryTestFactory(tmp_path)


@pytest.fixture
def small_factory(tmp_path):
    """Fresh uninitialized host shipping SMALL_TABLE, plus a registry."""
    return RegistryTestFactory(tmp_path, builtin_table=SMALL_TABLE)


@pytest.fixture
def host(registry_factory):
    return registry_factory.host


@pytest.fixture
def registry(registry_factory):
    return registry_factory.registry


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keep ConfigManager away from the real ~/.fillprefix."""
    from fillprefix.config import ConfigManager
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", tmp_path / "home" / ".fillprefix")
    monkeypatch.delenv("FILLPREFIX_GLOBAL_CATALOG", raising=False)
    monkeypatch.delenv("FILLPREFIX_LOG_LEVEL", raising=False)
