"""
Tests for registry.py
"""

import pytest

from artwall.config import ArtwallConfig
from artwall.registry import SourceRegistry
from artwall.registry import UnknownSourceError
from artwall.registry import default_registry
from artwall.sources.artic import ArticClient
from artwall.sources.met import MetClient


@pytest.fixture
def registry(flat_client, paged_client) -> SourceRegistry:
    registry = SourceRegistry()
    for client in (flat_client([1], {}), paged_client({})):
        registry.register(client.descriptor, client)
    return registry


def test_first_registered_is_active(registry):
    assert registry.get_active() == "flat"
    assert registry.active_client().kind == "flat"


def test_list_all_in_registration_order(registry):
    assert [(s.id, s.display_name) for s in registry.list_all()] == [
        ("flat", "Flat Museum"),
        ("paged", "Paged Museum"),
    ]


def test_set_active(registry):
    registry.set_active("paged")

    assert registry.get_active() == "paged"
    assert registry.active_client().kind == "paged"


def test_set_active_unknown_leaves_active_unchanged(registry):
    registry.set_active("paged")

    with pytest.raises(UnknownSourceError):
        registry.set_active("unknown")

    assert registry.get_active() == "paged"


def test_empty_registry():
    registry = SourceRegistry()

    assert registry.list_all() == []
    with pytest.raises(UnknownSourceError):
        registry.active_client()


def test_registries_are_independent(flat_client):
    first, second = SourceRegistry(), SourceRegistry()
    client = flat_client([1], {})
    first.register(client.descriptor, client)

    assert second.get_active() is None
    assert second.list_all() == []


def test_default_registry(tmp_path):
    registry = default_registry(ArtwallConfig(ARTWALL_CONFIG_DIR=tmp_path, USER_AGENT="artwall/test"))

    assert [s.id for s in registry.list_all()] == ["met", "artic"]
    assert registry.get_active() == "met"
    assert isinstance(registry.get("met"), MetClient)
    assert isinstance(registry.get("artic"), ArticClient)

    # each client gets its own session
    assert registry.get("met").session is not registry.get("artic").session
    assert registry.get("met").session.headers["User-Agent"] == "artwall/test"
    assert "AIC-User-Agent" not in registry.get("met").session.headers


def test_default_registry_default_source(tmp_path):
    registry = default_registry(ArtwallConfig(ARTWALL_CONFIG_DIR=tmp_path, DEFAULT_SOURCE="artic"))
    assert registry.get_active() == "artic"


def test_default_registry_unknown_default_source(tmp_path):
    registry = default_registry(ArtwallConfig(ARTWALL_CONFIG_DIR=tmp_path, DEFAULT_SOURCE="louvre"))
    assert registry.get_active() == "met"
