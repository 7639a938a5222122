"""
Pytest configuration and shared fixtures for subrpc tests.

Provides:
- Sample endpoints, registries and registry documents
- A LocalData instance backed by a temporary file
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest

from subrpc.core.local_data import LocalData
from subrpc.core.registry import Registry
from subrpc.models import Endpoint


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Sample Data
# ============================================================================


@pytest.fixture
def parity_endpoint() -> Endpoint:
    return Endpoint(
        name="Parity",
        url="wss://rpc.polkadot.io:443",
        labels=["Parity"],
        aliases=["dot"],
    )


@pytest.fixture
def onfinality_endpoint() -> Endpoint:
    return Endpoint(
        name="OnFinality",
        url="wss://polkadot.api.onfinality.io:443/public-ws",
        labels=["OnFinality"],
    )


@pytest.fixture
def test_registry(parity_endpoint: Endpoint, onfinality_endpoint: Endpoint) -> Registry:
    """A local registry "Test" holding two Polkadot endpoints."""
    return Registry(
        name="Test",
        rpc_endpoints={"Polkadot": [parity_endpoint, onfinality_endpoint]},
    )


@pytest.fixture
def filter_registry() -> Registry:
    """Two chains sharing one URL, with registry labels attached."""
    registry = Registry(name="foo", url="http://foo.bar", labels=["glob1", "glob2"])
    registry.add_endpoint(
        "chain1",
        Endpoint(name="ep11", url="http://ep11.url", labels=["foo", "bar"], aliases=["one1"]),
    )
    registry.add_endpoint(
        "chain1",
        Endpoint(name="ep21", url="http://ep21.url", labels=["foo", "baz"], aliases=["one2"]),
    )
    registry.add_endpoint(
        "chain2",
        Endpoint(name="ep21", url="http://ep21.url", labels=["foo", "bar"], aliases=["two1"]),
    )
    registry.add_endpoint(
        "chain2",
        Endpoint(name="ep22", url="http://ep22.url", labels=["foo", "baz"], aliases=["two2"]),
    )
    return registry


@pytest.fixture
def registry_document() -> dict[str, Any]:
    """A remote registry document as published over HTTP."""
    return {
        "name": "Remote",
        "url": "https://example.org/registry.json",
        "labels": ["A", "B"],
        "rpc_endpoints": {
            "Polkadot": [
                {"name": "Parity", "url": "wss://rpc.polkadot.io:443", "labels": ["Parity"]},
            ],
            "Kusama": [
                {
                    "name": "OnFinality",
                    "url": "https://kusama.api.onfinality.io/public",
                    "aliases": ["ksm"],
                },
            ],
        },
    }


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data.json"


@pytest.fixture
def local_data(data_file: Path, test_registry: Registry) -> LocalData:
    """A LocalData holding the "Test" registry, not yet saved."""
    data = LocalData(file=data_file)
    data.add_registry(test_registry)
    return data
