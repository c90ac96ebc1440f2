"""Shared fixtures: fast clients with a fixed clock."""

from datetime import datetime, timezone

import pytest

from collabdb.client import BackendConfig, Client, create_client
from collabdb.tables import TableStore

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def config() -> BackendConfig:
    return BackendConfig(query_latency=0.001, storage_latency=0.001, seed=False, clock=fixed_clock)


@pytest.fixture
def empty_client(config: BackendConfig) -> Client:
    """A client over 31 empty tables."""
    return create_client(config)


@pytest.fixture
def seeded_client() -> Client:
    """A client over the demo content."""
    return create_client(BackendConfig(query_latency=0.001, storage_latency=0.001, clock=fixed_clock))


@pytest.fixture
def make_client(config: BackendConfig):
    """Build a client over the given initial rows."""

    def build(**tables) -> Client:
        return Client(TableStore(tables), config=config)

    return build
