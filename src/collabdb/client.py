"""Client wiring the table store, relations and blob storage together."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Mapping, Sequence

from collabdb.query import QueryBuilder
from collabdb.relations import DEFAULT_RELATIONS, Relation, RelationAttacher
from collabdb.seed import create_demo_tables
from collabdb.storage import BlobStore, StorageClient
from collabdb.tables import TableStore, utc_now


@dataclass(frozen=True)
class BackendConfig:
    """Tunables for a client.

    Attributes:
        query_latency: Seconds every query execution waits before running.
        storage_latency: Seconds every upload or download waits.
        seed: Populate the store with demo content at construction.
        clock: Source of the current time for timestamps.
    """

    query_latency: float = 0.14
    storage_latency: float = 0.12
    seed: bool = True
    clock: Callable[[], datetime] = field(default=utc_now)

    def __post_init__(self) -> None:
        if self.query_latency <= 0:
            raise ValueError(f"query_latency must be positive, got {self.query_latency}")
        if self.storage_latency <= 0:
            raise ValueError(f"storage_latency must be positive, got {self.storage_latency}")


class Client:
    """Entry point mirroring a hosted backend SDK: client.from_(table), client.storage."""

    def __init__(
        self,
        store: TableStore,
        *,
        blobs: BlobStore | None = None,
        relations: Mapping[str, Sequence[Relation]] = DEFAULT_RELATIONS,
        config: BackendConfig | None = None,
    ) -> None:
        self.config = config or BackendConfig()
        self.store = store
        self.attacher = RelationAttacher(store, relations)
        self.storage = StorageClient(blobs or BlobStore(), latency=self.config.storage_latency)

    def from_(self, table: str) -> QueryBuilder:
        """Start a query against a table. Unknown tables fail at execution."""
        return QueryBuilder(
            table,
            self.store,
            self.attacher,
            latency=self.config.query_latency,
            clock=self.config.clock,
        )

    table = from_


def create_client(config: BackendConfig | None = None) -> Client:
    """Build a client over a freshly constructed store."""
    config = config or BackendConfig()
    tables = create_demo_tables(config.clock()) if config.seed else None
    return Client(TableStore(tables), config=config)
