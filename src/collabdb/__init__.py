"""collabdb - an in-memory relational backend for research collaboration data."""

from collabdb.client import BackendConfig, Client, create_client
from collabdb.errors import (
    ActionError,
    BackendError,
    CardinalityError,
    CollabDBError,
    UnknownTableError,
)
from collabdb.query import QueryBuilder, QueryError, QueryResult
from collabdb.relations import DEFAULT_RELATIONS, BelongsTo, Computed, HasMany, RelationAttacher
from collabdb.seed import create_demo_tables
from collabdb.storage import Blob, BlobStore, StorageClient
from collabdb.tables import TABLE_NAMES, TableStore

__version__ = "0.1.0"

__all__ = [
    "ActionError",
    "BackendConfig",
    "BackendError",
    "BelongsTo",
    "Blob",
    "BlobStore",
    "CardinalityError",
    "Client",
    "CollabDBError",
    "Computed",
    "DEFAULT_RELATIONS",
    "HasMany",
    "QueryBuilder",
    "QueryError",
    "QueryResult",
    "RelationAttacher",
    "StorageClient",
    "TABLE_NAMES",
    "TableStore",
    "UnknownTableError",
    "create_client",
    "create_demo_tables",
]
