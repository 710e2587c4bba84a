"""Document store abstraction and adapters."""

from .protocols import (
    Document,
    DocumentStore,
    Filter,
    Query,
    StoreTransaction,
    WriteKind,
    WriteOp,
)
from .memory_store import InMemoryDocumentStore, InMemoryTransaction
from .asyncpg_store import AsyncPGDocumentStore, AsyncPGTransaction, compile_query

__all__ = [
    # Contracts
    "Document",
    "DocumentStore",
    "Filter",
    "Query",
    "StoreTransaction",
    "WriteKind",
    "WriteOp",

    # Adapters
    "InMemoryDocumentStore",
    "InMemoryTransaction",
    "AsyncPGDocumentStore",
    "AsyncPGTransaction",
    "compile_query",
]
