"""
PostgreSQL document store using asyncpg.

Documents live in a single JSONB table keyed by ``(collection, id)``:

    CREATE TABLE documents (
        collection TEXT NOT NULL,
        id TEXT NOT NULL,
        data JSONB NOT NULL,
        PRIMARY KEY (collection, id)
    );
"""
import json
import logging
import re
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

import asyncpg
from asyncpg import Pool

from ..core.exceptions import (
    BatchLimitExceededError,
    ConfigurationError,
    DocumentExistsError,
    NotFoundError,
    StoreError,
)
from .protocols import Document, Filter, Query, WriteKind, WriteOp

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TABLE_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*(\.[a-z_][a-z0-9_]*)?$")

_SQL_OPERATORS = {
    "==": "=",
    "<": "<",
    "<=": "<=",
    ">": ">",
    ">=": ">=",
}

SERIALIZATION_RETRIES = 3

# Driver and transport failures reported as StoreError.
CONNECTION_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def _dumps(value: Any) -> str:
    return json.dumps(value, default=str)


def _loads(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, (bytes, str)):
        return json.loads(raw)
    return dict(raw)


def compile_filter(flt: Filter, position: int) -> Tuple[str, List[Any]]:
    """Compile one filter into a SQL predicate and its parameters.

    ``position`` is the index of the first free ``$n`` placeholder.
    """
    key = f"${position}"
    val = f"${position + 1}"
    if flt.op == "in":
        return (
            f"data -> {key} = ANY({val}::jsonb[])",
            [flt.field, [_dumps(v) for v in flt.value]],
        )
    if flt.op == "!=":
        return f"(data -> {key}) IS DISTINCT FROM {val}::jsonb", [flt.field, _dumps(flt.value)]
    return f"data -> {key} {_SQL_OPERATORS[flt.op]} {val}::jsonb", [flt.field, _dumps(flt.value)]


def compile_query(table: str, query: Query) -> Tuple[str, List[Any]]:
    """Compile a ``Query`` into a parameterised SELECT statement."""
    clauses = ["collection = $1"]
    args: List[Any] = [query.collection]
    for flt in query.filters:
        clause, params = compile_filter(flt, len(args) + 1)
        clauses.append(clause)
        args.extend(params)
    sql = f"SELECT id, data FROM {table} WHERE {' AND '.join(clauses)} ORDER BY id"
    if query.limit is not None:
        args.append(query.limit)
        sql += f" LIMIT ${len(args)}"
    return sql, args


class AsyncPGTransaction:
    """Transaction bound to one pooled connection."""

    def __init__(self, connection, table: str):
        self._connection = connection
        self._table = table

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        row = await self._connection.fetchrow(
            f"SELECT id, data FROM {self._table} WHERE collection = $1 AND id = $2 FOR UPDATE",
            collection,
            doc_id,
        )
        return Document(row["id"], _loads(row["data"])) if row else None

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        await self._connection.execute(
            f"INSERT INTO {self._table} (collection, id, data) VALUES ($1, $2, $3::jsonb) "
            f"ON CONFLICT (collection, id) DO UPDATE SET data = EXCLUDED.data",
            collection,
            doc_id,
            _dumps(data),
        )

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        result = await self._connection.fetchval(
            f"UPDATE {self._table} SET data = data || $3::jsonb "
            f"WHERE collection = $1 AND id = $2 RETURNING id",
            collection,
            doc_id,
            _dumps(data),
        )
        if result is None:
            raise NotFoundError(
                f"Document {collection}/{doc_id} not found",
                details={"collection": collection, "id": doc_id},
            )

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._connection.execute(
            f"DELETE FROM {self._table} WHERE collection = $1 AND id = $2",
            collection,
            doc_id,
        )


class AsyncPGDocumentStore:
    """``DocumentStore`` backed by a PostgreSQL JSONB table."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        table: str = "documents",
        max_batch_size: int = 500,
        pool: Optional[Pool] = None,
        **pool_config
    ):
        """Initialize the store.

        Args:
            database_url: PostgreSQL DSN, used when no pool is supplied
            table: Documents table, optionally schema-qualified
            max_batch_size: Ceiling for a single ``batch`` call
            pool: Existing asyncpg pool to reuse
            **pool_config: Additional pool configuration options
        """
        if not _TABLE_PATTERN.match(table):
            raise ConfigurationError(f"Invalid documents table name: {table}")
        self.pool: Optional[Pool] = pool
        self.dsn = (database_url or "").replace("+asyncpg", "")
        self.table = table
        self._max_batch_size = max_batch_size
        self.pool_config = {
            "min_size": 2,
            "max_size": 10,
            "command_timeout": 60,
            **pool_config
        }

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    async def create_pool(self) -> Pool:
        """Create and return a connection pool."""
        if self.pool is None:
            if not self.dsn:
                raise ConfigurationError("database_url is required to create a pool")
            logger.info(f"Creating document store pool with size {self.pool_config['max_size']}")
            self.pool = await asyncpg.create_pool(self.dsn, **self.pool_config)
        return self.pool

    async def close_pool(self):
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Document store pool closed")

    @asynccontextmanager
    async def acquire(self):
        """Acquire a connection, translating driver and network errors into ``StoreError``."""
        try:
            if not self.pool:
                await self.create_pool()
            async with self.pool.acquire() as connection:
                yield connection
        except CONNECTION_ERRORS as e:
            logger.error(f"Document store operation failed: {e}")
            raise StoreError(f"Document store operation failed: {e}") from e

    async def ensure_schema(self) -> None:
        """Create the documents table if it does not exist."""
        async with self.acquire() as connection:
            await connection.execute(
                f"CREATE TABLE IF NOT EXISTS {self.table} ("
                f"collection TEXT NOT NULL, id TEXT NOT NULL, data JSONB NOT NULL, "
                f"PRIMARY KEY (collection, id))"
            )

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        async with self.acquire() as connection:
            row = await connection.fetchrow(
                f"SELECT id, data FROM {self.table} WHERE collection = $1 AND id = $2",
                collection,
                doc_id,
            )
        return Document(row["id"], _loads(row["data"])) if row else None

    async def query(self, query: Query) -> List[Document]:
        sql, args = compile_query(self.table, query)
        async with self.acquire() as connection:
            rows = await connection.fetch(sql, *args)
        return [Document(row["id"], _loads(row["data"])) for row in rows]

    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        async with self.acquire() as connection:
            inserted = await connection.fetchval(
                f"INSERT INTO {self.table} (collection, id, data) VALUES ($1, $2, $3::jsonb) "
                f"ON CONFLICT (collection, id) DO NOTHING RETURNING id",
                collection,
                doc_id,
                _dumps(data),
            )
        if inserted is None:
            raise DocumentExistsError(
                f"Document {collection}/{doc_id} already exists",
                details={"collection": collection, "id": doc_id},
            )
        return Document(doc_id, dict(data))

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        async with self.acquire() as connection:
            await AsyncPGTransaction(connection, self.table).set(collection, doc_id, data)
        return Document(doc_id, dict(data))

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        async with self.acquire() as connection:
            raw = await connection.fetchval(
                f"UPDATE {self.table} SET data = data || $3::jsonb "
                f"WHERE collection = $1 AND id = $2 RETURNING data",
                collection,
                doc_id,
                _dumps(data),
            )
        if raw is None:
            raise NotFoundError(
                f"Document {collection}/{doc_id} not found",
                details={"collection": collection, "id": doc_id},
            )
        return Document(doc_id, _loads(raw))

    async def delete(self, collection: str, doc_id: str) -> bool:
        async with self.acquire() as connection:
            status = await connection.execute(
                f"DELETE FROM {self.table} WHERE collection = $1 AND id = $2",
                collection,
                doc_id,
            )
        return status.endswith(" 1")

    async def batch(self, ops: Sequence[WriteOp]) -> int:
        if len(ops) > self._max_batch_size:
            raise BatchLimitExceededError(
                f"Batch of {len(ops)} writes exceeds the limit of {self._max_batch_size}",
                details={"size": len(ops), "limit": self._max_batch_size},
            )
        async with self.acquire() as connection:
            async with connection.transaction():
                tx = AsyncPGTransaction(connection, self.table)
                for op in ops:
                    if op.kind == WriteKind.DELETE:
                        await tx.delete(op.collection, op.id)
                    elif op.kind == WriteKind.SET:
                        await tx.set(op.collection, op.id, op.data or {})
                    else:
                        await tx.update(op.collection, op.id, op.data or {})
        logger.debug(f"Applied batch of {len(ops)} writes to {self.table}")
        return len(ops)

    async def run_transaction(self, fn: Callable[[AsyncPGTransaction], Awaitable[T]]) -> T:
        """Run ``fn`` under SERIALIZABLE isolation, retrying serialization failures."""
        for attempt in range(1, SERIALIZATION_RETRIES + 1):
            try:
                async with self.acquire() as connection:
                    async with connection.transaction(isolation="serializable"):
                        return await fn(AsyncPGTransaction(connection, self.table))
            except StoreError as e:
                if not isinstance(e.__cause__, asyncpg.exceptions.SerializationError):
                    raise
                logger.warning(f"Serialization failure on attempt {attempt}, retrying")
        raise StoreError("Transaction could not be serialized")
