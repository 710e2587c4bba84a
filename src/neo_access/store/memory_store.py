"""In-memory document store adapter.

Used by the test-suite and for local runs. Every operation yields to the
event loop before touching state so concurrent callers interleave the way
they would against a networked store.
"""

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from ..core.exceptions import BatchLimitExceededError, DocumentExistsError, NotFoundError
from .protocols import Document, Query, WriteKind, WriteOp

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_BATCH_SIZE = 500

_DELETED = object()


class InMemoryTransaction:
    """Buffered transaction over an ``InMemoryDocumentStore``."""

    def __init__(self, store: "InMemoryDocumentStore"):
        self._store = store
        self._writes: Dict[tuple, Any] = {}

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        await asyncio.sleep(0)
        key = (collection, doc_id)
        if key in self._writes:
            pending = self._writes[key]
            if pending is _DELETED:
                return None
            return Document(doc_id, copy.deepcopy(pending))
        return self._store._read(collection, doc_id)

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._writes[(collection, doc_id)] = copy.deepcopy(data)

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        current = await self.get(collection, doc_id)
        if current is None:
            raise NotFoundError(
                f"Document {collection}/{doc_id} not found",
                details={"collection": collection, "id": doc_id},
            )
        merged = dict(current.data)
        merged.update(copy.deepcopy(data))
        self._writes[(collection, doc_id)] = merged

    async def delete(self, collection: str, doc_id: str) -> None:
        self._writes[(collection, doc_id)] = _DELETED

    def _commit(self) -> None:
        for (collection, doc_id), data in self._writes.items():
            bucket = self._store._collections.setdefault(collection, {})
            if data is _DELETED:
                bucket.pop(doc_id, None)
            else:
                bucket[doc_id] = data


class InMemoryDocumentStore:
    """Dictionary backed ``DocumentStore``.

    Writes and transactions are serialised by one ``asyncio.Lock``. Reads are
    lock-free and always observe committed state.
    """

    def __init__(self, max_batch_size: int = DEFAULT_MAX_BATCH_SIZE):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._max_batch_size = max_batch_size
        self._lock = asyncio.Lock()

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    def _read(self, collection: str, doc_id: str) -> Optional[Document]:
        data = self._collections.get(collection, {}).get(doc_id)
        if data is None:
            return None
        return Document(doc_id, copy.deepcopy(data))

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        await asyncio.sleep(0)
        return self._read(collection, doc_id)

    async def query(self, query: Query) -> List[Document]:
        await asyncio.sleep(0)
        results = [
            Document(doc_id, copy.deepcopy(data))
            for doc_id, data in self._collections.get(query.collection, {}).items()
            if query.matches(data)
        ]
        if query.limit is not None:
            results = results[: query.limit]
        return results

    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        await asyncio.sleep(0)
        async with self._lock:
            bucket = self._collections.setdefault(collection, {})
            if doc_id in bucket:
                raise DocumentExistsError(
                    f"Document {collection}/{doc_id} already exists",
                    details={"collection": collection, "id": doc_id},
                )
            bucket[doc_id] = copy.deepcopy(data)
            return Document(doc_id, copy.deepcopy(data))

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        await asyncio.sleep(0)
        async with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
            return Document(doc_id, copy.deepcopy(data))

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        await asyncio.sleep(0)
        async with self._lock:
            current = self._collections.get(collection, {}).get(doc_id)
            if current is None:
                raise NotFoundError(
                    f"Document {collection}/{doc_id} not found",
                    details={"collection": collection, "id": doc_id},
                )
            current.update(copy.deepcopy(data))
            return Document(doc_id, copy.deepcopy(current))

    async def delete(self, collection: str, doc_id: str) -> bool:
        await asyncio.sleep(0)
        async with self._lock:
            return self._collections.get(collection, {}).pop(doc_id, None) is not None

    async def batch(self, ops: Sequence[WriteOp]) -> int:
        if len(ops) > self._max_batch_size:
            raise BatchLimitExceededError(
                f"Batch of {len(ops)} writes exceeds the limit of {self._max_batch_size}",
                details={"size": len(ops), "limit": self._max_batch_size},
            )
        await asyncio.sleep(0)
        async with self._lock:
            for op in ops:
                if op.kind == WriteKind.UPDATE and op.id not in self._collections.get(op.collection, {}):
                    raise NotFoundError(
                        f"Document {op.collection}/{op.id} not found",
                        details={"collection": op.collection, "id": op.id},
                    )
            for op in ops:
                bucket = self._collections.setdefault(op.collection, {})
                if op.kind == WriteKind.DELETE:
                    bucket.pop(op.id, None)
                elif op.kind == WriteKind.SET:
                    bucket[op.id] = copy.deepcopy(op.data or {})
                else:
                    bucket[op.id].update(copy.deepcopy(op.data or {}))
        logger.debug(f"Applied batch of {len(ops)} writes")
        return len(ops)

    async def run_transaction(self, fn: Callable[[InMemoryTransaction], Awaitable[T]]) -> T:
        async with self._lock:
            transaction = InMemoryTransaction(self)
            result = await fn(transaction)
            transaction._commit()
            return result

    def count(self, collection: str, **equals: Any) -> int:
        """Synchronous helper for inspecting state in tests and local tooling."""
        return sum(
            1
            for data in self._collections.get(collection, {}).values()
            if all(data.get(k) == v for k, v in equals.items())
        )
