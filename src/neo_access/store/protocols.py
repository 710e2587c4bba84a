"""Document store contracts.

The access-control core never talks to a database directly. Every read and
write goes through a ``DocumentStore``: a collection/id keyed store of JSON
documents with equality filters, bounded batches and serializable
transactions. Adapters live next to this module.
"""

from abc import abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
    runtime_checkable,
)


T = TypeVar("T")

SUPPORTED_OPERATORS = ("==", "!=", "<", "<=", ">", ">=", "in")


@dataclass(frozen=True)
class Filter:
    """Single field predicate applied to a document's top-level keys."""

    field: str
    value: Any
    op: str = "=="

    def __post_init__(self):
        if self.op not in SUPPORTED_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op}")
        if self.op == "in" and not isinstance(self.value, (list, tuple, set, frozenset)):
            raise ValueError("'in' filters require a sequence value")

    def matches(self, data: Mapping[str, Any]) -> bool:
        """Evaluate the predicate against a document body."""
        if self.op == "!=":
            return data.get(self.field) != self.value
        if self.field not in data:
            return False
        current = data[self.field]
        if self.op == "==":
            return current == self.value
        if self.op == "in":
            return current in self.value
        if current is None or self.value is None:
            return False
        try:
            if self.op == "<":
                return current < self.value
            if self.op == "<=":
                return current <= self.value
            if self.op == ">":
                return current > self.value
            return current >= self.value
        except TypeError:
            return False


@dataclass(frozen=True)
class Query:
    """Filtered read over one collection."""

    collection: str
    filters: Tuple[Filter, ...] = ()
    limit: Optional[int] = None

    def where(self, field: str, value: Any, op: str = "==") -> "Query":
        """Return a new query with one more filter."""
        return replace(self, filters=self.filters + (Filter(field, value, op),))

    def without_field(self, field: str) -> "Query":
        """Return a new query with every filter on ``field`` removed."""
        return replace(self, filters=tuple(f for f in self.filters if f.field != field))

    def filters_on(self, field: str) -> List[Filter]:
        return [f for f in self.filters if f.field == field]

    def with_limit(self, limit: Optional[int]) -> "Query":
        return replace(self, limit=limit)

    def matches(self, data: Mapping[str, Any]) -> bool:
        return all(f.matches(data) for f in self.filters)


@dataclass(frozen=True)
class Document:
    """Stored document: its id plus the JSON body."""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


class WriteKind(str, Enum):
    """Batched write operations."""

    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class WriteOp:
    """One write inside an atomic batch."""

    kind: WriteKind
    collection: str
    id: str
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def set(cls, collection: str, doc_id: str, data: Dict[str, Any]) -> "WriteOp":
        return cls(WriteKind.SET, collection, doc_id, data)

    @classmethod
    def update(cls, collection: str, doc_id: str, data: Dict[str, Any]) -> "WriteOp":
        return cls(WriteKind.UPDATE, collection, doc_id, data)

    @classmethod
    def delete(cls, collection: str, doc_id: str) -> "WriteOp":
        return cls(WriteKind.DELETE, collection, doc_id)


@runtime_checkable
class StoreTransaction(Protocol):
    """Serializable unit of work handed to ``DocumentStore.run_transaction``.

    Reads inside the transaction observe a consistent snapshot; writes become
    visible only when the callback returns without raising.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Read a document, locking it for the rest of the transaction."""
        ...

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """Protocol for the document store behind every access-control decision."""

    @property
    @abstractmethod
    def max_batch_size(self) -> int:
        """Largest number of writes accepted by a single ``batch`` call."""
        ...

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Get a document by id, or None when it does not exist."""
        ...

    @abstractmethod
    async def query(self, query: Query) -> List[Document]:
        """Return every document matching all filters of ``query``."""
        ...

    @abstractmethod
    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        """Insert a document if its id is free.

        Raises:
            DocumentExistsError: If the id is already taken
        """
        ...

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        """Create or fully replace a document."""
        ...

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Document:
        """Merge top-level keys into an existing document.

        Raises:
            NotFoundError: If the document does not exist
        """
        ...

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Deleting a missing document is a no-op returning False."""
        ...

    @abstractmethod
    async def batch(self, ops: Sequence[WriteOp]) -> int:
        """Apply writes atomically and return how many were applied.

        Raises:
            BatchLimitExceededError: If ``len(ops)`` exceeds ``max_batch_size``
        """
        ...

    @abstractmethod
    async def run_transaction(self, fn: Callable[[StoreTransaction], Awaitable[T]]) -> T:
        """Run ``fn`` inside a serializable transaction and return its result."""
        ...
