"""Tests for the PostgreSQL document store adapter."""

import json
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from neo_access.core.exceptions import (
    BatchLimitExceededError,
    ConfigurationError,
    DocumentExistsError,
    NotFoundError,
    StoreError,
)
from neo_access.store import AsyncPGDocumentStore, Query, WriteOp, compile_query


@pytest.fixture
def connection():
    conn = MagicMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchval = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="DELETE 0")
    return conn


@pytest.fixture
def pool(connection):
    mock_pool = MagicMock()
    mock_pool.acquire.return_value.__aenter__.return_value = connection
    mock_pool.close = AsyncMock()
    return mock_pool


@pytest.fixture
def pg_store(pool):
    return AsyncPGDocumentStore(pool=pool, max_batch_size=3)


class TestCompileQuery:
    """Test SQL generation for queries."""

    def test_equality_filters(self):
        sql, args = compile_query("documents", Query("invites").where("createdBy", "u1"))

        assert sql == (
            "SELECT id, data FROM documents WHERE collection = $1 "
            "AND data -> $2 = $3::jsonb ORDER BY id"
        )
        assert args == ["invites", "createdBy", '"u1"']

    def test_in_not_equal_and_limit(self):
        query = (
            Query("tasks")
            .where("tenantId", ["T1", "T2"], "in")
            .where("status", "done", "!=")
            .with_limit(400)
        )

        sql, args = compile_query("app.documents", query)

        assert "data -> $2 = ANY($3::jsonb[])" in sql
        assert "(data -> $4) IS DISTINCT FROM $5::jsonb" in sql
        assert sql.endswith("ORDER BY id LIMIT $6")
        assert args == ["tasks", "tenantId", ['"T1"', '"T2"'], "status", '"done"', 400]


class TestAsyncPGDocumentStore:
    """Test the adapter against a mocked pool."""

    def test_rejects_unsafe_table_names(self):
        with pytest.raises(ConfigurationError):
            AsyncPGDocumentStore("postgresql://localhost/db", table="documents; DROP TABLE x")

    @pytest.mark.asyncio
    async def test_create_pool_requires_dsn(self):
        with pytest.raises(ConfigurationError):
            await AsyncPGDocumentStore().create_pool()

    @pytest.mark.asyncio
    async def test_get(self, pg_store, connection):
        connection.fetchrow.return_value = {"id": "5", "data": json.dumps({"name": "Acme"})}

        document = await pg_store.get("tenants", "5")

        assert document.id == "5"
        assert document.data == {"name": "Acme"}

    @pytest.mark.asyncio
    async def test_query(self, pg_store, connection):
        connection.fetch.return_value = [{"id": "t1", "data": '{"tenantId": "T1"}'}]

        documents = await pg_store.query(Query("tasks").where("tenantId", "T1"))

        assert [document.id for document in documents] == ["t1"]
        assert connection.fetch.call_args.args[1:] == ("tasks", "tenantId", '"T1"')

    @pytest.mark.asyncio
    async def test_create_conflict(self, pg_store, connection):
        connection.fetchval.return_value = None
        with pytest.raises(DocumentExistsError):
            await pg_store.create("invites", "ABC", {"isUsed": False})

        connection.fetchval.return_value = "ABC"
        document = await pg_store.create("invites", "ABC", {"isUsed": False})
        assert document.data == {"isUsed": False}

    @pytest.mark.asyncio
    async def test_update(self, pg_store, connection):
        with pytest.raises(NotFoundError):
            await pg_store.update("tenants", "404", {"status": "active"})

        connection.fetchval.return_value = '{"name": "Acme", "status": "active"}'
        document = await pg_store.update("tenants", "5", {"status": "active"})
        assert document.data == {"name": "Acme", "status": "active"}

    @pytest.mark.asyncio
    async def test_delete_reports_whether_a_row_went(self, pg_store, connection):
        connection.execute.return_value = "DELETE 1"
        assert await pg_store.delete("tasks", "t1")
        connection.execute.return_value = "DELETE 0"
        assert not await pg_store.delete("tasks", "t1")

    @pytest.mark.asyncio
    async def test_batch(self, pg_store, pool, connection):
        ops = [WriteOp.delete("tasks", "t1"), WriteOp.set("tasks", "t2", {"a": 1})]
        assert await pg_store.batch(ops) == 2
        assert connection.execute.await_count == 2

        with pytest.raises(BatchLimitExceededError):
            await pg_store.batch([WriteOp.delete("tasks", f"t{i}") for i in range(4)])
        assert connection.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_driver_errors_become_store_errors(self, pg_store, connection):
        connection.fetchrow.side_effect = asyncpg.PostgresError("connection lost")
        with pytest.raises(StoreError):
            await pg_store.get("tenants", "5")

    @pytest.mark.asyncio
    async def test_interface_errors_become_store_errors(self, pg_store, pool):
        pool.acquire.side_effect = asyncpg.InterfaceError("pool is closing")
        with pytest.raises(StoreError) as exc_info:
            await pg_store.batch([WriteOp.delete("tasks", "t1")])
        assert isinstance(exc_info.value.__cause__, asyncpg.InterfaceError)

    @pytest.mark.asyncio
    async def test_network_errors_become_store_errors(self, pg_store, connection):
        connection.fetch.side_effect = ConnectionResetError("connection reset by peer")
        with pytest.raises(StoreError):
            await pg_store.query(Query("tasks"))

    @pytest.mark.asyncio
    async def test_pool_creation_failure_becomes_store_error(self, mocker):
        mocker.patch(
            "neo_access.store.asyncpg_store.asyncpg.create_pool",
            side_effect=ConnectionRefusedError("connection refused"),
        )
        store = AsyncPGDocumentStore("postgresql://localhost/db")

        with pytest.raises(StoreError):
            await store.get("tenants", "5")
        assert store.pool is None

    @pytest.mark.asyncio
    async def test_transaction_retries_serialization_failures(self, pg_store):
        calls = []

        async def work(tx):
            calls.append(tx)
            if len(calls) == 1:
                raise asyncpg.exceptions.SerializationError("could not serialize access")
            return "done"

        assert await pg_store.run_transaction(work) == "done"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_transaction_gives_up(self, pg_store):
        async def work(tx):
            raise asyncpg.exceptions.SerializationError("could not serialize access")

        with pytest.raises(StoreError):
            await pg_store.run_transaction(work)

    @pytest.mark.asyncio
    async def test_ensure_schema_creates_table(self, pg_store, connection):
        await pg_store.ensure_schema()

        sql = connection.execute.await_args.args[0]
        assert sql.startswith("CREATE TABLE IF NOT EXISTS documents (")
        assert "PRIMARY KEY (collection, id)" in sql

    @pytest.mark.asyncio
    async def test_close_pool(self, pg_store, pool):
        await pg_store.close_pool()
        pool.close.assert_awaited_once()
        assert pg_store.pool is None
