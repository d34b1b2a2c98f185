"""Unit tests for the in-memory stores."""

from __future__ import annotations

import asyncio

import pytest

from auth_gateway.database.memory import (
    InMemoryApiKeyStore,
    InMemoryProductStore,
    InMemoryUserStore,
)
from auth_gateway.database.models import ApiKeyRecord
from auth_gateway.database.protocols import ApiKeyStore, ProductStore, UserStore


pytestmark = pytest.mark.unit


class TestInMemoryProductStore:
    """Tests for InMemoryProductStore."""

    @pytest.fixture
    def store(self) -> InMemoryProductStore:
        return InMemoryProductStore()

    def test_satisfies_protocol(self, store: InMemoryProductStore) -> None:
        """Should implement ProductStore."""
        assert isinstance(store, ProductStore)

    @pytest.mark.asyncio
    async def test_create_assigns_unique_ids(self, store: InMemoryProductStore) -> None:
        """Should give every product its own id."""
        first = await store.create({"name": "Laptop", "category": "Tech", "price": 1.0})
        second = await store.create({"name": "Laptop", "category": "Tech", "price": 1.0})

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_list_in_insertion_order(self, store: InMemoryProductStore) -> None:
        """Should list products in the order they were created."""
        names = ["a", "b", "c"]
        for name in names:
            await store.create({"name": name, "category": "x", "price": 0.0})

        assert [p.name for p in await store.list_all()] == names

    @pytest.mark.asyncio
    async def test_list_is_repeatable(self, store: InMemoryProductStore) -> None:
        """Should return the same result on repeated reads."""
        await store.create({"name": "a", "category": "x", "price": 0.0})

        assert await store.list_all() == await store.list_all()

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, store: InMemoryProductStore) -> None:
        """Should change only the given fields and keep the id."""
        product = await store.create({"name": "a", "category": "x", "price": 1.0})

        updated = await store.update(product.id, {"price": 2.5})

        assert updated is not None
        assert updated.id == product.id
        assert updated.name == "a"
        assert updated.price == 2.5
        assert (await store.list_all())[0] == updated

    @pytest.mark.asyncio
    async def test_update_keeps_position(self, store: InMemoryProductStore) -> None:
        """Should keep an updated product at its original position."""
        first = await store.create({"name": "a", "category": "x", "price": 1.0})
        await store.create({"name": "b", "category": "x", "price": 1.0})

        await store.update(first.id, {"name": "z"})

        assert [p.name for p in await store.list_all()] == ["z", "b"]

    @pytest.mark.asyncio
    async def test_update_unknown(self, store: InMemoryProductStore) -> None:
        """Should return None for an unknown id."""
        assert await store.update("missing", {"price": 1.0}) is None

    @pytest.mark.asyncio
    async def test_delete(self, store: InMemoryProductStore) -> None:
        """Should remove the product once."""
        product = await store.create({"name": "a", "category": "x", "price": 1.0})

        assert await store.delete(product.id) is True
        assert await store.delete(product.id) is False
        assert await store.list_all() == []

    @pytest.mark.asyncio
    async def test_concurrent_creates(self, store: InMemoryProductStore) -> None:
        """Should keep every product created concurrently."""
        await asyncio.gather(
            *(
                store.create({"name": str(i), "category": "x", "price": float(i)})
                for i in range(50)
            )
        )

        assert len(await store.list_all()) == 50


class TestInMemoryUserStore:
    """Tests for InMemoryUserStore."""

    @pytest.mark.asyncio
    async def test_add_and_get(self) -> None:
        """Should return the stored record."""
        store = InMemoryUserStore()
        assert isinstance(store, UserStore)

        await store.add("admin", "hash")

        record = await store.get("admin")
        assert record is not None
        assert record.password_hash == "hash"
        assert await store.get("ghost") is None

    @pytest.mark.asyncio
    async def test_add_replaces(self) -> None:
        """Should replace the hash when a user is added again."""
        store = InMemoryUserStore()
        await store.add("admin", "old")
        await store.add("admin", "new")

        record = await store.get("admin")
        assert record is not None
        assert record.password_hash == "new"


class TestInMemoryApiKeyStore:
    """Tests for InMemoryApiKeyStore."""

    @pytest.mark.asyncio
    async def test_set_active(self) -> None:
        """Should flip the active flag of an existing key."""
        store = InMemoryApiKeyStore()
        assert isinstance(store, ApiKeyStore)
        await store.add(ApiKeyRecord(key="K1", owner="alice"))

        assert await store.set_active("K1", False) is True

        record = await store.get("K1")
        assert record is not None
        assert record.active is False
        assert record.owner == "alice"

    @pytest.mark.asyncio
    async def test_set_active_unknown(self) -> None:
        """Should report an unknown key."""
        assert await InMemoryApiKeyStore().set_active("nope", True) is False
