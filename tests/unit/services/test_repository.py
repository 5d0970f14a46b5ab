"""Unit tests for SnapshotRepository."""

from __future__ import annotations

from typing import Any

import pytest

from mindease.config import StorageSettings
from mindease.domain.enums import AnxietySeverity, DepressionSeverity
from mindease.domain.exceptions import PersistenceError
from mindease.domain.value_objects import AssessmentSnapshot
from mindease.infrastructure.storage import InMemoryKeyValueStore
from mindease.services.repository import SnapshotRepository
from mindease.services.snapshot_codec import encode, to_wire

pytestmark = pytest.mark.unit


def _snapshot(timestamp: float, depression_total: int = 0) -> AssessmentSnapshot:
    depression = [0] * 9
    remaining = depression_total
    for index in range(9):
        depression[index] = min(3, remaining)
        remaining -= depression[index]
    band = DepressionSeverity.MINIMAL if depression_total < 5 else DepressionSeverity.MILD
    return encode(
        depression_responses=depression,
        anxiety_responses=[0] * 7,
        depression_total=depression_total,
        anxiety_total=0,
        depression_band=band,
        anxiety_band=AnxietySeverity.MINIMAL,
        timestamp=timestamp,
    )


class FailingStore:
    """Store whose every operation fails."""

    async def get(self, key: str) -> Any | None:
        raise PersistenceError("get", key, "unavailable")

    async def set(self, key: str, value: Any) -> None:
        raise PersistenceError("set", key, "unavailable")

    async def remove(self, key: str) -> None:
        raise PersistenceError("remove", key, "unavailable")

    async def clear(self) -> None:
        raise PersistenceError("clear", None, "unavailable")


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(prefix="mindease_")


@pytest.fixture
def repository(store: InMemoryKeyValueStore) -> SnapshotRepository:
    return SnapshotRepository(store, StorageSettings())


class TestSave:
    """Tests for saving snapshots."""

    @pytest.mark.asyncio
    async def test_save_sets_latest_and_history(
        self, repository: SnapshotRepository, store: InMemoryKeyValueStore
    ) -> None:
        snapshot = _snapshot(1000, 6)
        await repository.save(snapshot)

        assert await repository.load_latest() == snapshot
        assert await repository.load_history() == [snapshot]
        assert await store.get("latest_snapshot") == to_wire(snapshot)
        assert sorted(store.keys()) == ["assessments", "latest_snapshot"]

    @pytest.mark.asyncio
    async def test_history_newest_first(self, repository: SnapshotRepository) -> None:
        for ts in (2000, 1000, 3000):
            await repository.save(_snapshot(ts))

        history = await repository.load_history()
        assert [s.timestamp for s in history] == [3000, 2000, 1000]
        latest = await repository.load_latest()
        assert latest is not None
        assert latest.timestamp == 1000

    @pytest.mark.asyncio
    async def test_same_timestamp_replaces(self, repository: SnapshotRepository) -> None:
        await repository.save(_snapshot(1000, 2))
        await repository.save(_snapshot(1000, 7))

        history = await repository.load_history()
        assert len(history) == 1
        assert history[0].depression_total == 7

    @pytest.mark.asyncio
    async def test_history_capped(self, store: InMemoryKeyValueStore) -> None:
        repository = SnapshotRepository(store, StorageSettings(history_limit=3))
        for ts in range(1, 6):
            await repository.save(_snapshot(ts * 1000))

        history = await repository.load_history()
        assert [s.timestamp for s in history] == [5000, 4000, 3000]

    @pytest.mark.asyncio
    async def test_custom_keys(self, store: InMemoryKeyValueStore) -> None:
        settings = StorageSettings(latest_snapshot_key="last", history_key="all")
        repository = SnapshotRepository(store, settings)
        await repository.save(_snapshot(1000))
        assert sorted(store.keys()) == ["all", "last"]

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self) -> None:
        repository = SnapshotRepository(FailingStore(), StorageSettings())
        with pytest.raises(PersistenceError):
            await repository.save(_snapshot(1000))


class TestLoad:
    """Tests for reading possibly-corrupt stored data."""

    @pytest.mark.asyncio
    async def test_empty_store(self, repository: SnapshotRepository) -> None:
        assert await repository.load_latest() is None
        assert await repository.load_history() == []

    @pytest.mark.asyncio
    async def test_corrupt_latest(
        self, repository: SnapshotRepository, store: InMemoryKeyValueStore
    ) -> None:
        await store.set("latest_snapshot", {"timestamp": "garbage"})
        assert await repository.load_latest() is None

    @pytest.mark.asyncio
    async def test_history_not_a_list(
        self, repository: SnapshotRepository, store: InMemoryKeyValueStore
    ) -> None:
        await store.set("assessments", {"oops": True})
        assert await repository.load_history() == []

    @pytest.mark.asyncio
    async def test_history_skips_invalid_records(
        self, repository: SnapshotRepository, store: InMemoryKeyValueStore
    ) -> None:
        good = _snapshot(2000, 3)
        await store.set("assessments", [to_wire(good), {"timestamp": 1}, "junk", None])

        assert await repository.load_history() == [good]

    @pytest.mark.asyncio
    async def test_history_sorted_on_read(
        self, repository: SnapshotRepository, store: InMemoryKeyValueStore
    ) -> None:
        older, newer = _snapshot(1000), _snapshot(2000)
        await store.set("assessments", [to_wire(older), to_wire(newer)])
        assert await repository.load_history() == [newer, older]


class TestDeleteAndClear:
    """Tests for delete and clear."""

    @pytest.mark.asyncio
    async def test_delete_from_history(self, repository: SnapshotRepository) -> None:
        await repository.save(_snapshot(1000))
        await repository.save(_snapshot(2000))

        assert await repository.delete(1000) is True

        assert [s.timestamp for s in await repository.load_history()] == [2000]
        latest = await repository.load_latest()
        assert latest is not None
        assert latest.timestamp == 2000

    @pytest.mark.asyncio
    async def test_delete_latest_clears_slot(self, repository: SnapshotRepository) -> None:
        await repository.save(_snapshot(1000))
        await repository.save(_snapshot(2000))

        assert await repository.delete(2000) is True
        assert await repository.load_latest() is None

    @pytest.mark.asyncio
    async def test_delete_unknown(self, repository: SnapshotRepository) -> None:
        await repository.save(_snapshot(1000))
        assert await repository.delete(9999) is False
        assert len(await repository.load_history()) == 1

    @pytest.mark.asyncio
    async def test_clear(
        self, repository: SnapshotRepository, store: InMemoryKeyValueStore
    ) -> None:
        await repository.save(_snapshot(1000))
        await repository.save_consent(True)

        await repository.clear()

        assert store.keys() == []
        assert await repository.load_consent() is False


class TestConsent:
    """Tests for the save-consent flag."""

    @pytest.mark.asyncio
    async def test_default_is_not_allowed(self, repository: SnapshotRepository) -> None:
        assert await repository.load_consent() is False

    @pytest.mark.asyncio
    async def test_round_trip(self, repository: SnapshotRepository) -> None:
        await repository.save_consent(True)
        assert await repository.load_consent() is True
        await repository.save_consent(False)
        assert await repository.load_consent() is False

    @pytest.mark.asyncio
    async def test_only_literal_true_counts(
        self, repository: SnapshotRepository, store: InMemoryKeyValueStore
    ) -> None:
        await store.set("allow_save", "true")
        assert await repository.load_consent() is False
