"""Snapshot persistence over an injected key-value store.

Layout inside the store:
- ``latest_snapshot_key``: wire object of the most recent snapshot
  (last writer wins)
- ``history_key``: list of wire objects, newest first, one per timestamp,
  capped at ``history_limit``
- ``consent_key``: boolean, whether the user allowed local saving
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mindease.infrastructure.logging import get_logger
from mindease.services.snapshot_codec import decode, to_wire

if TYPE_CHECKING:
    from mindease.config import StorageSettings
    from mindease.domain.value_objects import AssessmentSnapshot
    from mindease.infrastructure.storage import KeyValueStore

logger = get_logger(__name__)


class SnapshotRepository:
    """Reads and writes assessment snapshots through a ``KeyValueStore``.

    Store failures propagate (``PersistenceError``) so the caller can decide
    how to degrade. Malformed stored records are skipped.
    """

    def __init__(self, store: KeyValueStore, settings: StorageSettings) -> None:
        """Initialize the repository.

        Args:
            store: Key-value store adapter.
            settings: Storage key names and history cap.
        """
        self._store = store
        self._latest_key = settings.latest_snapshot_key
        self._history_key = settings.history_key
        self._consent_key = settings.consent_key
        self._history_limit = settings.history_limit

    async def save(self, snapshot: AssessmentSnapshot) -> None:
        """Store ``snapshot`` as the latest one and upsert it into history."""
        wire = to_wire(snapshot)
        await self._store.set(self._latest_key, wire)

        history = [s for s in await self.load_history() if s.timestamp != snapshot.timestamp]
        history.append(snapshot)
        history.sort(key=lambda s: s.timestamp, reverse=True)
        kept = history[: self._history_limit]
        await self._store.set(self._history_key, [to_wire(s) for s in kept])

        logger.info(
            "Snapshot saved",
            snapshot_timestamp=snapshot.timestamp,
            history_size=len(kept),
            dropped=len(history) - len(kept),
        )

    async def load_latest(self) -> AssessmentSnapshot | None:
        """Most recently saved snapshot, or None if absent or corrupt."""
        return decode(await self._store.get(self._latest_key))

    async def load_history(self) -> list[AssessmentSnapshot]:
        """Stored snapshots, newest first. Corrupt entries are dropped."""
        raw = await self._store.get(self._history_key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Discarding malformed history", found=type(raw).__name__)
            return []

        snapshots = [s for s in (decode(item) for item in raw) if s is not None]
        if len(snapshots) != len(raw):
            logger.warning("Skipped invalid history records", skipped=len(raw) - len(snapshots))
        snapshots.sort(key=lambda s: s.timestamp, reverse=True)
        return snapshots

    async def delete(self, timestamp: float) -> bool:
        """Remove the snapshot with ``timestamp`` from history.

        The latest-snapshot slot is cleared too when it holds that snapshot.

        Returns:
            True if a history record was removed.
        """
        history = await self.load_history()
        remaining = [s for s in history if s.timestamp != timestamp]
        removed = len(remaining) != len(history)
        if removed:
            await self._store.set(self._history_key, [to_wire(s) for s in remaining])

        latest = await self.load_latest()
        if latest is not None and latest.timestamp == timestamp:
            await self._store.remove(self._latest_key)

        return removed

    async def clear(self) -> None:
        """Remove every stored snapshot and the consent flag."""
        await self._store.clear()

    async def load_consent(self) -> bool:
        """Whether the user allowed local saving (default: not allowed)."""
        return (await self._store.get(self._consent_key)) is True

    async def save_consent(self, allowed: bool) -> None:
        await self._store.set(self._consent_key, allowed)
