"""Key-value persistence boundary.

The engine never persists anything itself. Whatever orchestrates it is
handed a ``KeyValueStore`` (structural protocol, so any object with the
four coroutines qualifies). Two adapters ship with the package:

- InMemoryKeyValueStore: process-local dict, used by tests and embedders
  that persist elsewhere.
- JsonFileKeyValueStore: a single JSON document on disk.

Values must be JSON-compatible. Adapters raise ``PersistenceError`` on
failure; callers decide whether that is fatal (the assessment service
treats it as "nothing saved").
"""

from __future__ import annotations

import asyncio
import copy
import json
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from mindease.domain.exceptions import PersistenceError
from mindease.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Asynchronous key-value mapping used for snapshots and preferences."""

    async def get(self, key: str) -> Any | None:
        """Return the stored value, or None when the key is absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value under ``key``."""
        ...

    async def remove(self, key: str) -> None:
        """Delete ``key``; removing an absent key is not an error."""
        ...

    async def clear(self) -> None:
        """Delete every key owned by this store."""
        ...


class InMemoryKeyValueStore:
    """Dict-backed store with a key prefix.

    Values are deep-copied on the way in and out so callers cannot mutate
    stored state through a reference they hold.
    """

    def __init__(self, prefix: str = "", data: dict[str, Any] | None = None) -> None:
        """Initialize the store.

        Args:
            prefix: Namespace prepended to every key.
            data: Optional backing dict, shared with other prefixes.
        """
        self._prefix = prefix
        self._data: dict[str, Any] = data if data is not None else {}

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(self._key(key)))

    async def set(self, key: str, value: Any) -> None:
        self._data[self._key(key)] = copy.deepcopy(value)

    async def remove(self, key: str) -> None:
        self._data.pop(self._key(key), None)

    async def clear(self) -> None:
        for key in [k for k in self._data if k.startswith(self._prefix)]:
            del self._data[key]

    def keys(self) -> list[str]:
        """Unprefixed keys currently stored."""
        return [k[len(self._prefix) :] for k in self._data if k.startswith(self._prefix)]


class JsonFileKeyValueStore:
    """Store backed by one JSON object on disk.

    Each operation reads the file, applies the change and writes it back
    through a temporary file. Blocking I/O runs in a worker thread.
    """

    def __init__(self, path: Path, prefix: str = "") -> None:
        """Initialize the store.

        Args:
            path: JSON document location (created on first write).
            prefix: Namespace prepended to every key.
        """
        self._path = path
        self._prefix = prefix
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """Backing file location."""
        return self._path

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise PersistenceError("read", None, f"{self._path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError("read", None, f"{self._path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self._path)

    async def _run(self, operation: str, key: str | None, func: Any, *args: Any) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except PersistenceError:
            raise
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(operation, key, str(e)) from e

    async def get(self, key: str) -> Any | None:
        data = await self._run("get", key, self._read)
        return data.get(self._key(key))

    async def set(self, key: str, value: Any) -> None:
        def update() -> None:
            data = self._read()
            data[self._key(key)] = value
            self._write(data)

        async with self._lock:
            await self._run("set", key, update)
        logger.debug("Stored key", key=key, path=str(self._path))

    async def remove(self, key: str) -> None:
        def update() -> None:
            data = self._read()
            if self._key(key) in data:
                del data[self._key(key)]
                self._write(data)

        async with self._lock:
            await self._run("remove", key, update)

    async def clear(self) -> None:
        def update() -> None:
            data = self._read()
            kept = {k: v for k, v in data.items() if not k.startswith(self._prefix)}
            if len(kept) != len(data):
                self._write(kept)

        async with self._lock:
            await self._run("clear", None, update)
