"""Key-value store abstraction standing in for browser local/session storage.

Provides a ``KeyValueStore`` Protocol over string keys and string values,
an ``InMemoryStore`` for session-scoped data and tests, and a
``JsonFileStore`` that persists every key in a single JSON document on the
local device.
"""

import json
import os
from pathlib import Path
from typing import Protocol

import aiofiles
from loguru import logger


class KeyValueStore(Protocol):
    """Abstract string key-value storage.

    Implementations must provide async get, set, delete, and key listing.
    """

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store a value, replacing any existing one."""
        ...

    async def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        ...

    async def keys(self) -> list[str]:
        """Return every stored key."""
        ...


class InMemoryStore:
    """Process-local KeyValueStore backed by a dict."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """KeyValueStore persisted as one JSON object on the local filesystem.

    Every mutation rewrites the whole document through a temporary file
    and an atomic rename, so readers never see a half-written file.

    Args:
        path: Location of the JSON document (created on first write).
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def get(self, key: str) -> str | None:
        data = await self._load()
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        data = await self._load()
        data[key] = value
        await self._dump(data)

    async def delete(self, key: str) -> None:
        data = await self._load()
        if data.pop(key, None) is not None:
            await self._dump(data)

    async def keys(self) -> list[str]:
        return list(await self._load())

    async def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        async with aiofiles.open(self._path, encoding="utf-8") as f:
            raw = await f.read()
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Store file {} is not valid JSON; treating it as empty", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file {} does not hold an object; treating it as empty", self._path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    async def _dump(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data, indent=2, sort_keys=True))
        os.replace(tmp_path, self._path)
