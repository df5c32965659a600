# src/taskflow/session/storage.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
PROFILE_KEY = "profile"
LEGACY_USER_KEY = "user"


class FileStorage:
    """
    Durable string-keyed storage backed by a single JSON object on disk.

    - Reads the file lazily and caches it in memory.
    - Every write goes through an atomic replace (tmp file + os.replace).
    - The file holds a bearer token, so it is created private (0600) where the FS allows.

    A missing or unreadable file is treated as empty storage.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._cache: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._cache is not None:
            return self._cache

        data: dict[str, str] = {}
        if self._path.exists():
            try:
                raw = json.loads(self._path.read_text("utf-8"))
                if isinstance(raw, dict):
                    data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
                else:
                    logger.warning("Storage file %s is not a JSON object; ignoring it.", self._path)
            except (OSError, ValueError):
                logger.exception("Failed to read storage from %s", self._path)
        self._cache = data
        return data

    def _flush(self) -> None:
        data = self._load()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        # A stale tmp file would keep its old mode; start from a fresh 0600 inode.
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self._path)

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._load()[key] = str(value)
        self._flush()

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        self._flush()


class MemoryStorage:
    """Non-durable storage: same interface, lives and dies with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)
