"""Persistent lint result cache."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from designlint.diagnostics import LintResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DocumentStat:
    mtime: float
    size: int | None = None


@dataclass(frozen=True, slots=True)
class CacheEntry:
    mtime: float
    size: int | None
    result: LintResult

    def matches(self, stat: DocumentStat) -> bool:
        if self.mtime != stat.mtime:
            return False
        return self.size is None or stat.size is None or self.size == stat.size

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"mtime": self.mtime, "result": self.result.to_json()}
        if self.size is not None:
            data["size"] = self.size
        return data

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> CacheEntry:
        if not isinstance(data, Mapping):
            raise TypeError(f"Cache entry must be an object, got {type(data).__name__}")
        size = data.get("size")
        return CacheEntry(
            mtime=float(data["mtime"]),
            size=int(size) if size is not None else None,
            result=LintResult.from_json(data["result"]),
        )


class CacheStore:
    """Document id to `CacheEntry` map, persisted as JSON on `save()`.

    A missing, corrupt or unreadable file loads as an empty store.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}
        self._dirty = False
        if self._path is not None:
            self._entries = _load(self._path)

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[key] = entry
            self._dirty = True

    def remove(self, key: str) -> None:
        with self._lock:
            if self._entries.pop(key, None) is not None:
                self._dirty = True

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def save(self) -> None:
        """Write the store atomically; a clean store is not rewritten."""
        if self._path is None:
            return
        with self._lock:
            if not self._dirty:
                return
            payload = {key: entry.to_json() for key, entry in self._entries.items()}
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            self._dirty = False


def prune(cache: CacheStore, ids: set[str] | frozenset[str]) -> list[str]:
    """Remove entries for documents absent from the current scan."""
    removed = [key for key in cache.keys() if key not in ids]
    for key in removed:
        cache.remove(key)
    return removed


def _load(path: Path) -> dict[str, CacheEntry]:
    if not path.exists():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable cache %s: %s", path, exc)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring cache %s: expected a JSON object", path)
        return {}
    entries: dict[str, CacheEntry] = {}
    for key, data in raw.items():
        try:
            entries[str(key)] = CacheEntry.from_json(data)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Dropping malformed cache entry %s: %s", key, exc)
    return entries
