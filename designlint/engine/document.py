"""Documents the linter reads, stats and writes back."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol

from designlint.cache import DocumentStat

_EXTENSION_TYPES: Final[dict[str, str]] = {
    ".css": "css",
    ".scss": "scss",
    ".less": "less",
    ".sass": "sass",
    ".ts": "ts",
    ".mts": "mts",
    ".cts": "cts",
    ".tsx": "tsx",
    ".js": "js",
    ".jsx": "jsx",
    ".mjs": "mjs",
    ".cjs": "cjs",
    ".vue": "vue",
    ".svelte": "svelte",
}


def document_type_for_path(path: str | Path) -> str:
    """Document type for a file name; unknown extensions map to their bare suffix."""
    suffix = Path(path).suffix.lower()
    return _EXTENSION_TYPES.get(suffix, suffix.removeprefix("."))


class LintDocument(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def type(self) -> str: ...

    async def get_text(self) -> str: ...

    async def stat(self) -> DocumentStat | None: ...

    async def write_text(self, text: str) -> None: ...


@dataclass(frozen=True, slots=True)
class FileDocument:
    """File-backed document keyed by its absolute path."""

    path: Path
    type: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path).resolve())
        if not self.type:
            object.__setattr__(self, "type", document_type_for_path(self.path))

    @property
    def id(self) -> str:
        return str(self.path)

    async def get_text(self) -> str:
        return await asyncio.to_thread(self.path.read_text, encoding="utf-8")

    async def stat(self) -> DocumentStat:
        result = await asyncio.to_thread(self.path.stat)
        return DocumentStat(mtime=result.st_mtime, size=result.st_size)

    async def write_text(self, text: str) -> None:
        await asyncio.to_thread(self.path.write_text, text, encoding="utf-8")


@dataclass(slots=True)
class TextDocument:
    """In-memory document; it has no stat so it is never cached."""

    id: str
    type: str
    text: str = field(default="")

    async def get_text(self) -> str:
        return self.text

    async def stat(self) -> None:
        return None

    async def write_text(self, text: str) -> None:
        self.text = text
