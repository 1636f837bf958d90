"""Synchronous entrypoints that run one lint invocation to completion."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from designlint.cache import CacheStore
from designlint.diagnostics import LintResult
from designlint.engine import Config, FileDocument, Linter, LintRun, TextDocument


def lint_files(
    paths: Iterable[str | Path],
    config: Config | Mapping[str, Any] | None = None,
    *,
    fix: bool = False,
    cache_path: str | Path | None = None,
    ignore_files: Sequence[str] = (),
) -> LintRun:
    """Lint files on disk, optionally fixing them and caching results at `cache_path`."""
    linter = Linter(config)
    documents = [FileDocument(Path(path)) for path in paths]
    cache = CacheStore(cache_path) if cache_path is not None else None
    return asyncio.run(linter.lint_documents(documents, fix=fix, cache=cache, ignore_files=ignore_files))


def lint_text(
    text: str,
    config: Config | Mapping[str, Any] | None = None,
    *,
    document_id: str = "<text>",
    document_type: str = "css",
) -> LintResult:
    """Lint one string; run-level rules do not fire."""
    return asyncio.run(Linter(config).lint_text(text, document_id, document_type))


def fix_text(
    text: str,
    config: Config | Mapping[str, Any] | None = None,
    *,
    document_id: str = "<text>",
    document_type: str = "css",
) -> tuple[str, LintRun]:
    """Apply every available fix to `text`, returning the new text and the run."""
    document = TextDocument(document_id, document_type, text)
    run = asyncio.run(Linter(config).lint_documents([document], fix=True))
    return document.text, run
