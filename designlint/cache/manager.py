"""Cache-aware linting of one document, with optional fixing."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from designlint.cache.fixes import apply_fixes
from designlint.cache.store import CacheEntry, CacheStore, DocumentStat
from designlint.diagnostics import READ_ERROR, WRITE_ERROR, DiagnosticSpec, LintMessage, LintResult

logger = logging.getLogger(__name__)

type LintFn = Callable[[str], Awaitable[LintResult]]


class CacheableDocument(Protocol):
    @property
    def id(self) -> str: ...

    async def get_text(self) -> str: ...

    async def stat(self) -> DocumentStat | None: ...

    async def write_text(self, text: str) -> None: ...


class CacheManager:
    """Serves cached results for unchanged documents and applies fixes.

    Fix mode never serves a cached result, since fixes must be recomputed
    from the current text.
    """

    def __init__(self, cache: CacheStore | None = None, *, fix: bool = False) -> None:
        self._cache = cache
        self._fix = fix

    @property
    def cache(self) -> CacheStore | None:
        return self._cache

    async def process_document(self, document: CacheableDocument, lint_fn: LintFn) -> LintResult:
        key = document.id
        try:
            stat = await document.stat()
        except OSError as exc:
            return self._failure(key, READ_ERROR, exc)

        if self._cache is not None and stat is not None and not self._fix:
            entry = self._cache.get(key)
            if entry is not None and entry.matches(stat):
                logger.debug("Cache hit for %s", key)
                return entry.result

        try:
            text = await document.get_text()
        except (OSError, UnicodeDecodeError) as exc:
            return self._failure(key, READ_ERROR, exc)

        result = await lint_fn(text)
        if self._fix:
            fixed = apply_fixes(text, result.messages)
            if fixed != text:
                try:
                    await document.write_text(fixed)
                    stat = await document.stat()
                except OSError as exc:
                    return self._failure(key, WRITE_ERROR, exc)
                logger.debug("Applied fixes to %s", key)
                result = await lint_fn(fixed)

        if self._cache is not None and stat is not None:
            self._cache.set(key, CacheEntry(mtime=stat.mtime, size=stat.size, result=result))
        return result

    def _failure(self, key: str, spec: DiagnosticSpec, exc: Exception) -> LintResult:
        if self._cache is not None:
            self._cache.remove(key)
        logger.debug("%s %s: %s", spec.message, key, exc)
        message = LintMessage(
            rule_id=spec.rule_id,
            message=f"{spec.message}: {exc}",
            severity=spec.severity,
            line=1,
            column=1,
        )
        return LintResult(document_id=key, messages=(message,))
