"""Lint result cache and fix application."""

from designlint.cache.fixes import apply_fixes, select_fixes
from designlint.cache.manager import CacheableDocument, CacheManager, LintFn
from designlint.cache.store import CacheEntry, CacheStore, DocumentStat, prune

__all__ = [
    "CacheEntry",
    "CacheManager",
    "CacheStore",
    "CacheableDocument",
    "DocumentStat",
    "LintFn",
    "apply_fixes",
    "prune",
    "select_fixes",
]
