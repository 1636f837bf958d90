"""Lazy synchronous entrypoint exports."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from designlint.diagnostics import LintResult
    from designlint.engine import Config, LintRun


def lint_files(
    paths: Iterable[str | Path],
    config: Config | Mapping[str, Any] | None = None,
    *,
    fix: bool = False,
    cache_path: str | Path | None = None,
    ignore_files: Sequence[str] = (),
) -> LintRun:
    from designlint.pipeline.entrypoints import lint_files as _lint_files

    return _lint_files(paths, config, fix=fix, cache_path=cache_path, ignore_files=ignore_files)


def lint_text(
    text: str,
    config: Config | Mapping[str, Any] | None = None,
    *,
    document_id: str = "<text>",
    document_type: str = "css",
) -> LintResult:
    from designlint.pipeline.entrypoints import lint_text as _lint_text

    return _lint_text(text, config, document_id=document_id, document_type=document_type)


def fix_text(
    text: str,
    config: Config | Mapping[str, Any] | None = None,
    *,
    document_id: str = "<text>",
    document_type: str = "css",
) -> tuple[str, LintRun]:
    from designlint.pipeline.entrypoints import fix_text as _fix_text

    return _fix_text(text, config, document_id=document_id, document_type=document_type)


__all__ = [
    "fix_text",
    "lint_files",
    "lint_text",
]
