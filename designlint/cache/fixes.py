"""Applying message fixes to document text."""

from __future__ import annotations

from collections.abc import Iterable

from designlint.diagnostics import Fix, LintMessage


def select_fixes(messages: Iterable[LintMessage]) -> list[Fix]:
    """Fixes in offset order, dropping any that overlaps an earlier one."""
    candidates = sorted(
        (message.fix for message in messages if message.fix is not None),
        key=lambda fix: (fix.range.start, fix.range.end),
    )
    selected: list[Fix] = []
    last_end = -1
    for fix in candidates:
        if fix.range.start < last_end:
            continue
        selected.append(fix)
        last_end = fix.range.end
    return selected


def apply_fixes(text: str, messages: Iterable[LintMessage]) -> str:
    """Apply non-overlapping fixes back to front so offsets stay valid."""
    output = text
    for fix in reversed(select_fixes(messages)):
        if fix.range.end > len(output):
            continue
        output = output[: fix.range.start] + fix.text + output[fix.range.end :]
    return output
