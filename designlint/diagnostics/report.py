"""Message helpers."""

from __future__ import annotations

from collections.abc import Iterable

from designlint.diagnostics.message import LintMessage, LintResult


def collect_messages(*groups: Iterable[LintMessage]) -> list[LintMessage]:
    messages: list[LintMessage] = []
    for group in groups:
        messages.extend(group)
    return messages


def has_errors(results: Iterable[LintResult]) -> bool:
    return any(message.severity == "error" for result in results for message in result.messages)


def sort_messages(messages: Iterable[LintMessage]) -> list[LintMessage]:
    """Order messages by position; ties keep report order."""
    return sorted(messages, key=lambda message: (message.line, message.column))
