"""Deliver scanned syntax events to rule listeners."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from designlint.diagnostics import RULE_RUNTIME_ERROR, LintMessage
from designlint.parsers.events import Handler, ScanEvent, SyntaxEvent, SyntaxNode


@dataclass(frozen=True, slots=True)
class RegisteredListener:
    """Handlers one enabled rule returned from `create` for one document."""

    rule_id: str
    handlers: Mapping[SyntaxEvent, Handler]


class ListenerDispatcher:
    """Calls every listener subscribed to an event in registration order.

    A handler that raises is reported once as a `rule-runtime-error`
    message and is not invoked again for the rest of the document.
    """

    def __init__(self, listeners: Sequence[RegisteredListener], messages: list[LintMessage]) -> None:
        self._listeners = tuple(listeners)
        self._messages = messages
        self._failed: set[tuple[str, SyntaxEvent]] = set()

    @property
    def messages(self) -> list[LintMessage]:
        return self._messages

    def dispatch(self, event: SyntaxEvent, node: SyntaxNode) -> None:
        for listener in self._listeners:
            handler = listener.handlers.get(event)
            if handler is None or (listener.rule_id, event) in self._failed:
                continue
            try:
                handler(node)
            except Exception as exc:
                self._failed.add((listener.rule_id, event))
                self._messages.append(
                    runtime_error_message(listener.rule_id, event.value, exc, line=node.line, column=node.column)
                )

    def dispatch_all(self, events: Iterable[ScanEvent]) -> None:
        for scanned in events:
            self.dispatch(scanned.event, scanned.node)


def runtime_error_message(
    rule_id: str,
    hook: str,
    exc: Exception,
    *,
    line: int = 1,
    column: int = 1,
    phase: str = "document",
) -> LintMessage:
    """Message recording that a rule hook raised."""
    detail = str(exc) or type(exc).__name__
    return LintMessage(
        rule_id=RULE_RUNTIME_ERROR.rule_id,
        message=f'Rule "{rule_id}" failed in {hook}: {detail}',
        severity=RULE_RUNTIME_ERROR.severity,
        line=line,
        column=column,
        metadata=MappingProxyType(
            {
                "phase": phase,
                "sourceRule": rule_id,
                "sourceHook": hook,
                "errorMessage": detail,
            }
        ),
    )
