"""Lint messages and per-document results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from designlint.diagnostics.codes import Severity
from designlint.text import TextRange


@dataclass(frozen=True, slots=True)
class Fix:
    """Replacement of `range` in the document text with `text`."""

    range: TextRange
    text: str

    def to_json(self) -> dict[str, Any]:
        return {"range": [self.range.start, self.range.end], "text": self.text}

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> Fix:
        _require_mapping(data, "fix")
        start, end = data["range"]
        return Fix(range=TextRange(int(start), int(end)), text=str(data["text"]))


@dataclass(frozen=True, slots=True)
class LintMessage:
    """Structured diagnostic emitted by parsers, rules and the engine."""

    rule_id: str
    message: str
    severity: Severity
    line: int
    column: int
    fix: Fix | None = None
    suggest: str | None = None
    metadata: Mapping[str, Any] | None = None

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "ruleId": self.rule_id,
            "message": self.message,
            "severity": self.severity,
            "line": self.line,
            "column": self.column,
        }
        if self.fix is not None:
            data["fix"] = self.fix.to_json()
        if self.suggest is not None:
            data["suggest"] = self.suggest
        if self.metadata is not None:
            data["metadata"] = dict(self.metadata)
        return data

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> LintMessage:
        _require_mapping(data, "message")
        severity = data["severity"]
        if severity not in ("error", "warn"):
            raise ValueError(f"Invalid message severity `{severity}`; expected error/warn.")
        fix = data.get("fix")
        metadata = data.get("metadata")
        return LintMessage(
            rule_id=str(data["ruleId"]),
            message=str(data["message"]),
            severity=severity,
            line=int(data["line"]),
            column=int(data["column"]),
            fix=Fix.from_json(fix) if fix is not None else None,
            suggest=data.get("suggest"),
            metadata=MappingProxyType(dict(metadata)) if metadata is not None else None,
        )


@dataclass(frozen=True, slots=True)
class LintResult:
    """All messages produced for one document, in report order."""

    document_id: str
    messages: tuple[LintMessage, ...] = ()
    token_references: tuple[str, ...] = field(default=())

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "documentId": self.document_id,
            "messages": [message.to_json() for message in self.messages],
        }
        if self.token_references:
            data["tokenReferences"] = list(self.token_references)
        return data

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> LintResult:
        _require_mapping(data, "result")
        return LintResult(
            document_id=str(data["documentId"]),
            messages=tuple(LintMessage.from_json(item) for item in data.get("messages", ())),
            token_references=tuple(str(item) for item in data.get("tokenReferences", ())),
        )


def _require_mapping(data: object, what: str) -> None:
    if not isinstance(data, Mapping):
        raise TypeError(f"Cached {what} must be an object, got {type(data).__name__}")
