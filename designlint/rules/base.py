"""Rule contracts and the contexts rules receive."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol

from pydantic import BaseModel

from designlint.diagnostics import Fix, LintMessage, Severity
from designlint.parsers.events import RuleListener, RunListener
from designlint.tokens import FlattenedToken, TokenPattern, TokenType


@dataclass(frozen=True, slots=True)
class RuleMeta:
    description: str
    category: str | None = None
    schema: type[BaseModel] | None = None
    capabilities: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class RuleModule:
    """A lint rule.

    `create` runs once per document and returns the syntax listeners for it.
    `create_run`, when present, runs once after every document settled and
    returns the run-level hooks.
    """

    name: str
    meta: RuleMeta
    create: Callable[[RuleContext], RuleListener]
    create_run: Callable[[RunContext], RunListener] | None = None


class TokenUsage(Protocol):
    """Read-only view over the token identities documents referenced."""

    def is_referenced(self, token: FlattenedToken) -> bool: ...

    def unused_tokens(self, ignore: Sequence[str] = ()) -> list[FlattenedToken]: ...


@dataclass(slots=True)
class _Reporter:
    rule_id: str
    severity: Severity
    messages: list[LintMessage] = field(default_factory=list)

    def report(
        self,
        message: str,
        line: int = 1,
        column: int = 1,
        *,
        fix: Fix | None = None,
        suggest: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        self.messages.append(
            LintMessage(
                rule_id=self.rule_id,
                message=message,
                severity=self.severity,
                line=line,
                column=column,
                fix=fix,
                suggest=suggest,
                metadata=MappingProxyType(dict(metadata)) if metadata is not None else None,
            )
        )


class RuleContext:
    """Per-document state handed to `RuleModule.create`."""

    def __init__(
        self,
        *,
        rule_id: str,
        severity: Severity,
        options: BaseModel | None,
        document_id: str,
        document_type: str,
        tokens: Sequence[FlattenedToken],
        token_patterns: Sequence[TokenPattern] = (),
        messages: list[LintMessage] | None = None,
        ignored_files: list[str] | None = None,
    ) -> None:
        self._reporter = _Reporter(rule_id, severity, messages if messages is not None else [])
        self.rule_id = rule_id
        self.severity = severity
        self.options = options
        self.document_id = document_id
        self.document_type = document_type
        self.tokens = tuple(tokens)
        self.token_patterns = tuple(token_patterns)
        self._ignored_files = ignored_files if ignored_files is not None else []

    @property
    def messages(self) -> list[LintMessage]:
        return self._reporter.messages

    @property
    def ignored_files(self) -> list[str]:
        return self._ignored_files

    def tokens_of(self, *types: TokenType) -> list[FlattenedToken]:
        return [token for token in self.tokens if token.type in types]

    def report(
        self,
        message: str,
        line: int = 1,
        column: int = 1,
        *,
        fix: Fix | None = None,
        suggest: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        self._reporter.report(message, line, column, fix=fix, suggest=suggest, metadata=metadata)

    def ignore_file(self, path: str) -> None:
        """Exclude `path` from subsequent runs."""
        if path not in self._ignored_files:
            self._ignored_files.append(path)


class RunContext:
    """Run-level state handed to `RuleModule.create_run`."""

    def __init__(
        self,
        *,
        rule_id: str,
        severity: Severity,
        options: BaseModel | None,
        tokens: Sequence[FlattenedToken],
        usage: TokenUsage,
        messages: list[LintMessage] | None = None,
    ) -> None:
        self._reporter = _Reporter(rule_id, severity, messages if messages is not None else [])
        self.rule_id = rule_id
        self.severity = severity
        self.options = options
        self.tokens = tuple(tokens)
        self._usage = usage

    @property
    def messages(self) -> list[LintMessage]:
        return self._reporter.messages

    def is_token_referenced(self, token: FlattenedToken | str) -> bool:
        """Whether any document referenced `token` (a token or a token path)."""
        if isinstance(token, str):
            matches = [candidate for candidate in self.tokens if candidate.path == token]
            return any(self._usage.is_referenced(candidate) for candidate in matches)
        return self._usage.is_referenced(token)

    def unused_tokens(self, ignore: Sequence[str] = ()) -> list[FlattenedToken]:
        return self._usage.unused_tokens(ignore)

    def report(
        self,
        message: str,
        line: int = 1,
        column: int = 1,
        *,
        fix: Fix | None = None,
        suggest: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        self._reporter.report(message, line, column, fix=fix, suggest=suggest, metadata=metadata)
