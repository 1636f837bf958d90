"""Lint orchestration over many documents with run-level hooks."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from designlint.cache import CacheManager, CacheStore, prune
from designlint.diagnostics import NO_FILES_MATCHED, LintMessage, LintResult, sort_messages
from designlint.engine.config import Config, load_config
from designlint.engine.document import LintDocument, TextDocument
from designlint.engine.tracker import TokenTracker
from designlint.parsers import RegisteredListener, RunEvent, filter_disabled, run_parser, runtime_error_message
from designlint.rules import (
    EnabledRule,
    RuleContext,
    RuleRegistry,
    RunContext,
    builtin_rules,
    load_plugin,
    validate_listener,
    validate_run_listener,
)
from designlint.tokens import FlattenedToken, parse_tokens_by_theme

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LintRun:
    """Outcome of one `lint_documents` call."""

    results: tuple[LintResult, ...] = ()
    ignore_files: tuple[str, ...] = ()
    warning: str | None = None

    @property
    def messages(self) -> list[LintMessage]:
        return [message for result in self.results for message in result.messages]


@dataclass(slots=True)
class _RunState:
    enabled: list[EnabledRule]
    ignored_files: list[str] = field(default_factory=list)


class Linter:
    """Lints documents against the configured tokens and rules.

    Token and plugin errors surface from the constructor; rule settings are
    checked at the start of every run, before any document is read.
    """

    def __init__(
        self,
        config: Config | Mapping[str, Any] | None = None,
        *,
        plugins: Sequence[str | Path] = (),
    ) -> None:
        self.config = load_config(config)
        self.tokens_by_theme = self._load_tokens()
        self.tokens: tuple[FlattenedToken, ...] = tuple(
            token for theme_tokens in self.tokens_by_theme.values() for token in theme_tokens
        )
        self.registry = RuleRegistry(builtin_rules())
        for path in (*self.config.plugins, *plugins):
            loaded = load_plugin(path)
            for rule in loaded.rules:
                self.registry.register(rule, source=loaded.source, strict=True)
        logger.debug(
            "Linter ready: %s token(s), %s rule(s)",
            len(self.tokens),
            len(self.registry),
        )

    def _load_tokens(self) -> dict[str, list[FlattenedToken]]:
        tree = self.config.token_tree
        if tree is None:
            return {}
        return parse_tokens_by_theme(tree, color_space=self.config.color_space)

    async def lint_documents(
        self,
        documents: Iterable[LintDocument],
        *,
        fix: bool = False,
        cache: CacheStore | None = None,
        ignore_files: Sequence[str] = (),
    ) -> LintRun:
        """Lint every document, then fire run hooks once over the whole set."""
        state = _RunState(enabled=self.registry.resolve(self.config.rules))
        documents = list(documents)
        ignored = _union(self.config.ignore_files, ignore_files)
        if not documents:
            return LintRun(ignore_files=tuple(ignored), warning=NO_FILES_MATCHED)

        if cache is not None:
            removed = prune(cache, frozenset(document.id for document in documents))
            if removed:
                logger.debug("Pruned %s stale cache entr(ies)", len(removed))

        manager = CacheManager(cache, fix=fix)
        semaphore = asyncio.Semaphore(self.config.concurrency or os.cpu_count() or 1)

        async def lint_one(document: LintDocument) -> LintResult:
            async def lint_fn(text: str) -> LintResult:
                return self._lint_source(text, document.id, document.type, state)

            async with semaphore:
                return await manager.process_document(document, lint_fn)

        results = list(await asyncio.gather(*(lint_one(document) for document in documents)))

        tracker = TokenTracker(self.tokens)
        for result in results:
            tracker.track(result.token_references)
        run_messages = self._run_hooks(state.enabled, tracker)
        if run_messages:
            results.append(LintResult(document_id=self.config.result_id, messages=tuple(run_messages)))

        if cache is not None:
            await asyncio.to_thread(cache.save)

        return LintRun(
            results=tuple(results),
            ignore_files=tuple(_union(ignored, state.ignored_files)),
        )

    async def lint_text(self, text: str, document_id: str = "<text>", document_type: str = "css") -> LintResult:
        """Lint one in-memory string; run hooks do not fire."""
        document = TextDocument(document_id, document_type, text)
        state = _RunState(enabled=self.registry.resolve(self.config.rules))
        return self._lint_source(await document.get_text(), document.id, document.type, state)

    def _lint_source(self, text: str, document_id: str, document_type: str, state: _RunState) -> LintResult:
        messages: list[LintMessage] = []
        listeners: list[RegisteredListener] = []
        for enabled in state.enabled:
            context = RuleContext(
                rule_id=enabled.name,
                severity=enabled.severity,
                options=enabled.options,
                document_id=document_id,
                document_type=document_type,
                tokens=self.tokens,
                token_patterns=self.config.token_patterns,
                messages=messages,
                ignored_files=state.ignored_files,
            )
            try:
                listener = validate_listener(enabled.name, enabled.rule.create(context))
            except Exception as exc:
                messages.append(runtime_error_message(enabled.name, "create", exc))
                continue
            listeners.append(RegisteredListener(enabled.name, listener))

        parsed = run_parser(document_type, text, document_id, listeners, messages)
        return LintResult(
            document_id=document_id,
            messages=tuple(sort_messages(filter_disabled(messages, text))),
            token_references=parsed.token_references,
        )

    def _run_hooks(self, enabled: Sequence[EnabledRule], tracker: TokenTracker) -> list[LintMessage]:
        messages: list[LintMessage] = []
        for rule in enabled:
            if rule.rule.create_run is None:
                continue
            context = RunContext(
                rule_id=rule.name,
                severity=rule.severity,
                options=rule.options,
                tokens=self.tokens,
                usage=tracker,
                messages=messages,
            )
            try:
                hook = validate_run_listener(rule.name, rule.rule.create_run(context)).get(RunEvent.RUN_COMPLETE)
            except Exception as exc:
                messages.append(runtime_error_message(rule.name, "create_run", exc, phase="run"))
                continue
            if hook is None:
                continue
            try:
                hook()
            except Exception as exc:
                messages.append(runtime_error_message(rule.name, RunEvent.RUN_COMPLETE.value, exc, phase="run"))
        return messages


def _union(*groups: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for group in groups:
        for item in group:
            seen.setdefault(item, None)
    return list(seen)

