"""Document type to parser strategy mapping."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Final

from designlint.diagnostics import PARSE_ERROR, UNSUPPORTED_SASS, LintMessage
from designlint.errors import DocumentSyntaxError
from designlint.parsers.css import StylesheetSyntax, scan_stylesheet
from designlint.parsers.dispatch import ListenerDispatcher, RegisteredListener
from designlint.parsers.events import (
    CSSDeclaration,
    NumericLiteral,
    ParserPassResult,
    ScanEvent,
    ScanResult,
    StringLiteral,
    SyntaxEvent,
)
from designlint.parsers.references import ReferenceCollector
from designlint.parsers.script import scan_script
from designlint.parsers.templates import TemplateFlavor, scan_template
from designlint.text import LineIndex

logger = logging.getLogger(__name__)

type ParserStrategy = Callable[[str, ListenerDispatcher], ParserPassResult]


def syntax_error_message(error: DocumentSyntaxError) -> LintMessage:
    return LintMessage(
        rule_id=PARSE_ERROR.rule_id,
        message=error.message,
        severity=PARSE_ERROR.severity,
        line=error.line,
        column=error.column,
    )


def _finish(scan: ScanResult, dispatcher: ListenerDispatcher) -> ParserPassResult:
    """Report recovered errors, then deliver every event."""
    dispatcher.messages.extend(syntax_error_message(error) for error in scan.errors)
    dispatcher.dispatch_all(scan.events)
    return ParserPassResult(token_references=_references(scan.events))


def _references(events: Iterable[ScanEvent]) -> tuple[str, ...]:
    collector = ReferenceCollector()
    for scanned in events:
        node = scanned.node
        if isinstance(node, StringLiteral):
            collector.add_value(node.value)
        elif isinstance(node, NumericLiteral):
            collector.add_number(node.raw)
        elif isinstance(node, CSSDeclaration):
            collector.add_value(node.value)
    return collector.to_tuple()


def _stylesheet(syntax: StylesheetSyntax) -> ParserStrategy:
    def parse(text: str, dispatcher: ListenerDispatcher) -> ParserPassResult:
        declarations = scan_stylesheet(text, syntax=syntax)
        events = tuple(ScanEvent(SyntaxEvent.CSS_DECLARATION, decl) for decl in declarations)
        return _finish(ScanResult(events=events), dispatcher)

    return parse


def _script(*, jsx: bool) -> ParserStrategy:
    def parse(text: str, dispatcher: ListenerDispatcher) -> ParserPassResult:
        return _finish(scan_script(text, jsx=jsx, line_index=LineIndex(text)), dispatcher)

    return parse


def _template(flavor: TemplateFlavor) -> ParserStrategy:
    def parse(text: str, dispatcher: ListenerDispatcher) -> ParserPassResult:
        return _finish(scan_template(text, flavor), dispatcher)

    return parse


def _unsupported_sass(text: str, dispatcher: ListenerDispatcher) -> ParserPassResult:
    dispatcher.messages.append(
        LintMessage(
            rule_id=UNSUPPORTED_SASS.rule_id,
            message=UNSUPPORTED_SASS.message,
            severity=UNSUPPORTED_SASS.severity,
            line=1,
            column=1,
        )
    )
    return ParserPassResult()


PARSER_STRATEGIES: Final[Mapping[str, ParserStrategy]] = MappingProxyType(
    {
        "css": _stylesheet("css"),
        "scss": _stylesheet("scss"),
        "less": _stylesheet("less"),
        "sass": _unsupported_sass,
        "ts": _script(jsx=False),
        "mts": _script(jsx=False),
        "cts": _script(jsx=False),
        "tsx": _script(jsx=True),
        "js": _script(jsx=True),
        "jsx": _script(jsx=True),
        "mjs": _script(jsx=True),
        "cjs": _script(jsx=True),
        "vue": _template("vue"),
        "svelte": _template("svelte"),
    }
)


def run_parser(
    document_type: str,
    text: str,
    document_id: str,
    listeners: Sequence[RegisteredListener],
    messages: list[LintMessage],
) -> ParserPassResult:
    """Run the strategy for `document_type`; unknown types produce nothing.

    A syntax error becomes a single `parse-error` message; listeners are
    not called for a document that failed to scan.
    """
    strategy = PARSER_STRATEGIES.get(document_type)
    if strategy is None:
        logger.debug("No parser for %s (type %s); skipping", document_id, document_type)
        return ParserPassResult()
    dispatcher = ListenerDispatcher(listeners, messages)
    try:
        return strategy(text, dispatcher)
    except DocumentSyntaxError as exc:
        messages.append(syntax_error_message(exc))
        return ParserPassResult()
