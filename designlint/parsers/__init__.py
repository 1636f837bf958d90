"""Parser strategies, syntax events and listener dispatch."""

from designlint.parsers.css import StylesheetScanner, scan_stylesheet
from designlint.parsers.disable import DisabledRange, filter_disabled, parse_disable_directives
from designlint.parsers.dispatch import ListenerDispatcher, RegisteredListener, runtime_error_message
from designlint.parsers.events import (
    CSSDeclaration,
    JSXAttribute,
    NumericLiteral,
    ParserPassResult,
    RuleListener,
    RunEvent,
    RunListener,
    ScanEvent,
    ScanResult,
    StringLiteral,
    SyntaxEvent,
    SyntaxNode,
)
from designlint.parsers.references import ReferenceCollector
from designlint.parsers.registry import PARSER_STRATEGIES, ParserStrategy, run_parser, syntax_error_message
from designlint.parsers.script import ScriptScanner, scan_script
from designlint.parsers.templates import MarkupScanner, find_expression_end, scan_template

__all__ = [
    "PARSER_STRATEGIES",
    "CSSDeclaration",
    "DisabledRange",
    "JSXAttribute",
    "ListenerDispatcher",
    "MarkupScanner",
    "NumericLiteral",
    "ParserPassResult",
    "ParserStrategy",
    "ReferenceCollector",
    "RegisteredListener",
    "RuleListener",
    "RunEvent",
    "RunListener",
    "ScanEvent",
    "ScanResult",
    "ScriptScanner",
    "StringLiteral",
    "StylesheetScanner",
    "SyntaxEvent",
    "SyntaxNode",
    "filter_disabled",
    "find_expression_end",
    "parse_disable_directives",
    "run_parser",
    "runtime_error_message",
    "scan_script",
    "scan_stylesheet",
    "scan_template",
    "syntax_error_message",
]
