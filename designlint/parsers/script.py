"""Script scanner for TypeScript, JavaScript and JSX sources.

This is not a full parser. It tokenizes far enough to find string, numeric
and template literals, JSX attributes and the CSS embedded in `style`
attributes and styled-component tagged templates. Regex literals and JSX
are recognized by looking at the previous significant token.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Literal

from designlint.errors import DocumentSyntaxError
from designlint.parsers.css import scan_stylesheet
from designlint.parsers.events import (
    CSSDeclaration,
    JSXAttribute,
    NumericLiteral,
    ScanEvent,
    ScanResult,
    StringLiteral,
    SyntaxEvent,
    SyntaxNode,
)
from designlint.text import LineIndex

type _Previous = Literal["value", "operator"] | None

_CLOSE_BRACE: Final[frozenset[str]] = frozenset({"}"})
_STYLE_ENTRY_END: Final[frozenset[str]] = frozenset({",", "}"})
_REGEX_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "return",
        "typeof",
        "instanceof",
        "in",
        "of",
        "new",
        "delete",
        "void",
        "throw",
        "case",
        "do",
        "else",
        "yield",
        "await",
    }
)
_ESCAPES: Final[dict[str, str]] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_NUMBER_RE: Final = re.compile(
    r"0[xX][0-9a-fA-F_]+n?|0[bB][01_]+n?|0[oO][0-7_]+n?"
    r"|(?:\d[\d_]*\.?[\d_]*|\.\d[\d_]*)(?:[eE][+-]?\d[\d_]*)?n?"
)
_STYLE_NUMBER_RE: Final = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_STYLE_TAG_RE: Final = re.compile(
    r"(?<![\w$.])(?:styled|css|tw|keyframes|createGlobalStyle|injectGlobal)"
    r"(?:\s*\.\s*[\w$]+|\s*\([^()]*\)|\s*<[^<>`]*>)*\s*$"
)
_JSX_NAME_RE: Final = re.compile(r"[\w$][\w$.:-]*")


@dataclass(frozen=True, slots=True)
class ScannerCheckpoint:
    position: int
    previous: _Previous
    attribute: str | None
    events_position: int
    errors_position: int


class _StyleObjectFallback(Exception):
    """Style object is not a plain literal; rescan it as an expression."""


class ScriptScanner:
    def __init__(
        self,
        source: str,
        *,
        jsx: bool = False,
        line_index: LineIndex | None = None,
        base_offset: int = 0,
        attribute: str | None = None,
    ) -> None:
        self._source = source
        self._jsx = jsx
        self._line_index = line_index if line_index is not None else LineIndex(source)
        self._base_offset = base_offset
        self._position = 0
        self._previous: _Previous = None
        self._attribute = attribute
        self._events: list[ScanEvent] = []
        self._errors: list[DocumentSyntaxError] = []

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    @property
    def checkpoint(self) -> ScannerCheckpoint:
        return ScannerCheckpoint(
            position=self._position,
            previous=self._previous,
            attribute=self._attribute,
            events_position=len(self._events),
            errors_position=len(self._errors),
        )

    def rewind(self, checkpoint: ScannerCheckpoint) -> None:
        self._position = checkpoint.position
        self._previous = checkpoint.previous
        self._attribute = checkpoint.attribute
        del self._events[checkpoint.events_position :]
        del self._errors[checkpoint.errors_position :]

    def scan(self) -> ScanResult:
        self._scan_code(frozenset())
        return self._result()

    def scan_style_binding(self) -> ScanResult:
        """Scan a bound style expression, reading an object literal as declarations."""
        self._attribute = "style"
        self._skip_trivia()
        if self._current_char() == "{":
            checkpoint = self.checkpoint
            try:
                self._scan_style_object()
                self._skip_trivia()
                if not self.is_eof:
                    raise _StyleObjectFallback
                return self._result()
            except _StyleObjectFallback:
                self.rewind(checkpoint)
        self._scan_code(frozenset())
        return self._result()

    def _result(self) -> ScanResult:
        return ScanResult(events=tuple(self._events), errors=tuple(self._errors))

    def _current_char(self) -> str:
        if self._position >= len(self._source):
            return "\0"
        return self._source[self._position]

    def _peek_char(self) -> str:
        if self._position + 1 >= len(self._source):
            return "\0"
        return self._source[self._position + 1]

    def _advance(self, count: int = 1) -> None:
        self._position += count

    def _error(self, message: str, local_offset: int) -> DocumentSyntaxError:
        line, column = self._line_index.line_col(self._base_offset + local_offset)
        return DocumentSyntaxError(message, line, column)

    def _emit(self, event: SyntaxEvent, node: SyntaxNode) -> None:
        self._events.append(ScanEvent(event, node))

    def _position_of(self, local_offset: int) -> tuple[int, int]:
        return self._line_index.line_col(self._base_offset + local_offset)

    def _scan_code(self, stops: frozenset[str]) -> None:
        depth = 0
        while not self.is_eof:
            ch = self._current_char()
            if ch in " \t\r\n\ufeff":
                self._advance()
                continue
            if ch == "/" and self._peek_char() in "/*":
                self._skip_comment()
                continue
            if depth == 0 and ch in stops:
                return
            if ch in "\"'":
                value, start, end = self._read_string(ch)
                self._emit_string(value, start, end)
                self._previous = "value"
            elif ch == "`":
                self._scan_template()
                self._previous = "value"
            elif ch.isdigit() or (ch == "." and self._peek_char().isdigit()):
                self._scan_number()
                self._previous = "value"
            elif _is_identifier_start(ch):
                word = self._read_identifier()
                self._previous = "operator" if word in _REGEX_KEYWORDS else "value"
            elif ch == "/" and self._previous != "value":
                self._skip_regex()
                self._previous = "value"
            elif ch == "<" and self._jsx and self._previous != "value" and _starts_jsx(self._peek_char()):
                self._scan_jsx_element()
                self._previous = "value"
            else:
                if ch in "([{":
                    depth += 1
                    self._previous = "operator"
                elif ch in ")]}":
                    depth = max(depth - 1, 0)
                    self._previous = "value"
                else:
                    self._previous = "operator"
                self._advance()

    def _skip_trivia(self) -> None:
        while not self.is_eof:
            ch = self._current_char()
            if ch in " \t\r\n":
                self._advance()
            elif ch == "/" and self._peek_char() in "/*":
                self._skip_comment()
            else:
                return

    def _skip_comment(self) -> None:
        start = self._position
        if self._peek_char() == "/":
            end = self._source.find("\n", start)
            self._position = len(self._source) if end < 0 else end
            return
        end = self._source.find("*/", start + 2)
        if end < 0:
            raise self._error("Unterminated comment", start)
        self._position = end + 2

    def _read_identifier(self) -> str:
        start = self._position
        while not self.is_eof and _is_identifier_part(self._current_char()):
            self._advance()
        return self._source[start : self._position]

    def _read_string(self, quote: str) -> tuple[str, int, int]:
        start = self._position
        self._advance()
        chars: list[str] = []
        while True:
            if self.is_eof or self._current_char() == "\n":
                raise self._error("Unterminated string literal", start)
            ch = self._current_char()
            if ch == "\\":
                escaped = self._peek_char()
                if escaped == "\r" and self._source.startswith("\n", self._position + 2):
                    self._advance(3)
                    continue
                if escaped not in "\r\n":
                    chars.append(_ESCAPES.get(escaped, escaped))
                self._advance(2)
                continue
            self._advance()
            if ch == quote:
                return "".join(chars), start, self._position
            chars.append(ch)

    def _emit_string(self, value: str, start: int, end: int) -> None:
        line, column = self._position_of(start)
        self._emit(
            SyntaxEvent.STRING_LITERAL,
            StringLiteral(
                value=value,
                line=line,
                column=column,
                start=self._base_offset + start,
                end=self._base_offset + end,
                attribute=self._attribute,
            ),
        )

    def _scan_number(self) -> None:
        match = _NUMBER_RE.match(self._source, self._position)
        if match is None:
            self._advance()
            return
        raw = match.group(0)
        start = self._position
        self._position = match.end()
        cleaned = raw.replace("_", "").rstrip("n")
        if cleaned[:2].lower() in ("0x", "0b", "0o"):
            value = float(int(cleaned, 0))
        else:
            value = float(cleaned)
        line, column = self._position_of(start)
        self._emit(
            SyntaxEvent.NUMERIC_LITERAL,
            NumericLiteral(
                value=value,
                raw=raw,
                line=line,
                column=column,
                start=self._base_offset + start,
                end=self._base_offset + self._position,
            ),
        )

    def _skip_regex(self) -> None:
        start = self._position
        self._advance()
        in_class = False
        while True:
            if self.is_eof or self._current_char() == "\n":
                raise self._error("Unterminated regular expression", start)
            ch = self._current_char()
            if ch == "\\":
                self._advance(2)
                continue
            self._advance()
            if ch == "[":
                in_class = True
            elif ch == "]":
                in_class = False
            elif ch == "/" and not in_class:
                break
        while not self.is_eof and _is_identifier_part(self._current_char()):
            self._advance()

    def _scan_template(self) -> None:
        start = self._position
        self._advance()
        body_start = self._position
        placeholders: list[tuple[int, int]] = []
        while True:
            if self.is_eof:
                raise self._error("Unterminated template literal", start)
            ch = self._current_char()
            if ch == "\\":
                self._advance(2)
                continue
            if ch == "`":
                break
            if ch == "$" and self._peek_char() == "{":
                expression_start = self._position
                self._advance(2)
                previous, attribute = self._previous, self._attribute
                self._previous = None
                self._scan_code(_CLOSE_BRACE)
                if self.is_eof:
                    raise self._error("Unterminated template literal", start)
                self._advance()
                self._previous, self._attribute = previous, attribute
                placeholders.append((expression_start, self._position))
                continue
            self._advance()
        body_end = self._position
        self._advance()

        if _STYLE_TAG_RE.search(self._source, 0, start):
            css_source = _with_placeholders(self._source[body_start:body_end], placeholders, body_start)
            self._scan_embedded_css(css_source, body_start)
        elif not placeholders:
            self._emit_string(self._source[body_start:body_end], start, self._position)

    def _scan_embedded_css(self, css_source: str, local_offset: int) -> None:
        try:
            declarations = scan_stylesheet(
                css_source,
                line_index=self._line_index,
                base_offset=self._base_offset + local_offset,
                inline=True,
            )
        except DocumentSyntaxError as exc:
            self._errors.append(exc)
            return
        for declaration in declarations:
            self._emit(SyntaxEvent.CSS_DECLARATION, declaration)

    def _read_jsx_name(self) -> str:
        match = _JSX_NAME_RE.match(self._source, self._position)
        if match is None:
            return ""
        self._position = match.end()
        return match.group(0)

    def _skip_whitespace(self) -> None:
        while not self.is_eof and self._current_char() in " \t\r\n":
            self._advance()

    def _scan_jsx_element(self) -> None:
        start = self._position
        self._advance()
        if self._current_char() == ">":
            self._advance()
            self._scan_jsx_children(start)
            return
        element = self._read_jsx_name()
        if not element:
            raise self._error("Expected JSX tag name", start)
        while True:
            self._skip_whitespace()
            if self.is_eof:
                raise self._error("Unterminated JSX element", start)
            ch = self._current_char()
            if ch == "/" and self._peek_char() == ">":
                self._advance(2)
                return
            if ch == ">":
                self._advance()
                self._scan_jsx_children(start)
                return
            if ch == "{":
                self._advance()
                self._scan_jsx_expression(start)
                continue
            self._scan_jsx_attribute(element)

    def _scan_jsx_attribute(self, element: str) -> None:
        start = self._position
        name = self._read_jsx_name()
        if not name:
            raise self._error(f"Unexpected character {self._current_char()!r} in JSX element", start)
        insert_at = len(self._events)
        self._skip_whitespace()
        value: str | None = None
        if self._current_char() == "=":
            self._advance()
            self._skip_whitespace()
            ch = self._current_char()
            if ch in "\"'":
                value_start = self._position + 1
                value_end = self._source.find(ch, value_start)
                if value_end < 0:
                    raise self._error("Unterminated JSX attribute", self._position)
                value = self._source[value_start:value_end]
                self._position = value_end + 1
                if name == "style":
                    self._scan_embedded_css(value, value_start)
                else:
                    self._attribute = name
                    self._emit_string(value, value_start - 1, value_end + 1)
                    self._attribute = None
            elif ch == "{":
                value_start = self._position + 1
                self._advance()
                self._attribute = name
                if name == "style":
                    self._scan_style_expression(start)
                else:
                    self._scan_jsx_expression(start)
                self._attribute = None
                value = self._source[value_start : self._position - 1]
            elif ch == "<":
                value_start = self._position
                self._scan_jsx_element()
                value = self._source[value_start : self._position]
            else:
                raise self._error("Expected JSX attribute value", self._position)
        line, column = self._position_of(start)
        attribute = JSXAttribute(
            element=element,
            name=name,
            value=value,
            line=line,
            column=column,
            start=self._base_offset + start,
            end=self._base_offset + self._position,
        )
        self._events.insert(insert_at, ScanEvent(SyntaxEvent.JSX_ATTRIBUTE, attribute))

    def _scan_jsx_expression(self, element_start: int) -> None:
        previous = self._previous
        self._previous = None
        self._scan_code(_CLOSE_BRACE)
        if self.is_eof:
            raise self._error("Unterminated JSX expression", element_start)
        self._advance()
        self._previous = previous

    def _scan_style_expression(self, element_start: int) -> None:
        checkpoint = self.checkpoint
        self._skip_trivia()
        if self._current_char() == "{":
            try:
                self._scan_style_object()
                self._skip_trivia()
                if self._current_char() != "}":
                    raise _StyleObjectFallback
                self._advance()
                return
            except _StyleObjectFallback:
                self.rewind(checkpoint)
        self._scan_jsx_expression(element_start)

    def _scan_style_object(self) -> None:
        self._advance()
        while True:
            self._skip_trivia()
            ch = self._current_char()
            if ch == "}":
                self._advance()
                return
            key_start = self._position
            if ch in "\"'":
                key, _, _ = self._read_string(ch)
            elif _is_identifier_start(ch):
                key = self._read_identifier()
            else:
                raise _StyleObjectFallback
            self._skip_trivia()
            if self._current_char() != ":":
                raise _StyleObjectFallback
            self._advance()
            self._skip_trivia()
            self._scan_style_entry(_kebab_case(key), key_start)
            self._skip_trivia()
            if self._current_char() == ",":
                self._advance()
            elif self._current_char() != "}":
                raise _StyleObjectFallback

    def _scan_style_entry(self, prop: str, key_start: int) -> None:
        ch = self._current_char()
        if ch in "\"'":
            value, start, end = self._read_string(ch)
            value_start, value_end = start + 1, end - 1
        else:
            match = _STYLE_NUMBER_RE.match(self._source, self._position)
            if match is None or (match.end() < len(self._source) and _is_identifier_part(self._source[match.end()])):
                previous = self._previous
                self._previous = None
                self._scan_code(_STYLE_ENTRY_END)
                self._previous = previous
                return
            value = match.group(0)
            value_start, value_end = match.start(), match.end()
            self._position = match.end()
        line, column = self._position_of(key_start)
        self._emit(
            SyntaxEvent.CSS_DECLARATION,
            CSSDeclaration(
                prop=prop,
                value=value,
                line=line,
                column=column,
                start=self._base_offset + key_start,
                end=self._base_offset + self._position,
                value_start=self._base_offset + value_start,
                value_end=self._base_offset + value_end,
            ),
        )

    def _scan_jsx_children(self, element_start: int) -> None:
        while True:
            if self.is_eof:
                raise self._error("Unterminated JSX contents", element_start)
            ch = self._current_char()
            if ch == "{":
                self._advance()
                self._scan_jsx_expression(element_start)
            elif ch == "<" and self._peek_char() == "/":
                close = self._source.find(">", self._position)
                if close < 0:
                    raise self._error("Unterminated JSX closing tag", self._position)
                self._position = close + 1
                return
            elif ch == "<":
                self._scan_jsx_element()
            else:
                self._advance()


def scan_script(
    source: str,
    *,
    jsx: bool = False,
    line_index: LineIndex | None = None,
    base_offset: int = 0,
) -> ScanResult:
    """Scan a script region; raises `DocumentSyntaxError` on lexical errors."""
    return ScriptScanner(source, jsx=jsx, line_index=line_index, base_offset=base_offset).scan()


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_identifier_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def _starts_jsx(ch: str) -> bool:
    return ch.isalpha() or ch in "_$>"


def _kebab_case(name: str) -> str:
    if name.startswith("--"):
        return name
    return re.sub(r"[A-Z]", lambda match: f"-{match.group(0).lower()}", name)


def _with_placeholders(body: str, placeholders: list[tuple[int, int]], body_start: int) -> str:
    """Replace `${...}` spans with `0` padded to the same length, keeping newlines."""
    chars = list(body)
    for start, end in placeholders:
        local_start, local_end = start - body_start, end - body_start
        for index in range(local_start, local_end):
            chars[index] = "\n" if chars[index] == "\n" else " "
        chars[local_start] = "0"
    return "".join(chars)
