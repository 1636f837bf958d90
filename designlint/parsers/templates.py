"""Vue and Svelte single-file components.

`<script>` and `<style>` regions are handed to the script and stylesheet
scanners with their document offsets. The remaining markup is scanned for
attributes, style bindings and template expressions.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Final, Literal

from designlint.diagnostics import UNSUPPORTED_SASS
from designlint.errors import DocumentSyntaxError
from designlint.parsers.css import StylesheetSyntax, scan_stylesheet
from designlint.parsers.events import (
    CSSDeclaration,
    JSXAttribute,
    ScanEvent,
    ScanResult,
    StringLiteral,
    SyntaxEvent,
)
from designlint.parsers.script import ScriptScanner, scan_script
from designlint.text import LineIndex

type TemplateFlavor = Literal["vue", "svelte"]

_SCRIPT_RE: Final = re.compile(r"<script\b([^>]*)>(.*?)</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE_RE: Final = re.compile(r"<style\b([^>]*)>(.*?)</style\s*>", re.IGNORECASE | re.DOTALL)
_LANG_RE: Final = re.compile(r"""\blang\s*=\s*["']?([\w-]+)""", re.IGNORECASE)
_TAG_NAME_RE: Final = re.compile(r"[A-Za-z][\w.:-]*")
_ATTRIBUTE_NAME_RE: Final = re.compile(r"""[^\s=>/"'{}]+""")
_UNQUOTED_VALUE_RE: Final = re.compile(r"""[^\s>"'`=<]+""")
_SVELTE_BLOCK_RE: Final = re.compile(r"\s*[#:/@]\w+(?:\s+if\b)?")
_VUE_STYLE_BINDINGS: Final[frozenset[str]] = frozenset({":style", "v-bind:style"})


def scan_template(source: str, flavor: TemplateFlavor, line_index: LineIndex | None = None) -> ScanResult:
    """Scan a component; malformed `<script>`/`<style>` regions raise `DocumentSyntaxError`."""
    index = line_index if line_index is not None else LineIndex(source)
    events: list[ScanEvent] = []
    errors: list[DocumentSyntaxError] = []
    markup = list(source)

    for match in _SCRIPT_RE.finditer(source):
        _blank(markup, match.start(), match.end())
        lang = _lang(match.group(1))
        scan = scan_script(
            match.group(2),
            jsx=lang in ("tsx", "jsx"),
            line_index=index,
            base_offset=match.start(2),
        )
        events.extend(scan.events)
        errors.extend(scan.errors)

    for match in _STYLE_RE.finditer(source):
        _blank(markup, match.start(), match.end())
        lang = _lang(match.group(1)) or "css"
        if lang == "sass":
            line, column = index.line_col(match.start())
            errors.append(DocumentSyntaxError(UNSUPPORTED_SASS.message, line, column))
            continue
        syntax: StylesheetSyntax = "scss" if lang == "scss" else "less" if lang == "less" else "css"
        for declaration in scan_stylesheet(
            match.group(2),
            syntax=syntax,
            line_index=index,
            base_offset=match.start(2),
        ):
            events.append(ScanEvent(SyntaxEvent.CSS_DECLARATION, declaration))

    markup_scan = MarkupScanner("".join(markup), flavor, line_index=index).scan()
    events.extend(markup_scan.events)
    errors.extend(markup_scan.errors)
    events.sort(key=lambda scanned: scanned.node.start)
    return ScanResult(events=tuple(events), errors=tuple(errors))


class MarkupScanner:
    """Tag and attribute scanner for component templates."""

    def __init__(self, source: str, flavor: TemplateFlavor, *, line_index: LineIndex | None = None) -> None:
        self._source = source
        self._flavor = flavor
        self._line_index = line_index if line_index is not None else LineIndex(source)
        self._position = 0
        self._events: list[ScanEvent] = []
        self._errors: list[DocumentSyntaxError] = []

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    def scan(self) -> ScanResult:
        while not self.is_eof:
            ch = self._current_char()
            if self._source.startswith("<!--", self._position):
                end = self._source.find("-->", self._position + 4)
                if end < 0:
                    raise self._error("Unterminated comment", self._position)
                self._position = end + 3
            elif ch == "<" and self._peek_char() == "/":
                close = self._source.find(">", self._position)
                self._position = len(self._source) if close < 0 else close + 1
            elif ch == "<" and self._peek_char().isalpha():
                self._scan_tag()
            elif self._flavor == "vue" and self._source.startswith("{{", self._position):
                self._scan_interpolation(2)
            elif self._flavor == "svelte" and ch == "{":
                self._scan_interpolation(1)
            else:
                self._advance()
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

    def _error(self, message: str, offset: int) -> DocumentSyntaxError:
        line, column = self._line_index.line_col(offset)
        return DocumentSyntaxError(message, line, column)

    def _skip_whitespace(self) -> None:
        while not self.is_eof and self._current_char() in " \t\r\n":
            self._advance()

    def _scan_tag(self) -> None:
        start = self._position
        self._advance()
        match = _TAG_NAME_RE.match(self._source, self._position)
        element = match.group(0) if match is not None else ""
        self._position = match.end() if match is not None else self._position
        while True:
            self._skip_whitespace()
            if self.is_eof:
                raise self._error("Unterminated tag", start)
            ch = self._current_char()
            if ch == ">":
                self._advance()
                return
            if ch == "/":
                self._advance()
                continue
            if ch == "{" and self._flavor == "svelte":
                end = self._expression_end(self._position)
                self._scan_script_region(self._position + 1, end - 1, attribute=None)
                self._position = end
                continue
            self._scan_attribute(element)

    def _scan_attribute(self, element: str) -> None:
        start = self._position
        match = _ATTRIBUTE_NAME_RE.match(self._source, self._position)
        if match is None:
            self._advance()
            return
        name = match.group(0)
        self._position = match.end()
        insert_at = len(self._events)
        value: str | None = None
        self._skip_whitespace()
        if self._current_char() == "=":
            self._advance()
            self._skip_whitespace()
            value = self._scan_attribute_value(name)
        line, column = self._line_index.line_col(start)
        attribute = JSXAttribute(
            element=element,
            name=name,
            value=value,
            line=line,
            column=column,
            start=start,
            end=self._position,
        )
        self._events.insert(insert_at, ScanEvent(SyntaxEvent.JSX_ATTRIBUTE, attribute))

    def _scan_attribute_value(self, name: str) -> str:
        ch = self._current_char()
        if self._flavor == "svelte" and ch == "{":
            end = self._expression_end(self._position)
            value_start, value_end = self._position + 1, end - 1
            self._position = end
            if name == "style":
                self._scan_style_binding(value_start, value_end)
            else:
                self._scan_script_region(value_start, value_end, attribute=_binding_name(name))
            return self._source[value_start:value_end]

        attribute_start = self._position
        if ch in "\"'":
            value_start = self._position + 1
            value_end = self._source.find(ch, value_start)
            if value_end < 0:
                raise self._error("Unterminated attribute value", self._position)
            self._position = value_end + 1
        else:
            match = _UNQUOTED_VALUE_RE.match(self._source, self._position)
            value_start = self._position
            value_end = match.end() if match is not None else self._position
            self._position = value_end
        value = self._source[value_start:value_end]

        if self._flavor == "vue" and name in _VUE_STYLE_BINDINGS:
            self._scan_style_binding(value_start, value_end)
        elif self._flavor == "vue" and name.startswith((":", "@", "#", "v-")):
            self._scan_script_region(value_start, value_end, attribute=_binding_name(name))
        elif name == "style":
            self._scan_inline_style(value, value_start)
        elif self._flavor == "svelte" and name.startswith("style:"):
            self._emit_style_directive(name, value, attribute_start, value_start, value_end)
        else:
            line, column = self._line_index.line_col(attribute_start)
            self._events.append(
                ScanEvent(
                    SyntaxEvent.STRING_LITERAL,
                    StringLiteral(
                        value=value,
                        line=line,
                        column=column,
                        start=attribute_start,
                        end=self._position,
                        attribute=name,
                        quoted=value_start != attribute_start,
                    ),
                )
            )
        return value

    def _scan_inline_style(self, value: str, value_start: int) -> None:
        if self._flavor == "svelte":
            value = _mask_interpolations(value)
        try:
            declarations = scan_stylesheet(
                value,
                line_index=self._line_index,
                base_offset=value_start,
                inline=True,
            )
        except DocumentSyntaxError as exc:
            self._errors.append(exc)
            return
        self._events.extend(ScanEvent(SyntaxEvent.CSS_DECLARATION, decl) for decl in declarations)

    def _emit_style_directive(self, name: str, value: str, start: int, value_start: int, value_end: int) -> None:
        prop = name.removeprefix("style:").split("|", 1)[0]
        line, column = self._line_index.line_col(start)
        declaration = CSSDeclaration(
            prop=prop,
            value=value,
            line=line,
            column=column,
            start=start,
            end=self._position,
            value_start=value_start,
            value_end=value_end,
        )
        self._events.append(ScanEvent(SyntaxEvent.CSS_DECLARATION, declaration))

    def _scan_style_binding(self, start: int, end: int) -> None:
        scanner = ScriptScanner(
            self._source[start:end],
            line_index=self._line_index,
            base_offset=start,
        )
        self._collect(scanner.scan_style_binding)

    def _scan_script_region(self, start: int, end: int, *, attribute: str | None) -> None:
        scanner = ScriptScanner(
            self._source[start:end],
            line_index=self._line_index,
            base_offset=start,
            attribute=attribute,
        )
        self._collect(scanner.scan)

    def _collect(self, scan: Callable[[], ScanResult]) -> None:
        try:
            result = scan()
        except DocumentSyntaxError as exc:
            self._errors.append(exc)
            return
        self._events.extend(result.events)
        self._errors.extend(result.errors)

    def _scan_interpolation(self, width: int) -> None:
        start = self._position
        end = self._expression_end(start)
        expression_start, expression_end = start + width, end - width
        if self._flavor == "svelte":
            block = _SVELTE_BLOCK_RE.match(self._source, expression_start, expression_end)
            if block is not None:
                expression_start = block.end()
        self._position = end
        if expression_start < expression_end:
            self._scan_script_region(expression_start, expression_end, attribute=None)

    def _expression_end(self, start: int) -> int:
        end = find_expression_end(self._source, start)
        if end < 0:
            raise self._error("Unterminated expression", start)
        return end


def find_expression_end(text: str, start: int) -> int:
    """Offset just past the brace matching `text[start]`, or -1 when unbalanced."""
    depth = 0
    index = start
    while index < len(text):
        ch = text[index]
        if ch in "\"'`":
            index = _quoted_end(text, index)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return -1


def _quoted_end(text: str, start: int) -> int:
    quote = text[start]
    index = start + 1
    while index < len(text):
        ch = text[index]
        if ch == "\\":
            index += 2
            continue
        index += 1
        if ch == quote:
            return index
    return len(text)


def _mask_interpolations(value: str) -> str:
    chars = list(value)
    index = value.find("{")
    while index >= 0:
        end = find_expression_end(value, index)
        if end < 0:
            break
        _blank(chars, index, end)
        chars[index] = "0"
        index = value.find("{", end)
    return "".join(chars)


def _blank(chars: list[str], start: int, end: int) -> None:
    for index in range(start, end):
        if chars[index] != "\n":
            chars[index] = " "


def _lang(attributes: str) -> str | None:
    match = _LANG_RE.search(attributes)
    return match.group(1).lower() if match is not None else None


def _binding_name(name: str) -> str:
    if name.startswith("v-bind:"):
        return name.removeprefix("v-bind:")
    return name.removeprefix(":")
