"""Stylesheet scanner for CSS, SCSS and Less.

The scanner only recovers declarations; selectors and at-rule preludes are
skipped. Offsets are document offsets: a scanner over an embedded region is
given the region's `base_offset` and the document's `LineIndex`.
"""

from __future__ import annotations

import re
from typing import Final, Literal

from designlint.errors import DocumentSyntaxError
from designlint.parsers.events import CSSDeclaration
from designlint.text import LineIndex

type StylesheetSyntax = Literal["css", "scss", "less"]

_IMPORTANT_RE: Final = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)
_INTERPOLATION_OPENERS: Final[frozenset[str]] = frozenset({"#", "@", "$"})


class StylesheetScanner:
    """Declaration scanner over one stylesheet or inline style region."""

    def __init__(
        self,
        source: str,
        *,
        syntax: StylesheetSyntax = "css",
        line_index: LineIndex | None = None,
        base_offset: int = 0,
        inline: bool = False,
    ) -> None:
        self._source = source
        self._syntax = syntax
        self._line_index = line_index if line_index is not None else LineIndex(source)
        self._base_offset = base_offset
        self._inline = inline
        self._position = 0
        self._masked = ""

    def scan(self) -> list[CSSDeclaration]:
        self._masked = self._mask_comments()
        self._position = 0
        return self._scan_declarations()

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

    def _mask_comments(self) -> str:
        """Source with comments replaced by spaces, newlines kept."""
        chars = list(self._source)
        paren_depth = 0
        while self._position < len(self._source):
            ch = self._current_char()
            if ch in "\"'":
                self._skip_string(ch)
                continue
            if ch == "(":
                paren_depth += 1
            elif ch == ")" and paren_depth > 0:
                paren_depth -= 1
            elif ch == "/" and self._peek_char() == "*":
                start = self._position
                end = self._source.find("*/", start + 2)
                if end < 0:
                    raise self._error("Unclosed comment", start)
                self._blank(chars, start, end + 2)
                self._position = end + 2
                continue
            elif ch == "/" and self._peek_char() == "/" and self._syntax != "css" and paren_depth == 0:
                start = self._position
                end = self._source.find("\n", start)
                end = len(self._source) if end < 0 else end
                self._blank(chars, start, end)
                self._position = end
                continue
            self._advance()
        return "".join(chars)

    @staticmethod
    def _blank(chars: list[str], start: int, end: int) -> None:
        for index in range(start, end):
            if chars[index] != "\n":
                chars[index] = " "

    def _skip_string(self, quote: str) -> None:
        start = self._position
        self._advance()
        while True:
            ch = self._current_char()
            if ch == "\0" and self._position >= len(self._source):
                raise self._error("Unclosed string", start)
            if ch == "\\":
                self._advance(2)
                continue
            if ch == "\n":
                raise self._error("Unclosed string", start)
            self._advance()
            if ch == quote:
                return

    def _scan_declarations(self) -> list[CSSDeclaration]:
        text = self._masked
        declarations: list[CSSDeclaration] = []
        open_blocks: list[int] = []
        paren_depth = 0
        segment_start = 0
        index = 0
        while index < len(text):
            ch = text[index]
            if ch in "\"'":
                index = _string_end(text, index)
                continue
            if ch == "(":
                paren_depth += 1
            elif ch == ")" and paren_depth > 0:
                paren_depth -= 1
            elif paren_depth > 0:
                pass
            elif ch == "{":
                if index > 0 and text[index - 1] in _INTERPOLATION_OPENERS and self._syntax != "css":
                    index = _interpolation_end(text, index)
                    continue
                open_blocks.append(index)
                segment_start = index + 1
            elif ch == "}":
                self._flush(segment_start, index, declarations)
                if not open_blocks:
                    raise self._error("Unexpected }", index)
                open_blocks.pop()
                segment_start = index + 1
            elif ch == ";":
                self._flush(segment_start, index, declarations)
                segment_start = index + 1
            index += 1
        if open_blocks:
            raise self._error("Unclosed block", open_blocks[-1])
        self._flush(segment_start, len(text), declarations)
        return declarations

    def _flush(self, start: int, end: int, declarations: list[CSSDeclaration]) -> None:
        segment = self._masked[start:end]
        stripped = segment.strip()
        if not stripped or stripped.startswith("@"):
            return
        leading = len(segment) - len(segment.lstrip())
        colon = _top_level_colon(segment)
        if colon < 0 or not segment[:colon].strip():
            # mixin calls and placeholders in scss/less have no colon
            if self._inline or self._syntax != "css":
                return
            raise self._error("Unknown word", start + leading)

        prop = segment[:colon].strip()
        raw_value = segment[colon + 1 :]
        value_lead = len(raw_value) - len(raw_value.lstrip())
        value = raw_value.strip()
        important = False
        important_match = _IMPORTANT_RE.search(value)
        if important_match is not None:
            important = True
            value = value[: important_match.start()].rstrip()

        decl_start = start + leading
        value_start = start + colon + 1 + value_lead
        value_end = value_start + len(value)
        # values come from the unmasked source so strings and urls are intact
        value = self._source[value_start:value_end]
        line, column = self._line_index.line_col(self._base_offset + decl_start)
        declarations.append(
            CSSDeclaration(
                prop=prop,
                value=value,
                line=line,
                column=column,
                start=self._base_offset + decl_start,
                end=self._base_offset + max(value_end, decl_start + len(prop)),
                value_start=self._base_offset + value_start,
                value_end=self._base_offset + value_end,
                important=important,
            )
        )


def scan_stylesheet(
    source: str,
    *,
    syntax: StylesheetSyntax = "css",
    line_index: LineIndex | None = None,
    base_offset: int = 0,
    inline: bool = False,
) -> list[CSSDeclaration]:
    """Scan declarations; raises `DocumentSyntaxError` on malformed input."""
    scanner = StylesheetScanner(
        source,
        syntax=syntax,
        line_index=line_index,
        base_offset=base_offset,
        inline=inline,
    )
    return scanner.scan()


def _string_end(text: str, start: int) -> int:
    quote = text[start]
    index = start + 1
    while index < len(text):
        ch = text[index]
        if ch == "\\":
            index += 2
            continue
        index += 1
        if ch == quote:
            break
    return index


def _interpolation_end(text: str, start: int) -> int:
    depth = 0
    index = start
    while index < len(text):
        if text[index] == "{":
            depth += 1
        elif text[index] == "}":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return index


def _top_level_colon(segment: str) -> int:
    paren_depth = 0
    index = 0
    while index < len(segment):
        ch = segment[index]
        if ch in "\"'":
            index = _string_end(segment, index)
            continue
        if ch == "(":
            paren_depth += 1
        elif ch == ")" and paren_depth > 0:
            paren_depth -= 1
        elif ch == ":" and paren_depth == 0:
            return index
        index += 1
    return -1
