"""Syntax events and the nodes passed to rule listeners."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from designlint.errors import DocumentSyntaxError


class SyntaxEvent(StrEnum):
    """Constructs a parser strategy reports to per-document listeners."""

    STRING_LITERAL = "string_literal"
    NUMERIC_LITERAL = "numeric_literal"
    JSX_ATTRIBUTE = "jsx_attribute"
    CSS_DECLARATION = "css_declaration"


class RunEvent(StrEnum):
    """Hooks invoked once per run after every document settled."""

    RUN_COMPLETE = "run_complete"


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """A quoted string in script or markup.

    `attribute` names the element attribute the string is the value of, if any.
    `start`/`end` include the quotes unless `quoted` is false.
    """

    value: str
    line: int
    column: int
    start: int
    end: int
    attribute: str | None = None
    quoted: bool = True

    @property
    def value_range(self) -> tuple[int, int]:
        if self.quoted:
            return self.start + 1, self.end - 1
        return self.start, self.end


@dataclass(frozen=True, slots=True)
class NumericLiteral:
    value: float
    raw: str
    line: int
    column: int
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class JSXAttribute:
    """Attribute on a JSX element or template tag; `value` is its source text."""

    element: str
    name: str
    value: str | None
    line: int
    column: int
    start: int
    end: int

    @property
    def is_component(self) -> bool:
        if not self.element:
            return False
        return self.element[0].isupper() or "-" in self.element


@dataclass(frozen=True, slots=True)
class CSSDeclaration:
    """`prop: value` with document offsets of the whole declaration and its value."""

    prop: str
    value: str
    line: int
    column: int
    start: int
    end: int
    value_start: int
    value_end: int
    important: bool = False

    def shifted(self, delta: int) -> CSSDeclaration:
        return CSSDeclaration(
            prop=self.prop,
            value=self.value,
            line=self.line,
            column=self.column,
            start=self.start + delta,
            end=self.end + delta,
            value_start=self.value_start + delta,
            value_end=self.value_end + delta,
            important=self.important,
        )


type SyntaxNode = StringLiteral | NumericLiteral | JSXAttribute | CSSDeclaration
type Handler = Callable[[Any], None]
type RuleListener = Mapping[SyntaxEvent, Handler]
type RunListener = Mapping[RunEvent, Callable[[], None]]


@dataclass(frozen=True, slots=True)
class ScanEvent:
    """One construct found by a scanner, dispatched after the scan completes."""

    event: SyntaxEvent
    node: SyntaxNode

    @property
    def line(self) -> int:
        return self.node.line

    @property
    def column(self) -> int:
        return self.node.column


@dataclass(frozen=True, slots=True)
class ParserPassResult:
    token_references: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Events in source order plus recoverable errors from embedded regions."""

    events: tuple[ScanEvent, ...] = ()
    errors: tuple[DocumentSyntaxError, ...] = ()
