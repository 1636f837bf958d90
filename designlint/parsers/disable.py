"""Inline `design-lint-disable` comment directives."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final

from designlint.diagnostics import PARSE_ERROR, RULE_RUNTIME_ERROR, LintMessage
from designlint.text import LineIndex

_COMMENT_OR_STRING_RE: Final = re.compile(
    r"""(?P<string>"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')"""
    r"|(?P<comment>/\*.*?\*/|<!--.*?-->|//[^\n]*)",
    re.DOTALL,
)
_DIRECTIVE_RE: Final = re.compile(r"design-lint-(disable-next-line|disable-line|disable|enable)\b([^\n]*)")
_COMMENT_CLOSERS: Final = re.compile(r"\s*(?:\*/|-->)\s*$")

UNFILTERED_RULES: Final[frozenset[str]] = frozenset({PARSE_ERROR.rule_id, RULE_RUNTIME_ERROR.rule_id})


@dataclass(frozen=True, slots=True)
class DisabledRange:
    """Lines `start_line..end_line` (inclusive) where `rules` are silenced.

    `rules` of None silences every rule.
    """

    start_line: int
    end_line: float
    rules: frozenset[str] | None = None

    def covers(self, message: LintMessage) -> bool:
        if not self.start_line <= message.line <= self.end_line:
            return False
        return self.rules is None or message.rule_id in self.rules


def parse_disable_directives(text: str) -> tuple[DisabledRange, ...]:
    if "design-lint-" not in text:
        return ()
    index = LineIndex(text)
    ranges: list[DisabledRange] = []
    open_blocks: list[tuple[int, frozenset[str] | None]] = []
    for found in _COMMENT_OR_STRING_RE.finditer(text):
        comment = found.group("comment")
        if comment is None:
            continue
        directive = _DIRECTIVE_RE.search(comment)
        if directive is None:
            continue
        kind = directive.group(1)
        rules = _parse_rule_list(directive.group(2))
        start_line, _ = index.line_col(found.start())
        end_line, _ = index.line_col(found.end())
        match kind:
            case "disable-line":
                ranges.append(DisabledRange(start_line, start_line, rules))
            case "disable-next-line":
                ranges.append(DisabledRange(end_line + 1, end_line + 1, rules))
            case "disable":
                open_blocks.append((start_line, rules))
            case "enable":
                still_open: list[tuple[int, frozenset[str] | None]] = []
                for block_start, block_rules in open_blocks:
                    if rules is None or (block_rules is not None and block_rules <= rules):
                        ranges.append(DisabledRange(block_start, start_line, block_rules))
                    else:
                        still_open.append((block_start, block_rules))
                open_blocks = still_open
    ranges.extend(DisabledRange(block_start, math.inf, block_rules) for block_start, block_rules in open_blocks)
    return tuple(ranges)


def filter_disabled(messages: Iterable[LintMessage], text: str) -> list[LintMessage]:
    """Drop messages silenced by directives; engine diagnostics are always kept."""
    ranges = parse_disable_directives(text)
    if not ranges:
        return list(messages)
    return [
        message
        for message in messages
        if message.rule_id in UNFILTERED_RULES or not any(item.covers(message) for item in ranges)
    ]


def _parse_rule_list(raw: str) -> frozenset[str] | None:
    body = _COMMENT_CLOSERS.sub("", raw)
    body = body.split(" -- ", 1)[0]
    rules = frozenset(part for part in re.split(r"[\s,]+", body) if part)
    return rules or None
