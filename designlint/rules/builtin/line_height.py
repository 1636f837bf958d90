"""design-token/line-height: line heights come from line-height or typography tokens."""

from __future__ import annotations

import re
from typing import Final

from designlint.parsers.events import CSSDeclaration, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta
from designlint.rules.builtin.font_size import dimension_pixels, to_pixels
from designlint.rules.builtin.token_rule import in_group, is_var_reference, token_rule
from designlint.tokens import FlattenedToken, TokenType
from designlint.tokens.validators import is_finite_number

_UNIT_RE: Final = re.compile(r"^(\d*\.?\d+)(px|rem|em)$", re.IGNORECASE)
_PERCENT_RE: Final = re.compile(r"^(\d*\.?\d+)%$")
_NUMBER_RE: Final = re.compile(r"^\d*\.?\d+$")
_LINE_HEIGHT_GROUPS: Final[frozenset[str]] = frozenset({"lineheight", "lineheights", "leading"})


def parse_line_height(value: str) -> float | None:
    """Unitless ratio, percentage as a ratio, or a length in pixels."""
    text = value.strip()
    if match := _UNIT_RE.match(text):
        return to_pixels(float(match.group(1)), match.group(2))
    if match := _PERCENT_RE.match(text):
        return round(float(match.group(1)) / 100, 6)
    if _NUMBER_RE.match(text):
        return round(float(text), 6)
    return None


def _allowed(tokens: list[FlattenedToken], context: RuleContext) -> set[float]:
    allowed: set[float] = set()
    for token in tokens:
        value = token.value
        if token.type is TokenType.TYPOGRAPHY:
            value = value.get("lineHeight") if isinstance(value, dict) else None
        elif not in_group(token, _LINE_HEIGHT_GROUPS):
            continue
        if is_finite_number(value):
            allowed.add(round(float(value), 6))
        elif (pixels := dimension_pixels(value)) is not None:
            allowed.add(pixels)
    return allowed


def _create(context: RuleContext, allowed: set[float]) -> RuleListener:
    def on_declaration(decl: CSSDeclaration) -> None:
        if decl.prop.lower() != "line-height" or is_var_reference(decl.value):
            return
        number = parse_line_height(decl.value)
        if number is not None and number not in allowed:
            context.report(f"Unexpected line height {decl.value}", decl.line, decl.column)

    return {SyntaxEvent.CSS_DECLARATION: on_declaration}


line_height_rule = token_rule(
    name="design-token/line-height",
    meta=RuleMeta(description="enforce line-height tokens", category="design-token"),
    token_types=(TokenType.NUMBER, TokenType.DIMENSION, TokenType.TYPOGRAPHY),
    missing_message=(
        "design-token/line-height requires line height tokens; "
        'configure tokens in a "lineHeights" group or typography tokens to enable this rule.'
    ),
    allowed=_allowed,
    create=_create,
    properties=lambda prop: prop == "line-height",
    label="line height",
)
