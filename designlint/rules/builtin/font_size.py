"""design-token/font-size: font sizes come from font-size or typography tokens."""

from __future__ import annotations

import re
from typing import Any, Final

from designlint.parsers.events import CSSDeclaration, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta
from designlint.rules.builtin.token_rule import in_group, is_var_reference, token_rule
from designlint.tokens import FlattenedToken, TokenType

_SIZE_RE: Final = re.compile(r"^(\d*\.?\d+)(px|rem|em)$", re.IGNORECASE)
_FONT_SIZE_GROUPS: Final[frozenset[str]] = frozenset({"fontsize", "fontsizes"})
# rem and em are compared at a 16px root size
ROOT_FONT_SIZE: Final = 16


def to_pixels(number: float, unit: str) -> float:
    return round(number if unit.lower() == "px" else number * ROOT_FONT_SIZE, 6)


def dimension_pixels(value: Any) -> float | None:
    if isinstance(value, dict) and value.get("unit") in ("px", "rem", "em"):
        return to_pixels(float(value["value"]), value["unit"])
    return None


def _allowed(tokens: list[FlattenedToken], context: RuleContext) -> set[float]:
    allowed: set[float] = set()
    for token in tokens:
        if token.type is TokenType.TYPOGRAPHY:
            size = dimension_pixels(token.value.get("fontSize")) if isinstance(token.value, dict) else None
        elif in_group(token, _FONT_SIZE_GROUPS):
            size = dimension_pixels(token.value)
        else:
            size = None
        if size is not None:
            allowed.add(size)
    return allowed


def _create(context: RuleContext, allowed: set[float]) -> RuleListener:
    def on_declaration(decl: CSSDeclaration) -> None:
        if decl.prop.lower() != "font-size" or is_var_reference(decl.value):
            return
        match = _SIZE_RE.match(decl.value.strip())
        if match is not None and to_pixels(float(match.group(1)), match.group(2)) not in allowed:
            context.report(f"Unexpected font size {decl.value}", decl.line, decl.column)

    return {SyntaxEvent.CSS_DECLARATION: on_declaration}


font_size_rule = token_rule(
    name="design-token/font-size",
    meta=RuleMeta(description="enforce font-size tokens", category="design-token"),
    token_types=(TokenType.DIMENSION, TokenType.TYPOGRAPHY),
    missing_message=(
        "design-token/font-size requires font size tokens; "
        'configure dimension tokens in a "fontSizes" group or typography tokens to enable this rule.'
    ),
    allowed=_allowed,
    create=_create,
    properties=lambda prop: prop == "font-size",
    label="font size",
)
