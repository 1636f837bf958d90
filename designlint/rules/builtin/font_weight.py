"""design-token/font-weight: font weights must come from fontWeight tokens."""

from __future__ import annotations

from designlint.parsers.events import CSSDeclaration, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta
from designlint.rules.builtin.token_rule import is_var_reference, token_rule
from designlint.tokens import FlattenedToken, TokenType


def _allowed(tokens: list[FlattenedToken], context: RuleContext) -> set[str]:
    values: set[str] = set()
    for token in tokens:
        value = token.value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            values.add(_canonical(str(value)))
        elif isinstance(value, str):
            values.add(_canonical(value))
    return values


def _canonical(value: str) -> str:
    text = value.strip().lower()
    try:
        number = float(text)
    except ValueError:
        return text
    return str(int(number)) if number.is_integer() else str(number)


def _create(context: RuleContext, allowed: set[str]) -> RuleListener:
    def on_declaration(decl: CSSDeclaration) -> None:
        if decl.prop.lower() != "font-weight" or is_var_reference(decl.value):
            return
        if _canonical(decl.value) not in allowed:
            context.report(f"Unexpected font weight {decl.value}", decl.line, decl.column)

    return {SyntaxEvent.CSS_DECLARATION: on_declaration}


font_weight_rule = token_rule(
    name="design-token/font-weight",
    meta=RuleMeta(description="enforce font-weight tokens", category="design-token"),
    token_types=(TokenType.FONT_WEIGHT,),
    missing_message=(
        "design-token/font-weight requires fontWeight tokens; "
        'configure tokens with $type "fontWeight" to enable this rule.'
    ),
    allowed=_allowed,
    create=_create,
    properties=lambda prop: prop == "font-weight",
    label="font weight",
)
