"""design-token/font-family: font stacks must use fontFamily token families."""

from __future__ import annotations

from designlint.parsers.events import CSSDeclaration, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta
from designlint.rules.builtin.token_rule import is_var_reference, token_rule
from designlint.tokens import FlattenedToken, TokenType


def _allowed(tokens: list[FlattenedToken], context: RuleContext) -> set[str]:
    families: set[str] = set()
    for token in tokens:
        value = token.value
        entries = value if isinstance(value, list) else [value]
        for entry in entries:
            if isinstance(entry, str):
                families.update(_split_families(entry))
    return families


def _split_families(value: str) -> list[str]:
    return [part.strip().strip("'\"").lower() for part in value.split(",") if part.strip()]


def _create(context: RuleContext, families: set[str]) -> RuleListener:
    def on_declaration(decl: CSSDeclaration) -> None:
        if decl.prop.lower() != "font-family" or is_var_reference(decl.value):
            return
        for family in _split_families(decl.value):
            if family not in families:
                context.report(f"Unexpected font family {family}", decl.line, decl.column)
                return

    return {SyntaxEvent.CSS_DECLARATION: on_declaration}


font_family_rule = token_rule(
    name="design-token/font-family",
    meta=RuleMeta(description="enforce font-family tokens", category="design-token"),
    token_types=(TokenType.FONT_FAMILY,),
    missing_message=(
        "design-token/font-family requires font tokens; "
        'configure tokens with $type "fontFamily" to enable this rule.'
    ),
    allowed=_allowed,
    create=_create,
    properties=lambda prop: prop == "font-family",
    label="font family",
)
