"""design-system/deprecation: flag uses of deprecated tokens and fix them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from designlint.diagnostics import Fix
from designlint.parsers.events import CSSDeclaration, RuleListener, StringLiteral, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta
from designlint.rules.builtin.token_rule import token_rule
from designlint.text import TextRange
from designlint.tokens import FlattenedToken, TokenType, alias_target, css_var_name

_VAR_NAME_RE: Final = re.compile(r"var\(\s*(--[\w-]+)")


@dataclass(frozen=True, slots=True)
class Deprecation:
    path: str
    replacement: str | None


def _deprecations(tokens: list[FlattenedToken], context: RuleContext) -> dict[str, Deprecation]:
    """Deprecated tokens keyed by path and by custom property name."""
    by_name: dict[str, Deprecation] = {}
    for token in tokens:
        if not token.is_deprecated:
            continue
        replacement = alias_target(token.deprecated) if isinstance(token.deprecated, str) else None
        deprecation = Deprecation(token.path, replacement)
        by_name[token.path] = deprecation
        by_name[css_var_name(token.path)] = deprecation
    return by_name


def _message(name: str, replacement: str | None) -> str:
    if replacement is None:
        return f"Token {name} is deprecated"
    return f"Token {name} is deprecated, use {replacement}"


def _create(context: RuleContext, deprecations: dict[str, Deprecation]) -> RuleListener:
    def on_string(node: StringLiteral) -> None:
        deprecation = deprecations.get(node.value.strip())
        if deprecation is None or deprecation.path != node.value.strip():
            return
        fix = None
        if deprecation.replacement is not None:
            start, end = node.value_range
            fix = Fix(TextRange(start, end), deprecation.replacement)
        context.report(_message(deprecation.path, deprecation.replacement), node.line, node.column, fix=fix)

    def on_declaration(decl: CSSDeclaration) -> None:
        value = decl.value.strip()
        direct = deprecations.get(value)
        if direct is not None and direct.path == value:
            fix = None
            if direct.replacement is not None:
                fix = Fix(TextRange(decl.value_start, decl.value_end), direct.replacement)
            context.report(_message(direct.path, direct.replacement), decl.line, decl.column, fix=fix)
            return
        for match in _VAR_NAME_RE.finditer(decl.value):
            name = match.group(1)
            deprecation = deprecations.get(name)
            if deprecation is None:
                continue
            fix = None
            replacement = None
            if deprecation.replacement is not None:
                replacement = css_var_name(deprecation.replacement)
                offset = decl.value_start + match.start(1)
                fix = Fix(TextRange(offset, offset + len(name)), replacement)
            context.report(_message(name, replacement), decl.line, decl.column, fix=fix)
            return

    return {
        SyntaxEvent.STRING_LITERAL: on_string,
        SyntaxEvent.CSS_DECLARATION: on_declaration,
    }


deprecation_rule = token_rule(
    name="design-system/deprecation",
    meta=RuleMeta(
        description="flag deprecated tokens",
        category="design-system",
        capabilities=frozenset({"fix"}),
    ),
    token_types=tuple(TokenType),
    missing_message=(
        "design-system/deprecation requires deprecated tokens; "
        "mark tokens with $deprecated to enable this rule."
    ),
    allowed=_deprecations,
    create=_create,
    properties=lambda prop: False,
    label="token",
)
