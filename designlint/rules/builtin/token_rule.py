"""Shared shape for rules that compare values against a token set."""

from __future__ import annotations

from collections.abc import Callable, Collection, Sequence

from designlint.parsers.events import CSSDeclaration, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta, RuleModule
from designlint.tokens import FlattenedToken, TokenType, closest_token, extract_var_name, match_token


def token_rule[A: Collection[object]](
    *,
    name: str,
    meta: RuleMeta,
    token_types: Sequence[TokenType],
    missing_message: str,
    allowed: Callable[[list[FlattenedToken], RuleContext], A],
    create: Callable[[RuleContext, A], RuleListener],
    properties: Callable[[str], bool],
    label: str,
) -> RuleModule:
    """Build a rule that reports once at 1:1 when no usable tokens exist.

    When tokens are configured as allow-patterns, declarations of matching
    `properties` must use a `var(--name)` whose name matches a pattern.
    """

    def create_listener(context: RuleContext) -> RuleListener:
        if context.token_patterns:
            return _pattern_listener(context, properties, label)
        values = allowed(context.tokens_of(*token_types), context)
        if not values:
            context.report(missing_message, 1, 1)
            return {}
        return create(context, values)

    return RuleModule(name=name, meta=meta, create=create_listener)


def _pattern_listener(context: RuleContext, properties: Callable[[str], bool], label: str) -> RuleListener:
    def on_declaration(decl: CSSDeclaration) -> None:
        if not properties(decl.prop.lower()):
            return
        var_name = extract_var_name(decl.value)
        if var_name is not None and match_token(var_name, context.token_patterns):
            return
        suggest = closest_token(var_name, context.token_patterns) if var_name is not None else None
        context.report(f"Unexpected {label} {decl.value}", decl.line, decl.column, suggest=suggest)

    return {SyntaxEvent.CSS_DECLARATION: on_declaration}


def is_var_reference(value: str) -> bool:
    return extract_var_name(value) is not None


def in_group(token: FlattenedToken, names: Collection[str]) -> bool:
    """True when a parent group of `token` is named like one of `names`.

    Names compare case-insensitively with `-` and `_` ignored, so
    `font-sizes`, `fontSizes` and `font_sizes` are the same group.
    """
    return any(_group_key(segment) in names for segment in token.path.split(".")[:-1])


def _group_key(segment: str) -> str:
    return segment.replace("-", "").replace("_", "").lower()
