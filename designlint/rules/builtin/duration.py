"""design-token/duration: transition and animation durations use duration tokens."""

from __future__ import annotations

import re
from typing import Final

from designlint.parsers.events import CSSDeclaration, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta
from designlint.rules.builtin.token_rule import token_rule
from designlint.tokens import FlattenedToken, TokenType

_TIME_RE: Final = re.compile(r"(?<![\w.-])(-?\d*\.?\d+)(ms|s)\b", re.IGNORECASE)
_FUNCTION_RE: Final = re.compile(r"[\w-]+\([^()]*\)")
_DURATION_PROPERTIES: Final[frozenset[str]] = frozenset(
    {"transition", "transition-duration", "animation", "animation-duration"}
)


def _milliseconds(value: float, unit: str) -> float:
    return value * 1000 if unit.lower() == "s" else value


def _allowed(tokens: list[FlattenedToken], context: RuleContext) -> set[float]:
    allowed: set[float] = set()
    for token in tokens:
        value = token.value
        if isinstance(value, dict) and isinstance(value.get("value"), (int, float)):
            allowed.add(_milliseconds(float(value["value"]), str(value.get("unit", "ms"))))
    return allowed


def _create(context: RuleContext, allowed: set[float]) -> RuleListener:
    def on_declaration(decl: CSSDeclaration) -> None:
        if decl.prop.lower() not in _DURATION_PROPERTIES:
            return
        # durations inside functions such as cubic-bezier() or var() are not literal times
        value = _FUNCTION_RE.sub(" ", decl.value)
        for match in _TIME_RE.finditer(value):
            if _milliseconds(float(match.group(1)), match.group(2)) not in allowed:
                context.report(f"Unexpected duration {match.group(0)}", decl.line, decl.column)
                return

    return {SyntaxEvent.CSS_DECLARATION: on_declaration}


duration_rule = token_rule(
    name="design-token/duration",
    meta=RuleMeta(description="enforce motion duration tokens", category="design-token"),
    token_types=(TokenType.DURATION,),
    missing_message=(
        "design-token/duration requires duration tokens; "
        'configure tokens with $type "duration" to enable this rule.'
    ),
    allowed=_allowed,
    create=_create,
    properties=lambda prop: prop in _DURATION_PROPERTIES,
    label="duration",
)
