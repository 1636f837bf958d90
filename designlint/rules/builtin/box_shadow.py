"""design-token/box-shadow: each shadow layer must match a shadow token."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final

from designlint.parsers.events import CSSDeclaration, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta
from designlint.rules.builtin.token_rule import token_rule
from designlint.tokens import FlattenedToken, TokenType, format_scalar
from designlint.tokens.validators import as_list

_NUMBER_RE: Final = re.compile(r"^(-?\d*\.?\d+)([a-z%]*)$", re.IGNORECASE)
_FUNCTION_ONLY_RE: Final = re.compile(r"^[\w-]+\([^()]*\)$")


def split_layers(value: str) -> list[str]:
    """Split a shadow list on top-level commas; commas inside functions stay."""
    layers: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(value):
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            layers.append(value[start:index])
            start = index + 1
    layers.append(value[start:])
    return [layer.strip() for layer in layers if layer.strip()]


def normalize_layer(layer: str) -> str:
    compact = re.sub(r"\s*,\s*", ",", layer.strip())
    return " ".join(_canonical_part(part) for part in compact.split())


def _canonical_part(part: str) -> str:
    match = _NUMBER_RE.match(part)
    if match is None:
        return part.lower()
    number = float(match.group(1))
    if number == 0:
        return "0"
    text = str(int(number)) if number.is_integer() else str(number)
    return text + match.group(2).lower()


def format_shadow_layer(layer: Mapping[str, Any]) -> str:
    parts = [format_scalar(layer["offsetX"]), format_scalar(layer["offsetY"]), format_scalar(layer["blur"])]
    if "spread" in layer:
        parts.append(format_scalar(layer["spread"]))
    parts.append(str(layer["color"]))
    if layer.get("inset"):
        parts.insert(0, "inset")
    return " ".join(parts)


def _allowed(tokens: list[FlattenedToken], context: RuleContext) -> set[str]:
    allowed: set[str] = set()
    for token in tokens:
        for value in token.values():
            for layer in as_list(value):
                if isinstance(layer, Mapping):
                    allowed.add(normalize_layer(format_shadow_layer(layer)))
    return allowed


def _create(context: RuleContext, allowed: set[str]) -> RuleListener:
    def on_declaration(decl: CSSDeclaration) -> None:
        if decl.prop.lower() != "box-shadow":
            return
        for layer in split_layers(decl.value):
            if _FUNCTION_ONLY_RE.match(layer) or layer.lower() in ("none", "inherit", "initial", "unset"):
                continue
            if normalize_layer(layer) not in allowed:
                context.report(f"Unexpected box shadow {layer}", decl.line, decl.column)
                return

    return {SyntaxEvent.CSS_DECLARATION: on_declaration}


box_shadow_rule = token_rule(
    name="design-token/box-shadow",
    meta=RuleMeta(description="enforce box-shadow tokens", category="design-token"),
    token_types=(TokenType.SHADOW,),
    missing_message=(
        "design-token/box-shadow requires shadow tokens; "
        'configure tokens with $type "shadow" to enable this rule.'
    ),
    allowed=_allowed,
    create=_create,
    properties=lambda prop: prop == "box-shadow",
    label="box shadow",
)
