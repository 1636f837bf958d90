"""design-token/border-radius: radii come from dimension tokens in a radius group."""

from __future__ import annotations

import re
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from designlint.parsers.events import CSSDeclaration, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta
from designlint.rules.builtin.token_rule import in_group, is_var_reference, token_rule
from designlint.tokens import FlattenedToken, TokenType

_LENGTH_RE: Final = re.compile(r"(?<![\w#.-])(-?\d*\.?\d+)([a-z%]+)", re.IGNORECASE)
_FUNCTION_RE: Final = re.compile(r"[\w-]+\([^()]*\)")
_RADIUS_GROUPS: Final[frozenset[str]] = frozenset({"radius", "radii", "borderradius"})


class BorderRadiusOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    units: list[str] = Field(default_factory=lambda: ["px", "rem", "em"])


def is_radius_property(prop: str) -> bool:
    return prop == "border-radius" or (prop.startswith("border-") and prop.endswith("-radius"))


def _allowed(tokens: list[FlattenedToken], context: RuleContext) -> set[float]:
    allowed: set[float] = set()
    for token in tokens:
        value = token.value
        if in_group(token, _RADIUS_GROUPS) and isinstance(value, dict):
            allowed.add(float(value["value"]))
    return allowed


def _create(context: RuleContext, allowed: set[float]) -> RuleListener:
    options = context.options if isinstance(context.options, BorderRadiusOptions) else BorderRadiusOptions()
    units = {unit.lower() for unit in options.units}

    def on_declaration(decl: CSSDeclaration) -> None:
        if not is_radius_property(decl.prop.lower()) or is_var_reference(decl.value):
            return
        value = _FUNCTION_RE.sub(" ", decl.value)
        for match in _LENGTH_RE.finditer(value):
            if match.group(2).lower() in units and float(match.group(1)) not in allowed:
                context.report(f"Unexpected border radius {match.group(0)}", decl.line, decl.column)
                return

    return {SyntaxEvent.CSS_DECLARATION: on_declaration}


border_radius_rule = token_rule(
    name="design-token/border-radius",
    meta=RuleMeta(description="enforce border-radius tokens", category="design-token", schema=BorderRadiusOptions),
    token_types=(TokenType.DIMENSION,),
    missing_message=(
        "design-token/border-radius requires radius tokens; "
        'configure dimension tokens in a "radius" group to enable this rule.'
    ),
    allowed=_allowed,
    create=_create,
    properties=is_radius_property,
    label="border radius",
)
