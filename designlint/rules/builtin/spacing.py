"""design-token/spacing: lengths on spacing properties follow the scale."""

from __future__ import annotations

import math
import re
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from designlint.parsers.events import CSSDeclaration, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta, RuleModule
from designlint.rules.builtin.token_rule import is_var_reference
from designlint.tokens import TokenType

_LENGTH_RE: Final = re.compile(r"(?<![\w#.-])(-?\d*\.?\d+)([a-z%]*)", re.IGNORECASE)
_SPACING_UNITS: Final[frozenset[str]] = frozenset({"px", "rem", "em"})
_SPACING_PREFIXES: Final[tuple[str, ...]] = (
    "margin",
    "padding",
    "gap",
    "row-gap",
    "column-gap",
    "inset",
    "top",
    "right",
    "bottom",
    "left",
    "scroll-margin",
    "scroll-padding",
)


class SpacingOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base: float = Field(default=4, gt=0)


def is_spacing_property(prop: str) -> bool:
    return prop.startswith(_SPACING_PREFIXES)


def _create(context: RuleContext) -> RuleListener:
    options = context.options if isinstance(context.options, SpacingOptions) else SpacingOptions()
    allowed: set[float] = set()
    for token in context.tokens_of(TokenType.DIMENSION):
        value = token.value
        if isinstance(value, dict) and value.get("unit") in _SPACING_UNITS:
            allowed.add(float(value["value"]))

    def is_allowed(number: float) -> bool:
        return number in allowed or math.isclose(math.remainder(number, options.base), 0.0, abs_tol=1e-9)

    def on_declaration(decl: CSSDeclaration) -> None:
        if not is_spacing_property(decl.prop.lower()) or is_var_reference(decl.value):
            return
        for match in _LENGTH_RE.finditer(decl.value):
            unit = match.group(2).lower()
            if unit not in _SPACING_UNITS:
                continue
            if not is_allowed(float(match.group(1))):
                context.report(f"Unexpected spacing {match.group(0)}", decl.line, decl.column)
                return

    return {SyntaxEvent.CSS_DECLARATION: on_declaration}


spacing_rule = RuleModule(
    name="design-token/spacing",
    meta=RuleMeta(description="enforce spacing scale", category="design-token", schema=SpacingOptions),
    create=_create,
)
