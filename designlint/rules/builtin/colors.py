"""design-token/colors: disallow raw colors that are not color token values."""

from __future__ import annotations

import re
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict

from designlint.parsers.events import CSSDeclaration, RuleListener, StringLiteral, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta, RuleModule
from designlint.tokens import TokenType, match_token
from designlint.tokens.colors import NAMED_COLORS

type ColorFormat = Literal["hex", "rgb", "rgba", "hsl", "hsla", "named"]

_NAMED_ALTERNATION: Final[str] = "|".join(sorted(NAMED_COLORS, key=len, reverse=True))
_COLOR_PATTERNS: Final[tuple[tuple[ColorFormat, re.Pattern[str]], ...]] = (
    ("hex", re.compile(r"#[0-9a-fA-F]{3,8}\b")),
    ("rgb", re.compile(r"\brgb\([^()]*\)", re.IGNORECASE)),
    ("rgba", re.compile(r"\brgba\([^()]*\)", re.IGNORECASE)),
    ("hsl", re.compile(r"\bhsl\([^()]*\)", re.IGNORECASE)),
    ("hsla", re.compile(r"\bhsla\([^()]*\)", re.IGNORECASE)),
    ("named", re.compile(rf"(?<![\w#$@.-])(?:{_NAMED_ALTERNATION})(?![\w-])", re.IGNORECASE)),
)


class ColorsOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    allow: list[ColorFormat] = []


def _create(context: RuleContext) -> RuleListener:
    options = context.options if isinstance(context.options, ColorsOptions) else ColorsOptions()
    allowed = {
        str(value).strip().lower()
        for token in context.tokens_of(TokenType.COLOR)
        for value in token.values()
        if isinstance(value, str)
    }
    allowed_formats = frozenset(options.allow)

    def check(text: str, line: int, column: int) -> None:
        for color_format, pattern in _COLOR_PATTERNS:
            if color_format in allowed_formats:
                continue
            for match in pattern.finditer(text):
                value = match.group(0)
                if value.lower() in allowed:
                    continue
                if context.token_patterns and match_token(value, context.token_patterns):
                    continue
                context.report(f"Unexpected color {value}", line, column)
                return

    def on_string(node: StringLiteral) -> None:
        if node.attribute is not None and node.attribute != "style":
            return
        check(node.value, node.line, node.column)

    def on_declaration(decl: CSSDeclaration) -> None:
        check(decl.value, decl.line, decl.column)

    return {
        SyntaxEvent.STRING_LITERAL: on_string,
        SyntaxEvent.CSS_DECLARATION: on_declaration,
    }


colors_rule = RuleModule(
    name="design-token/colors",
    meta=RuleMeta(description="disallow raw colors", category="design-token", schema=ColorsOptions),
    create=_create,
)
