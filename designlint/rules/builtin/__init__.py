"""Rules shipped with designlint, in registration order."""

from designlint.rules.base import RuleModule
from designlint.rules.builtin.border_radius import BorderRadiusOptions, border_radius_rule
from designlint.rules.builtin.box_shadow import box_shadow_rule
from designlint.rules.builtin.colors import ColorsOptions, colors_rule
from designlint.rules.builtin.deprecation import deprecation_rule
from designlint.rules.builtin.duration import duration_rule
from designlint.rules.builtin.font_family import font_family_rule
from designlint.rules.builtin.font_size import font_size_rule
from designlint.rules.builtin.font_weight import font_weight_rule
from designlint.rules.builtin.line_height import line_height_rule
from designlint.rules.builtin.no_inline_styles import NoInlineStylesOptions, no_inline_styles_rule
from designlint.rules.builtin.no_unused_tokens import NoUnusedTokensOptions, no_unused_tokens_rule
from designlint.rules.builtin.spacing import SpacingOptions, spacing_rule
from designlint.rules.builtin.token_rule import token_rule


def builtin_rules() -> tuple[RuleModule, ...]:
    return (
        colors_rule,
        spacing_rule,
        font_weight_rule,
        font_family_rule,
        duration_rule,
        border_radius_rule,
        box_shadow_rule,
        font_size_rule,
        line_height_rule,
        deprecation_rule,
        no_inline_styles_rule,
        no_unused_tokens_rule,
    )


__all__ = [
    "BorderRadiusOptions",
    "ColorsOptions",
    "NoInlineStylesOptions",
    "NoUnusedTokensOptions",
    "SpacingOptions",
    "border_radius_rule",
    "box_shadow_rule",
    "builtin_rules",
    "colors_rule",
    "deprecation_rule",
    "duration_rule",
    "font_family_rule",
    "font_size_rule",
    "font_weight_rule",
    "line_height_rule",
    "no_inline_styles_rule",
    "no_unused_tokens_rule",
    "spacing_rule",
    "token_rule",
]
