"""Design token model, validation and flattening."""

from designlint.tokens.alias import (
    ALIAS_EXACT,
    ALIAS_GLOBAL,
    alias_target,
    is_alias,
    normalize_alias_path,
    resolve_alias,
)
from designlint.tokens.colors import convert_color, detect_color_format, is_color, parse_color
from designlint.tokens.flatten import (
    flatten_design_tokens,
    flatten_tokens,
    format_scalar,
    parse_tokens_by_theme,
    to_token_tree,
)
from designlint.tokens.model import (
    DEFAULT_THEME,
    ColorSpace,
    DesignTokens,
    FlattenedToken,
    ThemeRecord,
    TokenLocation,
    TokenType,
)
from designlint.tokens.normalize import normalize_token_value
from designlint.tokens.patterns import TokenPattern, closest_token, css_var_name, extract_var_name, match_token
from designlint.tokens.pointer import path_to_pointer, pointer_to_path
from designlint.tokens.themes import is_design_tokens, is_theme_record, to_theme_record
from designlint.tokens.validators import (
    validate_border,
    validate_color,
    validate_cubic_bezier,
    validate_dimension,
    validate_duration,
    validate_font_family,
    validate_font_weight,
    validate_gradient,
    validate_number,
    validate_shadow,
    validate_string,
    validate_stroke_style,
    validate_token_value,
    validate_transition,
    validate_typography,
)

__all__ = [
    "ALIAS_EXACT",
    "ALIAS_GLOBAL",
    "DEFAULT_THEME",
    "ColorSpace",
    "DesignTokens",
    "FlattenedToken",
    "ThemeRecord",
    "TokenLocation",
    "TokenPattern",
    "TokenType",
    "alias_target",
    "closest_token",
    "convert_color",
    "css_var_name",
    "detect_color_format",
    "extract_var_name",
    "flatten_design_tokens",
    "flatten_tokens",
    "format_scalar",
    "is_alias",
    "is_color",
    "is_design_tokens",
    "is_theme_record",
    "match_token",
    "normalize_alias_path",
    "normalize_token_value",
    "parse_color",
    "parse_tokens_by_theme",
    "path_to_pointer",
    "pointer_to_path",
    "resolve_alias",
    "to_theme_record",
    "to_token_tree",
    "validate_border",
    "validate_color",
    "validate_cubic_bezier",
    "validate_dimension",
    "validate_duration",
    "validate_font_family",
    "validate_font_weight",
    "validate_gradient",
    "validate_number",
    "validate_shadow",
    "validate_string",
    "validate_stroke_style",
    "validate_token_value",
    "validate_transition",
    "validate_typography",
]
