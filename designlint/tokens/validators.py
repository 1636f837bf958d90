"""Structural validators for token values.

Every validator takes `(value, path, token_map=None)` and raises
`TokenValidationError` (or `TokenAliasError` for bad references) on mismatch.
Alias strings are accepted in place of literals; with a token map they must
resolve to a token of the expected type.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any, Final

from designlint.errors import TokenAliasError, TokenValidationError
from designlint.tokens.alias import alias_target, resolve_alias
from designlint.tokens.colors import is_color
from designlint.tokens.model import TokenLike, TokenType

type TokenMap = Mapping[str, TokenLike]

DIMENSION_UNITS: Final[frozenset[str]] = frozenset({"px", "rem", "em", "%"})
DURATION_UNITS: Final[frozenset[str]] = frozenset({"ms", "s"})

FONT_WEIGHT_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "thin",
        "hairline",
        "extra-light",
        "ultra-light",
        "light",
        "normal",
        "regular",
        "book",
        "medium",
        "semi-bold",
        "demi-bold",
        "bold",
        "extra-bold",
        "ultra-bold",
        "black",
        "heavy",
        "extra-black",
        "ultra-black",
    }
)

STROKE_STYLE_KEYWORDS: Final[frozenset[str]] = frozenset(
    {"solid", "dashed", "dotted", "double", "groove", "ridge", "outset", "inset"}
)
STROKE_LINE_CAPS: Final[frozenset[str]] = frozenset({"round", "butt", "square"})

BORDER_KEYS: Final[frozenset[str]] = frozenset({"color", "width", "style"})
SHADOW_KEYS: Final[frozenset[str]] = frozenset({"color", "offsetX", "offsetY", "blur", "spread", "inset"})
SHADOW_REQUIRED_KEYS: Final[frozenset[str]] = frozenset({"color", "offsetX", "offsetY", "blur"})
GRADIENT_STOP_KEYS: Final[frozenset[str]] = frozenset({"color", "position"})
TRANSITION_KEYS: Final[frozenset[str]] = frozenset({"duration", "delay", "timingFunction"})
TYPOGRAPHY_KEYS: Final[frozenset[str]] = frozenset(
    {"fontFamily", "fontSize", "fontWeight", "letterSpacing", "lineHeight"}
)
STROKE_STYLE_KEYS: Final[frozenset[str]] = frozenset({"dashArray", "lineCap"})


def is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_color(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.COLOR, token_map)
        return
    if not is_color(value):
        raise _invalid(path, TokenType.COLOR)


def validate_dimension(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.DIMENSION, token_map)
        return
    if not _is_unit_record(value, DIMENSION_UNITS):
        raise _invalid(path, TokenType.DIMENSION)


def validate_duration(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.DURATION, token_map)
        return
    if not _is_unit_record(value, DURATION_UNITS) or value["value"] < 0:
        raise _invalid(path, TokenType.DURATION)


def validate_cubic_bezier(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.CUBIC_BEZIER, token_map)
        return
    if not _is_sequence(value) or len(value) != 4:
        raise _invalid(path, TokenType.CUBIC_BEZIER)
    for index, point in enumerate(value):
        point_path = f"{path}[{index}]"
        if _is_alias_string(point):
            _expect_alias(point, point_path, TokenType.NUMBER, token_map)
            continue
        if not is_finite_number(point):
            raise _invalid(path, TokenType.CUBIC_BEZIER)
        # x coordinates are bounded, y coordinates may overshoot
        if index in (0, 2) and not 0 <= point <= 1:
            raise _invalid(path, TokenType.CUBIC_BEZIER)


def validate_font_family(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.FONT_FAMILY, token_map)
        return
    if isinstance(value, str) and value.strip():
        return
    if _is_sequence(value) and value and all(isinstance(item, str) and item.strip() for item in value):
        return
    raise _invalid(path, TokenType.FONT_FAMILY)


def validate_font_weight(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.FONT_WEIGHT, token_map)
        return
    if is_finite_number(value) and 1 <= value <= 1000:
        return
    if isinstance(value, str) and value in FONT_WEIGHT_KEYWORDS:
        return
    raise _invalid(path, TokenType.FONT_WEIGHT)


def validate_number(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.NUMBER, token_map)
        return
    if not is_finite_number(value):
        raise _invalid(path, TokenType.NUMBER)


def validate_string(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.STRING, token_map)
        return
    if not isinstance(value, str):
        raise _invalid(path, TokenType.STRING)


def validate_stroke_style(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.STROKE_STYLE, token_map)
        return
    if isinstance(value, str):
        if value not in STROKE_STYLE_KEYWORDS:
            raise _invalid(path, TokenType.STROKE_STYLE)
        return
    if not isinstance(value, Mapping) or set(value) - STROKE_STYLE_KEYS:
        raise _invalid(path, TokenType.STROKE_STYLE)
    dash_array = value.get("dashArray")
    if not _is_sequence(dash_array) or not dash_array:
        raise _invalid(path, TokenType.STROKE_STYLE)
    for index, dash in enumerate(dash_array):
        validate_dimension(dash, f"{path}.dashArray[{index}]", token_map)
    if value.get("lineCap") not in STROKE_LINE_CAPS:
        raise _invalid(path, TokenType.STROKE_STYLE)


def validate_border(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.BORDER, token_map)
        return
    _expect_exact_keys(value, path, TokenType.BORDER, allowed=BORDER_KEYS, required=BORDER_KEYS)
    validate_color(value["color"], f"{path}.color", token_map)
    validate_dimension(value["width"], f"{path}.width", token_map)
    validate_stroke_style(value["style"], f"{path}.style", token_map)


def validate_shadow(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.SHADOW, token_map)
        return
    layers = as_list(value)
    if not layers:
        raise _invalid(path, TokenType.SHADOW)
    for index, layer in enumerate(layers):
        base = f"{path}[{index}]"
        if _is_alias_string(layer):
            _expect_alias(layer, base, TokenType.SHADOW, token_map)
            continue
        _expect_exact_keys(layer, base, TokenType.SHADOW, allowed=SHADOW_KEYS, required=SHADOW_REQUIRED_KEYS)
        validate_color(layer["color"], f"{base}.color", token_map)
        validate_dimension(layer["offsetX"], f"{base}.offsetX", token_map)
        validate_dimension(layer["offsetY"], f"{base}.offsetY", token_map)
        validate_dimension(layer["blur"], f"{base}.blur", token_map)
        if "spread" in layer:
            validate_dimension(layer["spread"], f"{base}.spread", token_map)
        if "inset" in layer and not isinstance(layer["inset"], bool):
            raise _invalid(base, TokenType.SHADOW)


def validate_gradient(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.GRADIENT, token_map)
        return
    stops = as_list(value)
    if not stops:
        raise _invalid(path, TokenType.GRADIENT)
    for index, stop in enumerate(stops):
        base = f"{path}[{index}]"
        _expect_exact_keys(stop, base, TokenType.GRADIENT, allowed=GRADIENT_STOP_KEYS, required=GRADIENT_STOP_KEYS)
        validate_color(stop["color"], f"{base}.color", token_map)
        position = stop["position"]
        if _is_alias_string(position):
            _expect_alias(position, f"{base}.position", TokenType.NUMBER, token_map)
        elif not is_finite_number(position):
            raise _invalid(base, TokenType.GRADIENT)


def validate_transition(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.TRANSITION, token_map)
        return
    _expect_exact_keys(value, path, TokenType.TRANSITION, allowed=TRANSITION_KEYS, required=TRANSITION_KEYS)
    validate_duration(value["duration"], f"{path}.duration", token_map)
    validate_duration(value["delay"], f"{path}.delay", token_map)
    validate_cubic_bezier(value["timingFunction"], f"{path}.timingFunction", token_map)


def validate_typography(value: Any, path: str, token_map: TokenMap | None = None) -> None:
    if _is_alias_string(value):
        _expect_alias(value, path, TokenType.TYPOGRAPHY, token_map)
        return
    _expect_exact_keys(value, path, TokenType.TYPOGRAPHY, allowed=TYPOGRAPHY_KEYS, required=TYPOGRAPHY_KEYS)
    validate_font_family(value["fontFamily"], f"{path}.fontFamily", token_map)
    validate_dimension(value["fontSize"], f"{path}.fontSize", token_map)
    validate_font_weight(value["fontWeight"], f"{path}.fontWeight", token_map)
    validate_dimension(value["letterSpacing"], f"{path}.letterSpacing", token_map)
    validate_number(value["lineHeight"], f"{path}.lineHeight", token_map)


def validate_token_value(
    token_type: TokenType,
    value: Any,
    path: str,
    token_map: TokenMap | None = None,
) -> None:
    match token_type:
        case TokenType.COLOR:
            validate_color(value, path, token_map)
        case TokenType.DIMENSION:
            validate_dimension(value, path, token_map)
        case TokenType.DURATION:
            validate_duration(value, path, token_map)
        case TokenType.CUBIC_BEZIER:
            validate_cubic_bezier(value, path, token_map)
        case TokenType.FONT_FAMILY:
            validate_font_family(value, path, token_map)
        case TokenType.FONT_WEIGHT:
            validate_font_weight(value, path, token_map)
        case TokenType.NUMBER:
            validate_number(value, path, token_map)
        case TokenType.STRING:
            validate_string(value, path, token_map)
        case TokenType.STROKE_STYLE:
            validate_stroke_style(value, path, token_map)
        case TokenType.BORDER:
            validate_border(value, path, token_map)
        case TokenType.SHADOW:
            validate_shadow(value, path, token_map)
        case TokenType.GRADIENT:
            validate_gradient(value, path, token_map)
        case TokenType.TRANSITION:
            validate_transition(value, path, token_map)
        case TokenType.TYPOGRAPHY:
            validate_typography(value, path, token_map)


def as_list(value: Any) -> list[Any]:
    """A single record becomes a one-element list; sequences are copied."""
    if _is_sequence(value):
        return list(value)
    return [value]


def _invalid(path: str, token_type: TokenType) -> TokenValidationError:
    return TokenValidationError(path, f"has invalid {token_type} value")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_alias_string(value: Any) -> bool:
    return alias_target(value) is not None


def _is_unit_record(value: Any, units: frozenset[str]) -> bool:
    return (
        isinstance(value, Mapping)
        and set(value) == {"value", "unit"}
        and is_finite_number(value["value"])
        and value["unit"] in units
    )


def _expect_exact_keys(
    value: Any,
    path: str,
    token_type: TokenType,
    *,
    allowed: frozenset[str],
    required: frozenset[str],
) -> None:
    if not isinstance(value, Mapping):
        raise _invalid(path, token_type)
    keys = set(value)
    if keys - allowed or required - keys:
        raise _invalid(path, token_type)


def _expect_alias(value: str, path: str, expected: TokenType, token_map: TokenMap | None) -> None:
    target_path = alias_target(value)
    if target_path is None:
        raise _invalid(path, expected)
    if token_map is None:
        return
    target, _ = resolve_alias(target_path, token_map, (path,))
    if target.type is None:
        raise TokenAliasError(path, f"references token without type: {target.path}")
    if target.type != expected:
        raise TokenAliasError(
            path,
            f"references {target.path} of type {target.type}; expected {expected}",
        )
