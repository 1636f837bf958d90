"""Shorthand coercion applied to token values before validation."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final

from designlint.errors import TokenAliasError
from designlint.tokens.alias import alias_target
from designlint.tokens.model import TokenType
from designlint.tokens.pointer import pointer_to_path

_DIMENSION_RE: Final = re.compile(r"^(-?(?:\d+\.?\d*|\.\d+))(px|rem|em|%)$")
_DURATION_RE: Final = re.compile(r"^((?:\d+\.?\d*|\.\d+))(ms|s)$")
_NUMERIC_RE: Final = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)$")

_COMPOSITE_FIELDS: Final[dict[TokenType, dict[str, TokenType]]] = {
    TokenType.BORDER: {
        "color": TokenType.COLOR,
        "width": TokenType.DIMENSION,
        "style": TokenType.STROKE_STYLE,
    },
    TokenType.SHADOW: {
        "color": TokenType.COLOR,
        "offsetX": TokenType.DIMENSION,
        "offsetY": TokenType.DIMENSION,
        "blur": TokenType.DIMENSION,
        "spread": TokenType.DIMENSION,
    },
    TokenType.GRADIENT: {"color": TokenType.COLOR, "position": TokenType.NUMBER},
    TokenType.TRANSITION: {
        "duration": TokenType.DURATION,
        "delay": TokenType.DURATION,
        "timingFunction": TokenType.CUBIC_BEZIER,
    },
    TokenType.TYPOGRAPHY: {
        "fontFamily": TokenType.FONT_FAMILY,
        "fontSize": TokenType.DIMENSION,
        "fontWeight": TokenType.FONT_WEIGHT,
        "letterSpacing": TokenType.DIMENSION,
        "lineHeight": TokenType.NUMBER,
    },
}


def refs_to_aliases(value: Any, path: str = "") -> Any:
    """Replace `{"$ref": "#/a/b"}` objects with `{a.b}` alias strings."""
    if isinstance(value, Mapping):
        if set(value) == {"$ref"}:
            return "{" + ref_to_path(value["$ref"], path) + "}"
        return {key: refs_to_aliases(item, path) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [refs_to_aliases(item, path) for item in value]
    return value


def ref_to_path(ref: Any, path: str) -> str:
    """Token path addressed by a `$ref` pointer."""
    if not isinstance(ref, str) or not ref.startswith(("#/", "/")):
        raise TokenAliasError(path, f"has invalid $ref {ref!r}; expected a JSON Pointer fragment")
    target = pointer_to_path(ref)
    if not target:
        raise TokenAliasError(path, f"has invalid $ref {ref!r}; expected a JSON Pointer fragment")
    return target


def normalize_token_value(token_type: TokenType, value: Any, path: str = "") -> Any:
    """Coerce shorthand forms into the canonical shape for `token_type`.

    Values that are not recognized shorthand are returned unchanged so the
    validator can report them.
    """
    value = refs_to_aliases(value, path)
    if alias_target(value) is not None:
        return value
    match token_type:
        case TokenType.DIMENSION:
            return _normalize_unit_value(value, _DIMENSION_RE, "px")
        case TokenType.DURATION:
            return _normalize_unit_value(value, _DURATION_RE, "ms")
        case TokenType.FONT_WEIGHT:
            if isinstance(value, str) and _NUMERIC_RE.match(value):
                return _to_number(value)
            return value
        case TokenType.STROKE_STYLE:
            if isinstance(value, Mapping) and isinstance(value.get("dashArray"), list):
                dashes = [normalize_token_value(TokenType.DIMENSION, dash) for dash in value["dashArray"]]
                return {**value, "dashArray": dashes}
            return value
        case TokenType.GRADIENT:
            stops = value if isinstance(value, list) else [value]
            return [_normalize_fields(token_type, stop) for stop in stops]
        case TokenType.SHADOW:
            if isinstance(value, list):
                return [_normalize_fields(token_type, layer) for layer in value]
            return _normalize_fields(token_type, value)
        case TokenType.BORDER | TokenType.TRANSITION | TokenType.TYPOGRAPHY:
            return _normalize_fields(token_type, value)
        case _:
            return value


def _normalize_fields(token_type: TokenType, value: Any) -> Any:
    if not isinstance(value, Mapping):
        return value
    fields = _COMPOSITE_FIELDS[token_type]
    normalized: dict[str, Any] = {}
    for key, item in value.items():
        field_type = fields.get(key)
        normalized[key] = normalize_token_value(field_type, item) if field_type is not None else item
    return normalized


def _normalize_unit_value(value: Any, pattern: re.Pattern[str], default_unit: str) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return {"value": value, "unit": default_unit}
    if isinstance(value, str):
        match = pattern.match(value.strip())
        if match is not None:
            return {"value": _to_number(match.group(1)), "unit": match.group(2)}
    return value


def _to_number(text: str) -> int | float:
    number = float(text)
    return int(number) if number.is_integer() and "." not in text else number
