"""Flatten hierarchical token trees into resolved, validated tokens."""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any, Final

from designlint.errors import (
    ThemeTokenError,
    TokenError,
    TokenValidationError,
)
from designlint.tokens.alias import ALIAS_GLOBAL, alias_target, resolve_alias
from designlint.tokens.colors import convert_color
from designlint.tokens.model import (
    DEFAULT_THEME,
    GROUP_PROPS,
    LIST_VALUE_TYPES,
    ROOT_ONLY_PROPS,
    ColorSpace,
    FlattenedToken,
    LocationResolver,
    TokenLocation,
    TokenType,
    WarningSink,
)
from designlint.tokens.normalize import normalize_token_value, ref_to_path, refs_to_aliases
from designlint.tokens.pointer import pointer_to_segments, segments_to_pointer
from designlint.tokens.themes import to_theme_record
from designlint.tokens.validators import validate_token_value

logger = logging.getLogger(__name__)

_INVALID_NAME_CHARS: Final = re.compile(r"[{}.]")


@dataclass(slots=True)
class _PendingToken:
    """Token collected in the first pass, values still holding aliases."""

    path: str
    pointer: str
    type: TokenType | None
    values: list[Any]
    deprecated: bool | str | None
    extensions: dict[str, Any] | None
    description: str | None
    location: TokenLocation | None

    @property
    def value(self) -> Any:
        return self.values[0]


def flatten_design_tokens(
    tokens: Mapping[str, Any],
    *,
    theme: str = DEFAULT_THEME,
    color_space: ColorSpace | None = None,
    location_resolver: LocationResolver | None = None,
    on_warning: WarningSink | None = None,
) -> list[FlattenedToken]:
    """Flatten one token tree in depth-first document order."""
    warn = on_warning if on_warning is not None else _log_warning
    pending = _collect_tokens(tokens, location_resolver)
    token_map = {token.path: token for token in pending}
    flattened = [_resolve_token(token, token_map, theme, warn) for token in pending]
    if color_space is not None:
        flattened = [_convert_color_space(token, color_space) for token in flattened]
    return flattened


def parse_tokens_by_theme(
    tokens: Any,
    *,
    color_space: ColorSpace | None = None,
    location_resolver: LocationResolver | None = None,
    on_warning: WarningSink | None = None,
) -> dict[str, list[FlattenedToken]]:
    """Flatten every theme independently, wrapping failures with the theme name."""
    by_theme: dict[str, list[FlattenedToken]] = {}
    for theme, tree in to_theme_record(tokens).items():
        try:
            by_theme[theme] = flatten_design_tokens(
                tree,
                theme=theme,
                color_space=color_space,
                location_resolver=location_resolver,
                on_warning=on_warning,
            )
        except TokenError as exc:
            raise ThemeTokenError(theme, exc) from exc
    return by_theme


def flatten_tokens(
    tokens: Any,
    *,
    color_space: ColorSpace | None = None,
    location_resolver: LocationResolver | None = None,
    on_warning: WarningSink | None = None,
) -> list[FlattenedToken]:
    """All tokens of every theme, themes in declaration order."""
    by_theme = parse_tokens_by_theme(
        tokens,
        color_space=color_space,
        location_resolver=location_resolver,
        on_warning=on_warning,
    )
    return [token for theme_tokens in by_theme.values() for token in theme_tokens]


def to_token_tree(tokens: Iterable[FlattenedToken]) -> dict[str, Any]:
    """Rebuild a token tree whose flattening yields `tokens` again."""
    tree: dict[str, Any] = {}
    for token in tokens:
        segments = pointer_to_segments(token.pointer)
        node = tree
        for segment in segments[:-1]:
            node = node.setdefault(segment, {})
        entry: dict[str, Any] = {"$type": token.type.value}
        if token.fallbacks:
            entry["$value"] = [copy.deepcopy(value) for value in token.values()]
        else:
            entry["$value"] = copy.deepcopy(token.value)
        if token.description is not None:
            entry["$description"] = token.description
        if token.deprecated is not None:
            entry["$deprecated"] = token.deprecated
        if token.extensions is not None:
            entry["$extensions"] = copy.deepcopy(dict(token.extensions))
        node[segments[-1]] = entry
    return tree


def _collect_tokens(
    tree: Mapping[str, Any],
    location_resolver: LocationResolver | None,
) -> list[_PendingToken]:
    if not isinstance(tree, Mapping):
        raise TokenError("Design tokens must be a mapping of groups and tokens")
    collected: list[_PendingToken] = []
    seen_paths: dict[str, str] = {}

    def walk(
        group: Mapping[str, Any],
        prefix: tuple[str, ...],
        inherited_type: TokenType | None,
        inherited_deprecated: bool | str | None,
    ) -> None:
        label = ".".join(prefix) if prefix else "(root)"
        _validate_metadata(group, label, is_root=not prefix)
        current_type = _parse_type(group["$type"], label) if "$type" in group else inherited_type
        current_deprecated = group["$deprecated"] if "$deprecated" in group else inherited_deprecated
        seen_names: dict[str, str] = {}

        for name, node in group.items():
            if name in GROUP_PROPS:
                continue
            _check_name(name, seen_names)
            segments = (*prefix, name)
            path = ".".join(segments)
            _check_path(path, seen_paths)
            if not isinstance(node, Mapping):
                raise TokenError(f"Token {path} must be an object with $value", path)
            if "$value" in node or "$ref" in node:
                collected.append(
                    _collect_token(node, segments, current_type, current_deprecated, location_resolver)
                )
                continue
            children = [key for key in node if key not in GROUP_PROPS]
            if "$type" in node and not children:
                raise TokenValidationError(path, "is missing $value")
            walk(node, segments, current_type, current_deprecated)

    walk(tree, (), None, None)
    return collected


def _collect_token(
    node: Mapping[str, Any],
    segments: tuple[str, ...],
    inherited_type: TokenType | None,
    inherited_deprecated: bool | str | None,
    location_resolver: LocationResolver | None,
) -> _PendingToken:
    path = ".".join(segments)
    _validate_metadata(node, path, is_root=False)
    token_type = _parse_type(node["$type"], path) if "$type" in node else inherited_type
    deprecated = node["$deprecated"] if "$deprecated" in node else inherited_deprecated
    description = node.get("$description")
    if description is not None and not isinstance(description, str):
        raise TokenValidationError(path, "has invalid $description")

    if "$ref" in node:
        if "$value" in node:
            raise TokenValidationError(path, "cannot declare both $value and $ref")
        raw_values: list[Any] = ["{" + ref_to_path(node["$ref"], path) + "}"]
    else:
        raw = node["$value"]
        if isinstance(raw, list | tuple) and token_type not in LIST_VALUE_TYPES:
            if not raw:
                raise TokenValidationError(path, "has an empty $value fallback chain")
            raw_values = list(raw)
        else:
            raw_values = [raw]

    values: list[Any] = []
    for index, raw_value in enumerate(raw_values):
        label = _value_label(path, index)
        if token_type is None:
            value = refs_to_aliases(raw_value, label)
            if alias_target(value) is None:
                raise TokenValidationError(path, "is missing $type")
        else:
            value = normalize_token_value(token_type, raw_value, label)
            validate_token_value(token_type, value, label)
        values.append(value)

    extensions = node.get("$extensions")
    return _PendingToken(
        path=path,
        pointer=segments_to_pointer(segments),
        type=token_type,
        values=values,
        deprecated=deprecated,
        extensions=dict(extensions) if extensions is not None else None,
        description=description,
        location=location_resolver(path) if location_resolver is not None else None,
    )


def _resolve_token(
    token: _PendingToken,
    token_map: Mapping[str, _PendingToken],
    theme: str,
    warn: WarningSink,
) -> FlattenedToken:
    references: list[str] = []
    token_type = token.type
    resolved_values: list[Any] = []
    for index, value in enumerate(token.values):
        label = _value_label(token.path, index)
        if token_type is not None:
            validate_token_value(token_type, value, label, token_map)
        resolved, inferred = _resolve_value(value, token.path, token_map, warn, (token.path,), references)
        if token_type is None:
            token_type = inferred
        resolved_values.append(resolved)

    if token_type is None:
        raise TokenValidationError(token.path, "is missing $type")
    for index, value in enumerate(resolved_values):
        validate_token_value(token_type, value, _value_label(token.path, index))

    return FlattenedToken(
        path=token.path,
        value=resolved_values[0],
        type=token_type,
        pointer=token.pointer,
        fallbacks=tuple(resolved_values[1:]) or None,
        deprecated=token.deprecated,
        extensions=token.extensions,
        description=token.description,
        location=token.location,
        theme=theme,
        references=tuple(references),
    )


def _resolve_value(
    value: Any,
    origin: str,
    token_map: Mapping[str, _PendingToken],
    warn: WarningSink,
    stack: tuple[str, ...],
    references: list[str] | None,
) -> tuple[Any, TokenType | None]:
    """Substitute aliases in `value`; returns the value and the alias target type."""
    target_path = alias_target(value)
    if target_path is not None:
        target, chain = resolve_alias(target_path, token_map, stack)
        _record_reference(references, chain[len(stack)])
        _warn_deprecated(origin, chain[len(stack) :], token_map, warn)
        resolved, _ = _resolve_value(target.value, origin, token_map, warn, chain, None)
        return resolved, target.type
    if isinstance(value, str):

        def substitute(match: re.Match[str]) -> str:
            target, chain = resolve_alias(match.group(1), token_map, stack)
            _record_reference(references, chain[len(stack)])
            _warn_deprecated(origin, chain[len(stack) :], token_map, warn)
            resolved, _ = _resolve_value(target.value, origin, token_map, warn, chain, None)
            return format_scalar(resolved)

        return ALIAS_GLOBAL.sub(substitute, value), None
    if isinstance(value, Mapping):
        return {
            key: _resolve_value(item, origin, token_map, warn, stack, references)[0] for key, item in value.items()
        }, None
    if isinstance(value, list):
        return [_resolve_value(item, origin, token_map, warn, stack, references)[0] for item in value], None
    return value, None


def format_scalar(value: Any) -> str:
    """Render a resolved value inline, `{value, unit}` records as `4px`."""
    if isinstance(value, Mapping) and set(value) == {"value", "unit"}:
        return f"{value['value']}{value['unit']}"
    if isinstance(value, list):
        return ", ".join(format_scalar(item) for item in value)
    return str(value)


def _record_reference(references: list[str] | None, path: str) -> None:
    if references is not None and path not in references:
        references.append(path)


def _warn_deprecated(
    origin: str,
    visited: tuple[str, ...],
    token_map: Mapping[str, _PendingToken],
    warn: WarningSink,
) -> None:
    for path in visited:
        deprecated = token_map[path].deprecated
        if deprecated is None or deprecated is False:
            continue
        hint = f"; {deprecated}" if isinstance(deprecated, str) else ""
        warn(f"Token {origin} references deprecated token {path}{hint}")


def _convert_color_space(token: FlattenedToken, color_space: ColorSpace) -> FlattenedToken:
    if token.type is not TokenType.COLOR:
        return token
    converted: list[Any] = []
    for index, value in enumerate(token.values()):
        try:
            converted.append(convert_color(value, color_space))
        except ValueError as exc:
            raise TokenValidationError(_value_label(token.path, index), "has invalid color value") from exc
    return replace(token, value=converted[0], fallbacks=tuple(converted[1:]) or None)


def _validate_metadata(node: Mapping[str, Any], path: str, *, is_root: bool) -> None:
    extensions = node.get("$extensions")
    if extensions is not None:
        if not isinstance(extensions, Mapping):
            raise TokenError(f"Token or group {path} has invalid $extensions", path)
        for key in extensions:
            if "." not in key:
                raise TokenError(f"Token or group {path} has invalid $extensions key: {key}", path)
    if "$deprecated" in node and not isinstance(node["$deprecated"], bool | str):
        raise TokenError(f"Token or group {path} has invalid $deprecated", path)
    for prop in ROOT_ONLY_PROPS:
        if prop not in node:
            continue
        if not is_root:
            raise TokenError(f"{prop} is only allowed on the root group", path)
        if not isinstance(node[prop], str):
            raise TokenError(f"Root group has invalid {prop}", path)


def _parse_type(raw: Any, path: str) -> TokenType:
    try:
        return TokenType(raw)
    except ValueError as exc:
        raise TokenValidationError(path, f"has unknown $type {raw!r}") from exc


def _check_name(name: Any, seen_names: dict[str, str]) -> None:
    if not isinstance(name, str) or not name or name.startswith("$") or _INVALID_NAME_CHARS.search(name):
        raise TokenError(f"Invalid token or group name: {name}")
    lowered = name.lower()
    existing = seen_names.get(lowered)
    if existing is not None:
        raise TokenError(f"Duplicate token name differing only by case: {existing} vs {name}")
    seen_names[lowered] = name


def _check_path(path: str, seen_paths: dict[str, str]) -> None:
    lowered = path.lower()
    existing = seen_paths.get(lowered)
    if existing is not None:
        raise TokenError(f"Duplicate token path differing only by case: {existing} vs {path}", path)
    seen_paths[lowered] = path


def _value_label(path: str, index: int) -> str:
    return path if index == 0 else f"{path}[$value][{index}]"


def _log_warning(message: str) -> None:
    logger.warning("%s", message)
