"""Alias references between tokens."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final

from designlint.errors import TokenAliasError, TokenCycleError
from designlint.tokens.model import TokenLike

ALIAS_EXACT: Final[re.Pattern[str]] = re.compile(r"^\{([^{}]+)\}$")
ALIAS_GLOBAL: Final[re.Pattern[str]] = re.compile(r"\{([^{}]+)\}")


def normalize_alias_path(reference: str) -> str:
    """`{a/b.c}` and `a.b.c` style references normalized to `a.b.c`."""
    return ".".join(part for part in re.split(r"[./]", reference) if part)


def alias_target(value: Any) -> str | None:
    """Return the normalized target path when `value` is exactly one alias."""
    if not isinstance(value, str):
        return None
    match = ALIAS_EXACT.match(value.strip())
    if match is None:
        return None
    return normalize_alias_path(match.group(1))


def is_alias(value: Any) -> bool:
    return alias_target(value) is not None


def embedded_aliases(value: str) -> list[str]:
    return [normalize_alias_path(match.group(1)) for match in ALIAS_GLOBAL.finditer(value)]


def resolve_alias[T: TokenLike](
    reference: str,
    token_map: Mapping[str, T],
    stack: tuple[str, ...] = (),
) -> tuple[T, tuple[str, ...]]:
    """Follow an alias chain to the first token holding a concrete value.

    Returns the terminal token and every path visited, including the
    referencing paths already on `stack`. Revisiting a path on the stack
    raises `TokenCycleError`.
    """
    target_path = normalize_alias_path(reference)
    chain = (*stack, target_path)
    if target_path in stack:
        raise TokenCycleError(chain)
    target = token_map.get(target_path)
    if target is None:
        origin = stack[0] if stack else target_path
        raise TokenAliasError(origin, f"references unknown token: {target_path}")
    nested = alias_target(target.value)
    if nested is not None:
        return resolve_alias(nested, token_map, chain)
    return target, chain
