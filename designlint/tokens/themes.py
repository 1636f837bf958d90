"""Theme record detection."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from designlint.tokens.model import DEFAULT_THEME, DesignTokens


def is_design_tokens(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_theme_record(value: Any) -> bool:
    """Whether `value` maps theme names to token trees.

    A single theme qualifies when its children are not all token nodes.
    Several themes qualify when every theme is a mapping and they share at
    least one top-level key. A single theme whose groups happen to look like
    themes is misdetected; callers that need certainty pass a theme record
    with more than one theme.
    """
    if not isinstance(value, Mapping):
        return False
    entries = [(key, item) for key, item in value.items() if not str(key).startswith("$")]
    if not entries:
        return False

    if len(entries) == 1:
        _, theme = entries[0]
        if not isinstance(theme, Mapping):
            return False
        children = [item for key, item in theme.items() if not str(key).startswith("$")]
        all_tokens = all(isinstance(child, Mapping) and ("$value" in child or "value" in child) for child in children)
        return not all_tokens

    shared: set[str] | None = None
    for _, theme in entries:
        if not isinstance(theme, Mapping):
            return False
        keys = {key for key in theme if not str(key).startswith("$")}
        shared = keys if shared is None else shared & keys
        if not shared:
            return False
    return True


def to_theme_record(tokens: Any) -> dict[str, DesignTokens]:
    """Normalize a tree or theme record into `{theme: tree}`."""
    if not tokens:
        return {}
    if is_theme_record(tokens):
        return {key: value for key, value in tokens.items() if not str(key).startswith("$")}
    if is_design_tokens(tokens):
        return {DEFAULT_THEME: tokens}
    return {}
