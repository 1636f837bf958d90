"""Allow-patterns used when tokens are configured as a list."""

from __future__ import annotations

import difflib
import fnmatch
import re
from collections.abc import Sequence

type TokenPattern = str | re.Pattern[str]


def match_token(name: str, patterns: Sequence[TokenPattern]) -> str | None:
    """Return `name` when any glob (case-insensitive) or regex matches it."""
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            if pattern.search(name):
                return name
        elif fnmatch.fnmatchcase(name.lower(), pattern.lower()):
            return name
    return None


def closest_token(name: str, patterns: Sequence[TokenPattern]) -> str | None:
    """Closest literal pattern to `name`, for suggestions."""
    candidates = [pattern for pattern in patterns if isinstance(pattern, str)]
    if not candidates:
        return None
    matches = difflib.get_close_matches(name, candidates, n=1, cutoff=0.0)
    return matches[0] if matches else None


_VAR_RE = re.compile(r"^var\(\s*(--[\w-]+)\s*(?:,.*)?\)$", re.DOTALL)


def extract_var_name(value: str) -> str | None:
    """`--name` when `value` is a single `var(--name[, fallback])`."""
    match = _VAR_RE.match(value.strip())
    return match.group(1) if match is not None else None


def css_var_name(path: str) -> str:
    """Custom property name a token path is published under."""
    return "--" + path.replace(".", "-")
