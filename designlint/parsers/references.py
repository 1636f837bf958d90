"""Token identities a document mentions, gathered for run-level rules."""

from __future__ import annotations

import re
from typing import Final

from designlint.tokens.alias import embedded_aliases

_VAR_RE: Final = re.compile(r"var\(\s*(--[\w-]+)")
_POINTER_RE: Final = re.compile(r"#/[\w~./-]+")
_COLOR_FUNCTION_RE: Final = re.compile(r"(?:rgba?|hsla?)\([^()]*\)", re.IGNORECASE)
_WORD_RE: Final = re.compile(r"[^\s,()'\"`]+")


class ReferenceCollector:
    """Ordered, de-duplicated set of lowercased identities."""

    def __init__(self) -> None:
        self._seen: dict[str, None] = {}

    def add(self, identity: str) -> None:
        if identity:
            self._seen.setdefault(identity.lower(), None)

    def add_value(self, value: str) -> None:
        """Record every identity found in a CSS value or string literal."""
        text = value.strip()
        if not text:
            return
        self.add(text)
        for match in _VAR_RE.finditer(text):
            self.add(match.group(1))
        for path in embedded_aliases(text):
            self.add(path)
        for match in _POINTER_RE.finditer(text):
            self.add(match.group(0))
        for match in _COLOR_FUNCTION_RE.finditer(text):
            self.add(match.group(0))
        for match in _WORD_RE.finditer(text):
            self.add(match.group(0))

    def add_number(self, raw: str) -> None:
        self.add(raw)

    def extend(self, identities: tuple[str, ...]) -> None:
        for identity in identities:
            self.add(identity)

    def to_tuple(self) -> tuple[str, ...]:
        return tuple(self._seen)
