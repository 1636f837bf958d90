"""Token types and flattened token carriers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Final, Literal, Protocol


class TokenType(StrEnum):
    COLOR = "color"
    DIMENSION = "dimension"
    DURATION = "duration"
    CUBIC_BEZIER = "cubicBezier"
    FONT_FAMILY = "fontFamily"
    FONT_WEIGHT = "fontWeight"
    NUMBER = "number"
    STRING = "string"
    STROKE_STYLE = "strokeStyle"
    BORDER = "border"
    SHADOW = "shadow"
    GRADIENT = "gradient"
    TRANSITION = "transition"
    TYPOGRAPHY = "typography"


type ColorSpace = Literal["rgb", "hsl", "hex"]
type DesignTokens = Mapping[str, Any]
type ThemeRecord = Mapping[str, DesignTokens]

GROUP_PROPS: Final[frozenset[str]] = frozenset(
    {
        "$type",
        "$description",
        "$extensions",
        "$deprecated",
        "$schema",
        "$metadata",
        "$version",
    }
)
ROOT_ONLY_PROPS: Final[frozenset[str]] = frozenset({"$schema", "$version"})

LIST_VALUE_TYPES: Final[frozenset[TokenType]] = frozenset(
    {
        TokenType.CUBIC_BEZIER,
        TokenType.FONT_FAMILY,
        TokenType.SHADOW,
        TokenType.GRADIENT,
    }
)
"""Types whose `$value` may itself be a list, so a list is not a fallback chain."""

DEFAULT_THEME: Final[str] = "default"


@dataclass(frozen=True, slots=True)
class TokenLocation:
    line: int
    column: int


type LocationResolver = Callable[[str], TokenLocation | None]
type WarningSink = Callable[[str], None]


class TokenLike(Protocol):
    """Anything alias resolution can look through."""

    @property
    def path(self) -> str: ...

    @property
    def type(self) -> TokenType | None: ...

    @property
    def value(self) -> Any: ...

    @property
    def deprecated(self) -> bool | str | None: ...


@dataclass(frozen=True, slots=True)
class FlattenedToken:
    """One resolved token of one theme."""

    path: str
    value: Any
    type: TokenType
    pointer: str
    fallbacks: tuple[Any, ...] | None = None
    deprecated: bool | str | None = None
    extensions: Mapping[str, Any] | None = None
    description: str | None = None
    location: TokenLocation | None = field(default=None, compare=False)
    theme: str = DEFAULT_THEME
    references: tuple[str, ...] = field(default=(), compare=False)

    @property
    def name(self) -> str:
        return self.path.rsplit(".", 1)[-1]

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated is not None and self.deprecated is not False

    def values(self) -> tuple[Any, ...]:
        """Primary value followed by fallbacks."""
        if self.fallbacks is None:
            return (self.value,)
        return (self.value, *self.fallbacks)
