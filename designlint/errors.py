"""Exception types raised by designlint."""

from __future__ import annotations


class DesignLintError(Exception):
    """Base class for every designlint failure."""


class TokenError(DesignLintError, ValueError):
    """Token document could not be turned into flat tokens."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class TokenValidationError(TokenError):
    """A token value does not match the shape required by its type."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Token {path} {detail}", path)


class TokenAliasError(TokenError):
    """An alias is unknown, malformed or points at an incompatible token."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Token {path} {detail}", path)


class TokenCycleError(TokenAliasError):
    """Alias resolution revisited a token already on the resolution stack."""

    def __init__(self, cycle: tuple[str, ...]) -> None:
        TokenError.__init__(self, f"Circular alias reference: {' -> '.join(cycle)}", cycle[0])
        self.cycle = cycle


class ThemeTokenError(TokenError):
    """Tokens of one theme failed to parse."""

    def __init__(self, theme: str, cause: Exception) -> None:
        super().__init__(f'Failed to parse tokens for theme "{theme}": {cause}')
        self.theme = theme


class RuleRegistrationError(DesignLintError, ValueError):
    """A rule module is malformed or collides with another rule."""


class PluginLoadError(DesignLintError):
    """A plugin module could not be imported or has the wrong shape."""

    def __init__(self, plugin: str, message: str) -> None:
        super().__init__(f'Failed to load plugin "{plugin}": {message}')
        self.plugin = plugin


class ConfigError(DesignLintError, ValueError):
    """Config content is invalid for the current rule set."""


class DocumentSyntaxError(DesignLintError):
    """A document could not be scanned by its parser strategy."""

    def __init__(self, message: str, line: int = 1, column: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
