"""Design-token linter."""

from designlint.diagnostics import LintMessage, LintResult, Severity
from designlint.engine import Config, FileDocument, Linter, LintRun, TextDocument
from designlint.errors import DesignLintError
from designlint.tokens import FlattenedToken, flatten_tokens

__all__ = [
    "Config",
    "DesignLintError",
    "FileDocument",
    "FlattenedToken",
    "LintMessage",
    "LintResult",
    "LintRun",
    "Linter",
    "Severity",
    "TextDocument",
    "flatten_tokens",
]
