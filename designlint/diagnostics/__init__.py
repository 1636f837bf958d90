"""Diagnostics."""

from designlint.diagnostics.codes import (
    NO_FILES_MATCHED,
    PARSE_ERROR,
    READ_ERROR,
    RULE_RUNTIME_ERROR,
    UNSUPPORTED_SASS,
    WRITE_ERROR,
    DiagnosticSpec,
    Severity,
)
from designlint.diagnostics.message import Fix, LintMessage, LintResult
from designlint.diagnostics.report import collect_messages, has_errors, sort_messages

__all__ = [
    "NO_FILES_MATCHED",
    "PARSE_ERROR",
    "READ_ERROR",
    "RULE_RUNTIME_ERROR",
    "UNSUPPORTED_SASS",
    "WRITE_ERROR",
    "DiagnosticSpec",
    "Fix",
    "LintMessage",
    "LintResult",
    "Severity",
    "collect_messages",
    "has_errors",
    "sort_messages",
]
