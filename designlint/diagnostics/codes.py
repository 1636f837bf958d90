"""Engine-owned diagnostic ids and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warn"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    rule_id: str
    message: str
    severity: Severity = "error"
    category: str | None = None


PARSE_ERROR: Final[DiagnosticSpec] = DiagnosticSpec(
    rule_id="parse-error",
    message="Failed to parse document",
    severity="error",
    category="parser",
)

RULE_RUNTIME_ERROR: Final[DiagnosticSpec] = DiagnosticSpec(
    rule_id="rule-runtime-error",
    message="Rule failed while linting",
    severity="error",
    category="engine",
)

READ_ERROR: Final[DiagnosticSpec] = DiagnosticSpec(
    rule_id="parse-error",
    message="Failed to read document",
    severity="error",
    category="engine",
)

WRITE_ERROR: Final[DiagnosticSpec] = DiagnosticSpec(
    rule_id="parse-error",
    message="Failed to write fixed document",
    severity="error",
    category="engine",
)

UNSUPPORTED_SASS: Final[DiagnosticSpec] = DiagnosticSpec(
    rule_id="parse-error",
    message="Indented .sass syntax is not supported; use .scss instead.",
    severity="error",
    category="parser",
)

NO_FILES_MATCHED: Final[str] = "No files matched the provided patterns."
