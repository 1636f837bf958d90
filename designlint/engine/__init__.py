"""Configuration, documents and the lint orchestrator."""

from designlint.engine.config import DEFAULT_CONFIG_PATH, Config, load_config, load_config_file
from designlint.engine.document import FileDocument, LintDocument, TextDocument, document_type_for_path
from designlint.engine.linter import Linter, LintRun
from designlint.engine.tracker import TokenTracker, token_identities

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "Config",
    "FileDocument",
    "LintDocument",
    "LintRun",
    "Linter",
    "TextDocument",
    "TokenTracker",
    "document_type_for_path",
    "load_config",
    "load_config_file",
    "token_identities",
]
