"""Linter configuration."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from designlint.errors import ConfigError
from designlint.tokens import ColorSpace, TokenPattern

DEFAULT_CONFIG_PATH = "designlint.config"


class Config(BaseModel):
    """Validated configuration; camelCase keys are accepted alongside snake_case."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, arbitrary_types_allowed=True)

    tokens: Any = None
    rules: dict[str, Any] = Field(default_factory=dict)
    plugins: list[str] = Field(default_factory=list)
    patterns: list[str] = Field(default_factory=list)
    ignore_files: list[str] = Field(default_factory=list, alias="ignoreFiles")
    config_path: str | None = Field(default=None, alias="configPath")
    concurrency: int | None = Field(default=None, ge=1)
    color_space: ColorSpace | None = Field(default=None, alias="colorSpace")

    @field_validator("tokens")
    @classmethod
    def _check_tokens(cls, value: Any) -> Any:
        if value is None or isinstance(value, Mapping):
            return value
        if isinstance(value, (list, tuple)):
            for item in value:
                if not isinstance(item, (str, re.Pattern)):
                    raise ValueError("token patterns must be strings or compiled regular expressions")
            return list(value)
        raise ValueError("tokens must be a token tree, a theme record or a list of patterns")

    @property
    def token_patterns(self) -> tuple[TokenPattern, ...]:
        if isinstance(self.tokens, list):
            return tuple(self.tokens)
        return ()

    @property
    def token_tree(self) -> Mapping[str, Any] | None:
        return self.tokens if isinstance(self.tokens, Mapping) else None

    @property
    def result_id(self) -> str:
        """Document id run-level messages are reported under."""
        return self.config_path or DEFAULT_CONFIG_PATH


def load_config(data: Mapping[str, Any] | Config | None = None) -> Config:
    if isinstance(data, Config):
        return data
    try:
        return Config.model_validate(dict(data or {}))
    except ValidationError as exc:
        raise ConfigError(f"Invalid config: {exc}") from exc


def load_config_file(path: str | Path) -> Config:
    """Read a JSON config; `configPath` defaults to the file's path."""
    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config {config_path}: {exc}") from exc
    except ValueError as exc:
        raise ConfigError(f"Config {config_path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a JSON object")
    data.setdefault("configPath", str(config_path))
    return load_config(data)
