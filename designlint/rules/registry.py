"""Rule registration and configured rule resolution."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Final

from pydantic import BaseModel, ValidationError

from designlint.diagnostics import Severity
from designlint.errors import ConfigError, RuleRegistrationError
from designlint.parsers.events import RuleListener, RunEvent, RunListener, SyntaxEvent
from designlint.rules.base import RuleModule

BUILTIN_SOURCE: Final[str] = "built-in"

_SEVERITIES: Final[Mapping[Any, Severity | None]] = {
    "off": None,
    0: None,
    "warn": "warn",
    1: "warn",
    "error": "error",
    2: "error",
}

type RuleSetting = str | int | list[Any] | tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class EnabledRule:
    """A rule that is not `off`, with its severity and validated options."""

    rule: RuleModule
    severity: Severity
    options: BaseModel | None = None

    @property
    def name(self) -> str:
        return self.rule.name


class RuleRegistry:
    """Rules in registration order: built-ins first, then plugins in order."""

    def __init__(self, rules: Iterable[RuleModule] = ()) -> None:
        self._rules: dict[str, RuleModule] = {}
        self._sources: dict[str, str] = {}
        for rule in rules:
            self.register(rule)

    def __iter__(self) -> Iterator[RuleModule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def get(self, name: str) -> RuleModule | None:
        return self._rules.get(name)

    def source_of(self, name: str) -> str | None:
        return self._sources.get(name)

    def register(self, rule: Any, *, source: str = BUILTIN_SOURCE, strict: bool = False) -> None:
        validate_rule_module(rule, source=source, strict=strict)
        existing = self._sources.get(rule.name)
        if existing is not None:
            if source == BUILTIN_SOURCE and existing == BUILTIN_SOURCE:
                raise RuleRegistrationError(f'Duplicate rule name "{rule.name}"')
            raise RuleRegistrationError(
                f'Rule "{rule.name}" from plugin "{source}" conflicts with rule from "{existing}"'
            )
        self._rules[rule.name] = rule
        self._sources[rule.name] = source

    def resolve(self, settings: Mapping[str, RuleSetting]) -> list[EnabledRule]:
        """Enabled rules in registration order; raises `ConfigError` on bad settings."""
        unknown = [name for name in settings if name not in self._rules]
        if unknown:
            raise ConfigError(f"Unknown rule(s): {', '.join(sorted(unknown))}")
        enabled: list[EnabledRule] = []
        for name, rule in self._rules.items():
            if name not in settings:
                continue
            severity, raw_options = normalize_rule_setting(name, settings[name])
            if severity is None:
                continue
            enabled.append(EnabledRule(rule, severity, _validate_options(rule, raw_options)))
        return enabled


def normalize_rule_setting(name: str, setting: RuleSetting) -> tuple[Severity | None, Any]:
    raw_severity: Any = setting
    options: Any = None
    if isinstance(setting, (list, tuple)):
        if not 1 <= len(setting) <= 2:
            raise ConfigError(f"Invalid setting for rule {name}: expected [severity, options]")
        raw_severity = setting[0]
        options = setting[1] if len(setting) == 2 else None
    if isinstance(raw_severity, bool) or not isinstance(raw_severity, (str, int)):
        raise ConfigError(f"Invalid severity for rule {name}: {raw_severity!r}")
    if raw_severity not in _SEVERITIES:
        raise ConfigError(f"Invalid severity for rule {name}: {raw_severity!r}")
    return _SEVERITIES[raw_severity], options


def _validate_options(rule: RuleModule, options: Any) -> BaseModel | None:
    schema = rule.meta.schema
    if schema is None:
        if options is not None:
            raise ConfigError(f"Invalid options for rule {rule.name}: rule takes no options")
        return None
    try:
        return schema.model_validate(options if options is not None else {})
    except ValidationError as exc:
        raise ConfigError(f"Invalid options for rule {rule.name}: {exc}") from exc


def validate_rule_module(rule: Any, *, source: str = BUILTIN_SOURCE, strict: bool = False) -> None:
    """Raise `RuleRegistrationError` when `rule` does not look like a `RuleModule`."""
    name = getattr(rule, "name", None)
    if not isinstance(name, str) or not name.strip():
        raise RuleRegistrationError(f'Rule from "{source}" has an empty or non-string name')
    if not callable(getattr(rule, "create", None)):
        raise RuleRegistrationError(f'Rule "{name}" from "{source}" has a non-callable create')
    create_run = getattr(rule, "create_run", None)
    if create_run is not None and not callable(create_run):
        raise RuleRegistrationError(f'Rule "{name}" from "{source}" has a non-callable create_run')
    meta = getattr(rule, "meta", None)
    if meta is None:
        raise RuleRegistrationError(f'Rule "{name}" from "{source}" is missing meta')
    if strict:
        description = getattr(meta, "description", None)
        if not isinstance(description, str) or not description.strip():
            raise RuleRegistrationError(f'Rule "{name}" from "{source}" is missing meta.description')


def validate_listener(rule_name: str, listener: Any) -> dict[SyntaxEvent, Any]:
    """Normalize a `create` result into a mapping keyed by `SyntaxEvent`."""
    return _validate_hooks(rule_name, listener, SyntaxEvent)


def validate_run_listener(rule_name: str, listener: Any) -> dict[RunEvent, Any]:
    return _validate_hooks(rule_name, listener, RunEvent)


def _validate_hooks[E: (SyntaxEvent, RunEvent)](
    rule_name: str,
    listener: RuleListener | RunListener | None,
    events: type[E],
) -> dict[E, Any]:
    if listener is None:
        return {}
    if not isinstance(listener, Mapping):
        raise RuleRegistrationError(f'Rule "{rule_name}" returned a non-mapping listener')
    hooks: dict[E, Any] = {}
    for key, handler in listener.items():
        try:
            event = events(key)
        except ValueError as exc:
            raise RuleRegistrationError(f'Rule "{rule_name}" listens to unknown event "{key}"') from exc
        if not callable(handler):
            raise RuleRegistrationError(f'Rule "{rule_name}" has a non-callable handler for "{event.value}"')
        hooks[event] = handler
    return hooks
