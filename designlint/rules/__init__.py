"""Rule contracts, registry, plugins and built-in rules."""

from designlint.rules.base import RuleContext, RuleMeta, RuleModule, RunContext, TokenUsage
from designlint.rules.builtin import builtin_rules
from designlint.rules.plugins import LoadedPlugin, Plugin, load_plugin
from designlint.rules.registry import (
    BUILTIN_SOURCE,
    EnabledRule,
    RuleRegistry,
    RuleSetting,
    normalize_rule_setting,
    validate_listener,
    validate_rule_module,
    validate_run_listener,
)

__all__ = [
    "BUILTIN_SOURCE",
    "EnabledRule",
    "LoadedPlugin",
    "Plugin",
    "RuleContext",
    "RuleMeta",
    "RuleModule",
    "RuleRegistry",
    "RuleSetting",
    "RunContext",
    "TokenUsage",
    "builtin_rules",
    "load_plugin",
    "normalize_rule_setting",
    "validate_listener",
    "validate_rule_module",
    "validate_run_listener",
]
