"""Loading rule plugins from Python files."""

from __future__ import annotations

import hashlib
import importlib.util
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

from designlint.errors import PluginLoadError
from designlint.rules.base import RuleModule

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Plugin:
    """What a plugin module exports as `plugin`."""

    rules: Sequence[RuleModule]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class LoadedPlugin:
    source: str
    rules: tuple[Any, ...]


def load_plugin(path: str | Path) -> LoadedPlugin:
    """Import a plugin module by absolute path.

    The module exposes either `plugin` (a `Plugin`) or a module-level
    `rules` sequence. Rule shapes are checked when the rules are
    registered.
    """
    plugin_path = Path(path)
    source = str(path)
    if not plugin_path.is_absolute():
        raise PluginLoadError(source, "plugin paths must be absolute")
    if not plugin_path.is_file():
        raise PluginLoadError(source, "file not found")
    module = _import_module(plugin_path, source)

    exported = getattr(module, "plugin", None)
    rules = getattr(exported, "rules", None) if exported is not None else getattr(module, "rules", None)
    if rules is None:
        raise PluginLoadError(source, "module exports neither `plugin` nor `rules`")
    if isinstance(rules, (str, bytes)) or not isinstance(rules, Sequence):
        raise PluginLoadError(source, "`rules` must be a sequence of rule modules")
    logger.debug("Loaded plugin %s with %s rule(s)", source, len(rules))
    return LoadedPlugin(source=source, rules=tuple(rules))


def _import_module(path: Path, source: str) -> ModuleType:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    spec = importlib.util.spec_from_file_location(f"designlint_plugin_{digest}", path)
    if spec is None or spec.loader is None:
        raise PluginLoadError(source, "cannot create an import spec")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise PluginLoadError(source, f"{type(exc).__name__}: {exc}") from exc
    return module
