"""Plugin discovery and loading.

Discovery: entry points in the ``nixcomment.plugins`` group via pluggy,
plus single-file plugins from a local directory (``.nixcomment/plugins/``).
Plugins contribute rules through the ``register_rules`` hook.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path

import pluggy

from nixcomment.plugins.hookspecs import PROJECT_NAME, NixCommentHookSpec

ENTRY_POINT_GROUP = "nixcomment.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, rule registration, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(NixCommentHookSpec)
        self._loaded: bool = False
        self.warnings: list[str] = []

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point and local plugins, then register their rules.

        Returns the names of all registered plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        for plugin in self._pm.get_plugins():
            self._register_plugin_rules(plugin, self._name_of(plugin))
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        if self._loaded:
            self._register_plugin_rules(plugin, resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Hook relay for dispatching events."""
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._name_of(p) for p in self._pm.get_plugins()]

    def _name_of(self, plugin: object) -> str:
        return self._pm.get_name(plugin) or plugin.__class__.__name__

    def _discover_local(self, local_dir: Path) -> None:
        """Load ``*.py`` files in *local_dir* (``_``-prefixed names skipped).

        Classes defined in a file that carry hookimpl-decorated methods are
        instantiated and registered. A broken file is logged and skipped.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"nixcomment_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    self._warn(f"Could not load local plugin {py_file}")
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                self.warnings.append(f"Failed to load local plugin {py_file.name}")
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name or not self._has_hook_impls(obj):
                    continue
                try:
                    self._pm.register(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )
                    self.warnings.append(f"Failed to instantiate plugin {obj.__name__}")
                    continue
                logger.debug("Loaded local plugin %s from %s", obj.__name__, py_file)

    def _normalize_plugin_instances(self) -> None:
        """Replace entry-point plugin classes with instances.

        Hook dispatch against a class object leaves ``self`` unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s", plugin_name, exc_info=True
                )
                self.warnings.append(f"Failed to instantiate plugin {plugin_name}")
                continue
            self._pm.register(instance, name=plugin_name)

    def _register_plugin_rules(self, plugin: object, plugin_name: str) -> None:
        """Add the rules one plugin exposes to the rule registry."""
        from nixcomment.domain.rules import register_rule

        hook = getattr(plugin, "register_rules", None)
        if hook is None:
            return
        try:
            rules = hook()
        except Exception:
            logger.warning("Failed to collect rules from plugin %s", plugin_name, exc_info=True)
            self.warnings.append(f"Plugin {plugin_name} failed to provide rules")
            return

        if rules is None:
            return
        if not isinstance(rules, (list, tuple)):
            self._warn(f"Plugin {plugin_name} returned {type(rules).__name__}, expected a list")
            return

        for rule in rules:
            try:
                register_rule(rule)
            except (TypeError, ValueError) as exc:
                self._warn(f"Skipping rule from plugin {plugin_name}: {exc}")

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether *cls* has any method decorated with ``@hookimpl``.

        ``HookimplMarker("nixcomment")`` sets a ``nixcomment_impl`` attribute.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, f"{PROJECT_NAME}_impl", None):
                return True
        return False
