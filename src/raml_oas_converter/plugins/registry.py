"""Plugin registry and discovery helpers."""

from __future__ import annotations

import importlib
import importlib.util
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType

from pydantic import ValidationError

from raml_oas_converter.errors import PluginError, UnsupportedFormatError
from raml_oas_converter.plugins.base import ConverterPlugin
from raml_oas_converter.plugins.builtins import RamlToOas2Plugin
from raml_oas_converter.schemas import PluginResolutionConfig
from raml_oas_converter.types import Formats


class PluginRegistry:
    """Registry for conversion plugins."""

    def __init__(self) -> None:
        self._plugins: dict[str, ConverterPlugin] = {}

    def register(self, plugin: ConverterPlugin) -> None:
        """Register plugin instance by unique name.

        Parameters
        ----------
        plugin : ConverterPlugin
            Plugin instance to register.

        Raises
        ------
        PluginError
            If plugin does not provide a valid name.
        """
        name = getattr(plugin, "name", "").strip()
        if not name:
            raise PluginError("Plugin must define a non-empty 'name'.")
        self._plugins[name] = plugin

    def names(self) -> list[str]:
        """Return registered plugin names, sorted."""
        return sorted(self._plugins.keys())

    def get(self, name: str) -> ConverterPlugin:
        """Get plugin by name.

        Raises
        ------
        PluginError
            If plugin name is not registered.
        """
        try:
            return self._plugins[name]
        except KeyError as exc:
            raise PluginError(
                f"Unknown plugin '{name}'. Available plugins: {', '.join(self.names())}"
            ) from exc

    def resolve(
        self,
        source_format: Formats | str,
        target_format: Formats | str,
        plugin_name: str | None = None,
    ) -> ConverterPlugin:
        """Resolve plugin either explicitly or by ``can_handle`` lookup.

        Parameters
        ----------
        source_format : Formats | str
            Format of the source document.
        target_format : Formats | str
            Requested output format.
        plugin_name : str | None, optional
            Explicit plugin name.

        Returns
        -------
        ConverterPlugin
            Resolved plugin.

        Raises
        ------
        UnsupportedFormatError
            If no plugin converts between the formats.
        PluginError
            If the request is invalid or several plugins match.
        """
        try:
            payload = PluginResolutionConfig(
                source_format=str(getattr(source_format, "value", source_format)),
                target_format=str(getattr(target_format, "value", target_format)),
                plugin_name=plugin_name,
            )
            source = Formats.parse(payload.source_format)
            target = Formats.parse(payload.target_format)
        except (ValidationError, ValueError) as exc:
            raise PluginError(f"Invalid plugin resolution options: {exc}") from exc

        if payload.plugin_name:
            return self.get(payload.plugin_name)

        matches = [
            plugin
            for plugin in self._plugins.values()
            if plugin.can_handle(source_format=source, target_format=target)
        ]
        if not matches:
            raise UnsupportedFormatError(
                f"No plugin converts {source.value} to {target.value}. "
                f"Available plugins: {', '.join(self.names())}"
            )
        if len(matches) > 1:
            names = ", ".join(plugin.name for plugin in matches)
            raise PluginError(
                f"Multiple plugins convert {source.value} to {target.value} "
                f"({names}). Pass a plugin name explicitly."
            )
        return matches[0]

    def load_module(self, module_or_path: str) -> None:
        """Load plugin providers from module name or file path.

        .. warning::
            This method executes code from the specified module. Only load plugins
            from trusted sources.
        """
        module = _import_module_or_path(module_or_path)
        _register_from_module(module, self)


def _import_module_or_path(module_or_path: str) -> ModuleType:
    """Import module by import path or filesystem path.

    .. warning::
        This function executes arbitrary Python code from the specified module or
        file. Only load plugins from trusted sources.

    Raises
    ------
    PluginError
        If import cannot be completed.
    """
    candidate = Path(module_or_path)
    if candidate.exists():
        spec = importlib.util.spec_from_file_location(candidate.stem, candidate)
        if spec is None or spec.loader is None:
            raise PluginError(f"Unable to load plugin module from {candidate}.")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    try:
        return importlib.import_module(module_or_path)
    except Exception as exc:
        raise PluginError(
            f"Unable to import plugin module '{module_or_path}': {exc}"
        ) from exc


def _register_from_module(module: ModuleType, registry: PluginRegistry) -> None:
    """Register plugin definitions found in module."""
    if hasattr(module, "register_plugins"):
        module.register_plugins(registry)
        return

    plugins_obj = getattr(module, "PLUGINS", None)
    if plugins_obj is not None:
        for plugin in plugins_obj:
            registry.register(plugin)
        return

    plugin_obj = getattr(module, "PLUGIN", None)
    if plugin_obj is not None:
        registry.register(plugin_obj)
        return

    raise PluginError(
        "Plugin module must expose register_plugins(registry), PLUGINS, or PLUGIN."
    )


def create_default_registry(
    extra_modules: Iterable[str] | None = None,
) -> PluginRegistry:
    """Create registry with the built-in plugins plus ``extra_modules``."""
    registry = PluginRegistry()
    registry.register(RamlToOas2Plugin())
    for module in extra_modules or []:
        registry.load_module(module)
    return registry
