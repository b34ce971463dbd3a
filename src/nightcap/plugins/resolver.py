"""Plugin dependency resolution."""

import logging
import types
from typing import Any

from nightcap.errors import (
    DuplicatePluginError,
    PluginDependencyCycleError,
    PluginLoadError,
)
from nightcap.plugins.models import Plugin
from nightcap.plugins.validation import validate_plugin
from nightcap.utils import import_object, maybe_await

logger = logging.getLogger(__name__)


class PluginResolver:
    """
    Orders plugins so every plugin comes after its dependencies.

    Dependencies are loaded lazily through their loaders while walking the
    graph depth-first. A plugin reachable through several paths is placed
    once, before all of its dependents.
    """

    async def resolve(self, plugins: list[Plugin]) -> list[Plugin]:
        """
        Validate and topologically sort plugins.

        Args:
            plugins: Plugins listed by the user, in declaration order

        Returns:
            Plugins in dependency order, each id exactly once

        Raises:
            PluginValidationError: If a plugin is malformed
            DuplicatePluginError: If two instances share an id
            PluginDependencyCycleError: If plugin dependencies form a cycle
            PluginLoadError: If a dependency loader fails
        """
        resolved: list[Plugin] = []
        seen: dict[str, Plugin] = {}
        visiting: set[str] = set()

        async def visit(plugin: Any, path: list[str]) -> None:
            validate_plugin(plugin)

            if plugin.id in visiting:
                cycle = path[path.index(plugin.id):] + [plugin.id]
                raise PluginDependencyCycleError(cycle)

            existing = seen.get(plugin.id)
            if existing is not None:
                if existing is not plugin:
                    raise DuplicatePluginError(plugin.id)
                return

            visiting.add(plugin.id)

            for loader in plugin.dependencies:
                try:
                    dependency = _unwrap_module(await maybe_await(loader()))
                except Exception as e:
                    raise PluginLoadError(plugin.id, e) from e

                await visit(dependency, path + [plugin.id])

            visiting.discard(plugin.id)
            seen[plugin.id] = plugin
            resolved.append(plugin)
            logger.debug(f"Resolved plugin: {plugin.id}")

        for plugin in plugins:
            await visit(plugin, [])

        logger.info(f"Resolved {len(resolved)} plugin(s): {[p.id for p in resolved]}")
        return resolved


def plugin_loader(reference: str):
    """
    Create a dependency loader for an import reference.

    Args:
        reference: ``"package.module:attribute"``, or a module exposing ``plugin``

    Returns:
        Zero-argument callable that imports and returns the plugin
    """

    def load() -> Plugin:
        return _unwrap_module(import_object(reference))

    load.__qualname__ = f"plugin_loader({reference!r})"
    return load


def _unwrap_module(value: Any) -> Any:
    """A loaded module stands for its ``plugin`` attribute."""
    if isinstance(value, types.ModuleType):
        return getattr(value, "plugin")
    return value
