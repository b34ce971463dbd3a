"""Structural validation of plugin definitions."""

from typing import Any

from nightcap.errors import PluginValidationError
from nightcap.plugins.models import ConfigHooks, HookHandlers, Plugin, RuntimeHooks
from nightcap.tasks.models import TaskDefinition

CONFIG_HOOKS = ("extend_user_config", "validate_user_config", "resolve_user_config")
RUNTIME_HOOKS = ("extend_environment", "created")


def validate_plugin(plugin: Any) -> None:
    """
    Validate a plugin definition.

    Args:
        plugin: Object expected to be a Plugin

    Raises:
        PluginValidationError: Naming the plugin id and the offending field
    """
    if not isinstance(plugin, Plugin):
        raise PluginValidationError(
            str(getattr(plugin, "id", "unknown")),
            f"Plugin must be a Plugin instance, got {type(plugin).__name__}",
        )

    if not isinstance(plugin.id, str) or not plugin.id.strip():
        raise PluginValidationError(
            str(plugin.id or "unknown"),
            'Plugin must have a non-empty string "id" property',
        )

    plugin_id = plugin.id

    if plugin.package is not None and not isinstance(plugin.package, str):
        raise PluginValidationError(plugin_id, '"package" must be a string')

    if not isinstance(plugin.dependencies, list):
        raise PluginValidationError(plugin_id, '"dependencies" must be a list')
    for i, loader in enumerate(plugin.dependencies):
        if not callable(loader):
            raise PluginValidationError(
                plugin_id, f"dependencies[{i}] must be a callable returning a plugin"
            )

    if plugin.hook_handlers is not None:
        _validate_hook_handlers(plugin_id, plugin.hook_handlers)

    if not isinstance(plugin.tasks, list):
        raise PluginValidationError(plugin_id, '"tasks" must be a list')
    for i, task in enumerate(plugin.tasks):
        _validate_task_definition(plugin_id, i, task)


def _validate_hook_handlers(plugin_id: str, handlers: Any) -> None:
    """Validate the hook_handlers structure."""
    if not isinstance(handlers, HookHandlers):
        raise PluginValidationError(plugin_id, '"hook_handlers" must be a HookHandlers object')

    if handlers.config is not None:
        if not isinstance(handlers.config, ConfigHooks):
            raise PluginValidationError(
                plugin_id, '"hook_handlers.config" must be a ConfigHooks object'
            )
        for name in CONFIG_HOOKS:
            _check_callable(plugin_id, f"hook_handlers.config.{name}", getattr(handlers.config, name))

    if handlers.runtime is not None:
        if not isinstance(handlers.runtime, RuntimeHooks):
            raise PluginValidationError(
                plugin_id, '"hook_handlers.runtime" must be a RuntimeHooks object'
            )
        for name in RUNTIME_HOOKS:
            _check_callable(plugin_id, f"hook_handlers.runtime.{name}", getattr(handlers.runtime, name))


def _check_callable(plugin_id: str, field_path: str, value: Any) -> None:
    if value is not None and not callable(value):
        raise PluginValidationError(plugin_id, f'"{field_path}" must be callable')


def _validate_task_definition(plugin_id: str, index: int, task: Any) -> None:
    """Validate a task contributed by a plugin."""
    if not isinstance(task, TaskDefinition):
        raise PluginValidationError(plugin_id, f"tasks[{index}] must be a TaskDefinition")

    if not isinstance(task.name, str) or not task.name.strip():
        raise PluginValidationError(
            plugin_id, f'tasks[{index}] must have a non-empty string "name" property'
        )

    if not isinstance(task.description, str):
        raise PluginValidationError(
            plugin_id, f'tasks[{index}] must have a string "description" property'
        )

    if not callable(task.action):
        raise PluginValidationError(
            plugin_id, f'tasks[{index}] must have a callable "action" property'
        )
