"""Plugin system: models, validation, dependency resolution and hooks."""

from nightcap.plugins.hook_manager import HookManager
from nightcap.plugins.models import (
    ConfigHooks,
    HookHandlers,
    Plugin,
    ResolvedConfig,
    RuntimeHooks,
    UserConfig,
)
from nightcap.plugins.resolver import PluginResolver, plugin_loader
from nightcap.plugins.validation import validate_plugin

__all__ = [
    "ConfigHooks",
    "HookHandlers",
    "HookManager",
    "Plugin",
    "PluginResolver",
    "ResolvedConfig",
    "RuntimeHooks",
    "UserConfig",
    "plugin_loader",
    "validate_plugin",
]
