"""Error types raised by the task, plugin and configuration layers."""

from typing import Any, Optional


class NightcapError(Exception):
    """Base class for all errors raised by nightcap."""


class UnknownTaskError(NightcapError):
    """Requested or depended-on task is not registered."""

    def __init__(self, name: str, suggestions: Optional[list[str]] = None):
        self.name = name
        self.suggestions = list(suggestions or [])
        message = f"Unknown task: {name}"
        if self.suggestions:
            message += f"\nDid you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)


class TaskCycleError(NightcapError):
    """Circular dependency between tasks."""

    def __init__(self, cycle: list[str]):
        self.cycle = list(cycle)
        super().__init__(f"Circular task dependency detected: {' -> '.join(self.cycle)}")


class TaskRegistrationError(NightcapError):
    """A task could not be registered or overridden."""


class PluginValidationError(NightcapError):
    """A plugin does not satisfy the plugin contract."""

    def __init__(self, plugin_id: str, message: str):
        self.plugin_id = plugin_id
        self.reason = message
        super().__init__(f"Plugin '{plugin_id}': {message}")


class DuplicatePluginError(PluginValidationError):
    """Two different plugin instances share the same id."""

    def __init__(self, plugin_id: str):
        super().__init__(
            plugin_id,
            f"Duplicate plugin id '{plugin_id}' with different instances. "
            "Ensure each plugin is only added once to the plugins list.",
        )


class PluginDependencyCycleError(NightcapError):
    """Circular dependency between plugins."""

    def __init__(self, cycle: list[str]):
        self.cycle = list(cycle)
        super().__init__(f"Circular dependency detected in plugins: {' -> '.join(self.cycle)}")


class PluginLoadError(NightcapError):
    """A plugin dependency loader failed."""

    def __init__(self, plugin_id: str, cause: BaseException):
        self.plugin_id = plugin_id
        self.cause = cause
        super().__init__(f"Failed to load dependency of plugin '{plugin_id}': {cause}")


class ConfigValidationError(NightcapError):
    """One or more plugins rejected the user configuration."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        lines = "\n".join(f"  - {error}" for error in self.errors)
        super().__init__(f"Config validation failed:\n{lines}")


class ConfigFileError(NightcapError):
    """The configuration file is missing, unreadable or malformed."""

    def __init__(self, message: str, path: str = "root", value: Any = None):
        self.path = path
        self.value = value
        super().__init__(f"Invalid configuration at {path}: {message}" if path else message)


class UnknownNetworkError(NightcapError):
    """Selected network is not configured."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = list(available)
        message = f"Unknown network: {name}"
        if self.available:
            message += f"\nAvailable networks: {', '.join(self.available)}"
        super().__init__(message)


class RuntimeEnvironmentError(NightcapError):
    """Invalid mutation of the shared runtime environment."""
