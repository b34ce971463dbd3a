"""Nightcap - a task runner and plugin host for Midnight development."""

__version__ = "0.1.0"

from nightcap.core.nightcap import Nightcap
from nightcap.core.environment import NightcapContext, RuntimeEnvironment
from nightcap.plugins.models import ConfigHooks, HookHandlers, Plugin, RuntimeHooks
from nightcap.tasks.models import TaskContext, TaskDefinition, TaskParam, TaskResult

__all__ = [
    "Nightcap",
    "NightcapContext",
    "RuntimeEnvironment",
    "Plugin",
    "HookHandlers",
    "ConfigHooks",
    "RuntimeHooks",
    "TaskDefinition",
    "TaskParam",
    "TaskContext",
    "TaskResult",
]
