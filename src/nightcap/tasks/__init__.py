"""Task definitions, registry and runner."""

from nightcap.tasks.models import TaskContext, TaskDefinition, TaskParam, TaskResult
from nightcap.tasks.registry import TaskRegistry
from nightcap.tasks.runner import TaskRunner

__all__ = [
    "TaskContext",
    "TaskDefinition",
    "TaskParam",
    "TaskResult",
    "TaskRegistry",
    "TaskRunner",
]
