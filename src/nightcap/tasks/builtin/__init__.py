"""Built-in tasks."""

from nightcap.tasks.builtin.clean import clean_task
from nightcap.tasks.builtin.doctor import doctor_task
from nightcap.tasks.registry import TaskRegistry

BUILTIN_TASKS = [doctor_task, clean_task]


def register_builtin_tasks(registry: TaskRegistry) -> None:
    """Register all built-in tasks with the registry."""
    for task in BUILTIN_TASKS:
        registry.register(task)


__all__ = ["BUILTIN_TASKS", "clean_task", "doctor_task", "register_builtin_tasks"]
