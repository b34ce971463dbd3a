"""Task registry with override history and name suggestions."""

import logging
from typing import Any, Optional

from nightcap.errors import TaskRegistrationError
from nightcap.tasks.models import TaskDefinition, TaskParam

logger = logging.getLogger(__name__)


class TaskRegistry:
    """
    Registry for task definitions.

    Re-registering a name keeps the previous definition as the "original"
    so an overriding task can call through to it via ``run_super``. Only
    the immediately previous definition is kept.
    """

    def __init__(self) -> None:
        self.tasks: dict[str, TaskDefinition] = {}
        self._originals: dict[str, TaskDefinition] = {}

    def register(self, task: TaskDefinition) -> None:
        """
        Register a task, replacing any existing task with the same name.

        Args:
            task: Task definition to register
        """
        existing = self.tasks.get(task.name)
        if existing is not None:
            self._originals[task.name] = existing
            logger.debug(f"Task '{task.name}' overridden, previous definition kept for run_super")

        self.tasks[task.name] = task
        logger.debug(f"Registered task: {task.name}")

    def register_custom(self, name: str, custom: dict[str, Any]) -> None:
        """
        Register a task from user configuration.

        Merges onto an existing task of the same name, or creates a new one
        when ``custom`` carries an action.

        Args:
            name: Task name
            custom: Partial task fields (description, dependencies, params, action)

        Raises:
            TaskRegistrationError: If the task is new and has no action
        """
        existing = self.tasks.get(name)

        if existing is not None:
            self._originals[name] = existing
            updates = {k: v for k, v in custom.items() if v is not None}
            params = {**existing.params, **_coerce_params(custom.get("params"))}
            merged = existing.model_copy(
                update={
                    **updates,
                    "name": name,
                    "action": custom.get("action") or existing.action,
                    "params": params,
                }
            )
            self.tasks[name] = merged
            logger.debug(f"Merged custom definition into task: {name}")
            return

        if not custom.get("action"):
            raise TaskRegistrationError(
                f"Cannot register custom task '{name}': no action provided and no existing task to override"
            )

        self.tasks[name] = TaskDefinition(
            name=name,
            description=custom.get("description") or f"Custom task: {name}",
            dependencies=custom.get("dependencies") or [],
            params=custom.get("params") or {},
            action=custom["action"],
        )
        logger.debug(f"Registered custom task: {name}")

    def get(self, name: str) -> Optional[TaskDefinition]:
        """Get a task by name."""
        return self.tasks.get(name)

    def has(self, name: str) -> bool:
        """Check if a task is registered."""
        return name in self.tasks

    def get_all_tasks(self) -> list[TaskDefinition]:
        """
        List all registered tasks.

        Returns:
            Tasks in registration order
        """
        return list(self.tasks.values())

    def get_suggestions(self, partial_name: str) -> list[str]:
        """
        Get task names similar to ``partial_name``.

        A name matches when either string contains the other
        (case-insensitive) or their edit distance is at most 2.

        Args:
            partial_name: Possibly misspelled task name

        Returns:
            Matching task names in registration order
        """
        needle = partial_name.lower()
        suggestions = []
        for name in self.tasks:
            candidate = name.lower()
            if (
                needle in candidate
                or candidate in needle
                or levenshtein_distance(candidate, needle) <= 2
            ):
                suggestions.append(name)
        return suggestions

    def override(self, name: str, overrides: dict[str, Any]) -> None:
        """
        Shallow-merge ``overrides`` onto an existing task.

        The existing action is kept when ``overrides`` has none.

        Args:
            name: Task name
            overrides: Task fields to replace

        Raises:
            TaskRegistrationError: If the task does not exist
        """
        existing = self.tasks.get(name)
        if existing is None:
            raise TaskRegistrationError(f"Cannot override non-existent task: {name}")

        if name not in self._originals:
            self._originals[name] = existing

        updates = dict(overrides)
        updates["action"] = overrides.get("action") or existing.action
        if "params" in updates:
            updates["params"] = _coerce_params(updates["params"])
        self.tasks[name] = existing.model_copy(update=updates)
        logger.debug(f"Overrode task: {name}")

    def get_original(self, name: str) -> Optional[TaskDefinition]:
        """Get the definition ``name`` had before it was last overridden."""
        return self._originals.get(name)

    def has_original(self, name: str) -> bool:
        """Check if a task has override history."""
        return name in self._originals


def _coerce_params(params: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Validate raw param dicts into TaskParam models."""
    if not params:
        return {}
    return {
        key: value if isinstance(value, TaskParam) else TaskParam(**value)
        for key, value in params.items()
    }


def levenshtein_distance(a: str, b: str) -> int:
    """Compute the edit distance between two strings."""
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + cost,
                )
            )
        previous = current
    return previous[-1]
