"""Task runner with dependency resolution."""

import logging
import time
from typing import Callable, Optional

from nightcap.errors import TaskCycleError, UnknownTaskError
from nightcap.tasks.models import TaskContext, TaskResult
from nightcap.tasks.registry import TaskRegistry
from nightcap.utils import maybe_await

logger = logging.getLogger(__name__)


class TaskRunner:
    """Runs a task after its dependencies, one at a time."""

    def __init__(self, registry: TaskRegistry) -> None:
        """
        Initialize task runner.

        Args:
            registry: Registry to look tasks up in
        """
        self.registry = registry

    async def run(
        self,
        task_name: str,
        context: TaskContext,
        context_factory: Optional[Callable[[str], TaskContext]] = None,
    ) -> list[TaskResult]:
        """
        Run a task and everything it depends on.

        Execution stops at the first failing task; the returned list only
        holds results for tasks that were attempted.

        Args:
            task_name: Name of the requested task
            context: Context handed to every action when no factory is given
            context_factory: Builds the context for each planned task by name

        Returns:
            One TaskResult per attempted task, in execution order

        Raises:
            UnknownTaskError: If the task or one of its dependencies is not registered
            TaskCycleError: If the dependency graph contains a cycle
        """
        order = self.resolve_execution_order(task_name)
        logger.debug(f"Execution order for '{task_name}': {order}")

        results: list[TaskResult] = []
        for name in order:
            task_context = context_factory(name) if context_factory is not None else context
            result = await self._execute_task(name, task_context)
            results.append(result)
            if not result.success:
                break

        return results

    def resolve_execution_order(self, task_name: str) -> list[str]:
        """
        Resolve execution order with a depth-first topological sort.

        Args:
            task_name: Name of the requested task

        Returns:
            Task names, dependencies first and ``task_name`` last
        """
        visited: set[str] = set()
        visiting: list[str] = []  # Current DFS path
        order: list[str] = []

        def visit(name: str) -> None:
            if name in visited:
                return

            if name in visiting:
                cycle = visiting[visiting.index(name):] + [name]
                raise TaskCycleError(cycle)

            task = self.registry.get(name)
            if task is None:
                raise UnknownTaskError(name, self.registry.get_suggestions(name))

            visiting.append(name)
            for dependency in task.dependencies:
                visit(dependency)
            visiting.pop()

            visited.add(name)
            order.append(name)

        visit(task_name)
        return order

    async def _execute_task(self, task_name: str, context: TaskContext) -> TaskResult:
        """Execute a single task, capturing any failure in the result."""
        task = self.registry.get(task_name)
        logger.info(f"Running task: {task_name}")
        start = time.perf_counter()

        try:
            await maybe_await(task.action(context))
        except Exception as e:
            duration = time.perf_counter() - start
            logger.error(f"Task {task_name} failed: {e}")
            logger.debug(f"Task {task_name} traceback", exc_info=True)
            return TaskResult(name=task_name, success=False, duration=duration, error=e)

        duration = time.perf_counter() - start
        logger.debug(f"Task {task_name} completed in {duration * 1000:.0f}ms")
        return TaskResult(name=task_name, success=True, duration=duration)
