"""Shared runtime environment that plugins extend."""

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional

from nightcap.errors import RuntimeEnvironmentError
from nightcap.plugins.models import ResolvedConfig
from nightcap.tasks.models import TaskContext, TaskResult
from nightcap.tasks.runner import TaskRunner
from nightcap.utils import maybe_await

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NightcapContext:
    """Context passed to ``created`` runtime hooks."""

    config: ResolvedConfig
    run_task: Callable[..., Awaitable[list[TaskResult]]]


class RuntimeEnvironment:
    """
    Process-wide environment handed to plugins and task actions.

    Plugins add namespaces with :meth:`attach` during the extend-environment
    phase; attached namespaces are then readable as attributes
    (``env.midnight``). Nothing can be reassigned or removed.
    """

    def __init__(
        self,
        config: ResolvedConfig,
        runner: TaskRunner,
        network_name: str,
        network: dict[str, Any],
        verbose: bool = False,
    ) -> None:
        object.__setattr__(self, "_extensions", {})
        object.__setattr__(self, "config", config)
        object.__setattr__(self, "runner", runner)
        object.__setattr__(self, "network_name", network_name)
        object.__setattr__(self, "network", network)
        object.__setattr__(self, "verbose", verbose)

    def attach(self, namespace: str, value: Any) -> None:
        """
        Attach a plugin namespace.

        Args:
            namespace: Attribute name the namespace is exposed under
            value: Namespace object

        Raises:
            RuntimeEnvironmentError: If the name is taken or reserved
        """
        if not namespace.isidentifier() or namespace.startswith("_"):
            raise RuntimeEnvironmentError(f"Invalid namespace name: {namespace!r}")
        if namespace in self.__dict__ or hasattr(type(self), namespace):
            raise RuntimeEnvironmentError(f"Cannot attach '{namespace}': reserved attribute")
        if namespace in self._extensions:
            raise RuntimeEnvironmentError(f"Namespace '{namespace}' is already attached")

        self._extensions[namespace] = value
        logger.debug(f"Attached runtime namespace: {namespace}")

    @property
    def extensions(self) -> Mapping[str, Any]:
        """Read-only view of attached namespaces."""
        return MappingProxyType(self._extensions)

    def __getattr__(self, name: str) -> Any:
        extensions = self.__dict__.get("_extensions", {})
        if name in extensions:
            return extensions[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        raise RuntimeEnvironmentError(
            f"Cannot set '{name}' on the runtime environment; use attach() to add a namespace"
        )

    def __delattr__(self, name: str) -> None:
        raise RuntimeEnvironmentError(f"Cannot remove '{name}' from the runtime environment")

    def create_context(self, task_name: str, params: Optional[dict[str, Any]] = None) -> TaskContext:
        """
        Build the TaskContext for one planned task.

        ``run_super`` is bound when ``task_name`` replaced an earlier
        definition; it runs that definition's action with the same context
        minus ``run_super``, since only one level of history is kept.

        Args:
            task_name: Requested task
            params: Parameter values

        Returns:
            Fresh TaskContext
        """
        context = TaskContext(
            config=self.config,
            network=self.network,
            network_name=self.network_name,
            params=dict(params or {}),
            verbose=self.verbose,
            env=self,
        )

        original = self.runner.registry.get_original(task_name)
        if original is None:
            return context

        async def run_super() -> Any:
            return await maybe_await(original.action(context))

        return replace(context, run_super=run_super)

    async def run_task(self, name: str, params: Optional[dict[str, Any]] = None) -> list[TaskResult]:
        """
        Run a task and its dependencies.

        Each planned task gets its own context, so ``run_super`` always
        refers to that task's previous definition.

        Args:
            name: Task name
            params: Parameter values

        Returns:
            Results of attempted tasks
        """
        return await self.runner.run(
            name,
            self.create_context(name, params),
            context_factory=lambda task_name: self.create_context(task_name, params),
        )

    def __repr__(self) -> str:
        return f"RuntimeEnvironment(network={self.network_name!r}, extensions={sorted(self._extensions)})"
