"""Startup sequence wiring config, plugins, hooks and tasks together."""

import logging
from pathlib import Path
from typing import Any, Optional

from nightcap.config.defaults import DEFAULT_NETWORK
from nightcap.config.loader import load_config
from nightcap.core.environment import NightcapContext, RuntimeEnvironment
from nightcap.errors import UnknownNetworkError
from nightcap.plugins.hook_manager import HookManager
from nightcap.plugins.models import Plugin, ResolvedConfig, UserConfig
from nightcap.plugins.resolver import PluginResolver
from nightcap.tasks.builtin import register_builtin_tasks
from nightcap.tasks.models import TaskResult
from nightcap.tasks.registry import TaskRegistry
from nightcap.tasks.runner import TaskRunner

logger = logging.getLogger(__name__)


class Nightcap:
    """
    Nightcap application.

    ``initialize`` runs the startup sequence in a fixed order:

    1. load the user config
    2. resolve plugins into dependency order
    3. register plugin hooks and run the config hooks
    4. register built-in, then custom, then plugin tasks
    5. build the runtime environment and run extend_environment hooks
    6. run created hooks
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        network: Optional[str] = None,
        verbose: bool = False,
        user_config: Optional[UserConfig] = None,
    ) -> None:
        """
        Initialize the application.

        Args:
            config_path: Explicit config file
            network: Network name overriding ``default_network``
            verbose: Verbose task output
            user_config: Pre-loaded user config; skips file loading
        """
        self.config_path = config_path
        self.network_override = network
        self.verbose = verbose
        self.user_config = user_config

        self.registry = TaskRegistry()
        self.runner = TaskRunner(self.registry)
        self.hook_manager = HookManager()
        self.plugins: list[Plugin] = []
        self.config: Optional[ResolvedConfig] = None
        self.env: Optional[RuntimeEnvironment] = None

    @property
    def initialized(self) -> bool:
        return self.env is not None

    async def initialize(self) -> None:
        """Run the startup sequence."""
        if self.initialized:
            return

        user_config = self.user_config if self.user_config is not None else load_config(self.config_path)

        self.plugins = await PluginResolver().resolve(list(user_config.get("plugins", [])))
        for plugin in self.plugins:
            self.hook_manager.register_plugin(plugin)

        self.config = await self.hook_manager.run_config_hooks(user_config, self.plugins)

        self._register_tasks()

        network_name, network = self._select_network()
        self.env = RuntimeEnvironment(
            config=self.config,
            runner=self.runner,
            network_name=network_name,
            network=network,
            verbose=self.verbose,
        )
        await self.hook_manager.run_extend_environment_hooks(self.env)
        await self.hook_manager.run_runtime_created_hooks(
            NightcapContext(config=self.config, run_task=self.env.run_task)
        )

        logger.info(
            f"Nightcap initialized: {len(self.registry.tasks)} tasks, "
            f"{len(self.plugins)} plugins, network '{network_name}'"
        )

    def _register_tasks(self) -> None:
        """Register built-in, custom and plugin tasks, in that order."""
        register_builtin_tasks(self.registry)

        for name, custom in self.config.get("tasks", {}).items():
            self.registry.register_custom(name, custom)

        for plugin in self.plugins:
            for task in plugin.tasks:
                if self.registry.has(task.name):
                    logger.debug(f"Plugin '{plugin.id}' overrides task '{task.name}'")
                self.registry.register(task)

    def _select_network(self) -> tuple[str, dict[str, Any]]:
        """Pick the network: explicit override, then default_network, then localnet."""
        networks = self.config.get("networks", {})
        name = self.network_override or self.config.get("default_network") or DEFAULT_NETWORK

        network = networks.get(name)
        if network is None:
            raise UnknownNetworkError(name, list(networks))
        return name, network

    async def run(self, task_name: str, params: Optional[dict[str, Any]] = None) -> list[TaskResult]:
        """
        Run a task with its dependencies.

        Args:
            task_name: Requested task
            params: Parameter values

        Returns:
            Results of attempted tasks
        """
        await self.initialize()
        return await self.env.run_task(task_name, params)
