"""Hook manager for plugin configuration and runtime hooks."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from nightcap.errors import ConfigValidationError
from nightcap.plugins.models import (
    ConfigHooks,
    ConfigResolver,
    Plugin,
    ResolvedConfig,
    RuntimeHooks,
    UserConfig,
)
from nightcap.utils import maybe_await

if TYPE_CHECKING:
    from nightcap.core.environment import NightcapContext, RuntimeEnvironment

logger = logging.getLogger(__name__)


@dataclass
class _Registration:
    plugin_id: str
    handlers: Any  # ConfigHooks or RuntimeHooks


class BaseConfigResolver:
    """Innermost resolver: replaces the user's plugin list with the resolved one."""

    def __init__(self, plugins: list[Plugin]) -> None:
        self.plugins = list(plugins)

    async def __call__(self, config: UserConfig) -> ResolvedConfig:
        rest = {key: value for key, value in config.items() if key != "plugins"}
        return {**rest, "plugins": list(self.plugins)}


class ResolverLink:
    """
    One ``resolve_user_config`` handler in the middleware chain.

    The handler receives the user config, a freshly base-resolved config
    and ``next``, the inner resolver it wraps.
    """

    def __init__(
        self,
        plugin_id: str,
        handler: Callable[..., Any],
        next_resolver: ConfigResolver,
        base_resolver: BaseConfigResolver,
    ) -> None:
        self.plugin_id = plugin_id
        self.handler = handler
        self.next_resolver = next_resolver
        self.base_resolver = base_resolver

    async def __call__(self, config: UserConfig) -> ResolvedConfig:
        resolved = await self.base_resolver(config)
        logger.debug(f"Running resolve_user_config of plugin '{self.plugin_id}'")
        return await maybe_await(self.handler(config, resolved, self.next_resolver))


class HookManager:
    """
    Collects plugin hook handlers and runs the hook pipelines.

    Handlers run in registration order, which is plugin dependency order
    when plugins are registered as the resolver returns them.
    """

    def __init__(self) -> None:
        self._config_handlers: list[_Registration] = []
        self._runtime_handlers: list[_Registration] = []

    def register_plugin(self, plugin: Plugin) -> None:
        """
        Register a plugin's hook handlers.

        Args:
            plugin: Validated plugin
        """
        handlers = plugin.hook_handlers
        if handlers is None:
            return

        if handlers.config is not None:
            self._config_handlers.append(_Registration(plugin.id, handlers.config))
        if handlers.runtime is not None:
            self._runtime_handlers.append(_Registration(plugin.id, handlers.runtime))

        logger.debug(f"Registered hook handlers for plugin '{plugin.id}'")

    async def run_config_hooks(
        self, user_config: UserConfig, plugins: list[Plugin]
    ) -> ResolvedConfig:
        """
        Turn the user config into the resolved config.

        Phases:
        1. extend_user_config - sequential fold, each handler gets the previous output
        2. validate_user_config - every handler runs on the fully extended config,
           all errors are collected before failing
        3. resolve_user_config - middleware chain, first registered is outermost

        Args:
            user_config: Raw user configuration
            plugins: Resolved plugin list

        Returns:
            Resolved configuration

        Raises:
            ConfigValidationError: If any validator reported errors
        """
        config = user_config
        for registration in self._config_handlers:
            hooks: ConfigHooks = registration.handlers
            if hooks.extend_user_config is not None:
                logger.debug(f"Running extend_user_config of plugin '{registration.plugin_id}'")
                config = await maybe_await(hooks.extend_user_config(config))

        errors: list[str] = []
        for registration in self._config_handlers:
            hooks = registration.handlers
            if hooks.validate_user_config is not None:
                plugin_errors = await maybe_await(hooks.validate_user_config(config))
                for error in plugin_errors or []:
                    errors.append(f"[{registration.plugin_id}] {error}")
        if errors:
            raise ConfigValidationError(errors)

        resolver = self.build_config_resolver(plugins)
        return await resolver(config)

    def build_config_resolver(self, plugins: list[Plugin]) -> ConfigResolver:
        """
        Build the ``resolve_user_config`` middleware chain.

        Links are wrapped from the last registered handler to the first, so
        the first registered handler runs outermost.

        Args:
            plugins: Resolved plugin list placed into the resolved config

        Returns:
            Outermost resolver
        """
        base_resolver = BaseConfigResolver(plugins)
        resolver: ConfigResolver = base_resolver

        for registration in reversed(self._config_handlers):
            hooks: ConfigHooks = registration.handlers
            if hooks.resolve_user_config is None:
                continue
            resolver = ResolverLink(
                registration.plugin_id,
                hooks.resolve_user_config,
                resolver,
                base_resolver,
            )

        return resolver

    async def run_extend_environment_hooks(self, env: "RuntimeEnvironment") -> None:
        """
        Let plugins attach their namespaces to the runtime environment.

        Args:
            env: Shared runtime environment
        """
        for registration in self._runtime_handlers:
            hooks: RuntimeHooks = registration.handlers
            if hooks.extend_environment is not None:
                logger.debug(f"Running extend_environment of plugin '{registration.plugin_id}'")
                await maybe_await(hooks.extend_environment(env))

    async def run_runtime_created_hooks(self, context: "NightcapContext") -> None:
        """
        Notify plugins that the runtime environment is complete.

        Args:
            context: Resolved config and run_task capability
        """
        for registration in self._runtime_handlers:
            hooks: RuntimeHooks = registration.handlers
            if hooks.created is not None:
                logger.debug(f"Running created hook of plugin '{registration.plugin_id}'")
                await maybe_await(hooks.created(context))

    @property
    def config_handler_count(self) -> int:
        """Number of plugins with config hooks."""
        return len(self._config_handlers)

    @property
    def runtime_handler_count(self) -> int:
        """Number of plugins with runtime hooks."""
        return len(self._runtime_handlers)
