"""Plugin data models."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Union

from nightcap.tasks.models import TaskDefinition

if TYPE_CHECKING:
    from nightcap.core.environment import NightcapContext, RuntimeEnvironment

# Raw configuration as produced by the config loader, plus an optional "plugins" list
UserConfig = dict[str, Any]
# UserConfig after hooks ran, with "plugins" replaced by the resolved plugin list
ResolvedConfig = dict[str, Any]

ConfigResolver = Callable[[UserConfig], Awaitable[ResolvedConfig]]


@dataclass(eq=False)
class ConfigHooks:
    """
    Configuration-phase hooks.

    extend_user_config(config) -> config
        Sequential fold; add defaults or plugin-specific sections.
    validate_user_config(config) -> list[str]
        Return error messages, empty when valid.
    resolve_user_config(user_config, resolved_config, next) -> resolved_config
        Middleware; ``await next(user_config)`` continues the chain.
    """

    extend_user_config: Optional[Callable[[UserConfig], Any]] = None
    validate_user_config: Optional[Callable[[UserConfig], Any]] = None
    resolve_user_config: Optional[
        Callable[[UserConfig, ResolvedConfig, ConfigResolver], Any]
    ] = None


@dataclass(eq=False)
class RuntimeHooks:
    """
    Runtime-phase hooks.

    extend_environment(env)
        Attach plugin namespaces to the shared RuntimeEnvironment.
    created(ctx)
        Runs after every plugin extended the environment.
    """

    extend_environment: Optional[Callable[["RuntimeEnvironment"], Any]] = None
    created: Optional[Callable[["NightcapContext"], Any]] = None


@dataclass(eq=False)
class HookHandlers:
    """Hook handlers a plugin contributes."""

    config: Optional[ConfigHooks] = None
    runtime: Optional[RuntimeHooks] = None


PluginLoader = Callable[[], Union["Plugin", Awaitable["Plugin"]]]


@dataclass(eq=False)
class Plugin:
    """
    A bundle of tasks and hook handlers.

    Plugins compare by identity: two instances with the same ``id`` are a
    conflict, the same instance reached twice is not.

    Attributes:
        id: Unique plugin identifier
        package: Distribution name, used in messages only
        dependencies: Zero-argument loaders, each returning a Plugin (or an awaitable of one)
        hook_handlers: Hook handlers the plugin defines
        tasks: Tasks the plugin defines or overrides
    """

    id: str
    package: Optional[str] = None
    dependencies: list[PluginLoader] = field(default_factory=list)
    hook_handlers: Optional[HookHandlers] = None
    tasks: list[TaskDefinition] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Plugin(id={self.id!r}, package={self.package!r})"
