"""CLI interface for nightcap."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from nightcap import __version__
from nightcap.core.nightcap import Nightcap
from nightcap.errors import (
    ConfigFileError,
    ConfigValidationError,
    NightcapError,
    PluginDependencyCycleError,
    PluginLoadError,
    PluginValidationError,
    TaskCycleError,
    UnknownNetworkError,
    UnknownTaskError,
)
from nightcap.tasks.models import TaskDefinition, TaskParam, TaskResult

# Load environment variables from .env file
load_dotenv()

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure root logging from CLI flags."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=verbose)],
        force=True,
    )


def _apply_logging_config(config: dict, verbose: bool, quiet: bool) -> None:
    """Apply the ``logging`` section of the resolved config."""
    log_config = config.get("logging", {})
    root = logging.getLogger()

    if not verbose and not quiet and "level" in log_config:
        root.setLevel(getattr(logging, log_config["level"]))

    log_file = log_config.get("file")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        root.addHandler(handler)


def _build_option(name: str, param: TaskParam) -> click.Option:
    """Turn a task param into a click option."""
    flag = f"--{name.replace('_', '-')}"
    decls = [flag, name] if name.isidentifier() else [flag]

    if param.type == "boolean":
        return click.Option(
            decls,
            is_flag=True,
            default=bool(param.default),
            help=param.description,
        )

    if param.type == "number":
        click_type = click.INT if isinstance(param.default, int) else click.FLOAT
    else:
        click_type = click.STRING

    return click.Option(
        decls,
        type=click_type,
        required=param.required,
        default=param.default,
        show_default=param.default is not None,
        help=param.description,
    )


def _print_results(results: list[TaskResult], verbose: bool) -> None:
    """Print a summary of executed tasks."""
    failed = [r for r in results if not r.success]
    if not failed and not verbose:
        return

    table = Table(title="Task Results", show_header=True, header_style="bold magenta")
    table.add_column("Task", style="cyan")
    table.add_column("Status")
    table.add_column("Duration", justify="right")
    table.add_column("Error", style="red")

    for result in results:
        status = "[green]ok[/green]" if result.success else "[red]failed[/red]"
        table.add_row(
            result.name,
            status,
            f"{result.duration * 1000:.0f}ms",
            str(result.error) if result.error else "",
        )

    console.print(table)


class NightcapGroup(click.Group):
    """
    Click group whose commands are the registered tasks.

    The application is initialized lazily, once the global options are
    parsed, so plugin and config tasks show up as commands.
    """

    def _app(self, ctx: click.Context) -> Nightcap:
        ctx.ensure_object(dict)
        app = ctx.obj.get("app")
        if app is not None:
            return app

        verbose = bool(ctx.params.get("verbose"))
        quiet = bool(ctx.params.get("quiet"))
        _setup_logging(verbose, quiet)

        app = Nightcap(
            config_path=ctx.params.get("config"),
            network=ctx.params.get("network"),
            verbose=verbose,
            user_config=ctx.obj.get("user_config"),
        )
        asyncio.run(app.initialize())
        _apply_logging_config(app.config, verbose, quiet)

        ctx.obj["app"] = app
        return app

    def list_commands(self, ctx: click.Context) -> list[str]:
        return [task.name for task in self._app(ctx).registry.get_all_tasks()]

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        task = self._app(ctx).registry.get(cmd_name)
        if task is None:
            return None
        return self._build_command(task)

    def resolve_command(self, ctx: click.Context, args: list[str]) -> Any:
        cmd_name = args[0] if args else ""
        if cmd_name and not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            suggestions = self._app(ctx).registry.get_suggestions(cmd_name)
            message = f"Unknown task: {cmd_name}"
            if suggestions:
                message += f"\nDid you mean: {', '.join(suggestions)}?"
            message += '\nRun "nightcap --help" for available tasks'
            ctx.fail(message)
        return super().resolve_command(ctx, args)

    def _build_command(self, task: TaskDefinition) -> click.Command:
        params = [_build_option(name, param) for name, param in task.params.items()]

        @click.pass_context
        def callback(ctx: click.Context, **options: Any) -> None:
            app: Nightcap = ctx.find_object(dict)["app"]
            results = asyncio.run(app.run(task.name, options))
            _print_results(results, app.verbose)
            if any(not result.success for result in results):
                ctx.exit(1)

        return click.Command(
            task.name,
            params=params,
            callback=callback,
            help=task.description,
            short_help=task.description,
        )


@click.group(cls=NightcapGroup)
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--network", type=str, help="Network to use (default: default_network from config)")
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.option("--quiet", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    network: Optional[str],
    verbose: bool,
    quiet: bool,
) -> None:
    """Nightcap - a development environment for Midnight."""
    ctx.ensure_object(dict)


def format_error(error: NightcapError) -> str:
    """Render an error for the terminal, by kind."""
    if isinstance(error, TaskCycleError):
        return f"[red]Circular task dependency:[/red] {' -> '.join(error.cycle)}"
    if isinstance(error, PluginDependencyCycleError):
        return f"[red]Circular plugin dependency:[/red] {' -> '.join(error.cycle)}"
    if isinstance(error, ConfigValidationError):
        lines = "\n".join(f"  - {message}" for message in error.errors)
        return f"[red]Config validation failed:[/red]\n{lines}"
    if isinstance(error, PluginLoadError):
        return f"[red]Failed to load a dependency of plugin '{error.plugin_id}':[/red] {error.cause}"
    if isinstance(error, PluginValidationError):
        return f"[red]Invalid plugin '{error.plugin_id}':[/red] {error.reason}"
    if isinstance(error, ConfigFileError):
        return f"[red]Configuration error:[/red] {error}"
    if isinstance(error, UnknownTaskError):
        message = f"[red]Unknown task:[/red] {error.name}"
        if error.suggestions:
            message += f"\nDid you mean: {', '.join(error.suggestions)}?"
        return message
    if isinstance(error, UnknownNetworkError):
        message = f"[red]Unknown network:[/red] {error.name}"
        if error.available:
            message += f"\nAvailable networks: {', '.join(error.available)}"
        return message
    return f"[red]Error:[/red] {error}"


def main() -> None:
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(1)
    except NightcapError as e:
        err_console.print(format_error(e), highlight=False)
        logger.debug("Error details", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
