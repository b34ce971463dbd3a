"""Environment diagnostics task."""

import asyncio
import logging
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx
from rich.console import Console

from nightcap.tasks.models import TaskContext, TaskDefinition

logger = logging.getLogger(__name__)

MIN_PYTHON = (3, 10)
MIN_DISK_GB = 20

# Registry endpoints that must answer for image pulls to work
REGISTRY_ENDPOINTS = [
    ("GitHub Container Registry", "https://ghcr.io/v2/", (200, 401)),
    ("Docker Hub", "https://registry-1.docker.io/v2/", (200, 401)),
]

console = Console()


@dataclass
class CheckResult:
    """Result of a single diagnostic."""

    name: str
    status: str  # "ok" | "warn" | "error"
    message: str
    details: Optional[str] = None


def check_python_version() -> CheckResult:
    """Check the interpreter version."""
    version = ".".join(str(part) for part in sys.version_info[:3])
    if sys.version_info[:2] >= MIN_PYTHON:
        return CheckResult("Python", "ok", f"Python {version} installed")
    return CheckResult(
        "Python",
        "error",
        f"Python {version} is below minimum required version",
        details=f"Please upgrade to Python {'.'.join(map(str, MIN_PYTHON))} or higher",
    )


async def check_docker() -> CheckResult:
    """Check that the docker CLI exists and the daemon answers."""
    if shutil.which("docker") is None:
        return CheckResult(
            "Docker",
            "error",
            "Docker is not installed",
            details="Install Docker: https://docs.docker.com/get-docker/",
        )

    try:
        process = await asyncio.create_subprocess_exec(
            "docker",
            "info",
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await asyncio.wait_for(process.communicate(), timeout=15)
    except asyncio.TimeoutError:
        return CheckResult("Docker", "warn", "Docker daemon did not answer in time")
    except OSError as e:
        return CheckResult("Docker", "error", f"Cannot run docker: {e}")

    if process.returncode != 0:
        return CheckResult(
            "Docker",
            "warn",
            "Docker is installed but the daemon is not running",
            details=stderr.decode(errors="replace").strip() or None,
        )
    return CheckResult("Docker", "ok", "Docker is installed and running")


def check_configuration(context: TaskContext) -> CheckResult:
    """Check that a config file was loaded and the network is usable."""
    config_path = context.config.get("config_path")
    if not context.network:
        return CheckResult("Configuration", "error", f"Network '{context.network_name}' is not configured")
    if not config_path:
        return CheckResult(
            "Configuration",
            "warn",
            "No nightcap.yaml found, using defaults",
            details="Create nightcap.yaml in the project root to customize settings",
        )
    return CheckResult("Configuration", "ok", f"Loaded {config_path} (network: {context.network_name})")


def check_disk_space(path: Path = Path(".")) -> CheckResult:
    """Check free disk space for images and chain data."""
    usage = shutil.disk_usage(path)
    free_gb = usage.free / (1024 ** 3)
    if free_gb >= MIN_DISK_GB:
        return CheckResult("Disk Space", "ok", f"{free_gb:.1f} GB free")
    return CheckResult(
        "Disk Space",
        "warn",
        f"{free_gb:.1f} GB free, {MIN_DISK_GB} GB recommended",
    )


async def check_registry_connectivity(timeout: float = 10.0) -> CheckResult:
    """Check that container registries are reachable."""
    unreachable = []

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        for name, url, accept_codes in REGISTRY_ENDPOINTS:
            try:
                response = await client.get(url)
                if response.status_code not in accept_codes:
                    unreachable.append(f"{name}: HTTP {response.status_code}")
            except httpx.HTTPError as e:
                unreachable.append(f"{name}: {e.__class__.__name__}")

    if not unreachable:
        return CheckResult("Registry Connectivity", "ok", "Container registries reachable")
    return CheckResult(
        "Registry Connectivity",
        "warn",
        "Some container registries are unreachable",
        details="\n".join(unreachable),
    )


STATUS_STYLES = {"ok": "[green][OK][/green]", "warn": "[yellow][WARN][/yellow]", "error": "[red][ERROR][/red]"}


async def doctor_action(context: TaskContext) -> None:
    """Run all diagnostics and print a report."""
    logger.info("Running Nightcap diagnostics...")

    checks = [
        check_python_version(),
        await check_docker(),
        check_configuration(context),
        check_disk_space(),
        await check_registry_connectivity(),
    ]

    for check in checks:
        console.print(f"{STATUS_STYLES[check.status]} {check.name}: {check.message}")
        if check.details and context.verbose:
            for line in check.details.splitlines():
                console.print(f"     [dim]{line}[/dim]")

    if any(check.status == "error" for check in checks):
        raise RuntimeError("Doctor found errors. Please fix the issues above.")
    if any(check.status == "warn" for check in checks):
        console.print("\n[yellow]Some checks have warnings. Review the messages above.[/yellow]")
    else:
        console.print("\n[green]All checks passed! Your environment is ready.[/green]")


doctor_task = TaskDefinition(
    name="doctor",
    description="Check system requirements and configuration",
    action=doctor_action,
)
