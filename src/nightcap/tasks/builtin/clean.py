"""Artifact cleanup task."""

import logging
import shutil
from pathlib import Path

from nightcap.config.defaults import DEFAULT_PATHS
from nightcap.tasks.models import TaskContext, TaskDefinition, TaskParam

logger = logging.getLogger(__name__)


def clean_action(context: TaskContext) -> None:
    """Remove the compiled artifacts directory."""
    paths = context.config.get("paths", {})
    artifacts = Path(paths.get("artifacts", DEFAULT_PATHS["artifacts"]))

    if context.params.get("dry_run"):
        logger.info(f"Would remove {artifacts}")
        return

    if not artifacts.exists():
        logger.info(f"Nothing to clean: {artifacts} does not exist")
        return

    shutil.rmtree(artifacts)
    logger.info(f"Removed {artifacts}")


clean_task = TaskDefinition(
    name="clean",
    description="Remove compiled artifacts",
    params={
        "dry_run": TaskParam(
            type="boolean",
            description="Only print what would be removed",
            default=False,
        ),
    },
    action=clean_action,
)
