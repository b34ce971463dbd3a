"""Configuration file discovery and loading."""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from nightcap.config.defaults import create_default_config
from nightcap.config.schema import NightcapConfigFile
from nightcap.errors import ConfigFileError
from nightcap.plugins.resolver import plugin_loader
from nightcap.utils import import_object

logger = logging.getLogger(__name__)

# Searched in order in each directory
CONFIG_FILE_NAMES = ["nightcap.yaml", "nightcap.yml"]


def find_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Find a config file in ``start_dir`` or any of its parents.

    Args:
        start_dir: Directory to start from (default: current directory)

    Returns:
        Path to the config file or None
    """
    current = (start_dir or Path.cwd()).resolve()

    for directory in [current, *current.parents]:
        for file_name in CONFIG_FILE_NAMES:
            candidate = directory / file_name
            if candidate.is_file():
                return candidate

    return None


def load_config(config_path: Optional[Path] = None) -> dict[str, Any]:
    """
    Load, validate and merge the user configuration.

    Args:
        config_path: Explicit config file; must exist when given

    Returns:
        User config dict, with plugin references imported and custom task
        actions resolved to callables

    Raises:
        ConfigFileError: If the file is missing, malformed or invalid
    """
    defaults = create_default_config()

    if config_path is not None:
        path = Path(config_path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Config file not found: {path}", path="")
    else:
        path = find_config_file()
        if path is None:
            logger.debug("No config file found, using defaults")
            return defaults

    logger.debug(f"Loading config from: {path}")
    raw = _read_yaml(path)
    validated = validate_config(raw)
    config = merge_configs(defaults, validated)
    config["config_path"] = str(path)
    return _resolve_references(config)


def _read_yaml(path: Path) -> Any:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigFileError(f"Invalid YAML in {path}: {e}", path="") from e
    except OSError as e:
        raise ConfigFileError(f"Cannot read {path}: {e}", path="") from e

    return {} if data is None else data


def validate_config(raw: Any) -> dict[str, Any]:
    """
    Validate a raw configuration mapping.

    Args:
        raw: Parsed YAML document

    Returns:
        Validated config as a plain dict

    Raises:
        ConfigFileError: Carrying the dotted path of the first invalid field
    """
    if not isinstance(raw, dict):
        raise ConfigFileError("Configuration must be a mapping", path="root", value=raw)

    try:
        model = NightcapConfigFile(**raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "root"
        raise ConfigFileError(first["msg"], path=location, value=first.get("input")) from e

    config = model.to_dict()
    for name, network in config.get("networks", {}).items():
        network.setdefault("name", name)
    return config


def merge_configs(defaults: dict[str, Any], user: dict[str, Any]) -> dict[str, Any]:
    """
    Merge a validated user config over the defaults, section by section.

    Args:
        defaults: Default configuration
        user: Validated user configuration

    Returns:
        Merged configuration
    """
    merged = {**defaults, **user}
    merged["default_network"] = user.get("default_network", defaults.get("default_network"))
    merged["networks"] = {**defaults.get("networks", {}), **user.get("networks", {})}

    default_docker = defaults.get("docker", {})
    user_docker = user.get("docker", {})
    merged["docker"] = {
        **default_docker,
        **user_docker,
        "images": {**default_docker.get("images", {}), **user_docker.get("images", {})},
    }

    merged["paths"] = {**defaults.get("paths", {}), **user.get("paths", {})}
    return merged


def _resolve_references(config: dict[str, Any]) -> dict[str, Any]:
    """Import plugin references and custom task actions."""
    plugins = []
    for i, reference in enumerate(config.get("plugins", [])):
        try:
            plugins.append(plugin_loader(reference)())
        except Exception as e:
            raise ConfigFileError(
                f"Cannot import plugin '{reference}': {e}", path=f"plugins.{i}", value=reference
            ) from e
    if plugins:
        config["plugins"] = plugins

    for name, task in config.get("tasks", {}).items():
        reference = task.get("action")
        if reference is None:
            continue
        try:
            task["action"] = import_object(reference)
        except Exception as e:
            raise ConfigFileError(
                f"Cannot import action '{reference}': {e}", path=f"tasks.{name}.action", value=reference
            ) from e
        if not callable(task["action"]):
            raise ConfigFileError(
                f"Action '{reference}' is not callable", path=f"tasks.{name}.action", value=reference
            )

    return config
