"""Configuration loading."""

from nightcap.config.defaults import (
    DEFAULT_NETWORKS,
    DEFAULT_PROOF_SERVER_URL,
    create_default_config,
)
from nightcap.config.loader import find_config_file, load_config, merge_configs, validate_config

__all__ = [
    "DEFAULT_NETWORKS",
    "DEFAULT_PROOF_SERVER_URL",
    "create_default_config",
    "find_config_file",
    "load_config",
    "merge_configs",
    "validate_config",
]
