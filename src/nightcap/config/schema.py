"""Configuration file schema."""

from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nightcap.tasks.models import TaskParam


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"must be a valid URL, got: {value}")
    return value


class NetworkConfig(BaseModel):
    """Connection settings for one network."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    indexer_url: Optional[str] = None
    proof_server_url: Optional[str] = None
    node_url: Optional[str] = None
    is_local: Optional[bool] = None

    @field_validator("indexer_url", "proof_server_url", "node_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate endpoint URLs."""
        return _check_url(v)


class DockerConfig(BaseModel):
    """Local container settings."""

    enabled: Optional[bool] = None
    compose_path: Optional[str] = None
    images: dict[str, str] = Field(default_factory=dict)
    ports: dict[str, int] = Field(default_factory=dict)


class CompactConfig(BaseModel):
    """Contract compiler settings."""

    version: Optional[str] = None
    sources: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class PathsConfig(BaseModel):
    """Project directories."""

    artifacts: Optional[str] = None
    sources: Optional[str] = None
    deploy: Optional[str] = None


class CustomTaskConfig(BaseModel):
    """Task defined or extended in the configuration file."""

    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = None
    dependencies: Optional[list[str]] = None
    params: Optional[dict[str, TaskParam]] = None
    action: Optional[str] = Field(default=None, description='Import reference, "module:function"')


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level name."""
        valid = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid:
            raise ValueError(f"Level must be one of {valid}, got: {v}")
        return v.upper()


class NightcapConfigFile(BaseModel):
    """
    Top-level configuration file.

    Unknown top-level keys are kept so plugins can read their own sections.
    """

    model_config = ConfigDict(extra="allow")

    default_network: Optional[str] = None
    networks: Optional[dict[str, NetworkConfig]] = None
    docker: Optional[DockerConfig] = None
    compact: Optional[CompactConfig] = None
    paths: Optional[PathsConfig] = None
    tasks: Optional[dict[str, CustomTaskConfig]] = None
    plugins: Optional[list[str]] = None
    logging: Optional[LoggingConfig] = None

    @model_validator(mode="after")
    def check_default_network(self) -> "NightcapConfigFile":
        """default_network must name a configured network."""
        if self.default_network and self.networks is not None:
            if self.default_network not in self.networks:
                available = ", ".join(self.networks)
                raise ValueError(
                    f"default_network '{self.default_network}' is not defined in networks. "
                    f"Available: {available}"
                )
        return self

    def to_dict(self) -> dict[str, Any]:
        """Dump to a plain dict, dropping unset values."""
        return self.model_dump(exclude_none=True)
