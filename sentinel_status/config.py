"""Configuration management for status reporting."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ClusterConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StatusSettings(BaseSettings):
    """Status reporter settings."""

    model_config = SettingsConfigDict(
        env_prefix="SENTINEL_STATUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"

    # Kubernetes Settings
    kubeconfig_path: Optional[str] = Field(
        default=None,
        description="Path to kubeconfig file; in-cluster config when unset",
    )
    kubeconfig_data: Optional[str] = Field(
        default=None,
        description="Base64 encoded kubeconfig",
    )
    context: Optional[str] = None
    default_namespace: str = "default"

    # Report Settings
    label_selector: str = Field(
        default="",
        description="Label selector applied when building the dependency graph",
    )
    export: bool = False
    graph_builder: Optional[str] = Field(
        default=None,
        description="Dependency graph builder as 'module:attribute'",
    )

    def cluster_config(self) -> ClusterConfig:
        return ClusterConfig(
            kubeconfig_path=self.kubeconfig_path,
            kubeconfig_data=self.kubeconfig_data,
            context=self.context,
        )


@lru_cache
def get_settings() -> StatusSettings:
    """Get cached settings instance."""
    return StatusSettings()


def configure_logging(level: str) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
