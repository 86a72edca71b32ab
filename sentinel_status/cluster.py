"""Kubernetes client management."""

import base64
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from kubernetes import config
from kubernetes.client import ApiClient
from kubernetes.dynamic import DynamicClient

from .models import ClusterConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamespacedClient:
    """Dynamic client bound to a single namespace."""

    dynamic: DynamicClient
    namespace: str


class ClusterConnection:
    """Represents a connection to a Kubernetes cluster."""

    def __init__(self, cluster_config: ClusterConfig):
        """
        Initialize cluster connection.

        Args:
            cluster_config: Cluster configuration

        Raises:
            ValueError: If kubeconfig is invalid
        """
        self.config = cluster_config
        self._api_client: Optional[ApiClient] = None
        self._dynamic: Optional[DynamicClient] = None
        self._temp_kubeconfig: Optional[Path] = None

        self._initialize_client()

    def _initialize_client(self):
        """Initialize Kubernetes API client."""
        try:
            if self.config.kubeconfig_data:
                # Decode base64 kubeconfig and write to temp file
                kubeconfig_content = base64.b64decode(self.config.kubeconfig_data)
                with tempfile.NamedTemporaryFile(mode="wb", delete=False) as f:
                    f.write(kubeconfig_content)
                    self._temp_kubeconfig = Path(f.name)
                config.load_kube_config(
                    config_file=str(self._temp_kubeconfig),
                    context=self.config.context,
                )
            elif self.config.kubeconfig_path:
                config.load_kube_config(
                    config_file=str(Path(self.config.kubeconfig_path).expanduser()),
                    context=self.config.context,
                )
            else:
                # Running inside the cluster
                config.load_incluster_config()

            self._api_client = ApiClient()
            self._dynamic = DynamicClient(self._api_client)

        except Exception as e:
            self.close()
            raise ValueError(f"Failed to initialize cluster connection: {e}") from e

    @property
    def api_client(self) -> ApiClient:
        """Get ApiClient instance."""
        if not self._api_client:
            raise RuntimeError("Cluster connection not initialized")
        return self._api_client

    @property
    def dynamic(self) -> DynamicClient:
        """Get DynamicClient instance."""
        if not self._dynamic:
            raise RuntimeError("Cluster connection not initialized")
        return self._dynamic

    def for_namespace(self, namespace: str) -> NamespacedClient:
        """
        Get a client scoped to one namespace.

        Args:
            namespace: Kubernetes namespace

        Returns:
            NamespacedClient
        """
        if not namespace:
            raise ValueError("namespace must not be empty")
        logger.debug(f"Creating namespaced client for {namespace}")
        return NamespacedClient(dynamic=self.dynamic, namespace=namespace)

    def close(self):
        """Close the cluster connection and clean up resources."""
        if self._api_client:
            self._api_client.close()
            self._api_client = None

        # Clean up temporary kubeconfig file
        if self._temp_kubeconfig and self._temp_kubeconfig.exists():
            self._temp_kubeconfig.unlink()
            self._temp_kubeconfig = None

        self._dynamic = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
