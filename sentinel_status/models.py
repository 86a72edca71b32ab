"""Data models for status reporting."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

from pydantic import BaseModel, Field


class FetchFailure(str, Enum):
    """Why a live fetch did not return an object."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    UNAUTHORIZED = "unauthorized"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class ClusterConfig(BaseModel):
    """How to reach the cluster."""

    kubeconfig_path: Optional[str] = None
    kubeconfig_data: Optional[str] = None  # Base64 encoded kubeconfig
    context: Optional[str] = None


class LiveClient(Protocol):
    """Fetches a single live object."""

    def get(self, namespace: Optional[str], name: str, export: bool = False) -> Any:
        ...


@dataclass(frozen=True)
class ResourceDescriptor:
    """A declared resource and the client able to fetch it."""

    namespace: Optional[str]
    name: str
    kind: str
    api_version: str
    resource: str  # Plural resource type, e.g. "pods"
    client: LiveClient
    export: bool = False

    def get(self) -> Any:
        """Fetch the live object for this descriptor."""
        return self.client.get(self.namespace, self.name, self.export)


class ObjectReference(BaseModel):
    """Identity of a live object."""

    api_version: str
    kind: str
    name: str
    namespace: Optional[str] = None
    uid: Optional[str] = None

    @property
    def type_key(self) -> str:
        return f"{self.api_version}/{self.kind}"


class MissingResource(BaseModel):
    """
    A declared resource whose live fetch failed.

    The failure reason is kept for logging only; the report shows the
    resource as missing regardless of why the fetch failed.
    """

    name: str
    kind: str
    resource: str
    reason: FetchFailure = FetchFailure.UNKNOWN
    message: Optional[str] = None

    @property
    def key(self) -> str:
        """Dependency graph key, e.g. ``pod/web-0``."""
        return f"{self.kind.lower()}/{self.name}"


class DependencyReport(BaseModel):
    """One dependency of a scheduled resource."""

    dependency: str
    blocks: bool = False


class NodeReport(BaseModel):
    """Blocking state of a scheduled resource."""

    blocked: bool = False
    dependencies: list[DependencyReport] = Field(default_factory=list)

    @property
    def blocking(self) -> list[str]:
        """Names of the dependencies that block this node."""
        return [dep.dependency for dep in self.dependencies if dep.blocks]


class ScheduledResource(Protocol):
    """A node of the dependency graph."""

    def get_node_report(self, key: str) -> NodeReport:
        ...
