"""Pytest configuration and fixtures for status reporter tests."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from kubernetes.client.exceptions import ApiException

from sentinel_status import DependencyReport, NodeReport, ResourceDescriptor

FIXED_NOW = datetime(2024, 1, 1, 1, 0, 0, tzinfo=timezone.utc)

RESOURCES = {"Pod": "pods", "Service": "services", "Deployment": "deployments"}
API_VERSIONS = {"Pod": "v1", "Service": "v1", "Deployment": "apps/v1"}


def make_object(kind, name, namespace="default", **extra):
    """Build a live object dict as returned by the dynamic client."""
    obj = {
        "apiVersion": API_VERSIONS.get(kind, "v1"),
        "kind": kind,
        "metadata": {
            "name": name,
            "namespace": namespace,
            "uid": f"uid-{name}",
            "creationTimestamp": "2024-01-01T00:00:00Z",
        },
    }
    obj.update(extra)
    return obj


def make_descriptor(kind, name, obj=None, error=None, namespace="default"):
    """Build a descriptor whose client returns obj or raises error."""
    client = MagicMock()
    if error is not None:
        client.get.side_effect = error
    else:
        client.get.return_value = obj if obj is not None else make_object(kind, name, namespace)
    return ResourceDescriptor(
        namespace=namespace,
        name=name,
        kind=kind,
        api_version=API_VERSIONS.get(kind, "v1"),
        resource=RESOURCES.get(kind, kind.lower() + "s"),
        client=client,
    )


class FakeScheduledResource:
    """Dependency graph node returning a fixed report."""

    def __init__(self, blocked, dependencies=()):
        self.report = NodeReport(
            blocked=blocked,
            dependencies=[DependencyReport(dependency=d, blocks=b) for d, b in dependencies],
        )
        self.requested_keys = []

    def get_node_report(self, key):
        self.requested_keys.append(key)
        return self.report


@pytest.fixture
def fixed_clock():
    """Clock pinned one hour after the sample creation timestamps."""
    return lambda: FIXED_NOW


@pytest.fixture
def not_found():
    """ApiException for a missing object."""
    return ApiException(status=404, reason="Not Found")


@pytest.fixture
def mock_namespaced_client():
    """Mock namespaced client handed to graph builders."""
    return MagicMock()


@pytest.fixture
def sample_graph():
    """Dependency graph with one blocked and one in-progress node."""
    return {
        "pod/b": FakeScheduledResource(blocked=True, dependencies=[("svc/c", True)]),
        "service/web": FakeScheduledResource(
            blocked=False, dependencies=[("pod/db", True), ("job/migrate", False)]
        ),
    }
