"""Sentinel Status - Live status reports for declared Kubernetes resources."""

from .cluster import ClusterConnection, NamespacedClient
from .config import StatusSettings, get_settings
from .diagnoser import DependencyDiagnoser, format_missing_row
from .exceptions import (
    ClientConstructionError,
    DependencyGraphError,
    ManifestError,
    NoObjectsError,
    ObjectReferenceError,
    PrintError,
    ReportWriteError,
    SelectorParseError,
    StatusError,
)
from .fetcher import FetchResult, LiveFetcher, ObjectGroups, get_reference
from .manifest import DynamicLiveClient, ManifestResourceBuilder
from .models import (
    ClusterConfig,
    DependencyReport,
    FetchFailure,
    MissingResource,
    NodeReport,
    ObjectReference,
    ResourceDescriptor,
)
from .printer import HumanReadablePrinter
from .reporter import render_groups
from .selectors import LabelSelector, parse_selector
from .status import StatusReporter, get_status

__version__ = "0.1.0"

__all__ = [
    # Orchestration
    "StatusReporter",
    "get_status",
    # Components
    "LiveFetcher",
    "ObjectGroups",
    "FetchResult",
    "get_reference",
    "HumanReadablePrinter",
    "render_groups",
    "DependencyDiagnoser",
    "format_missing_row",
    "LabelSelector",
    "parse_selector",
    # Cluster access
    "ClusterConnection",
    "NamespacedClient",
    "ManifestResourceBuilder",
    "DynamicLiveClient",
    # Configuration
    "StatusSettings",
    "get_settings",
    # Models
    "ClusterConfig",
    "ResourceDescriptor",
    "ObjectReference",
    "MissingResource",
    "FetchFailure",
    "NodeReport",
    "DependencyReport",
    # Errors
    "StatusError",
    "ManifestError",
    "NoObjectsError",
    "ObjectReferenceError",
    "PrintError",
    "ReportWriteError",
    "ClientConstructionError",
    "SelectorParseError",
    "DependencyGraphError",
]
