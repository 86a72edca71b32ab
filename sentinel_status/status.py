"""Status report orchestration."""

import io
import logging
from collections.abc import Callable, Sequence
from typing import Optional, Protocol

from .diagnoser import ClientFactory, DependencyDiagnoser, GraphBuilder
from .fetcher import LiveFetcher
from .manifest import Manifest
from .models import ResourceDescriptor
from .printer import HumanReadablePrinter
from .reporter import ObjectPrinter, render_groups

logger = logging.getLogger(__name__)


class DescriptorSource(Protocol):
    """Builds declared resource descriptors from a manifest."""

    def build(self, namespace: str, manifest: Manifest) -> Sequence[ResourceDescriptor]:
        ...


class StatusReporter:
    """
    Reconciles declared resources against the cluster and reports status.

    A run fetches every declared resource, renders the live objects grouped
    by type and, when some resources could not be fetched, appends a MISSING
    section explaining what each of them is waiting for.
    """

    def __init__(
        self,
        builder: DescriptorSource,
        diagnoser: DependencyDiagnoser,
        fetcher: Optional[LiveFetcher] = None,
        printer_factory: Callable[[], ObjectPrinter] = HumanReadablePrinter,
    ):
        """
        Initialize status reporter.

        Args:
            builder: Descriptor source for manifests
            diagnoser: Diagnoser for missing resources
            fetcher: Live fetcher (creates new one if not provided)
            printer_factory: Creates a fresh row printer for each run
        """
        self.builder = builder
        self.diagnoser = diagnoser
        self.fetcher = fetcher or LiveFetcher()
        self.printer_factory = printer_factory

    def get_status(self, namespace: str, manifest: Manifest) -> str:
        """
        Build the status report for a manifest.

        Args:
            namespace: Namespace the manifest was deployed to
            manifest: Rendered manifest stream

        Returns:
            Report text

        Raises:
            StatusError: If the run fails; no partial report is returned
        """
        descriptors = self.builder.build(namespace, manifest)
        result = self.fetcher.fetch(descriptors)
        logger.info(
            f"Fetched {len(descriptors)} resources in {namespace}: "
            f"{len(result.missing)} missing"
        )

        buf = io.StringIO()
        render_groups(result.groups, self.printer_factory(), buf)
        if result.missing:
            self.diagnoser.diagnose(namespace, result.missing, buf)
        return buf.getvalue()


def get_status(
    builder: DescriptorSource,
    namespace: str,
    manifest: Manifest,
    client_factory: ClientFactory,
    graph_builder: GraphBuilder,
    label_selector: str = "",
) -> str:
    """
    Build a status report in one call.

    Args:
        builder: Descriptor source for manifests
        namespace: Namespace the manifest was deployed to
        manifest: Rendered manifest stream
        client_factory: Builds the namespaced client for the graph builder
        graph_builder: Builds the dependency graph
        label_selector: Selector restricting the dependency graph

    Returns:
        Report text
    """
    diagnoser = DependencyDiagnoser(client_factory, graph_builder, label_selector)
    return StatusReporter(builder, diagnoser).get_status(namespace, manifest)
