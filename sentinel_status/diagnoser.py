"""Dependency-aware diagnosis of missing resources."""

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TextIO

from .exceptions import ClientConstructionError, DependencyGraphError
from .models import MissingResource, NodeReport, ScheduledResource
from .reporter import write
from .selectors import LabelSelector, parse_selector

logger = logging.getLogger(__name__)

DependencyGraph = Mapping[str, ScheduledResource]
ClientFactory = Callable[[str], Any]
GraphBuilder = Callable[[Any, LabelSelector], DependencyGraph]

MISSING_HEADER = "==> MISSING\nKIND\t\tNAME\t\tSTATUS\t\n"


def format_missing_row(missing: MissingResource, report: NodeReport) -> str:
    """
    Format the diagnostic row of one missing resource.

    Blocked resources list the names of their blocking dependencies;
    resources that are not blocked are reported as in progress.
    """
    row = f"{missing.resource}\t\t{missing.name}\t\t"
    if report.blocked:
        row += "WAITING_FOR:" + "".join(f" {name}," for name in report.blocking)
    else:
        row += "INPROGRESS"
    return row + "\t\n"


class DependencyDiagnoser:
    """
    Explains why declared resources are not yet present.

    The dependency graph is built on demand for the report's namespace and
    looked up by ``kind/name`` keys.
    """

    def __init__(
        self,
        client_factory: ClientFactory,
        graph_builder: GraphBuilder,
        label_selector: str = "",
    ):
        """
        Initialize diagnoser.

        Args:
            client_factory: Builds a namespace-scoped client for the graph builder
            graph_builder: Builds the dependency graph from a client and selector
            label_selector: Selector restricting the graph's resources
        """
        self.client_factory = client_factory
        self.graph_builder = graph_builder
        self.label_selector = label_selector

    def build_graph(self, namespace: str) -> DependencyGraph:
        """
        Build the dependency graph for a namespace.

        Raises:
            ClientConstructionError: If the namespaced client cannot be created
            SelectorParseError: If the label selector is malformed
            DependencyGraphError: If the graph cannot be built
        """
        try:
            client = self.client_factory(namespace)
        except Exception as e:
            raise ClientConstructionError(f"couldn't create namespaced client. Err: {e}") from e

        selector = parse_selector(self.label_selector)

        try:
            return self.graph_builder(client, selector)
        except Exception as e:
            raise DependencyGraphError(f"couldn't create a dependency graph. Err: {e}") from e

    def diagnose(
        self, namespace: str, missing: Sequence[MissingResource], out: TextIO
    ) -> None:
        """
        Write the MISSING section for the given resources.

        Rows follow the order of ``missing``. Resources with no node in the
        graph produce no row.

        Args:
            namespace: Namespace the resources were declared in
            missing: Resources whose live fetch failed
            out: Report buffer
        """
        graph = self.build_graph(namespace)

        write(out, MISSING_HEADER)
        for resource in missing:
            key = resource.key
            logger.debug(f"Looking for key {key} in resource graph")
            node = graph.get(key)
            if node is None:
                logger.info(f"No dependency graph node for missing resource {key}")
                continue
            try:
                report = node.get_node_report(key)
            except Exception as e:
                raise DependencyGraphError(f"couldn't get node report for {key}. Err: {e}") from e
            write(out, format_missing_row(resource, report))
