"""Command-line entry point."""

import argparse
import importlib
import logging
import sys
from typing import Optional

from .cluster import ClusterConnection
from .config import StatusSettings, configure_logging, get_settings
from .diagnoser import DependencyDiagnoser, DependencyGraph, GraphBuilder
from .exceptions import StatusError
from .manifest import ManifestResourceBuilder
from .selectors import LabelSelector
from .status import StatusReporter

logger = logging.getLogger(__name__)


def empty_graph(client, selector: LabelSelector) -> DependencyGraph:
    """Graph builder used when none is configured."""
    return {}


def load_graph_builder(path: Optional[str]) -> GraphBuilder:
    """
    Import a graph builder from a ``module:attribute`` path.

    Raises:
        ValueError: If the path is malformed or cannot be imported
    """
    if not path:
        return empty_graph
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"graph builder must be 'module:attribute', got {path!r}")
    try:
        builder = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"cannot load graph builder {path!r}: {e}") from e
    if not callable(builder):
        raise ValueError(f"graph builder {path!r} is not callable")
    return builder


def build_parser(settings: StatusSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sentinel-status",
        description="Report the live status of resources declared in a manifest",
    )
    parser.add_argument("manifest", help="Path to rendered manifest, or - for stdin")
    parser.add_argument("-n", "--namespace", default=settings.default_namespace)
    parser.add_argument("--kubeconfig", default=settings.kubeconfig_path)
    parser.add_argument("--context", default=settings.context)
    parser.add_argument(
        "--selector",
        default=settings.label_selector,
        help="Label selector for the dependency graph",
    )
    parser.add_argument(
        "--graph-builder",
        default=settings.graph_builder,
        help="Dependency graph builder as module:attribute",
    )
    parser.add_argument("--export", action="store_true", default=settings.export)
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(args.log_level)

    try:
        graph_builder = load_graph_builder(args.graph_builder)
    except ValueError as e:
        logger.error(str(e))
        return 2

    cluster_config = settings.cluster_config().model_copy(
        update={"kubeconfig_path": args.kubeconfig, "context": args.context}
    )
    try:
        connection = ClusterConnection(cluster_config)
    except ValueError as e:
        logger.error(str(e))
        return 1

    with connection:
        reporter = StatusReporter(
            ManifestResourceBuilder(connection.dynamic, export=args.export),
            DependencyDiagnoser(connection.for_namespace, graph_builder, args.selector),
        )
        try:
            if args.manifest == "-":
                report = reporter.get_status(args.namespace, sys.stdin)
            else:
                with open(args.manifest, encoding="utf-8") as manifest:
                    report = reporter.get_status(args.namespace, manifest)
        except OSError as e:
            logger.error(f"Cannot open manifest {args.manifest}: {e}")
            return 1
        except StatusError as e:
            logger.error(f"Status check failed: {e}")
            return 1

    sys.stdout.write(report)
    return 0
