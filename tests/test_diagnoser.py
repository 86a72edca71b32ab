"""Tests for DependencyDiagnoser."""

import io
from unittest.mock import MagicMock

import pytest

from conftest import FakeScheduledResource
from sentinel_status import (
    ClientConstructionError,
    DependencyDiagnoser,
    DependencyGraphError,
    LabelSelector,
    MissingResource,
    NodeReport,
    SelectorParseError,
    format_missing_row,
)
from sentinel_status.diagnoser import MISSING_HEADER


def missing(kind, name, resource):
    return MissingResource(name=name, kind=kind, resource=resource)


class TestFormatMissingRow:
    """Test cases for format_missing_row."""

    def test_blocked_lists_blocking_dependencies(self):
        """Test that only blocking dependencies are listed."""
        report = NodeReport.model_validate(
            {
                "blocked": True,
                "dependencies": [
                    {"dependency": "svc/a", "blocks": True},
                    {"dependency": "job/b", "blocks": False},
                    {"dependency": "pod/c", "blocks": True},
                ],
            }
        )

        row = format_missing_row(missing("Pod", "web", "pods"), report)

        assert row == "pods\t\tweb\t\tWAITING_FOR: svc/a, pod/c,\t\n"
        assert "job/b" not in row

    def test_in_progress_has_no_dependencies(self):
        """Test that unblocked resources list no dependencies."""
        report = NodeReport.model_validate(
            {"blocked": False, "dependencies": [{"dependency": "svc/a", "blocks": True}]}
        )

        row = format_missing_row(missing("Pod", "web", "pods"), report)

        assert row == "pods\t\tweb\t\tINPROGRESS\t\n"

    def test_blocked_without_blocking_dependencies(self):
        """Test a blocked node whose dependencies are all informational."""
        report = NodeReport(blocked=True)

        assert format_missing_row(missing("Job", "j", "jobs"), report) == "jobs\t\tj\t\tWAITING_FOR:\t\n"


class TestDependencyDiagnoser:
    """Test cases for DependencyDiagnoser."""

    def test_diagnose(self, mock_namespaced_client, sample_graph):
        """Test the MISSING section for blocked and in-progress resources."""
        client_factory = MagicMock(return_value=mock_namespaced_client)
        graph_builder = MagicMock(return_value=sample_graph)
        diagnoser = DependencyDiagnoser(client_factory, graph_builder)
        out = io.StringIO()

        diagnoser.diagnose(
            "default",
            [missing("Service", "web", "services"), missing("Pod", "b", "pods")],
            out,
        )

        client_factory.assert_called_once_with("default")
        graph_builder.assert_called_once()
        client, selector = graph_builder.call_args.args
        assert client is mock_namespaced_client
        assert isinstance(selector, LabelSelector)
        assert selector.empty()

        assert out.getvalue() == (
            MISSING_HEADER
            + "services\t\tweb\t\tINPROGRESS\t\n"
            + "pods\t\tb\t\tWAITING_FOR: svc/c,\t\n"
        )
        assert sample_graph["pod/b"].requested_keys == ["pod/b"]

    def test_unknown_key_is_skipped(self, sample_graph):
        """Test that resources absent from the graph produce no row."""
        diagnoser = DependencyDiagnoser(MagicMock(), MagicMock(return_value=sample_graph))
        out = io.StringIO()

        diagnoser.diagnose("default", [missing("ConfigMap", "settings", "configmaps")], out)

        assert out.getvalue() == MISSING_HEADER

    def test_key_is_lowercase_kind(self):
        """Test that graph lookups use lowercase kind."""
        node = FakeScheduledResource(blocked=False)
        diagnoser = DependencyDiagnoser(MagicMock(), MagicMock(return_value={"statefulset/db": node}))
        out = io.StringIO()

        diagnoser.diagnose("default", [missing("StatefulSet", "db", "statefulsets")], out)

        assert node.requested_keys == ["statefulset/db"]
        assert out.getvalue().endswith("statefulsets\t\tdb\t\tINPROGRESS\t\n")

    def test_selector_is_passed_to_graph_builder(self):
        """Test that the configured selector reaches the graph builder."""
        graph_builder = MagicMock(return_value={})
        diagnoser = DependencyDiagnoser(MagicMock(), graph_builder, label_selector="release=web")

        diagnoser.diagnose("default", [missing("Pod", "a", "pods")], io.StringIO())

        selector = graph_builder.call_args.args[1]
        assert selector.matches({"release": "web"})
        assert not selector.matches({"release": "api"})

    def test_client_construction_failure(self):
        """Test that client construction errors are fatal."""
        client_factory = MagicMock(side_effect=RuntimeError("no credentials"))
        diagnoser = DependencyDiagnoser(client_factory, MagicMock())

        with pytest.raises(ClientConstructionError, match="couldn't create namespaced client"):
            diagnoser.diagnose("default", [missing("Pod", "a", "pods")], io.StringIO())

    def test_selector_parse_failure(self):
        """Test that malformed selectors are fatal."""
        graph_builder = MagicMock()
        diagnoser = DependencyDiagnoser(MagicMock(), graph_builder, label_selector="a in (")

        with pytest.raises(SelectorParseError):
            diagnoser.diagnose("default", [missing("Pod", "a", "pods")], io.StringIO())

        graph_builder.assert_not_called()

    def test_graph_construction_failure(self):
        """Test that graph construction errors are fatal."""
        graph_builder = MagicMock(side_effect=RuntimeError("api unavailable"))
        diagnoser = DependencyDiagnoser(MagicMock(), graph_builder)
        out = io.StringIO()

        with pytest.raises(DependencyGraphError, match="couldn't create a dependency graph"):
            diagnoser.diagnose("default", [missing("Pod", "a", "pods")], out)

        assert out.getvalue() == ""
