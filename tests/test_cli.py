"""Tests for configuration and the command-line entry point."""

from unittest.mock import MagicMock, patch

import pytest

from sentinel_status import StatusSettings
from sentinel_status.cli import empty_graph, load_graph_builder, main


class TestStatusSettings:
    """Test cases for StatusSettings."""

    def test_defaults(self, monkeypatch):
        """Test default settings."""
        monkeypatch.delenv("SENTINEL_STATUS_LABEL_SELECTOR", raising=False)
        settings = StatusSettings(_env_file=None)

        assert settings.default_namespace == "default"
        assert settings.label_selector == ""
        assert settings.graph_builder is None
        assert settings.export is False

    def test_environment(self, monkeypatch):
        """Test settings read from prefixed environment variables."""
        monkeypatch.setenv("SENTINEL_STATUS_DEFAULT_NAMESPACE", "prod")
        monkeypatch.setenv("SENTINEL_STATUS_LABEL_SELECTOR", "release=web")
        monkeypatch.setenv("SENTINEL_STATUS_KUBECONFIG_PATH", "/tmp/kubeconfig")

        settings = StatusSettings(_env_file=None)

        assert settings.default_namespace == "prod"
        assert settings.label_selector == "release=web"
        assert settings.cluster_config().kubeconfig_path == "/tmp/kubeconfig"


class TestLoadGraphBuilder:
    """Test cases for load_graph_builder."""

    def test_default_is_empty_graph(self):
        """Test that no path yields the empty graph builder."""
        builder = load_graph_builder(None)

        assert builder is empty_graph
        assert builder(MagicMock(), MagicMock()) == {}

    def test_import_path(self):
        """Test importing a builder from module:attribute."""
        assert load_graph_builder("sentinel_status.cli:empty_graph") is empty_graph

    @pytest.mark.parametrize(
        "path",
        ["sentinel_status.cli", "no_such_module:build", "sentinel_status.cli:missing", "sentinel_status.cli:__doc__"],
    )
    def test_invalid_paths(self, path):
        """Test that bad import paths raise ValueError."""
        with pytest.raises(ValueError):
            load_graph_builder(path)


class TestMain:
    """Test cases for the CLI main function."""

    @patch("sentinel_status.cli.ManifestResourceBuilder")
    @patch("sentinel_status.cli.ClusterConnection")
    def test_prints_report(self, mock_connection_cls, mock_builder_cls, tmp_path, capsys):
        """Test a successful run prints the report."""
        manifest = tmp_path / "manifest.yaml"
        manifest.write_text("apiVersion: v1\nkind: Pod\nmetadata:\n  name: a\n")
        mock_builder_cls.return_value.build.return_value = []

        with patch("sentinel_status.cli.StatusReporter") as mock_reporter_cls:
            mock_reporter_cls.return_value.get_status.return_value = "==> v1/Pod\n"
            exit_code = main([str(manifest), "-n", "prod"])

        assert exit_code == 0
        assert capsys.readouterr().out == "==> v1/Pod\n"
        namespace = mock_reporter_cls.return_value.get_status.call_args.args[0]
        assert namespace == "prod"
        mock_connection_cls.return_value.__exit__.assert_called_once()

    @patch("sentinel_status.cli.ManifestResourceBuilder")
    @patch("sentinel_status.cli.ClusterConnection")
    def test_status_error_exits_nonzero(self, mock_connection_cls, mock_builder_cls, tmp_path):
        """Test that a failed run exits with status 1."""
        manifest = tmp_path / "manifest.yaml"
        manifest.write_text("---\n")
        mock_builder_cls.return_value.build.return_value = []

        assert main([str(manifest)]) == 1

    @patch("sentinel_status.cli.ClusterConnection")
    def test_missing_manifest_file(self, mock_connection_cls, tmp_path):
        """Test that an unreadable manifest path exits with status 1."""
        assert main([str(tmp_path / "absent.yaml")]) == 1

    def test_bad_graph_builder(self, tmp_path):
        """Test that an invalid graph builder exits with status 2."""
        assert main([str(tmp_path / "m.yaml"), "--graph-builder", "nope"]) == 2
