"""Tests for the diagnostic CLI."""

import pytest
from typer.testing import CliRunner

import flexconnect.config
from flexconnect.cli import app
from flexconnect.config import FlexServiceDeclaration

runner = CliRunner()


@pytest.fixture
def configured_services(monkeypatch):
    """Configure two remote services for the CLI."""
    services = [
        FlexServiceDeclaration(connector="LrepConnector", url="/sap/bc/lrep"),
        FlexServiceDeclaration(connector="KeyUserConnector", layers=["CUSTOMER", "USER"]),
    ]
    monkeypatch.setattr(flexconnect.config.config, "flex_services", services)
    return services


class TestConnectorsCommand:
    """Tests for `flexconnect connectors`."""

    def test_lists_apply_connectors(self, configured_services):
        """Apply connectors are listed with the static file connector first."""
        result = runner.invoke(app, ["connectors"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "Namespace: flexconnect/apply/connectors/"
        assert lines[1] == "1. StaticFileConnector [ALL] (StaticFileConnector)"
        assert lines[2] == "2. LrepConnector [ALL] (LrepConnector)"
        assert lines[3] == "   url: /sap/bc/lrep"
        assert lines[4] == "3. KeyUserConnector [CUSTOMER] (KeyUserConnector)"

    def test_write_without_static(self, configured_services):
        """--write resolves the write namespace without static files."""
        result = runner.invoke(app, ["connectors", "--write"])

        assert result.exit_code == 0
        assert "flexconnect/write/connectors/" in result.output
        assert "StaticFileConnector" not in result.output

    def test_write_ignores_static_flag(self, configured_services):
        """--write never loads the static file connector, even with --static."""
        result = runner.invoke(app, ["connectors", "--write", "--static"])

        assert result.exit_code == 0
        assert "StaticFileConnector" not in result.output
        assert "1. LrepConnector" in result.output

    def test_no_static(self, configured_services):
        """--no-static drops the static file connector."""
        result = runner.invoke(app, ["connectors", "--no-static"])

        assert result.exit_code == 0
        assert "StaticFileConnector" not in result.output
        assert "1. LrepConnector" in result.output

    def test_unknown_connector(self, monkeypatch):
        """Unloadable connectors exit with an error."""
        monkeypatch.setattr(
            flexconnect.config.config,
            "flex_services",
            [FlexServiceDeclaration(connector="MissingConnector")],
        )

        result = runner.invoke(app, ["connectors"])

        assert result.exit_code == 1
        assert "MissingConnector" in result.output


class TestUrlCommand:
    """Tests for `flexconnect url`."""

    def test_full_url(self):
        """All parts are combined in order."""
        result = runner.invoke(
            app,
            ["url", "/flex/data/", "--base", "https://h", "-r", "my.app", "-c", "abc", "-p", "appVersion=1.0.0"],
        )

        assert result.exit_code == 0
        assert result.output.strip() == "https://h/flex/data/~abc~/my.app?appVersion=1.0.0"

    def test_missing_base(self):
        """A missing base url is reported."""
        result = runner.invoke(app, ["url", "/flex/data/"])

        assert result.exit_code == 1
        assert "Not all necessary parameters were passed" in result.output

    def test_malformed_parameter(self):
        """Parameters must be key=value."""
        result = runner.invoke(app, ["url", "/flex/data/", "--base", "https://h", "-p", "broken"])

        assert result.exit_code == 1
        assert "key=value" in result.output
