"""Tests for configuration handling."""

import json

import pytest

from flexconnect.config import Config, FlexServiceDeclaration, parse_flex_services
from flexconnect.connectors import ConfigurationError


class TestParseFlexServices:
    """Tests for parse_flex_services."""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty(self, raw):
        """Unset or blank configuration means no services."""
        assert parse_flex_services(raw) == []

    def test_declarations_in_order(self):
        """Declarations are parsed in configured order."""
        raw = json.dumps([
            {"connector": "LrepConnector", "url": "/sap/bc/lrep"},
            {"connector": "KeyUserConnector", "layers": ["CUSTOMER"], "url": "/keyuser"},
            {"connector": "my_pkg.connectors:Custom", "custom": True},
        ])

        services = parse_flex_services(raw)

        assert [s.connector for s in services] == ["LrepConnector", "KeyUserConnector", "my_pkg.connectors:Custom"]
        assert services[0].url == "/sap/bc/lrep"
        assert services[0].layers is None
        assert services[0].custom is False
        assert services[1].layers == ["CUSTOMER"]
        assert services[2].custom is True

    def test_layer_filter_alias(self):
        """layerFilter is accepted for layers."""
        services = parse_flex_services('[{"connector": "LrepConnector", "layerFilter": ["VENDOR"]}]')
        assert services[0].layers == ["VENDOR"]

    def test_unknown_keys_ignored(self):
        """Unknown declaration keys are ignored."""
        services = parse_flex_services('[{"connector": "LrepConnector", "path": "x"}]')
        assert services == [FlexServiceDeclaration(connector="LrepConnector")]

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            '{"connector": "LrepConnector"}',
            '[{"url": "/sap/bc/lrep"}]',
            '[{"connector": ""}]',
            '[{"connector": "LrepConnector", "layers": "CUSTOMER"}]',
        ],
    )
    def test_invalid(self, raw):
        """Invalid configuration raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            parse_flex_services(raw)


class TestConfig:
    """Tests for Config environment handling."""

    def test_defaults(self, monkeypatch):
        """Defaults apply without environment."""
        monkeypatch.delenv("FLEX_SERVICES", raising=False)
        monkeypatch.delenv("FLEX_STATIC_BUNDLE_DIR", raising=False)
        monkeypatch.delenv("FLEX_LOG_LEVEL", raising=False)

        config = Config()

        assert config.flex_services == []
        assert config.static_bundle_dir == config.project_root / "bundles"
        assert config.log_level == "INFO"

    def test_from_environment(self, monkeypatch, tmp_path):
        """Environment variables override defaults."""
        monkeypatch.setenv("FLEX_SERVICES", '[{"connector": "LrepConnector", "url": "/lrep"}]')
        monkeypatch.setenv("FLEX_STATIC_BUNDLE_DIR", str(tmp_path))
        monkeypatch.setenv("FLEX_LOG_LEVEL", "DEBUG")

        config = Config()

        assert config.flex_services[0].connector == "LrepConnector"
        assert config.flex_services[0].url == "/lrep"
        assert config.static_bundle_dir == tmp_path
        assert config.log_level == "DEBUG"

    def test_relative_bundle_dir(self, monkeypatch):
        """Relative bundle directories resolve against the project root."""
        monkeypatch.setenv("FLEX_STATIC_BUNDLE_DIR", "static/bundles")

        config = Config()

        assert config.static_bundle_dir == config.project_root / "static" / "bundles"

    def test_invalid_services(self, monkeypatch):
        """Broken FLEX_SERVICES fails loudly."""
        monkeypatch.setenv("FLEX_SERVICES", "[1, 2]")

        with pytest.raises(ConfigurationError):
            Config()
