"""Tests for quantive_export.cli module."""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from quantive_export.cli import app
from quantive_export.integrations.exceptions import QuantiveAuthenticationError
from quantive_export.utils.errors import ExitCode

runner = CliRunner()

SESSION_UUID = "12345678-abcd-1234-efgh-123456789012"


@pytest.fixture
def configured(manager, store):
    """Manager holding valid credentials, patched into the CLI."""
    store.set_properties(
        {
            "QUANTIVE_API_TOKEN": "test-token-123",
            "QUANTIVE_ACCOUNT_ID": "test-account-456",
            "SESSION_ID": SESSION_UUID,
        }
    )
    with patch("quantive_export.cli._create_manager", return_value=manager):
        yield manager


@pytest.fixture
def unconfigured(manager):
    with patch("quantive_export.cli._create_manager", return_value=manager):
        yield manager


@pytest.fixture
def api_client_cls(mock_sessions):
    """Patched QuantiveApiClient class; yields the client used inside `with`."""
    with patch("quantive_export.cli.QuantiveApiClient") as mock_cls:
        client = MagicMock()
        client.get_sessions.return_value = mock_sessions
        mock_cls.from_config.return_value.__enter__.return_value = client
        yield mock_cls


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "2.0.0" in result.output


class TestValidate:
    """Tests for the validate command."""

    def test_valid_configuration(self, configured):
        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_missing_token(self, unconfigured):
        result = runner.invoke(app, ["validate"])

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "API token must be a non-empty string" in result.output

    def test_placeholder_account(self, configured, store):
        store.set_property("QUANTIVE_ACCOUNT_ID", "your-account-id-here")

        result = runner.invoke(app, ["validate"])

        assert result.exit_code == ExitCode.CONFIG_ERROR


class TestConfigCommands:
    """Tests for config show / config set."""

    def test_set_property(self, unconfigured, store):
        result = runner.invoke(app, ["config", "set", "LOOKBACK_DAYS", "14"])

        assert result.exit_code == 0
        assert "Saved LOOKBACK_DAYS" in result.output
        assert store.get_property("LOOKBACK_DAYS") == "14"

    def test_set_environment_qualified_key(self, unconfigured, store):
        result = runner.invoke(app, ["config", "set", "STAGING_MAX_RETRIES", "5"])

        assert result.exit_code == 0
        assert "not a recognized setting" not in result.output
        assert store.get_property("STAGING_MAX_RETRIES") == "5"

    def test_set_unknown_key_warns(self, unconfigured, store):
        result = runner.invoke(app, ["config", "set", "SESION_ID", "Q1"])

        assert result.exit_code == 0
        assert "SESION_ID is not a recognized setting" in result.output
        assert store.get_property("SESION_ID") == "Q1"

    def test_set_invalid_key(self, unconfigured, store):
        result = runner.invoke(app, ["config", "set", "bad key", "x"])

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert store.get_properties() == {}

    def test_show_masks_token(self, configured):
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "test-token-123" not in result.output
        assert "test-account-456" in result.output
        assert "Environment: production" in result.output


class TestResolve:
    """Tests for the resolve command."""

    def test_resolves_name(self, configured):
        result = runner.invoke(app, ["resolve", "Development Goals"])

        assert result.exit_code == 0
        assert "87654321-dcba-4321-hgfe-210987654321" in result.output

    def test_unknown_name(self, configured):
        result = runner.invoke(app, ["resolve", "Nonexistent"])

        assert result.exit_code == ExitCode.CONFIG_ERROR


class TestApiCommands:
    """Tests for sessions and test-connection."""

    def test_sessions_table(self, configured, api_client_cls):
        result = runner.invoke(app, ["sessions"])

        assert result.exit_code == 0
        assert "Q4 2024 OKRs" in result.output
        assert SESSION_UUID in result.output

    def test_sessions_empty(self, configured, api_client_cls):
        client = api_client_cls.from_config.return_value.__enter__.return_value
        client.get_sessions.return_value = []

        result = runner.invoke(app, ["sessions"])

        assert result.exit_code == 0
        assert "No sessions returned" in result.output

    def test_sessions_uses_config_settings(self, configured, store, api_client_cls):
        store.set_properties({"ENVIRONMENT": "development", "SESSION_ID": "Q4 2024 OKRs"})

        result = runner.invoke(app, ["sessions"])

        assert result.exit_code == 0
        config = api_client_cls.from_config.call_args.args[0]
        assert config.environment == "development"
        assert config.api_rate_limit_delay == 500
        assert config.session_id == "Q4 2024 OKRs"

    def test_test_connection(self, configured, api_client_cls):
        result = runner.invoke(app, ["test-connection"])

        assert result.exit_code == 0
        assert "Connected to Quantive API (4 sessions available)" in result.output

    def test_test_connection_requires_credentials(self, unconfigured, api_client_cls):
        result = runner.invoke(app, ["test-connection"])

        assert result.exit_code == ExitCode.CONFIG_ERROR
        api_client_cls.from_config.assert_not_called()

    def test_api_error_exit_code(self, configured, api_client_cls):
        client = api_client_cls.from_config.return_value.__enter__.return_value
        client.get_sessions.side_effect = QuantiveAuthenticationError(
            "Quantive API request failed with status 401", status_code=401
        )

        result = runner.invoke(app, ["test-connection"])

        assert result.exit_code == ExitCode.API_ERROR

    def test_invalid_retry_settings_use_defaults(self, configured, store, api_client_cls):
        store.set_properties({"PRODUCTION_MAX_RETRIES": "-1", "RETRY_DELAY": "soon"})

        result = runner.invoke(app, ["test-connection"])

        assert result.exit_code == 0
        config = api_client_cls.from_config.call_args.args[0]
        assert config.max_retries == 3
        assert config.retry_delay == 2000

    def test_interrupt_exit_code(self, configured, api_client_cls):
        client = api_client_cls.from_config.return_value.__enter__.return_value
        client.get_sessions.side_effect = KeyboardInterrupt

        result = runner.invoke(app, ["sessions"])

        assert result.exit_code == ExitCode.USER_CANCELLED
