"""CLI interface for Quantive Export.

This module provides the Typer-based command-line interface for checking
configuration and exploring the Quantive Results API.
"""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

import typer
from rich.table import Table

from quantive_export import SCRIPT_NAME
from quantive_export.config.manager import ConfigManager
from quantive_export.config.settings import (
    ACCOUNT_ID_KEY,
    API_TOKEN_KEY,
    CONFIG_FILE,
    CONFIG_KEYS,
    ENVIRONMENT_DEFAULTS,
    QuantiveConfig,
)
from quantive_export.config.store import FilePropertyStore
from quantive_export.integrations.quantive import QuantiveApiClient
from quantive_export.utils.console import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
    show_version,
)
from quantive_export.utils.errors import ExitCode, QuantiveExportError
from quantive_export.utils.logging import apply_log_level, setup_logging

app = typer.Typer(
    name=SCRIPT_NAME,
    help="Quantive Export - OKR reporting from the Quantive Results API",
    add_completion=False,
    no_args_is_help=True,
)
config_app = typer.Typer(help="Show or change stored configuration", no_args_is_help=True)
app.add_typer(config_app, name="config")


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        show_version()
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Quantive Export command-line interface."""
    setup_logging()


def _create_manager() -> ConfigManager:
    """Build a ConfigManager over the config file with environment overrides."""
    return ConfigManager(FilePropertyStore(CONFIG_FILE, environ=os.environ))


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Translate application errors into exit codes."""
    try:
        yield
    except QuantiveExportError as e:
        print_error(str(e))
        raise typer.Exit(e.exit_code) from e
    except KeyboardInterrupt as e:
        print_info("\nOperation cancelled by user")
        raise typer.Exit(ExitCode.USER_CANCELLED) from e


def _is_known_key(key: str) -> bool:
    """Check for a documented key or an environment-qualified setting."""
    if key in CONFIG_KEYS:
        return True
    environment, _, name = key.partition("_")
    return name in ENVIRONMENT_DEFAULTS.get(environment.lower(), {})


def _load_api_config(manager: ConfigManager) -> QuantiveConfig:
    """Validate credentials and return the unresolved configuration."""
    manager.validate_api_token(manager.get_property(API_TOKEN_KEY, ""))
    manager.validate_account_id(manager.get_property(ACCOUNT_ID_KEY, ""))
    config = manager.get_config(resolve_session=False)
    apply_log_level(config.log_level)
    return config


@config_app.command("show")
def config_show() -> None:
    """Display the stored configuration (secrets masked)."""
    with _handle_errors():
        _create_manager().show()


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Property key, e.g. SESSION_ID")],
    value: Annotated[str, typer.Argument(help="Property value")],
) -> None:
    """Persist a configuration property."""
    manager = _create_manager()
    try:
        manager.set_property(key, value)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.CONFIG_ERROR) from e
    print_success(f"Saved {key}")
    if not _is_known_key(key):
        print_warning(f"{key} is not a recognized setting")


@app.command()
def validate() -> None:
    """Validate the API token, account ID and session ID."""
    with _handle_errors():
        manager = _create_manager()
        manager.validate_config()
        config = manager.get_config()
        print_success(
            f"Configuration is valid (environment: {config.environment}, "
            f"session: {config.session_id})"
        )


@app.command()
def sessions() -> None:
    """List the sessions visible to the configured account."""
    with _handle_errors():
        config = _load_api_config(_create_manager())
        with QuantiveApiClient.from_config(config) as client:
            result = client.get_sessions()

        if not isinstance(result, list) or not result:
            print_info("No sessions returned")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("ID")
        table.add_column("Name")
        for session in result:
            if isinstance(session, dict):
                table.add_row(str(session.get("id", "")), str(session.get("name", "")))
        console.print(table)


@app.command()
def resolve(
    identifier: Annotated[str, typer.Argument(help="Session name or UUID")],
) -> None:
    """Print the session UUID for a session name or UUID."""
    with _handle_errors():
        session_id = _create_manager().resolve_session_id(identifier)
        console.print(session_id)


@app.command("test-connection")
def test_connection() -> None:
    """Check that the configured credentials can reach the API."""
    with _handle_errors():
        config = _load_api_config(_create_manager())
        with QuantiveApiClient.from_config(config) as client:
            result = client.get_sessions()
        count = len(result) if isinstance(result, list) else 0
        print_success(f"Connected to Quantive API ({count} sessions available)")


__all__ = ["app", "main"]
