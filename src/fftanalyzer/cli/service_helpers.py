"""
CLI Service Helpers
===================

CLI-specific utilities for working with services and the ServiceFactory.

Each CLI invocation builds one CliState from its global options and stores
it on the click context. Commands reach services through it:

    from fftanalyzer.cli.service_helpers import get_services, handle_result

    factory = get_services()
    record = handle_result(factory.record_service.get(record_id))
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, TypeVar

import click

from fftanalyzer.core.config import AppConfig, load_config
from fftanalyzer.core.logger import set_level

if TYPE_CHECKING:
    from fftanalyzer.services import ServiceFactory
    from fftanalyzer.services.base import ServiceResult

# Type variable for generic result handling
T = TypeVar("T")


@dataclass
class CliState:
    """Configuration and lazily built services of one CLI invocation."""

    config: AppConfig
    verbose: bool = False
    factory: "Optional[ServiceFactory]" = None

    @classmethod
    def from_options(
        cls,
        config_path: Optional[str] = None,
        database_url: Optional[str] = None,
        verbose: bool = False,
    ) -> "CliState":
        """Load configuration and apply the global command-line overrides."""
        app_config = load_config(config_path)
        if database_url:
            app_config = app_config.with_overrides("database", url=database_url)

        try:
            set_level("DEBUG" if verbose else app_config.logging.level)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="[logging].level") from e

        return cls(config=app_config, verbose=verbose)

    def services(self) -> "ServiceFactory":
        """Get the factory, creating tables and file areas on first use."""
        if self.factory is None:
            # Keep database imports out of commands that never touch it
            from fftanalyzer.services import ServiceFactory

            self.factory = ServiceFactory(self.config)
            self.factory.initialize()
        return self.factory

    def close(self) -> None:
        if self.factory is not None:
            self.factory.close()


def get_state(ctx: Optional[click.Context] = None) -> CliState:
    """Get the CliState of the current invocation."""
    ctx = ctx or click.get_current_context()
    state = ctx.find_object(CliState)
    if state is None:
        raise click.UsageError("CLI state not initialized")
    return state


def get_services(ctx: Optional[click.Context] = None) -> "ServiceFactory":
    """Get the ServiceFactory of the current invocation."""
    return get_state(ctx).services()


# ============================================================================
# Result Handling Utilities
# ============================================================================


def handle_result(result: "ServiceResult[T]") -> T:
    """
    Handle a service result, exiting with error if failed.

    Args:
        result: Service result to handle

    Returns:
        The result data if successful

    Raises:
        SystemExit: If result indicates failure (exits with code 1)
    """
    if not result.success:
        for warning in result.warnings:
            click.echo(f"Warning: {warning}", err=True)
        exit_with_error(result.error or "Unknown error")
    return result.data


def exit_with_error(message: str, code: int = 1) -> None:
    """
    Print error message and exit.

    Raises:
        SystemExit: Always exits with specified code
    """
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(code)


__all__ = [
    "CliState",
    "exit_with_error",
    "get_services",
    "get_state",
    "handle_result",
]
