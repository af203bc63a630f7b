"""Configuration commands."""

import click


@click.group()
def config() -> None:
    """Configuration and file-area commands."""
    pass


@config.command("show")
def config_show() -> None:
    """Show current configuration."""
    from fftanalyzer.cli.progress import console
    from fftanalyzer.cli.service_helpers import get_state

    app_config = get_state().config

    console.print("\n[bold]Current Configuration[/bold]")
    if app_config.source:
        console.print(f"[dim]Source: {app_config.source}[/dim]\n")
    else:
        console.print("[dim]Source: defaults (no config file found)[/dim]\n")

    for section_name, section in app_config.to_dict().items():
        console.print(f"[bold blue]\\[{section_name}][/bold blue]")
        for key, value in section.items():
            console.print(f"  {key} = {value}")
        console.print()


@config.command("paths")
def config_paths() -> None:
    """Show configuration file search paths."""
    from pathlib import Path

    from fftanalyzer.cli.progress import console
    from fftanalyzer.cli.service_helpers import get_state
    from fftanalyzer.core.config import get_config_locations

    source = get_state().config.source
    active = Path(source).resolve() if source else None
    locations = get_config_locations()

    console.print("\n[bold]Configuration File Search Paths[/bold]\n")
    console.print("Files are searched in order (first found wins):\n")

    for i, location in enumerate(locations, 1):
        if active is not None and location.resolve() == active:
            status = "[green]✓ ACTIVE[/green]"
        else:
            status = "[dim]exists[/dim]" if location.exists() else "[dim]not found[/dim]"
        console.print(f"  {i}. {location} {status}")

    if active is not None and active not in [loc.resolve() for loc in locations]:
        console.print(f"\n  --config {source} [green]✓ ACTIVE[/green]")

    console.print()


@config.command("purge")
@click.option("--days", type=int, default=None, help="Retention in days (default: [ingest].retention_days)")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
def config_purge(days: int, yes: bool) -> None:
    """Delete success and fail area files older than the retention period.

    Examples:
        fftanalyzer config purge
        fftanalyzer config purge --days 7 -y
    """
    from fftanalyzer.cli.progress import print_success
    from fftanalyzer.cli.service_helpers import exit_with_error, get_services, get_state
    from fftanalyzer.core.exceptions import InvalidInputError

    state = get_state()
    retention = state.config.ingest.retention_days if days is None else days

    if not yes and not click.confirm(
        f"Delete processed files older than {retention} days?", default=False
    ):
        click.echo("Aborted.")
        return

    try:
        deleted = get_services().file_area_service.purge_expired(retention)
    except InvalidInputError as e:
        exit_with_error(str(e))

    print_success(f"Purged {deleted} files")
