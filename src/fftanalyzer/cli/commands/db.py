"""Database management commands."""

import click


@click.group()
def db() -> None:
    """Database management commands."""
    pass


@db.command("init")
def db_init() -> None:
    """Create database tables and the upload file areas."""
    from fftanalyzer.cli.progress import console, print_success
    from fftanalyzer.cli.service_helpers import exit_with_error, get_state
    from fftanalyzer.core.exceptions import FilesystemError

    state = get_state()
    try:
        state.services()
    except FilesystemError as e:
        exit_with_error(str(e))

    paths = state.config.paths
    print_success(f"Database ready: {state.config.database.url}")
    console.print(f"  staging: {paths.staging}")
    console.print(f"  success: {paths.success}")
    console.print(f"  fail:    {paths.fail}")


@db.command("stats")
def db_stats() -> None:
    """Show record counts by status and file-area usage."""
    from fftanalyzer.cli.progress import print_summary
    from fftanalyzer.cli.service_helpers import get_services, handle_result
    from fftanalyzer.core.formatting import format_file_size

    services = get_services()
    records = handle_result(services.record_service.list(limit=None))

    stats = {"Records": len(records)}
    for record in records:
        key = f"  {record.status.value}"
        stats[key] = stats.get(key, 0) + 1
    stats["Samples (parsed)"] = sum(r.sample_count for r in records)

    for area, (count, size) in services.file_area_service.area_usage().items():
        stats[f"Area {area}"] = f"{count} files, {format_file_size(size)}"

    print_summary("Database", stats)
