"""Ingestion commands."""

import click

WINDOW_CHOICES = ["none", "hann", "hamming", "blackman"]


@click.group()
def ingest() -> None:
    """Ingest sample files into the database."""
    pass


@ingest.command("file")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", "display_name", default=None, help="Display name (default: file name without extension)")
@click.option("--sample-rate", type=int, default=None, help="Sample rate in Hz (default: [ingest].default_sample_rate)")
@click.option(
    "--auto-detect/--no-auto-detect",
    "auto_detect",
    default=None,
    help="Detect the sample rate from the time column",
)
@click.option("--window", type=click.Choice(WINDOW_CHOICES), default=None, help="Window function")
@click.option("--user", "created_by", default=None, help="Record the ingestion as this user")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def ingest_file(
    file: str,
    display_name: str,
    sample_rate: int,
    auto_detect: bool,
    window: str,
    created_by: str,
    output_format: str,
) -> None:
    """Ingest a single time- or frequency-domain sample file."""
    import json as json_lib

    from fftanalyzer.cli.progress import console, print_peaks, print_success, print_warning
    from fftanalyzer.cli.service_helpers import get_services, handle_result
    from fftanalyzer.core.formatting import format_amplitude, format_frequency

    result = get_services().ingestion_service.ingest(
        file,
        display_name=display_name,
        sample_rate=sample_rate,
        auto_detect_rate=auto_detect,
        window=window,
        created_by=created_by,
    )
    ingested = handle_result(result)

    if output_format == "json":
        click.echo(json_lib.dumps(result.to_dict(), indent=2))
        return

    for warning in result.warnings:
        print_warning(warning)

    print_success(result.message)
    console.print(f"  Record:      {ingested.record_id}")
    console.print(f"  Data:        {ingested.data_type.value} ({ingested.sample_count} points)")
    console.print(f"  Sample rate: {ingested.sample_rate} Hz")
    top = ingested.top_peak
    if top is not None:
        console.print(f"  Top peak:    {format_frequency(top.frequency)} @ {format_amplitude(top.amplitude)}")
    if ingested.finalized:
        console.print(f"  Stored as:   {ingested.final_path}")
    else:
        console.print(f"  [yellow]Staged file kept at {ingested.staged_path}[/yellow]")

    print_peaks("Peaks", ingested.peaks)


@ingest.command("batch")
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--pattern", default="*.csv", help="Glob pattern for sample files")
@click.option("--recursive", "-r", is_flag=True, help="Include subdirectories")
@click.option("--workers", type=int, default=None, help="Worker threads (default: [ingest].workers)")
@click.option("--sample-rate", type=int, default=None, help="Sample rate in Hz")
@click.option("--auto-detect/--no-auto-detect", "auto_detect", default=None)
@click.option("--window", type=click.Choice(WINDOW_CHOICES), default=None, help="Window function")
@click.option("--user", "created_by", default=None, help="Record the ingestion as this user")
@click.option("--quiet", "-q", is_flag=True, help="Hide the progress bar")
def ingest_batch(
    directory: str,
    pattern: str,
    recursive: bool,
    workers: int,
    sample_rate: int,
    auto_detect: bool,
    window: str,
    created_by: str,
    quiet: bool,
) -> None:
    """Ingest every matching file in DIRECTORY.

    Files are independent; a failed file is moved to the fail area and the
    batch continues.
    """
    from fftanalyzer.cli.progress import ProgressBar, print_error, print_summary
    from fftanalyzer.cli.service_helpers import get_services, handle_result

    service = get_services().ingestion_service

    with ProgressBar(description="Ingesting", disable=quiet) as bar:
        def on_progress(progress) -> None:
            bar.set_total(progress.total)
            bar.update(completed=progress.completed)

        service.set_progress_callback(on_progress)
        try:
            result = service.ingest_directory(
                directory,
                pattern=pattern,
                workers=workers,
                recursive=recursive,
                sample_rate=sample_rate,
                auto_detect_rate=auto_detect,
                window=window,
                created_by=created_by,
            )
        finally:
            service.set_progress_callback(None)

    batch = handle_result(result)

    for path, error in sorted(batch.errors.items()):
        print_error(f"{path}: {error}")

    print_summary(
        "Batch ingest",
        {
            "Files": batch.total_files,
            "Succeeded": batch.successful,
            "Failed": batch.failed,
            "Not finalized": batch.not_finalized,
        },
        style="green" if batch.failed == 0 else "yellow",
    )

    if batch.failed:
        raise SystemExit(1)


@ingest.command("finalize")
@click.argument("record_id", type=click.UUID)
@click.argument("staged_path", type=click.Path(exists=True, dir_okay=False))
def ingest_finalize(record_id, staged_path: str) -> None:
    """Retry moving a staged file of a committed record to the success area."""
    from fftanalyzer.cli.progress import print_success
    from fftanalyzer.cli.service_helpers import get_services, handle_result

    handle_result(get_services().ingestion_service.finalize(record_id, staged_path))
    print_success(f"Finalized record {record_id}")
