"""Commands for persisted records."""

import click


@click.group()
def records() -> None:
    """List, search, inspect, export and maintain records."""
    pass


def _record_rows(items):
    from fftanalyzer.core.formatting import format_amplitude, format_frequency

    return [
        [
            str(r.id),
            r.display_name,
            r.source_filename,
            r.sample_rate,
            r.sample_count,
            format_frequency(r.peak_frequency) if r.peak_frequency is not None else "-",
            format_amplitude(r.peak_amplitude) if r.peak_amplitude is not None else "-",
            r.status.value,
            r.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        ]
        for r in items
    ]


RECORD_COLUMNS = ["ID", "Name", "File", "Rate (Hz)", "Samples", "Peak", "Peak amp.", "Status", "Created (UTC)"]


def _print_records(title: str, items, output_format: str) -> None:
    import json as json_lib

    from fftanalyzer.cli.progress import print_table, print_warning
    from fftanalyzer.services.records import record_to_dict

    if output_format == "json":
        click.echo(json_lib.dumps([record_to_dict(r) for r in items], indent=2))
        return
    if not items:
        print_warning("No records found")
        return
    print_table(title, RECORD_COLUMNS, _record_rows(items))


FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)


@records.command("list")
@click.option("--limit", type=int, default=50, help="Maximum records to show")
@FORMAT_OPTION
def records_list(limit: int, output_format: str) -> None:
    """List records, newest first."""
    from fftanalyzer.cli.service_helpers import get_services, handle_result

    items = handle_result(get_services().record_service.list(limit=limit))
    _print_records("Records", items, output_format)


@records.command("search")
@click.argument("term", required=False)
@click.option("--from", "start", type=click.DateTime(), default=None, help="Created on or after (UTC)")
@click.option("--to", "end", type=click.DateTime(), default=None, help="Created on or before (UTC)")
@click.option("--limit", type=int, default=None, help="Maximum records to show")
@FORMAT_OPTION
def records_search(term: str, start, end, limit: int, output_format: str) -> None:
    """Search records by name or file name (case-insensitive) and date range."""
    from fftanalyzer.cli.service_helpers import get_services, handle_result
    from fftanalyzer.core.utils import as_utc

    # click.DateTime yields naive values; the options are documented as UTC
    start = as_utc(start) if start else None
    end = as_utc(end) if end else None

    items = handle_result(
        get_services().record_service.search(term=term, start=start, end=end, limit=limit)
    )
    _print_records(f"Records matching '{term or ''}'", items, output_format)


@records.command("show")
@click.argument("record_id", type=click.UUID)
@FORMAT_OPTION
def records_show(record_id, output_format: str) -> None:
    """Show one record."""
    import json as json_lib

    from fftanalyzer.cli.progress import console
    from fftanalyzer.cli.service_helpers import get_services, handle_result
    from fftanalyzer.services.records import record_to_dict

    services = get_services()
    record = handle_result(services.record_service.get(record_id))
    stored = handle_result(services.record_service.sample_count(record_id))

    if output_format == "json":
        data = record_to_dict(record)
        data["stored_samples"] = stored
        click.echo(json_lib.dumps(data, indent=2))
        return

    rows = _record_rows([record])[0]
    console.print()
    for label, value in zip(RECORD_COLUMNS, rows):
        console.print(f"  [bold]{label}:[/bold] {value}")
    console.print(f"  [bold]Created by:[/bold] {record.created_by or '-'}")
    console.print(f"  [bold]Stored samples:[/bold] {stored}")
    if record.notes:
        console.print(f"  [bold]Notes:[/bold] {record.notes}")
    console.print()


@records.command("peaks")
@click.argument("record_id", type=click.UUID)
@click.option("--top-n", type=int, default=10, help="Number of peaks")
def records_peaks(record_id, top_n: int) -> None:
    """Detect peaks over the stored samples of a record."""
    from fftanalyzer.cli.progress import print_peaks
    from fftanalyzer.cli.service_helpers import get_services, handle_result

    peaks = handle_result(get_services().record_service.find_peaks(record_id, top_n=top_n))
    print_peaks(f"Peaks of {record_id}", peaks)


@records.command("export")
@click.argument("record_id", type=click.UUID)
@click.argument("output", type=click.Path(dir_okay=False))
def records_export(record_id, output: str) -> None:
    """Export the stored samples of a record as FrequencyHz,Amplitude CSV."""
    from fftanalyzer.cli.progress import print_success
    from fftanalyzer.cli.service_helpers import get_services, handle_result

    result = get_services().record_service.export_csv(record_id, output)
    handle_result(result)
    print_success(result.message)


@records.command("update")
@click.argument("record_id", type=click.UUID)
@click.option("--name", "display_name", default=None, help="New display name")
@click.option("--notes", default=None, help="New notes")
def records_update(record_id, display_name: str, notes: str) -> None:
    """Update the display name or notes of a record."""
    from fftanalyzer.cli.progress import print_success
    from fftanalyzer.cli.service_helpers import get_services, handle_result

    handle_result(
        get_services().record_service.update(record_id, display_name=display_name, notes=notes)
    )
    print_success(f"Updated record {record_id}")


@records.command("delete")
@click.argument("record_id", type=click.UUID)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
def records_delete(record_id, yes: bool) -> None:
    """Delete a record and its samples."""
    from fftanalyzer.cli.progress import print_success
    from fftanalyzer.cli.service_helpers import get_services, handle_result

    if not yes and not click.confirm(f"Delete record {record_id}?", default=False):
        click.echo("Aborted.")
        return

    handle_result(get_services().record_service.delete(record_id))
    print_success(f"Deleted record {record_id}")
