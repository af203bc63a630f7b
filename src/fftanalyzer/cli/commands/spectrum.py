"""Spectrum computation without persistence."""

import click

from .ingest import WINDOW_CHOICES


@click.group()
def spectrum() -> None:
    """Compute spectra of sample files without storing them."""
    pass


@spectrum.command("compute")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--sample-rate", type=int, default=None, help="Sample rate in Hz")
@click.option("--auto-detect/--no-auto-detect", "auto_detect", default=None)
@click.option("--window", type=click.Choice(WINDOW_CHOICES), default=None, help="Window function")
@click.option("--length", "transform_length", type=int, default=None, help="Transform length (raised to the next power of two)")
@click.option("--log-scale/--linear", "log_scale", default=None, help="Amplitudes in dB or linear magnitude")
@click.option("--top-n", type=int, default=None, help="Number of peaks to report")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    help="Output format",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the spectrum as CSV to this file")
def spectrum_compute(
    file: str,
    sample_rate: int,
    auto_detect: bool,
    window: str,
    transform_length: int,
    log_scale: bool,
    top_n: int,
    output_format: str,
    output: str,
) -> None:
    """Compute the single-sided spectrum of a time-domain FILE."""
    import json as json_lib

    from fftanalyzer.cli.progress import console, print_peaks, print_success, print_warning
    from fftanalyzer.cli.service_helpers import exit_with_error, get_services, handle_result
    from fftanalyzer.core.exceptions import FftAnalyzerError
    from fftanalyzer.core.export import format_spectrum_csv
    from fftanalyzer.core.formatting import format_frequency

    services = get_services()
    result = services.spectrum_service.compute_file(
        file,
        sample_rate=sample_rate,
        auto_detect_rate=auto_detect,
        window=window,
        transform_length=transform_length,
        log_scale=log_scale,
        top_n=top_n,
    )
    computed = handle_result(result)
    spec = computed.spectrum

    if output:
        try:
            services.file_area_service.export_csv(output, spec.frequencies, spec.amplitudes)
        except FftAnalyzerError as e:
            exit_with_error(str(e))

    if output_format == "json":
        click.echo(json_lib.dumps(computed.to_dict(), indent=2))
        return
    if output_format == "csv":
        click.echo(format_spectrum_csv(spec.frequencies, spec.amplitudes), nl=False)
        return

    for warning in result.warnings:
        print_warning(warning)

    console.print(f"\n[bold]{file}[/bold]")
    console.print(f"  Samples:     {spec.sample_count}")
    console.print(f"  Sample rate: {spec.sample_rate} Hz")
    console.print(f"  Window:      {spec.window.value}")
    console.print(f"  Length (N):  {spec.transform_length}")
    console.print(f"  Resolution:  {format_frequency(spec.resolution)}")
    print_peaks("Peaks", spec.peaks, log_scale=spec.log_scale)

    if output:
        print_success(f"Spectrum saved to {output}")
