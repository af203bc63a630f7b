"""
fftanalyzer CLI - Spectrum ingestion and analysis
"""

import click

from fftanalyzer import __version__

from .commands import config, db, ingest, records, spectrum
from .service_helpers import CliState


@click.group()
@click.version_option(version=__version__, prog_name="fftanalyzer")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (default: ./fftanalyzer.toml or ~/.config/fftanalyzer/config.toml)",
)
@click.option("--database", "database_url", default=None, help="Database URL, overrides [database].url")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str, database_url: str, verbose: bool) -> None:
    """fftanalyzer - Ingest sample files, compute spectra and find peaks

    Use 'fftanalyzer COMMAND --help' for more information on a command.
    """
    if ctx.obj is None:
        ctx.obj = CliState.from_options(config_path, database_url, verbose)
    ctx.call_on_close(ctx.obj.close)


# Register command groups
cli.add_command(config)
cli.add_command(db)
cli.add_command(ingest)
cli.add_command(records)
cli.add_command(spectrum)


if __name__ == "__main__":
    cli()
