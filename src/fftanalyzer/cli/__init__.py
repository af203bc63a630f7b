"""Command-line interface for fftanalyzer."""

from .cli import cli

__all__ = ["cli"]
