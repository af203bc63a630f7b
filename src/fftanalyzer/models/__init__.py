"""Plain data models shared across the core, services and CLI."""

from fftanalyzer.models.base import ToDictMixin
from fftanalyzer.models.ingest import BatchIngestResult, IngestResult, IngestStage
from fftanalyzer.models.spectrum import (
    DataType,
    ParseResult,
    Peak,
    SampleSet,
    Spectrum,
    WindowType,
)

__all__ = [
    "BatchIngestResult",
    "DataType",
    "IngestResult",
    "IngestStage",
    "ParseResult",
    "Peak",
    "SampleSet",
    "Spectrum",
    "ToDictMixin",
    "WindowType",
]
