"""CLI command modules for fftanalyzer."""

from .config import config
from .db import db
from .ingest import ingest
from .records import records
from .spectrum import spectrum

__all__ = [
    "config",
    "db",
    "ingest",
    "records",
    "spectrum",
]
