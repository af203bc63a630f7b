# database/repositories/__init__.py
"""Concrete repository implementations."""
from .record import RecordRepository
from .sample import SampleRepository

__all__ = [
    "RecordRepository",
    "SampleRepository",
]
