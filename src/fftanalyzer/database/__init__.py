# database/__init__.py
"""
fftanalyzer Database Layer
==========================

SQLModel-based database layer with Unit of Work pattern.

Components:
    - DatabaseConnection: Engine management
    - BaseRepository: Generic CRUD operations
    - UnitOfWork: Transaction management with repository access
    - Models: Record, Sample

Usage:
    from fftanalyzer.database import DatabaseConnection, UnitOfWork
    from fftanalyzer.database.models import RecordCreate

    db = DatabaseConnection("sqlite:///fftanalyzer.db")
    db.create_tables()

    with UnitOfWork(db).auto_commit() as uow:
        record = uow.records.create(RecordCreate(
            display_name="Pump vibration",
            source_filename="pump.csv",
            sample_rate=25600,
        ))
        uow.samples.bulk_insert(record.id, frequencies, amplitudes)
"""

from .connection import DatabaseConnection
from .models import Record, RecordCreate, RecordStatus, RecordUpdate, Sample
from .repositories import RecordRepository, SampleRepository
from .repository import BaseRepository
from .unit_of_work import UnitOfWork

__all__ = [
    # Connection
    "DatabaseConnection",
    # Base
    "BaseRepository",
    "UnitOfWork",
    # Models
    "Record",
    "RecordCreate",
    "RecordStatus",
    "RecordUpdate",
    "Sample",
    # Repositories
    "RecordRepository",
    "SampleRepository",
]
