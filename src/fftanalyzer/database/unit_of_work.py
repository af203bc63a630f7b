# database/unit_of_work.py
"""Unit of Work pattern implementation for the fftanalyzer database layer."""
from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlmodel import Session

from .connection import DatabaseConnection
from .repositories import RecordRepository, SampleRepository

if TYPE_CHECKING:
    from typing import Generator


class UnitOfWork:
    """
    Unit of Work pattern implementation.

    Manages database transactions and provides access to repositories.
    Ensures all operations within a unit are committed or rolled back together.

    Usage:
        with UnitOfWork(db) as uow:
            record = uow.records.create(record_data)
            uow.samples.bulk_insert(record.id, freqs, amps)
            uow.commit()

    Or as a context manager that auto-commits:
        with UnitOfWork(db).auto_commit() as uow:
            record = uow.records.create(record_data)
            # Automatically committed on exit
    """

    def __init__(self, database: DatabaseConnection):
        self._database = database
        self._session: Session | None = None

        # Repository instances (lazily initialized)
        self._records: RecordRepository | None = None
        self._samples: SampleRepository | None = None

    @property
    def session(self) -> Session:
        """Get the current session."""
        if self._session is None:
            raise RuntimeError("UnitOfWork not started. Use 'with' statement.")
        return self._session

    @property
    def records(self) -> RecordRepository:
        """Record repository instance."""
        if self._records is None:
            self._records = RecordRepository(self.session)
        return self._records

    @property
    def samples(self) -> SampleRepository:
        """Sample repository instance."""
        if self._samples is None:
            self._samples = SampleRepository(self.session)
        return self._samples

    def __enter__(self) -> UnitOfWork:
        """Start the unit of work."""
        self._session = Session(self._database.engine, expire_on_commit=False)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """End the unit of work, rolling back if there was an exception."""
        if exc_type is not None:
            self.rollback()
        self.close()

    def commit(self) -> None:
        """Commit the current transaction."""
        self.session.commit()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.session.rollback()

    def close(self) -> None:
        """Close the session."""
        if self._session is not None:
            self._session.close()
            self._session = None
            self._records = None
            self._samples = None

    @contextmanager
    def auto_commit(self) -> Generator[UnitOfWork, None, None]:
        """
        Context manager that auto-commits on successful exit.

        Usage:
            with UnitOfWork(db).auto_commit() as uow:
                uow.records.create(...)
                # Auto-committed here
        """
        self._session = Session(self._database.engine, expire_on_commit=False)
        try:
            yield self
            self.commit()
        except Exception:
            self.rollback()
            raise
        finally:
            self.close()
