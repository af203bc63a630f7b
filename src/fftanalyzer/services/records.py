# services/records.py
"""
Service for retrieving and maintaining persisted records.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

import numpy as np
from sqlalchemy.exc import SQLAlchemyError

from fftanalyzer.core.exceptions import FftAnalyzerError, PersistenceError
from fftanalyzer.core.logger import get_logger
from fftanalyzer.core.peaks import DEFAULT_TOP_N, find_peaks
from fftanalyzer.database import DatabaseConnection, Record, RecordUpdate, UnitOfWork
from fftanalyzer.models.spectrum import Peak

from .base import BaseService, ServiceResult
from .file_areas import FileAreaService

logger = get_logger(__name__)


@dataclass
class RecordSamples:
    """Persisted samples of a record in sample_index order."""

    record_id: UUID
    frequencies: np.ndarray
    amplitudes: np.ndarray

    def __len__(self) -> int:
        return len(self.frequencies)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "record_id": str(self.record_id),
            "frequencies": self.frequencies.tolist(),
            "amplitudes": self.amplitudes.tolist(),
        }


def record_to_dict(record: Record) -> Dict[str, Any]:
    """JSON-ready view of a record."""
    return record.model_dump(mode="json")


class RecordService(BaseService):
    """
    Service for record retrieval, search, update, delete and export.

    Every operation runs in its own UnitOfWork; returned records are detached
    from the session.
    """

    def __init__(self, database: DatabaseConnection, file_areas: FileAreaService) -> None:
        """Initialize the service.

        Args:
            database: Connection used to open units of work.
            file_areas: File-area service used for CSV export.
        """
        super().__init__(file_areas.file_repository)
        self.database = database
        self.file_areas = file_areas

    def _uow(self) -> UnitOfWork:
        return UnitOfWork(self.database)

    @staticmethod
    def _not_found(record_id: UUID) -> ServiceResult:
        return ServiceResult.fail(f"Record not found: {record_id}", error_type="NotFound")

    @staticmethod
    def _database_error(action: str, e: SQLAlchemyError) -> ServiceResult:
        logger.error(f"Failed to {action}: {e}")
        return ServiceResult.fail(f"Failed to {action}: {e}", error_type=PersistenceError.__name__)

    # =========================================================================
    # Read
    # =========================================================================

    def get(self, record_id: UUID) -> ServiceResult[Record]:
        """Get a record by id."""
        try:
            with self._uow() as uow:
                record = uow.records.get(record_id)
        except SQLAlchemyError as e:
            return self._database_error("load record", e)

        if record is None:
            return self._not_found(record_id)
        return ServiceResult.ok(data=record)

    def list(self, limit: Optional[int] = 100, skip: int = 0) -> ServiceResult[List[Record]]:
        """List records, newest first."""
        try:
            with self._uow() as uow:
                records = uow.records.list_recent(skip=skip, limit=limit)
        except SQLAlchemyError as e:
            return self._database_error("list records", e)

        return ServiceResult.ok(data=records, message=f"{len(records)} records")

    def search(
        self,
        term: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[Record]]:
        """
        Search records by name and creation time, newest first.

        Args:
            term: Case-insensitive substring of display name or source filename
            start: Earliest creation time (naive values are read as UTC)
            end: Latest creation time (naive values are read as UTC)
            limit: Maximum number of records
        """
        try:
            with self._uow() as uow:
                records = uow.records.search(term=term, start=start, end=end, limit=limit)
        except SQLAlchemyError as e:
            return self._database_error("search records", e)

        return ServiceResult.ok(data=records, message=f"{len(records)} records match")

    def sample_count(self, record_id: UUID) -> ServiceResult[int]:
        """Count persisted samples of a record."""
        try:
            with self._uow() as uow:
                if not uow.records.exists(record_id):
                    return self._not_found(record_id)
                count = uow.samples.count_by_record(record_id)
        except SQLAlchemyError as e:
            return self._database_error("count samples", e)

        return ServiceResult.ok(data=count)

    def get_samples(self, record_id: UUID) -> ServiceResult[RecordSamples]:
        """Load the persisted samples of a record in replay order."""
        try:
            with self._uow() as uow:
                if not uow.records.exists(record_id):
                    return self._not_found(record_id)
                frequencies, amplitudes = uow.samples.get_arrays(record_id)
        except SQLAlchemyError as e:
            return self._database_error("load samples", e)

        return ServiceResult.ok(
            data=RecordSamples(record_id=record_id, frequencies=frequencies, amplitudes=amplitudes)
        )

    def find_peaks(self, record_id: UUID, top_n: int = DEFAULT_TOP_N) -> ServiceResult[List[Peak]]:
        """Detect peaks over the persisted samples of a record."""
        loaded = self.get_samples(record_id)
        if not loaded.success:
            return loaded

        samples = loaded.data
        peaks = find_peaks(samples.amplitudes, samples.frequencies, top_n)
        return ServiceResult.ok(data=peaks, message=f"Found {len(peaks)} peaks")

    # =========================================================================
    # Write
    # =========================================================================

    def update(
        self,
        record_id: UUID,
        display_name: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ServiceResult[Record]:
        """Update the display name and/or notes of a record."""
        changes: Dict[str, Any] = {}
        if display_name is not None:
            if not display_name.strip():
                return ServiceResult.fail("Display name cannot be empty", error_type="InvalidInputError")
            changes["display_name"] = display_name.strip()
        if notes is not None:
            changes["notes"] = notes

        if not changes:
            return ServiceResult.fail("Nothing to update", error_type="InvalidInputError")

        try:
            with self._uow().auto_commit() as uow:
                record = uow.records.update_by_id(record_id, RecordUpdate(**changes))
        except SQLAlchemyError as e:
            return self._database_error("update record", e)

        if record is None:
            return self._not_found(record_id)

        logger.info(f"Updated record {record_id}: {', '.join(changes)}")
        return ServiceResult.ok(data=record, message="Record updated")

    def delete(self, record_id: UUID) -> ServiceResult[bool]:
        """Delete a record; its samples are removed by cascade."""
        try:
            with self._uow().auto_commit() as uow:
                deleted = uow.records.delete_by_id(record_id)
        except SQLAlchemyError as e:
            return self._database_error("delete record", e)

        if not deleted:
            return self._not_found(record_id)

        logger.info(f"Deleted record {record_id}")
        return ServiceResult.ok(data=True, message="Record deleted")

    # =========================================================================
    # Export
    # =========================================================================

    def export_csv(self, record_id: UUID, output_path: Union[str, Path]) -> ServiceResult[Path]:
        """Export the persisted samples of a record as FrequencyHz,Amplitude CSV."""
        loaded = self.get_samples(record_id)
        if not loaded.success:
            return loaded

        samples = loaded.data
        try:
            path = self.file_areas.export_csv(output_path, samples.frequencies, samples.amplitudes)
        except FftAnalyzerError as e:
            return ServiceResult.fail(str(e), error_type=e.error_type)

        return ServiceResult.ok(data=path, message=f"Exported {len(samples)} points to {path}")
