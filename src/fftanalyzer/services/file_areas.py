# services/file_areas.py
"""
Service for the ingestion file areas.

Files move through three directories below the upload root:

- staging: a private copy of the source named
  ``{yyyyMMdd_HHmmss}_{uuid hex}_{original name}``
- success: ``{record id hex}_{staged name}`` plus a ``{name}.meta.json`` sidecar
- fail: the staged name plus a ``.error.txt`` note

Generated names never collide, so concurrent ingestions need no locking.
"""

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union
from uuid import UUID, uuid4

from fftanalyzer.core.config import PathsConfig
from fftanalyzer.core.exceptions import FilesystemError, InvalidInputError
from fftanalyzer.core.export import format_spectrum_csv
from fftanalyzer.core.logger import get_logger
from fftanalyzer.core.utils import as_utc, utcnow
from fftanalyzer.repository.protocol import FileRepositoryProtocol

from .base import BaseService

logger = get_logger(__name__)

STAGED_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
ERROR_NOTE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
SIDECAR_SUFFIX = ".meta.json"
ERROR_NOTE_SUFFIX = ".error.txt"


class FileAreaService(BaseService):
    """
    Staging, success and fail areas used by ingestion.

    Operations raise FilesystemError; callers decide whether a failure is
    fatal (staging) or only logged (finalize after commit).
    """

    def __init__(self, file_repository: FileRepositoryProtocol, paths: PathsConfig) -> None:
        """Initialize the service.

        Args:
            file_repository: File repository for all file I/O operations (required).
            paths: Upload, staging, success and fail directories.
        """
        super().__init__(file_repository)
        self.paths = paths

    @property
    def areas(self) -> List[Path]:
        return [self.paths.upload, self.paths.staging, self.paths.success, self.paths.fail]

    def ensure_areas(self) -> None:
        """Create every area directory that does not exist yet."""
        try:
            for area in self.areas:
                self.file_repository.mkdir(area)
        except OSError as e:
            raise FilesystemError(f"Failed to create file areas: {e}") from e

    # =========================================================================
    # Lifecycle moves
    # =========================================================================

    @staticmethod
    def staged_name(source_name: str, now: Optional[datetime] = None) -> str:
        """Build a collision-free staged file name."""
        timestamp = (now or datetime.now()).strftime(STAGED_TIMESTAMP_FORMAT)
        return f"{timestamp}_{uuid4().hex}_{source_name}"

    def stage(self, source_path: Union[str, Path]) -> Path:
        """
        Copy a source file into the staging area.

        Returns:
            Path of the staged copy

        Raises:
            FilesystemError: If the source is missing or the copy fails
        """
        source = Path(source_path)
        if not self.file_repository.is_file(source):
            raise FilesystemError(f"Source file not found: {source}", context={"path": str(source)})

        staged = self.paths.staging / self.staged_name(source.name)
        try:
            self.file_repository.copy_file(source, staged)
        except OSError as e:
            raise FilesystemError(
                f"Failed to stage {source.name}: {e}", context={"path": str(source)}
            ) from e

        logger.debug(f"Staged {source} as {staged.name}")
        return staged

    def move_to_success(self, staged_path: Union[str, Path], record_id: UUID) -> Path:
        """
        Move a staged file to the success area and write its sidecar.

        Safe to call again after a partial failure: when the staged file is
        already in the success area only the sidecar is (re)written.

        Returns:
            Path of the file in the success area

        Raises:
            FilesystemError: If neither the staged nor the moved file exists,
                or the move or sidecar write fails
        """
        staged = Path(staged_path)
        destination = self.success_path(staged, record_id)
        staged_exists = self.file_repository.exists(staged)
        if not staged_exists and not self.file_repository.exists(destination):
            raise FilesystemError(f"Staged file not found: {staged}", context={"path": str(staged)})

        sidecar = {
            "RecordId": str(record_id),
            "OriginalFileName": staged.name,
            "ProcessedAt": datetime.now().isoformat(timespec="seconds"),
            "Status": "Success",
        }

        try:
            if staged_exists:
                self.file_repository.move_file(staged, destination)
            self.file_repository.write_text(self.sidecar_path(destination), json.dumps(sidecar, indent=2))
        except OSError as e:
            raise FilesystemError(
                f"Failed to move {staged.name} to success area: {e}",
                context={"path": str(staged), "record_id": str(record_id)},
            ) from e

        logger.debug(f"Moved {staged.name} to success area")
        return destination

    def move_to_fail(self, staged_path: Union[str, Path], error_message: str) -> Optional[Path]:
        """
        Move a staged file to the fail area with an error note.

        Returns:
            Path in the fail area, or None when the staged file no longer exists

        Raises:
            FilesystemError: If the move or note write fails
        """
        staged = Path(staged_path)
        if not self.file_repository.exists(staged):
            logger.warning(f"Staged file not found for fail move: {staged}")
            return None

        destination = self.paths.fail / staged.name
        note = (
            f"Failed at: {datetime.now().strftime(ERROR_NOTE_TIMESTAMP_FORMAT)}\n"
            f"Error: {error_message}\n"
        )

        try:
            self.file_repository.move_file(staged, destination)
            self.file_repository.write_text(self.error_note_path(destination), note)
        except OSError as e:
            raise FilesystemError(
                f"Failed to move {staged.name} to fail area: {e}", context={"path": str(staged)}
            ) from e

        logger.debug(f"Moved {staged.name} to fail area")
        return destination

    def success_path(self, staged_path: Union[str, Path], record_id: UUID) -> Path:
        return self.paths.success / f"{record_id.hex}_{Path(staged_path).name}"

    @staticmethod
    def sidecar_path(success_path: Path) -> Path:
        return success_path.with_name(success_path.name + SIDECAR_SUFFIX)

    @staticmethod
    def error_note_path(failed_path: Path) -> Path:
        return failed_path.with_suffix(ERROR_NOTE_SUFFIX)

    # =========================================================================
    # Export and housekeeping
    # =========================================================================

    def export_csv(
        self,
        output_path: Union[str, Path],
        frequencies: Sequence[float],
        amplitudes: Sequence[float],
    ) -> Path:
        """
        Write frequency/amplitude pairs as CSV.

        Raises:
            InvalidInputError: If the sequences differ in length
            FilesystemError: If the file cannot be written
        """
        output = Path(output_path)
        content = format_spectrum_csv(frequencies, amplitudes)
        try:
            self.file_repository.write_text(output, content)
        except OSError as e:
            raise FilesystemError(f"Failed to export CSV to {output}: {e}") from e

        logger.info(f"Exported {len(frequencies)} points to {output}")
        return output

    def area_usage(self) -> Dict[str, Tuple[int, int]]:
        """Return ``{area name: (file count, total bytes)}`` for staging, success and fail."""
        usage = {}
        for name in ("staging", "success", "fail"):
            files = self.file_repository.list_files(getattr(self.paths, name))
            usage[name] = (len(files), sum(self.file_repository.get_size(p) for p in files))
        return usage

    def purge_expired(self, retention_days: int, now: Optional[datetime] = None) -> int:
        """
        Delete success and fail files older than the retention period.

        Args:
            retention_days: Files modified more than this many days ago are removed
            now: Reference time (defaults to the current time; naive means UTC)

        Returns:
            Number of files deleted
        """
        if retention_days < 0:
            raise InvalidInputError(f"retention_days must be >= 0, got {retention_days}")

        cutoff = as_utc(now or utcnow()) - timedelta(days=retention_days)
        deleted = 0

        for area in (self.paths.success, self.paths.fail):
            for path in self.file_repository.list_files(area):
                try:
                    if self.file_repository.get_modified_time(path) < cutoff:
                        self.file_repository.delete_file(path)
                        deleted += 1
                except OSError as e:
                    logger.warning(f"Could not purge {path}: {e}")

        logger.info(f"Purged {deleted} files older than {retention_days} days")
        return deleted
