# services/ingestion.py
"""
Service coordinating the ingestion of sample files.

One ingestion moves a file through:

    STAGED -> PARSED -> RATE_RESOLVED -> TRANSFORM_APPLIED
                                       | PASSTHROUGH_FREQUENCY_DOMAIN
           -> PERSISTED -> FINALIZED

or to FAILED from any step. A failure before PERSISTED leaves no database
rows and moves the staged copy to the fail area with an error note. A
failure while finalizing does not unwind the committed record: the result
is still successful, flagged ``finalized=False``, and ``finalize`` can be
called again with the staged path.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from fftanalyzer.core.config import AppConfig
from fftanalyzer.core.exceptions import (
    FftAnalyzerError,
    FilesystemError,
    InvalidInputError,
    ParseError,
    PersistenceError,
)
from fftanalyzer.core.logger import get_logger
from fftanalyzer.core.parser import parse_auto, resolve_sample_rate
from fftanalyzer.core.peaks import find_peaks
from fftanalyzer.core.spectrum import compute_spectrum
from fftanalyzer.database import DatabaseConnection, Record, RecordCreate, RecordStatus, UnitOfWork
from fftanalyzer.models.ingest import BatchIngestResult, IngestResult, IngestStage
from fftanalyzer.models.spectrum import Peak, WindowType

from .base import BaseService, BatchProgress, ServiceResult
from .file_areas import FileAreaService

logger = get_logger(__name__)

# Zero-argument callable returning the acting username
UserProvider = Callable[[], Optional[str]]


class IngestionService(BaseService):
    """
    Service for ingesting sample files into the database.

    Concurrent ingestions of different files share only the database and
    the file areas; each ingestion is its own unit of work.
    """

    def __init__(
        self,
        database: DatabaseConnection,
        file_areas: FileAreaService,
        config: AppConfig,
        user_provider: Optional[UserProvider] = None,
    ) -> None:
        """Initialize the service.

        Args:
            database: Connection used to open units of work.
            file_areas: Staging, success and fail areas.
            config: Defaults for omitted ingest and spectrum options.
            user_provider: Returns the acting username for created_by.
        """
        super().__init__(file_areas.file_repository)
        self.database = database
        self.file_areas = file_areas
        self.config = config
        self.user_provider = user_provider

    # =========================================================================
    # Single file
    # =========================================================================

    def ingest(
        self,
        source_path: Union[str, Path],
        display_name: Optional[str] = None,
        sample_rate: Optional[int] = None,
        auto_detect_rate: Optional[bool] = None,
        window: Union[WindowType, str, None] = None,
        created_by: Optional[str] = None,
    ) -> ServiceResult[IngestResult]:
        """
        Ingest one sample file.

        Args:
            source_path: File to ingest; it is copied, never modified
            display_name: Record name (defaults to the file stem)
            sample_rate: Rate used when detection is off or fails
            auto_detect_rate: Let a rate detected from the time column win
            window: Window applied to time-domain samples
            created_by: Acting user (defaults to the user provider)

        Returns:
            ServiceResult containing an IngestResult. On failure
            ``metadata["stage"]`` is "failed", ``metadata["failed_stage"]``
            names the step that failed and ``metadata["error_type"]`` the
            error class.
        """
        ingest_config = self.config.ingest
        spectrum_config = self.config.spectrum
        source = Path(source_path)

        rate = ingest_config.default_sample_rate if sample_rate is None else sample_rate
        auto_detect = ingest_config.auto_detect_rate if auto_detect_rate is None else auto_detect_rate
        try:
            window = ingest_config.window if window is None else WindowType.parse(window)
        except ValueError as e:
            return self._fail(InvalidInputError(str(e)), IngestStage.STAGED)
        if rate is None or rate <= 0:
            return self._fail(
                InvalidInputError(f"Sample rate must be positive, got {rate}"), IngestStage.STAGED
            )

        name = (display_name or "").strip() or source.stem
        user = created_by if created_by is not None else self._current_user()

        # Stage
        try:
            staged = self.file_areas.stage(source)
        except FilesystemError as e:
            return self._fail(e, IngestStage.STAGED)

        attempting = IngestStage.PARSED
        warnings: List[str] = []
        try:
            text = self._read_staged(staged)
            parsed = parse_auto(text)
            warnings.extend(parsed.warnings)
            sample_set = parsed.unwrap()

            attempting = IngestStage.RATE_RESOLVED
            rate = resolve_sample_rate(text, rate, auto_detect)

            if sample_set.is_time_domain:
                attempting = IngestStage.TRANSFORM_APPLIED
                spectrum = compute_spectrum(
                    sample_set.samples,
                    rate,
                    window=window,
                    transform_length=spectrum_config.transform_length,
                    log_scale=spectrum_config.log_scale,
                    top_n=spectrum_config.top_n,
                )
                frequencies, amplitudes, peaks = spectrum.frequencies, spectrum.amplitudes, spectrum.peaks
            else:
                attempting = IngestStage.PASSTHROUGH_FREQUENCY_DOMAIN
                frequencies, amplitudes = sample_set.frequencies, sample_set.amplitudes
                peaks = find_peaks(amplitudes, frequencies, spectrum_config.top_n)
            transformed_stage = attempting

            attempting = IngestStage.PERSISTED
            record = self._persist(
                RecordCreate(
                    display_name=name,
                    source_filename=source.name,
                    sample_rate=rate,
                    sample_count=sample_set.sample_count,
                    created_by=user,
                    status=RecordStatus.SUCCESS,
                    **self._top_peak_fields(peaks),
                ),
                frequencies,
                amplitudes,
            )
        except FftAnalyzerError as e:
            self._move_to_fail(staged, str(e))
            return self._fail(e, attempting, warnings)
        except Exception as e:
            logger.exception(f"Unexpected error ingesting {source.name}")
            self._move_to_fail(staged, str(e))
            return self._fail(e, attempting, warnings)

        logger.info(
            f"Ingested {source.name} as record {record.id} "
            f"({sample_set.sample_count} {sample_set.data_type.value} points at {rate} Hz, "
            f"{transformed_stage.value})"
        )

        result = IngestResult(
            record_id=record.id,
            display_name=record.display_name,
            source_filename=source.name,
            data_type=sample_set.data_type,
            sample_rate=rate,
            sample_count=sample_set.sample_count,
            peaks=peaks,
            stage=IngestStage.PERSISTED,
            staged_path=staged,
        )

        # Finalize; the committed record stands whatever happens here
        try:
            result.final_path = self.file_areas.move_to_success(staged, record.id)
            result.finalized = True
            result.stage = IngestStage.FINALIZED
        except FilesystemError as e:
            logger.error(f"Record {record.id} committed but finalize failed: {e}")
            warnings.append(
                f"Finalize failed for {staged}: {e.message}. "
                f"Retry with finalize({record.id}, {staged})."
            )

        return ServiceResult.ok(
            data=result,
            message=f"Record '{result.display_name}' created with {len(peaks)} peaks",
            warnings=warnings,
            stage=result.stage.value,
        )

    def finalize(self, record_id: UUID, staged_path: Union[str, Path]) -> ServiceResult[Path]:
        """
        Move the staged file of a committed record to the success area.

        Retries the last ingestion step after a finalize failure. Completes
        a finalize that moved the file but did not write its sidecar.
        """
        try:
            with UnitOfWork(self.database) as uow:
                exists = uow.records.exists(record_id)
        except SQLAlchemyError as e:
            return ServiceResult.fail(f"Failed to load record: {e}", error_type=PersistenceError.__name__)

        if not exists:
            return ServiceResult.fail(f"Record not found: {record_id}", error_type="NotFound")

        try:
            final_path = self.file_areas.move_to_success(staged_path, record_id)
        except FilesystemError as e:
            logger.error(f"Finalize failed for record {record_id}: {e}")
            return ServiceResult.fail(
                str(e), error_type=e.error_type, stage=IngestStage.PERSISTED.value
            )

        logger.info(f"Finalized record {record_id}")
        return ServiceResult.ok(
            data=final_path,
            message=f"Moved to {final_path}",
            stage=IngestStage.FINALIZED.value,
        )

    # =========================================================================
    # Batch
    # =========================================================================

    def ingest_directory(
        self,
        directory: Union[str, Path],
        pattern: str = "*.csv",
        workers: Optional[int] = None,
        recursive: bool = False,
        **options,
    ) -> ServiceResult[BatchIngestResult]:
        """
        Ingest every matching file in a directory.

        Files are independent: one failure never affects another. With more
        than one worker, files are ingested on a thread pool.

        Args:
            directory: Directory to scan
            pattern: Glob pattern for sample files
            workers: Thread count (defaults to ``[ingest].workers``)
            recursive: Include subdirectories
            **options: Passed to ``ingest`` for every file (except display_name)

        Returns:
            ServiceResult containing a BatchIngestResult
        """
        directory = Path(directory)
        if not self.file_repository.exists(directory):
            return ServiceResult.fail(f"Directory does not exist: {directory}", error_type="FilesystemError")

        options.pop("display_name", None)
        workers = self.config.ingest.workers if workers is None else workers
        files = self.file_repository.list_files(directory, pattern, recursive=recursive)

        batch = BatchIngestResult(total_files=len(files))
        if not files:
            return ServiceResult.ok(data=batch, message=f"No files matching {pattern} in {directory}")

        progress = BatchProgress(total=len(files))
        lock = threading.Lock()
        self._report_progress(progress)

        def record_outcome(path: Path, outcome: ServiceResult[IngestResult]) -> None:
            with lock:
                progress.completed += 1
                progress.current_file = str(path)
                if outcome.success:
                    batch.successful += 1
                    batch.record_ids.append(outcome.data.record_id)
                    if not outcome.data.finalized:
                        batch.not_finalized += 1
                else:
                    batch.failed += 1
                    batch.errors[str(path)] = outcome.error
                    progress.errors.append(f"{path.name}: {outcome.error}")
                self._report_progress(progress)

        if workers <= 1:
            for path in files:
                record_outcome(path, self.ingest(path, **options))
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {executor.submit(self.ingest, path, **options): path for path in files}
                for future in as_completed(futures):
                    path = futures[future]
                    try:
                        outcome = future.result()
                    except Exception as e:
                        outcome = ServiceResult.fail(str(e), error_type=type(e).__name__)
                    record_outcome(path, outcome)

        logger.info(f"Batch ingest: {batch.successful}/{batch.total_files} succeeded, {batch.failed} failed")
        return ServiceResult.ok(
            data=batch,
            message=f"Ingested {batch.successful} of {batch.total_files} files",
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _current_user(self) -> Optional[str]:
        if self.user_provider is None:
            return None
        return self.user_provider()

    def _read_staged(self, staged: Path) -> str:
        try:
            return self.file_repository.read_text(staged)
        except UnicodeDecodeError as e:
            raise ParseError(f"File is not valid UTF-8 text: {e}") from e
        except OSError as e:
            raise FilesystemError(f"Could not read staged file {staged.name}: {e}") from e

    @staticmethod
    def _top_peak_fields(peaks: Sequence[Peak]) -> dict:
        """
        Record fields for the strongest peak.

        Peaks arrive sorted by frequency, so the first entry is the lowest
        frequency of the top-N, not the top peak. The highest amplitude is
        picked deliberately.
        """
        if not peaks:
            return {}
        top = max(peaks, key=lambda p: p.amplitude)
        return {"peak_frequency": top.frequency, "peak_amplitude": top.amplitude}

    def _persist(self, record_in: RecordCreate, frequencies, amplitudes) -> Record:
        """Insert the record and all its samples in one transaction."""
        try:
            with UnitOfWork(self.database).auto_commit() as uow:
                record = uow.records.create(record_in)
                uow.samples.bulk_insert(
                    record.id,
                    frequencies,
                    amplitudes,
                    chunk_size=self.config.database.batch_size,
                )
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to persist record: {e}",
                context={"source_filename": record_in.source_filename},
            ) from e
        return record

    def _move_to_fail(self, staged: Path, error_message: str) -> None:
        try:
            self.file_areas.move_to_fail(staged, error_message)
        except FilesystemError as e:
            logger.error(f"Could not move {staged.name} to fail area: {e}")

    @staticmethod
    def _fail(
        error: Exception,
        failed_stage: IngestStage,
        warnings: Optional[List[str]] = None,
    ) -> ServiceResult[IngestResult]:
        error_type = error.error_type if isinstance(error, FftAnalyzerError) else type(error).__name__
        logger.error(f"Ingestion failed at {failed_stage.value}: {error}")
        return ServiceResult.fail(
            str(error),
            warnings=warnings,
            error_type=error_type,
            stage=IngestStage.FAILED.value,
            failed_stage=failed_stage.value,
        )
