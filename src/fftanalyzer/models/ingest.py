"""Ingestion lifecycle and result models."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import UUID

from fftanalyzer.models.base import ToDictMixin
from fftanalyzer.models.spectrum import DataType, Peak


class IngestStage(str, Enum):
    """
    Lifecycle of a single ingestion.

    STAGED -> PARSED -> RATE_RESOLVED -> (TRANSFORM_APPLIED |
    PASSTHROUGH_FREQUENCY_DOMAIN) -> PERSISTED -> FINALIZED, or FAILED from
    any step.
    """

    STAGED = "staged"
    PARSED = "parsed"
    RATE_RESOLVED = "rate_resolved"
    TRANSFORM_APPLIED = "transform_applied"
    PASSTHROUGH_FREQUENCY_DOMAIN = "passthrough_frequency_domain"
    PERSISTED = "persisted"
    FINALIZED = "finalized"
    FAILED = "failed"


@dataclass
class IngestResult(ToDictMixin):
    """Outcome of ingesting one file."""

    record_id: UUID
    display_name: str
    source_filename: str
    data_type: DataType
    sample_rate: int
    sample_count: int
    peaks: List[Peak] = field(default_factory=list)
    stage: IngestStage = IngestStage.PERSISTED
    staged_path: Optional[Path] = None
    final_path: Optional[Path] = None
    finalized: bool = False

    @property
    def top_peak(self) -> Optional[Peak]:
        if not self.peaks:
            return None
        return max(self.peaks, key=lambda p: p.amplitude)


@dataclass
class BatchIngestResult(ToDictMixin):
    """Aggregate outcome of ingesting a directory of files."""

    total_files: int = 0
    successful: int = 0
    failed: int = 0
    not_finalized: int = 0
    record_ids: List[UUID] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    def _to_dict_extra(self) -> Optional[Dict[str, Any]]:
        return {"success_rate": self.success_rate}

    @property
    def success_rate(self) -> float:
        if self.total_files == 0:
            return 0.0
        return self.successful / self.total_files
