# database/models.py
"""
SQLModel domain models for the fftanalyzer database layer.

Models:
    - Record: Metadata and top peak of one ingested file
    - Sample: One frequency/amplitude point of a record, replayed by sample_index
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from fftanalyzer.core.utils import utcnow


class RecordStatus(str, Enum):
    PENDING = "Pending"
    SUCCESS = "Success"
    FAILED = "Failed"


# =============================================================================
# Record Model
# =============================================================================


class RecordBase(SQLModel):
    """Shared record properties."""

    display_name: str = Field(index=True, max_length=255)
    source_filename: str = Field(index=True, max_length=512)
    sample_rate: int
    sample_count: int = Field(default=0)
    created_by: Optional[str] = Field(default=None, max_length=255)
    status: RecordStatus = Field(default=RecordStatus.PENDING, index=True)
    notes: Optional[str] = Field(default=None)
    peak_frequency: Optional[float] = Field(default=None)
    peak_amplitude: Optional[float] = Field(default=None)


class Record(RecordBase, table=True):
    """Record database model."""

    __tablename__ = "records"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)

    # Relationships
    samples: List["Sample"] = Relationship(
        back_populates="record",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "passive_deletes": True},
    )


class RecordCreate(RecordBase):
    """Schema for creating a record."""

    id: Optional[UUID] = None


class RecordUpdate(SQLModel):
    """Schema for updating a record (all fields optional)."""

    display_name: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[RecordStatus] = None


# =============================================================================
# Sample Model
# =============================================================================


class Sample(SQLModel, table=True):
    """Sample database model."""

    __tablename__ = "samples"
    __table_args__ = (UniqueConstraint("record_id", "sample_index", name="uq_samples_record_index"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    record_id: UUID = Field(foreign_key="records.id", ondelete="CASCADE", index=True)
    frequency: float
    amplitude: float
    sample_index: int

    # Relationships
    record: Optional[Record] = Relationship(back_populates="samples")
