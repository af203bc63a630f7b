# database/repositories/record.py
"""Record repository for database operations."""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import Session, select

from fftanalyzer.core.utils import as_utc

from ..models import Record, RecordCreate, RecordUpdate
from ..repository import BaseRepository


class RecordRepository(BaseRepository[Record, RecordCreate, RecordUpdate]):
    """Repository for Record entities."""

    def __init__(self, session: Session):
        super().__init__(Record, session)

    def list_recent(self, skip: int = 0, limit: Optional[int] = 100) -> List[Record]:
        """Get records, newest first."""
        return self.get_all(skip=skip, limit=limit, order_by="created_at", descending=True)

    def search(
        self,
        term: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        """
        Search records, newest first.

        Args:
            term: Case-insensitive substring matched against display name
                and source filename
            start: Only records created at or after this time (naive means UTC)
            end: Only records created at or before this time (naive means UTC)
            limit: Maximum records to return
        """
        statement = select(Record)

        if term:
            pattern = f"%{term}%"
            statement = statement.where(
                or_(Record.display_name.ilike(pattern), Record.source_filename.ilike(pattern))
            )
        if start is not None:
            statement = statement.where(Record.created_at >= as_utc(start))
        if end is not None:
            statement = statement.where(Record.created_at <= as_utc(end))

        statement = statement.order_by(Record.created_at.desc())
        if limit is not None:
            statement = statement.limit(limit)

        return list(self.session.exec(statement).all())

