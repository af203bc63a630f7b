# database/repositories/sample.py
"""Sample repository with chunked bulk insert."""
from typing import Sequence, Tuple
from uuid import UUID

import numpy as np
from sqlalchemy import func, insert
from sqlmodel import Session, select

from ..models import Sample

DEFAULT_CHUNK_SIZE = 1000


class SampleRepository:
    """
    Repository for Sample rows.

    Samples are written in bulk and only ever read back per record, so this
    does not extend BaseRepository.
    """

    def __init__(self, session: Session):
        self.session = session

    def bulk_insert(
        self,
        record_id: UUID,
        frequencies: Sequence[float],
        amplitudes: Sequence[float],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> int:
        """
        Insert the samples of a record in chunks.

        Rows get ``sample_index`` 0..n-1 in input order. Every chunk runs on
        the session's connection, so all of them commit or roll back with the
        surrounding unit of work.

        Args:
            record_id: Owning record
            frequencies: Frequencies in replay order
            amplitudes: Amplitudes co-indexed with frequencies
            chunk_size: Rows per INSERT statement

        Returns:
            Number of rows inserted

        Raises:
            ValueError: If the arrays differ in length or chunk_size < 1
        """
        freqs = np.asarray(frequencies, dtype=np.float64).ravel()
        amps = np.asarray(amplitudes, dtype=np.float64).ravel()
        if freqs.shape != amps.shape:
            raise ValueError("Frequencies and amplitudes must have the same length")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")

        connection = self.session.connection()
        statement = insert(Sample.__table__)
        freq_list = freqs.tolist()
        amp_list = amps.tolist()

        for start in range(0, len(freq_list), chunk_size):
            stop = min(start + chunk_size, len(freq_list))
            rows = [
                {
                    "record_id": record_id,
                    "frequency": freq_list[i],
                    "amplitude": amp_list[i],
                    "sample_index": i,
                }
                for i in range(start, stop)
            ]
            connection.execute(statement, rows)

        return len(freq_list)

    def get_arrays(self, record_id: UUID) -> Tuple[np.ndarray, np.ndarray]:
        """Get (frequencies, amplitudes) of a record ordered by sample_index."""
        statement = (
            select(Sample.frequency, Sample.amplitude)
            .where(Sample.record_id == record_id)
            .order_by(Sample.sample_index)
        )
        rows = self.session.exec(statement).all()
        if not rows:
            return np.zeros(0, dtype=np.float64), np.zeros(0, dtype=np.float64)
        data = np.asarray(rows, dtype=np.float64)
        return data[:, 0].copy(), data[:, 1].copy()

    def count_by_record(self, record_id: UUID) -> int:
        """Count samples of a record."""
        statement = select(func.count()).select_from(Sample).where(Sample.record_id == record_id)
        return self.session.exec(statement).one()
