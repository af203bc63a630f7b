"""File repository abstraction for the staging, success and fail areas."""

from fftanalyzer.repository.local import LocalFileRepository
from fftanalyzer.repository.protocol import FileRepositoryProtocol

__all__ = ["FileRepositoryProtocol", "LocalFileRepository"]
