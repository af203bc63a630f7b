"""
Exception Classes for Spectrum Ingestion

Errors raised by the parsing, transform, persistence and file-area layers.
Services catch these at their boundary and report them through
``ServiceResult.fail`` with the exception class name as ``error_type``.
"""

from typing import Any, Dict, List, Optional


class FftAnalyzerError(Exception):
    """
    Base class for all fftanalyzer errors.

    Attributes:
        message (str): Explanation of the error
        context (dict): Optional details about where the error occurred
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    @property
    def error_type(self) -> str:
        """Name used when reporting the error through a ServiceResult."""
        return self.__class__.__name__


class ParseError(FftAnalyzerError):
    """
    Raised when sample text yields no usable data.

    Per-line problems never raise; they are accumulated as warnings and only
    an empty overall result escalates to this error.

    Attributes:
        warnings (list): Per-line warnings collected before the failure
    """

    def __init__(
        self,
        message: str = "No samples could be parsed.",
        warnings: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, context)
        self.warnings = list(warnings or [])


class InvalidInputError(FftAnalyzerError, ValueError):
    """Raised for invalid transform parameters (empty samples, non-positive rate)."""


class ComputeError(FftAnalyzerError):
    """Raised when the transform produces an unexpected numeric failure."""


class PersistenceError(FftAnalyzerError):
    """Raised when a database transaction fails and has been rolled back."""


class FilesystemError(FftAnalyzerError):
    """Raised when staging, moving or writing files in the file areas fails."""
