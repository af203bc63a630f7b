"""Abstract protocol for file-area storage operations."""

from datetime import datetime
from pathlib import Path
from typing import List, Protocol, Union

PathLike = Union[str, Path]


class FileRepositoryProtocol(Protocol):
    """Protocol defining the file operations used by the ingestion pipeline.

    Staging, success/fail relocation, sidecar notes and CSV export all go
    through this interface so services can be tested against an in-memory
    implementation.
    """

    def exists(self, path: PathLike) -> bool:
        """Check if a file or directory exists."""
        ...

    def is_file(self, path: PathLike) -> bool:
        ...

    def read_text(self, path: PathLike, encoding: str = "utf-8") -> str:
        """Read file contents as text."""
        ...

    def write_text(self, path: PathLike, content: str, encoding: str = "utf-8") -> None:
        """Write text to file, creating parent directories."""
        ...

    def list_files(self, directory: PathLike, pattern: str = "*", recursive: bool = False) -> List[Path]:
        """List files in directory matching pattern, sorted by name."""
        ...

    def mkdir(self, path: PathLike, parents: bool = True) -> None:
        """Create directory if absent."""
        ...

    def delete_file(self, path: PathLike) -> None:
        ...

    def copy_file(self, source: PathLike, destination: PathLike) -> None:
        """Copy a file, creating the destination directory."""
        ...

    def move_file(self, source: PathLike, destination: PathLike) -> None:
        """Move a file, creating the destination directory."""
        ...

    def get_size(self, path: PathLike) -> int:
        """Get file size in bytes."""
        ...

    def get_modified_time(self, path: PathLike) -> datetime:
        """Get the last modification time as aware UTC."""
        ...
