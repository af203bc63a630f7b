"""Local filesystem implementation of FileRepositoryProtocol."""

import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from fftanalyzer.repository.protocol import PathLike


class LocalFileRepository:
    """Implementation of FileRepositoryProtocol using the local filesystem."""

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def is_file(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def read_text(self, path: PathLike, encoding: str = "utf-8") -> str:
        # utf-8-sig strips a BOM written by spreadsheet exports
        if encoding.lower() == "utf-8":
            encoding = "utf-8-sig"
        return Path(path).read_text(encoding=encoding)

    def write_text(self, path: PathLike, content: str, encoding: str = "utf-8") -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding=encoding)

    def list_files(self, directory: PathLike, pattern: str = "*", recursive: bool = False) -> List[Path]:
        dir_path = Path(directory)
        if not dir_path.exists():
            return []

        search_pattern = f"**/{pattern}" if recursive else pattern
        return sorted(p for p in dir_path.glob(search_pattern) if p.is_file())

    def mkdir(self, path: PathLike, parents: bool = True) -> None:
        Path(path).mkdir(parents=parents, exist_ok=True)

    def delete_file(self, path: PathLike) -> None:
        Path(path).unlink()

    def copy_file(self, source: PathLike, destination: PathLike) -> None:
        dest_path = Path(destination)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)

    def move_file(self, source: PathLike, destination: PathLike) -> None:
        dest_path = Path(destination)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))

    def get_size(self, path: PathLike) -> int:
        return Path(path).stat().st_size

    def get_modified_time(self, path: PathLike) -> datetime:
        mtime = Path(path).stat().st_mtime
        return datetime.fromtimestamp(mtime, tz=timezone.utc)
