from __future__ import annotations

import os
import tempfile
from pathlib import Path

__all__: list[str] = [
    "FileMissingError",
    "FilePermissionError",
    "FileUtils",
    "FileUtilsError",
    "InvalidFileTypeError",
]


class FileUtils:
    """File helpers used by the snapshot store and the CLI."""

    @staticmethod
    def check_file_status(file_path: Path) -> None:
        """Check that a path points at an existing regular file.

        Args:
            file_path (Path): The path to check.

        Raises:
            FileMissingError: If the file does not exist.
            InvalidFileTypeError: If the path is a directory or a symbolic link.
        """
        if not file_path.exists():
            msg = f"File does not exist: {file_path}"
            raise FileMissingError(msg)
        if file_path.is_dir() or file_path.is_symlink():
            msg = f"Invalid file type (directory or symbolic link): {file_path}"
            raise InvalidFileTypeError(msg)

    @staticmethod
    def resolve_path(path: str | Path, *, strict: bool = False) -> Path:
        """Convert a user-supplied path to an absolute path.

        Expands environment variables and `~`, and resolves relative paths against
        the current working directory.

        Args:
            path (str | Path): The input path (e.g., "~/cache/$APP_ENV/snapshot.json").
            strict (bool): Raise if the path does not exist.

        Returns:
            Path: The absolute path.
        """
        expanded: str = os.path.expandvars(str(path))
        user_expanded: Path = Path(expanded).expanduser()

        if user_expanded.is_absolute():
            return user_expanded.resolve(strict=strict)
        return (Path.cwd() / user_expanded).resolve(strict=strict)

    @staticmethod
    def write_text_atomic(file_path: Path, content: str) -> None:
        """Write text through a temporary file and rename it into place.

        Readers never observe a half-written file, and a failed write leaves the
        previous content intact.

        Args:
            file_path (Path): Destination file.
            content (str): Text to write (UTF-8).

        Raises:
            FilePermissionError: If the destination directory is not writable.
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp")
        except PermissionError as err:
            msg = f"Insufficient permissions to write into: {file_path.parent}"
            raise FilePermissionError(msg) from err

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            tmp_path.replace(file_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise


class FileUtilsError(Exception):
    """Base exception for FileUtils errors."""


class FileMissingError(FileUtilsError):
    """The file does not exist."""


class InvalidFileTypeError(FileUtilsError):
    """The path is not a regular file."""


class FilePermissionError(FileUtilsError):
    """Insufficient permissions for the file operation."""
