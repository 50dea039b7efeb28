import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, Protocol

from constants import PARTIAL_SUFFIX
from core.exceptions import (
    DirectoryUnavailableError,
    FileDiscardError,
    FileReadError,
    WriteFailureError,
)


class FileReader(Protocol):
    """
    Protocol defining the interface for file reading operations.

    This protocol specifies methods for reading files, allowing different
    implementations for production (filesystem) and testing (mocks).
    """

    def stream_lines(self, file_path: Path) -> Iterator[str]:
        """
        Yield the lines of a UTF-8 text file one at a time.

        Args:
            file_path: The path to the file to read.

        Yields:
            Each line without its line terminator.
        """

    def read_file(self, file_path: Path) -> str:
        """
        Read the whole text content of a UTF-8 file.

        Args:
            file_path: The path to the file to read.

        Returns:
            The file content as a string.
        """


class FileWriter(Protocol):
    """
    Protocol defining the interface for file writing operations.

    This protocol specifies methods for persisting reports and removing
    consumed files, allowing different implementations for production
    (filesystem) and testing (mocks).
    """

    def write_file(self, file_path: Path, data: str) -> None:
        """
        Write data to a file, replacing any previous content.

        Args:
            file_path: Destination file.
            data: String data to write.
        """

    def discard(self, file_path: Path) -> None:
        """
        Delete a file.

        Args:
            file_path: The file to delete.
        """


class FilesystemFileReader:

    def stream_lines(self, file_path: Path) -> Iterator[str]:
        """
        Yield the lines of a UTF-8 text file one at a time.

        The file is streamed, never loaded as a whole, and closed as soon as
        the generator is exhausted or closed. Decoding is strict: a file that
        is not valid UTF-8 is a read error, not silently repaired input.

        Args:
            file_path: The path to the file to read.

        Yields:
            Each line without its line terminator.

        Raises:
            FileReadError: If the file cannot be opened, read or decoded.
        """
        try:
            with file_path.open("r", encoding="utf-8", newline=None) as f:
                for line in f:
                    yield line.rstrip("\r\n")
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(
                message=f"Failed to read file: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e

    def read_file(self, file_path: Path) -> str:
        """
        Read the whole text content of a UTF-8 file.

        Args:
            file_path: The path to the file to read.

        Returns:
            The file content as a string.

        Raises:
            FileReadError: If the file cannot be opened, read or decoded.
        """
        try:
            with file_path.open("r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(
                message=f"Failed to read file: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e


class FilesystemFileWriter:

    @staticmethod
    def ensure_writable_directory(directory: Path) -> None:
        """
        Check that a directory exists and accepts new files.

        Args:
            directory: The directory to check.

        Raises:
            DirectoryUnavailableError: If the directory does not exist, is not a
                directory, or is not writable.
        """
        if not directory.is_dir():
            raise DirectoryUnavailableError(
                message=f"Directory does not exist: {directory}",
                file_path=str(directory),
            )
        if not os.access(directory, os.W_OK):
            raise DirectoryUnavailableError(
                message=f"Directory is not writable: {directory}",
                file_path=str(directory),
            )

    def write_file(self, file_path: Path, data: str) -> None:
        """
        Durably write data to a file.

        The data goes to a sibling temporary file which is flushed, synced to
        disk and then renamed over the target. Readers therefore see either no
        file or the complete file. On failure the temporary file is removed.

        Args:
            file_path: Destination file.
            data: String data to write.

        Raises:
            WriteFailureError: If the parent directory is unavailable or any
                step of the write fails.
        """
        try:
            self.ensure_writable_directory(file_path.parent)
        except DirectoryUnavailableError as e:
            raise WriteFailureError(
                message=f"Failed to write to file: {file_path} ({e.message})",
                file_path=str(file_path),
                original_exception=e,
            ) from e

        partial_path = file_path.with_name(f".{file_path.name}{PARTIAL_SUFFIX}")
        try:
            with open(partial_path, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(partial_path, file_path)
        except OSError as e:
            partial_path.unlink(missing_ok=True)
            raise WriteFailureError(
                message=f"Failed to write to file: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e

    def discard(self, file_path: Path) -> None:
        """
        Delete a file.

        Raises:
            FileDiscardError: If the file cannot be deleted (doesn't exist, locked, etc.).
        """
        try:
            file_path.unlink()
        except FileNotFoundError as e:
            raise FileDiscardError(
                message=f"Cannot discard file since it no longer exists: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e
        except OSError as e:
            raise FileDiscardError(
                message=f"Failed to discard file: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e


class MockFileReader:
    """
    Mock implementation of FileReader for testing.

    Returns configurable file contents, allowing tests to control file reading
    behavior without requiring filesystem operations or actual file I/O.
    """

    def __init__(
        self,
        lines: Iterable[str] | None = None,
        read_lines_fn: Callable[[Path], Iterable[str]] | None = None,
    ):
        """
        Initialize MockFileReader with configurable reading behavior.

        Args:
            lines: If provided, every file yields these lines. Takes precedence
                over read_lines_fn if both are provided.
            read_lines_fn: Optional callable that takes a file path and returns
                its lines. It may raise to simulate read failures.

        Attributes (for test inspection):
            read_file_calls: List of file paths passed to stream_lines() or read_file()
        """
        self.lines = list(lines) if lines is not None else None
        self.read_lines_fn = read_lines_fn

        # Track calls for test inspection
        self.read_file_calls: list[Path] = []

    def _lines_for(self, file_path: Path) -> list[str]:
        if self.lines is not None:
            return self.lines
        if self.read_lines_fn is not None:
            return list(self.read_lines_fn(file_path))
        return []

    def stream_lines(self, file_path: Path) -> Iterator[str]:
        self.read_file_calls.append(file_path)
        yield from self._lines_for(file_path)

    def read_file(self, file_path: Path) -> str:
        self.read_file_calls.append(file_path)
        return "\n".join(self._lines_for(file_path))


class MockFileWriter:
    """
    Mock implementation of FileWriter for testing.

    Records writes and deletions in a single ordered log so tests can check
    that a report was written before its source file was removed.

    Attributes (for test inspection):
        calls: Ordered list of ("write", path) and ("discard", path) tuples.
        written: Mapping of written paths to the data written to them.
        discarded: Paths passed to discard().
    """

    def __init__(
        self,
        fail_write: Exception | None = None,
        fail_discard: Exception | None = None,
    ):
        """
        Initialize MockFileWriter with configurable behavior.

        Args:
            fail_write: If set, write_file() raises this exception.
            fail_discard: If set, discard() raises this exception.
        """
        self.fail_write = fail_write
        self.fail_discard = fail_discard

        self.calls: list[tuple[str, Path]] = []
        self.written: dict[Path, str] = {}
        self.discarded: list[Path] = []

    def write_file(self, file_path: Path, data: str) -> None:
        self.calls.append(("write", file_path))
        if self.fail_write is not None:
            raise self.fail_write
        self.written[file_path] = data

    def discard(self, file_path: Path) -> None:
        self.calls.append(("discard", file_path))
        if self.fail_discard is not None:
            raise self.fail_discard
        self.discarded.append(file_path)
