"""
Custom exception classes for the sales inbox daemon.

This module defines the application-specific exceptions raised while listing
the source directory, reading and parsing input files, writing reports and
removing consumed files. I/O exceptions carry structured diagnostic data so
that a failed file can be investigated from the log alone.
"""

import os
from typing import Optional


class FileIOError(Exception):
    """
    Base exception for filesystem operation errors.

    Attributes:
        message: A human-readable error message describing what went wrong.
        file_path: The file or directory the operation was working on, if known.
        original_exception: The underlying exception that caused this error, if any.
        diagnostic_info: A dictionary containing diagnostic information including
            exception type, details, and OS name.
    """

    default_message = "A file operation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        file_path: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.file_path = file_path
        self.original_exception = original_exception
        self.diagnostic_info = {
            "type": (
                type(original_exception).__name__ if original_exception else "Unknown"
            ),
            "details": str(original_exception) if original_exception else "No details",
            "os_name": os.name,
        }


class DirectoryUnavailableError(FileIOError):
    """
    Raised when a directory is missing, is not a directory, or cannot be listed.

    The dispatcher treats this as a transient condition: the poll cycle that
    hit it submits no work and the loop carries on.
    """

    default_message = "Directory is not available"


class FileReadError(FileIOError):
    """
    Raised when an input file cannot be read or is not valid UTF-8.
    """

    default_message = "Failed to read file"


class WriteFailureError(FileIOError):
    """
    Raised when a report cannot be persisted to the destination directory.

    Typical causes are a missing or read-only destination, a full disk or a
    permission error. A report that fails to write never leaves a file under
    its final name, and the source file it was built from is kept.
    """

    default_message = "Failed to write file"


class FileDiscardError(FileIOError):
    """
    Raised when a consumed input file cannot be deleted.
    """

    default_message = "Failed to discard file"


class MalformedRecordError(Exception):
    """
    Raised when a line has a known record code but a broken structure.

    A malformed line aborts the processing of the whole file it belongs to.

    Attributes:
        reason: Short description of what is wrong with the line.
        line: The offending line.
        line_number: One-based position of the line in its file, if known.
        file_path: The file the line was read from, if known.
    """

    def __init__(
        self,
        reason: str,
        line: str = "",
        line_number: Optional[int] = None,
        file_path: Optional[str] = None,
    ):
        self.reason = reason
        self.line = line
        self.line_number = line_number
        self.file_path = file_path
        super().__init__(self.message)

    @property
    def message(self) -> str:
        location = ""
        if self.file_path:
            location = f" in {self.file_path}"
        if self.line_number is not None:
            location += f" at line {self.line_number}"
        return f"Malformed record{location}: {self.reason}"

    def __str__(self) -> str:
        return self.message

    def at(self, line_number: int, file_path: str) -> "MalformedRecordError":
        """
        Return a copy of this error located at the given line of a file.

        Args:
            line_number: One-based line number.
            file_path: Path of the file being processed.

        Returns:
            MalformedRecordError: A new error carrying the location.
        """
        return MalformedRecordError(
            self.reason, self.line, line_number=line_number, file_path=file_path
        )


class InvalidSettingsError(Exception):
    """
    Raised when the daemon configuration is missing or unusable.

    This is the only error that stops the process; it is raised before the
    dispatch loop starts.

    Attributes:
        key: The settings key at fault.
        message: A human-readable error message.
    """

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        self.message = message or f"Invalid value for setting '{key}'"
        super().__init__(self.message)
