"""
Tests for the exceptions module using pytest.

Tests cover:
- FileIOError and its subclasses: default messages, file path, diagnostic info
- MalformedRecordError: message formatting and locating an error in a file
- InvalidSettingsError: key and message
"""

import os

import pytest

from core.exceptions import (
    DirectoryUnavailableError,
    FileDiscardError,
    FileIOError,
    FileReadError,
    InvalidSettingsError,
    MalformedRecordError,
    WriteFailureError,
)


# ============================================================================
# Tests for FileIOError and subclasses
# ============================================================================


@pytest.mark.unit
def test_file_io_error_defaults():
    """FileIOError has a default message and empty diagnostics."""
    error = FileIOError()

    assert str(error) == "A file operation failed"
    assert error.file_path is None
    assert error.original_exception is None
    assert error.diagnostic_info == {
        "type": "Unknown",
        "details": "No details",
        "os_name": os.name,
    }


@pytest.mark.unit
def test_file_io_error_with_original_exception():
    """The original exception is described in the diagnostic info."""
    original = PermissionError("Permission denied")
    error = FileIOError("Cannot write", file_path="/out/x", original_exception=original)

    assert error.message == "Cannot write"
    assert error.file_path == "/out/x"
    assert error.original_exception is original
    assert error.diagnostic_info["type"] == "PermissionError"
    assert error.diagnostic_info["details"] == "Permission denied"


@pytest.mark.unit
@pytest.mark.parametrize(
    "error_class, default_message",
    [
        (DirectoryUnavailableError, "Directory is not available"),
        (FileReadError, "Failed to read file"),
        (WriteFailureError, "Failed to write file"),
        (FileDiscardError, "Failed to discard file"),
    ],
)
def test_file_io_error_subclasses(error_class, default_message):
    """Every subclass is a FileIOError with its own default message."""
    error = error_class()

    assert isinstance(error, FileIOError)
    assert str(error) == default_message


@pytest.mark.unit
def test_file_io_error_can_be_raised_from():
    """Errors chain to their cause when raised with 'from'."""
    original = OSError("boom")

    with pytest.raises(FileReadError) as exc_info:
        try:
            raise original
        except OSError as e:
            raise FileReadError("read failed", original_exception=e) from e

    assert exc_info.value.__cause__ is original


# ============================================================================
# Tests for MalformedRecordError
# ============================================================================


@pytest.mark.unit
def test_malformed_record_error_without_location():
    """Without a location the message only carries the reason."""
    error = MalformedRecordError("bad item", line="003,1,[1-2],X")

    assert str(error) == "Malformed record: bad item"
    assert error.line == "003,1,[1-2],X"
    assert error.line_number is None
    assert error.file_path is None


@pytest.mark.unit
def test_malformed_record_error_at_location():
    """at() returns a copy carrying the file and line number."""
    error = MalformedRecordError("bad item", line="003,1,[1-2],X")

    located = error.at(7, "/in/orders.txt")

    assert located is not error
    assert located.reason == "bad item"
    assert located.line == error.line
    assert str(located) == "Malformed record in /in/orders.txt at line 7: bad item"
    assert error.file_path is None


@pytest.mark.unit
def test_malformed_record_error_is_not_file_io_error():
    """Parsing errors and I/O errors are separate families."""
    assert not isinstance(MalformedRecordError("x"), FileIOError)


# ============================================================================
# Tests for InvalidSettingsError
# ============================================================================


@pytest.mark.unit
def test_invalid_settings_error_default_message():
    """A default message names the key."""
    error = InvalidSettingsError("source.path")

    assert error.key == "source.path"
    assert str(error) == "Invalid value for setting 'source.path'"


@pytest.mark.unit
def test_invalid_settings_error_custom_message():
    """A custom message replaces the default."""
    error = InvalidSettingsError("workers", "'workers' must be at least 1")

    assert error.message == "'workers' must be at least 1"
    assert str(error) == "'workers' must be at least 1"
