"""
Tests for the file_io module using pytest.

Tests cover:
- FilesystemFileReader: streaming lines, reading whole files, read errors
- FilesystemFileWriter: durable writes, failed writes leave nothing behind, discarding files
- MockFileReader: configurable lines and call tracking
- MockFileWriter: ordered call log and configurable failures
"""

import os
from pathlib import Path

import pytest

from core.exceptions import (
    DirectoryUnavailableError,
    FileDiscardError,
    FileReadError,
    WriteFailureError,
)
from core.file_io import (
    FilesystemFileReader,
    FilesystemFileWriter,
    MockFileReader,
    MockFileWriter,
)


# ============================================================================
# Tests for FilesystemFileReader
# ============================================================================


@pytest.mark.unit
def test_stream_lines_strips_terminators(tmp_path):
    """Lines are yielded without their line terminators."""
    file_path = tmp_path / "in.txt"
    file_path.write_bytes(b"001,a\r\n002,b\n003,c")

    lines = list(FilesystemFileReader().stream_lines(file_path))

    assert lines == ["001,a", "002,b", "003,c"]


@pytest.mark.unit
def test_stream_lines_is_lazy(tmp_path):
    """Nothing is read until the generator is consumed."""
    file_path = tmp_path / "missing.txt"

    stream = FilesystemFileReader().stream_lines(file_path)

    with pytest.raises(FileReadError):
        next(stream)


@pytest.mark.unit
def test_stream_lines_missing_file(tmp_path):
    """A missing file is a FileReadError carrying the path."""
    file_path = tmp_path / "missing.txt"

    with pytest.raises(FileReadError) as exc_info:
        list(FilesystemFileReader().stream_lines(file_path))

    assert exc_info.value.file_path == str(file_path)
    assert isinstance(exc_info.value.original_exception, FileNotFoundError)


@pytest.mark.unit
def test_stream_lines_invalid_utf8(tmp_path):
    """Bytes that are not UTF-8 are a read error, not silently dropped."""
    file_path = tmp_path / "latin1.txt"
    file_path.write_bytes("001,José\n".encode("latin-1"))

    with pytest.raises(FileReadError) as exc_info:
        list(FilesystemFileReader().stream_lines(file_path))

    assert exc_info.value.diagnostic_info["type"] == "UnicodeDecodeError"


@pytest.mark.unit
def test_read_file(tmp_path):
    """Whole file content is returned."""
    file_path = tmp_path / "settings.json"
    file_path.write_text('{"a": 1}', encoding="utf-8")

    assert FilesystemFileReader().read_file(file_path) == '{"a": 1}'


@pytest.mark.unit
def test_read_file_missing(tmp_path):
    """A missing file raises FileReadError."""
    with pytest.raises(FileReadError):
        FilesystemFileReader().read_file(tmp_path / "nope.json")


# ============================================================================
# Tests for FilesystemFileWriter
# ============================================================================


@pytest.mark.unit
def test_write_file_creates_file(tmp_path):
    """Data is written under the final name."""
    file_path = tmp_path / "out.done.txt"

    FilesystemFileWriter().write_file(file_path, "content\n")

    assert file_path.read_text(encoding="utf-8") == "content\n"


@pytest.mark.unit
def test_write_file_replaces_existing(tmp_path):
    """An existing file is replaced, not appended to."""
    file_path = tmp_path / "out.done.txt"
    file_path.write_text("old", encoding="utf-8")

    FilesystemFileWriter().write_file(file_path, "new")

    assert file_path.read_text(encoding="utf-8") == "new"


@pytest.mark.unit
def test_write_file_leaves_no_temporary_file(tmp_path):
    """Only the final file remains after a successful write."""
    FilesystemFileWriter().write_file(tmp_path / "out.done.txt", "x")

    assert [p.name for p in tmp_path.iterdir()] == ["out.done.txt"]


@pytest.mark.unit
def test_write_file_missing_parent(tmp_path):
    """A missing parent directory is a write failure."""
    file_path = tmp_path / "missing" / "out.done.txt"

    with pytest.raises(WriteFailureError) as exc_info:
        FilesystemFileWriter().write_file(file_path, "x")

    assert isinstance(exc_info.value.original_exception, DirectoryUnavailableError)


@pytest.mark.unit
@pytest.mark.mock
def test_write_file_failure_removes_partial_file(tmp_path, mocker):
    """When the final rename fails, neither the final nor the temporary file remains."""
    file_path = tmp_path / "out.done.txt"
    mocker.patch("core.file_io.os.replace", side_effect=OSError("Disk full"))

    with pytest.raises(WriteFailureError) as exc_info:
        FilesystemFileWriter().write_file(file_path, "x")

    assert "Failed to write to file" in str(exc_info.value)
    assert list(tmp_path.iterdir()) == []


@pytest.mark.unit
@pytest.mark.mock
def test_write_file_open_error(tmp_path, mocker):
    """An error opening the temporary file is a write failure."""
    mocker.patch("builtins.open", side_effect=PermissionError("Permission denied"))

    with pytest.raises(WriteFailureError) as exc_info:
        FilesystemFileWriter().write_file(tmp_path / "out.done.txt", "x")

    assert exc_info.value.diagnostic_info["type"] == "PermissionError"


@pytest.mark.unit
def test_ensure_writable_directory(tmp_path):
    """An existing directory passes; a file or a missing path does not."""
    FilesystemFileWriter.ensure_writable_directory(tmp_path)

    a_file = tmp_path / "file.txt"
    a_file.write_text("x", encoding="utf-8")
    with pytest.raises(DirectoryUnavailableError):
        FilesystemFileWriter.ensure_writable_directory(a_file)
    with pytest.raises(DirectoryUnavailableError):
        FilesystemFileWriter.ensure_writable_directory(tmp_path / "missing")


@pytest.mark.unit
@pytest.mark.mock
def test_ensure_writable_directory_read_only(tmp_path, mocker):
    """A directory without write access is unavailable."""
    mocker.patch("core.file_io.os.access", return_value=False)

    with pytest.raises(DirectoryUnavailableError) as exc_info:
        FilesystemFileWriter.ensure_writable_directory(tmp_path)

    assert "not writable" in exc_info.value.message


@pytest.mark.unit
def test_discard_deletes_file(tmp_path):
    """discard() removes the file."""
    file_path = tmp_path / "in.txt"
    file_path.write_text("x", encoding="utf-8")

    FilesystemFileWriter().discard(file_path)

    assert not file_path.exists()


@pytest.mark.unit
def test_discard_missing_file(tmp_path):
    """Discarding a file that is gone raises FileDiscardError."""
    file_path = tmp_path / "gone.txt"

    with pytest.raises(FileDiscardError) as exc_info:
        FilesystemFileWriter().discard(file_path)

    assert "no longer exists" in str(exc_info.value)


@pytest.mark.unit
@pytest.mark.mock
def test_discard_os_error(tmp_path, mocker):
    """Other OS errors while deleting raise FileDiscardError."""
    file_path = tmp_path / "in.txt"
    file_path.write_text("x", encoding="utf-8")
    mocker.patch.object(Path, "unlink", side_effect=PermissionError("locked"))

    with pytest.raises(FileDiscardError) as exc_info:
        FilesystemFileWriter().discard(file_path)

    assert "Failed to discard file" in str(exc_info.value)
    assert file_path.exists()


# ============================================================================
# Tests for the mocks
# ============================================================================


@pytest.mark.unit
def test_mock_file_reader_fixed_lines():
    """MockFileReader yields the configured lines and tracks calls."""
    reader = MockFileReader(lines=["001,a", "002,b"])

    assert list(reader.stream_lines(Path("a.txt"))) == ["001,a", "002,b"]
    assert reader.read_file(Path("b.txt")) == "001,a\n002,b"
    assert reader.read_file_calls == [Path("a.txt"), Path("b.txt")]


@pytest.mark.unit
def test_mock_file_reader_function():
    """MockFileReader can compute lines per path."""
    reader = MockFileReader(read_lines_fn=lambda p: [p.stem])

    assert list(reader.stream_lines(Path("x.txt"))) == ["x"]
    assert list(MockFileReader().stream_lines(Path("y.txt"))) == []


@pytest.mark.unit
def test_mock_file_writer_records_order():
    """Writes and discards are logged in call order."""
    writer = MockFileWriter()

    writer.write_file(Path("out.done.txt"), "data")
    writer.discard(Path("in.txt"))

    assert writer.calls == [("write", Path("out.done.txt")), ("discard", Path("in.txt"))]
    assert writer.written == {Path("out.done.txt"): "data"}
    assert writer.discarded == [Path("in.txt")]


@pytest.mark.unit
def test_mock_file_writer_failures():
    """Configured failures are raised and nothing is recorded as written."""
    writer = MockFileWriter(
        fail_write=WriteFailureError("nope"), fail_discard=FileDiscardError("nope")
    )

    with pytest.raises(WriteFailureError):
        writer.write_file(Path("out.done.txt"), "data")
    with pytest.raises(FileDiscardError):
        writer.discard(Path("in.txt"))

    assert writer.written == {}
    assert writer.discarded == []
    assert len(writer.calls) == 2


@pytest.mark.unit
def test_os_name_in_diagnostics(tmp_path):
    """Diagnostic info records the OS name."""
    with pytest.raises(FileReadError) as exc_info:
        FilesystemFileReader().read_file(tmp_path / "nope")

    assert exc_info.value.diagnostic_info["os_name"] == os.name
