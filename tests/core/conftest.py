"""
Shared fixtures for core module tests.

This module provides reusable pytest fixtures for testing core functionality,
including temporary inbox/outbox directories, input file builders and
mock readers and writers.
"""

import pytest

from core.file_io import MockFileReader, MockFileWriter
from core.processing import FileTaskProcessor, ProcessedFileCounter
from core.report import FilesystemReportWriter


SAMPLE_LINES = [
    "001,1234567891234,Pedro,50000",
    "001,3245678865434,Paulo,40000.99",
    "002,2345675434544345,Jose da Silva,Rural",
    "002,2345675433444345,Eduardo Pereira,Rural",
    "003,10,[1-10-100;2-30-2.50;3-40-3.10],Jose da Silva",
    "003,08,[1-34-10;2-33-1.50;3-40-0.10],Eduardo Pereira",
]


@pytest.fixture
def source_dir(tmp_path):
    """Create a temporary source directory."""
    path = tmp_path / "in"
    path.mkdir()
    return path


@pytest.fixture
def destination_dir(tmp_path):
    """Create a temporary destination directory."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def input_file_factory(source_dir):
    """Factory writing an input file into the source directory."""

    def _factory(name="sales.txt", lines=None):
        path = source_dir / name
        content = "\n".join(SAMPLE_LINES if lines is None else lines)
        path.write_text(content + "\n", encoding="utf-8")
        return path

    return _factory


@pytest.fixture
def counter():
    """Counter isolated from the process-wide one."""
    return ProcessedFileCounter()


@pytest.fixture
def mock_file_writer():
    """MockFileWriter recording writes and deletions."""
    return MockFileWriter()


@pytest.fixture
def mock_processor_factory(destination_dir, counter):
    """Factory for processors fed from a MockFileReader and a MockFileWriter."""

    def _factory(lines, file_writer=None):
        writer = file_writer if file_writer is not None else MockFileWriter()
        return FileTaskProcessor(
            destination_dir,
            reader=MockFileReader(lines=lines),
            report_writer=FilesystemReportWriter(writer),
            file_writer=writer,
            counter=counter,
        )

    return _factory


@pytest.fixture
def filesystem_processor(destination_dir, counter):
    """Processor working on the real filesystem."""
    return FileTaskProcessor(destination_dir, counter=counter)
