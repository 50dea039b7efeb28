"""
Report rendering and persistence.

A report is a fixed four line text file in the destination directory. Its
name is derived from the input file name only, so reprocessing an input
always targets the same report.
"""

from pathlib import Path
from typing import Optional, Protocol

from constants import (
    INPUT_EXTENSION,
    OUTPUT_SUFFIX,
    REPORT_ABSENT_VALUE,
    REPORT_CLIENT_COUNT,
    REPORT_LEAST_ACTIVE_SELLER,
    REPORT_SELLER_COUNT,
    REPORT_TOP_SALE,
)
from core.exceptions import WriteFailureError
from core.file_io import FileWriter, FilesystemFileWriter
from core.models import FileAggregateSummary


def output_name_for(input_name: str) -> str:
    """
    Derive the report file name for an input file name.

    Only a trailing `.txt` is replaced: `orders.txt` becomes `orders.done.txt`.
    A name without that extension gets `.done.txt` appended.

    Args:
        input_name: The input file name (no directory part).

    Returns:
        str: The report file name.
    """
    if input_name.endswith(INPUT_EXTENSION):
        input_name = input_name[: -len(INPUT_EXTENSION)]
    return f"{input_name}{OUTPUT_SUFFIX}"


def _value_or_absent(value: Optional[str]) -> str:
    return value if value is not None else REPORT_ABSENT_VALUE


def render_report(summary: FileAggregateSummary) -> str:
    """
    Render a summary as report text.

    Sale related values that are absent (a file without sale lines) are
    rendered as `none`.

    Args:
        summary: The summary of one file.

    Returns:
        str: Four newline terminated lines.
    """
    lines = [
        f"{REPORT_CLIENT_COUNT}{summary.client_count}",
        f"{REPORT_SELLER_COUNT}{summary.seller_count}",
        f"{REPORT_TOP_SALE}{_value_or_absent(summary.top_sale_id)}",
        f"{REPORT_LEAST_ACTIVE_SELLER}{_value_or_absent(summary.least_active_seller)}",
    ]
    return "\n".join(lines) + "\n"


class ReportWriter(Protocol):
    """
    Protocol defining how a summary is persisted.
    """

    def write(
        self, destination_dir: Path, input_name: str, summary: FileAggregateSummary
    ) -> Path:
        """
        Persist the report of one input file.

        Args:
            destination_dir: Directory receiving the report.
            input_name: File name of the input the summary was built from.
            summary: The summary to render.

        Returns:
            Path: The written report.

        Raises:
            WriteFailureError: If the report cannot be persisted.
        """


class FilesystemReportWriter:
    """
    Writes rendered reports through a FileWriter.

    Attributes:
        file_writer: The writer used to persist report text.
    """

    def __init__(self, file_writer: FileWriter | None = None):
        self.file_writer = (
            file_writer if file_writer is not None else FilesystemFileWriter()
        )

    def write(
        self, destination_dir: Path, input_name: str, summary: FileAggregateSummary
    ) -> Path:
        output_path = destination_dir / output_name_for(input_name)
        try:
            self.file_writer.write_file(output_path, render_report(summary))
        except WriteFailureError:
            raise
        except OSError as e:
            raise WriteFailureError(
                message=f"Failed to write report: {output_path}",
                file_path=str(output_path),
                original_exception=e,
            ) from e
        return output_path
