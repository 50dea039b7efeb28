"""
Per-file processing: parse, aggregate, write the report, delete the input.

A file task moves through DISCOVERED -> READING -> AGGREGATING -> WRITING ->
DELETED, or ends in FAILED from any of the non-terminal states. The input file
is deleted only after its report was written successfully; any failure before
that point leaves the input untouched and no report under its final name.
"""

import logging
import threading
from pathlib import Path

from core.aggregation import accumulate, build_summary
from core.exceptions import FileIOError, MalformedRecordError
from core.file_io import (
    FileReader,
    FileWriter,
    FilesystemFileReader,
    FilesystemFileWriter,
)
from core.models import (
    FileAggregateSummary,
    FileTaskResult,
    SaleBatch,
    SalesTotals,
)
from core.parsing import parse_line
from core.report import FilesystemReportWriter, ReportWriter
from models import ParseStatus, RecordKind, TaskState

logger = logging.getLogger(__name__)


class ProcessedFileCounter:
    """
    Thread-safe count of files processed successfully.

    One instance, PROCESSED_FILES, lives for the whole process and is shared
    by every worker thread; tests use their own instances.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> int:
        """Add one processed file and return the new total."""
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


PROCESSED_FILES = ProcessedFileCounter()


class _TaskTrace:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.transitions: list[TaskState] = [TaskState.DISCOVERED]

    @property
    def state(self) -> TaskState:
        return self.transitions[-1]

    def advance(self, state: TaskState) -> None:
        if self.state is not state:
            self.transitions.append(state)
            logger.debug("%s: %s", self.path, state.value)

    def result(self, **kwargs) -> FileTaskResult:
        return FileTaskResult(
            source_path=self.path,
            state=self.state,
            transitions=tuple(self.transitions),
            **kwargs,
        )


class FileTaskProcessor:
    """
    Processes one input file end to end.

    Each call to process() owns its own counters and sales totals, so a
    single processor can safely be shared by every worker thread.

    Attributes:
        destination_dir: Directory receiving the reports.
        reader: Reader used to stream the input lines.
        report_writer: Writer used to persist the report.
        file_writer: Writer used to delete the consumed input.
        counter: Process-wide count of successfully processed files.
    """

    def __init__(
        self,
        destination_dir: Path,
        reader: FileReader | None = None,
        report_writer: ReportWriter | None = None,
        file_writer: FileWriter | None = None,
        counter: ProcessedFileCounter | None = None,
    ):
        self.destination_dir = destination_dir
        self.reader = reader if reader is not None else FilesystemFileReader()
        self.file_writer = (
            file_writer if file_writer is not None else FilesystemFileWriter()
        )
        self.report_writer = (
            report_writer
            if report_writer is not None
            else FilesystemReportWriter(self.file_writer)
        )
        self.counter = counter if counter is not None else PROCESSED_FILES

    def process(self, path: Path) -> FileTaskResult:
        """
        Process one input file.

        File level failures never propagate: they are logged at error level
        with the file path and reported through the returned result.

        Args:
            path: The input file.

        Returns:
            FileTaskResult: DELETED with the report path on success, FAILED
            with the error otherwise.
        """
        trace = _TaskTrace(path)
        logger.info("Processing file: %s", path)

        summary: FileAggregateSummary | None = None
        try:
            summary = self._scan(path, trace)

            trace.advance(TaskState.WRITING)
            output_path = self.report_writer.write(
                self.destination_dir, path.name, summary
            )

            self.file_writer.discard(path)
            trace.advance(TaskState.DELETED)
        except (MalformedRecordError, FileIOError) as e:
            trace.advance(TaskState.FAILED)
            logger.error("Failed to process file %s: %s", path, e)
            return trace.result(summary=summary, error=e)
        except Exception as e:  # noqa: BLE001
            # A bug in one file's task must not take the worker pool down
            trace.advance(TaskState.FAILED)
            logger.exception("Unexpected error while processing file %s", path)
            return trace.result(summary=summary, error=e)

        total = self.counter.increment()
        logger.info("File %s processed and deleted, report: %s", path, output_path)
        logger.info("Total files processed: %d", total)
        return trace.result(output_path=output_path, summary=summary)

    def _scan(self, path: Path, trace: _TaskTrace) -> FileAggregateSummary:
        """
        Stream the file once, counting records and folding sales into totals.

        Raises:
            MalformedRecordError: On the first malformed line, located in the file.
            FileReadError: If the file cannot be read.
        """
        trace.advance(TaskState.READING)

        client_count = 0
        seller_count = 0
        totals = SalesTotals()

        for line_number, line in enumerate(self.reader.stream_lines(path), start=1):
            result = parse_line(line)

            match result.status:
                case ParseStatus.SKIPPED:
                    continue
                case ParseStatus.FAILED:
                    raise result.error.at(line_number, str(path))  # type: ignore[union-attr]

            trace.advance(TaskState.AGGREGATING)
            record = result.record
            if isinstance(record, SaleBatch):
                accumulate(totals, record)
            elif record is not None and record.kind is RecordKind.CLIENT:
                client_count += 1
            elif record is not None and record.kind is RecordKind.SELLER:
                seller_count += 1

        trace.advance(TaskState.AGGREGATING)
        summary = build_summary(client_count, seller_count, totals)

        logger.debug("Number of clients in %s: %d", path, summary.client_count)
        logger.debug("Number of sellers in %s: %d", path, summary.seller_count)
        logger.debug("Biggest sale in %s: %s", path, summary.top_sale_id)
        logger.debug(
            "Seller with fewest items in %s: %s", path, summary.least_active_seller
        )
        return summary
