"""
Scheduling loop: poll the source directory and hand files to a worker pool.

The pool is created once and reused for the lifetime of the dispatcher. A
path stays "in flight" from the moment it is submitted until its task ends,
and a path in flight is never submitted again, so overlapping poll cycles do
not process the same file twice. Files the pool cannot start yet simply wait
in its queue.

A file whose task failed stays in the source directory and later cycles leave
it alone until its modification time changes, which is how an operator signals
that it was fixed. A file that failed only because it could not be deleted
after its report was written is picked up again on the next cycle.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for_futures
from pathlib import Path
from types import TracebackType
from typing import Optional

from adapters.directory import DirectoryWatcher
from constants import DEFAULT_MAX_WORKERS, DEFAULT_POLL_INTERVAL
from core.exceptions import DirectoryUnavailableError, FileDiscardError
from core.file_io import FilesystemFileWriter
from core.models import FileTaskResult
from core.processing import FileTaskProcessor
from models import TaskState

logger = logging.getLogger(__name__)


def _mtime_ns(path: Path) -> Optional[int]:
    try:
        return path.stat().st_mtime_ns
    except OSError:
        return None


class Dispatcher:
    """
    Polls a directory and processes every discovered file on a bounded pool.

    Attributes:
        source_dir: Directory scanned for input files.
        watcher: Lists eligible files on each cycle.
        processor: Processes one file. Its `destination_dir` is checked before
            each cycle submits work.
        poll_interval: Seconds to wait between two cycles. Zero re-polls
            immediately.
        max_workers: Size of the worker pool.
    """

    def __init__(
        self,
        source_dir: Path,
        processor: FileTaskProcessor,
        watcher: DirectoryWatcher | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if poll_interval < 0:
            raise ValueError("poll_interval must not be negative")

        self.source_dir = source_dir
        self.processor = processor
        self.watcher = watcher if watcher is not None else DirectoryWatcher()
        self.poll_interval = poll_interval
        self.max_workers = max_workers

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="file-task"
        )
        self._lock = threading.Lock()
        self._in_flight: set[Path] = set()
        # Failed files left in place, keyed to their mtime at submission
        self._abandoned: dict[Path, int] = {}

    def __enter__(self) -> "Dispatcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.shutdown(wait=True)

    @property
    def in_flight(self) -> frozenset[Path]:
        """Snapshot of the paths submitted and not yet finished."""
        with self._lock:
            return frozenset(self._in_flight)

    @property
    def abandoned(self) -> frozenset[Path]:
        """Snapshot of the failed files skipped until they are modified."""
        with self._lock:
            return frozenset(self._abandoned)

    def poll_once(self) -> list[Future[FileTaskResult]]:
        """
        Run one poll cycle.

        Lists the source directory and submits every eligible file that is
        neither in flight nor abandoned after a failure. A source directory
        that cannot be listed, or a destination directory that cannot receive
        reports, is logged and the cycle submits nothing.

        Returns:
            list[Future]: One future per file submitted during this cycle.
        """
        try:
            paths = self.watcher.list_eligible_files(self.source_dir)
            FilesystemFileWriter.ensure_writable_directory(
                self.processor.destination_dir
            )
        except DirectoryUnavailableError as e:
            logger.error("Skipping poll cycle: %s", e.message)
            return []

        self._forget_missing(paths)

        futures: list[Future[FileTaskResult]] = []
        for path in paths:
            mtime = _mtime_ns(path)
            with self._lock:
                if path in self._in_flight:
                    continue
                if path in self._abandoned:
                    if mtime is not None and self._abandoned[path] == mtime:
                        continue
                    del self._abandoned[path]
                    logger.info("File %s changed since it failed, retrying", path)
                self._in_flight.add(path)

            try:
                future = self._executor.submit(self.processor.process, path)
            except RuntimeError:
                # Pool already shut down
                with self._lock:
                    self._in_flight.discard(path)
                break

            future.add_done_callback(
                lambda f, p=path, m=mtime: self._on_task_done(p, m, f)
            )
            futures.append(future)

        if futures:
            logger.debug("Submitted %d file(s) from %s", len(futures), self.source_dir)
        return futures

    def run_until_idle(self) -> list[FileTaskResult]:
        """
        Run one poll cycle and wait for every file it submitted.

        Returns:
            list[FileTaskResult]: The results of this cycle's files.
        """
        futures = self.poll_once()
        wait_for_futures(futures)
        return [f.result() for f in futures if not f.cancelled()]

    def run_forever(self, stop_event: threading.Event | None = None) -> None:
        """
        Poll the source directory until the stop event is set.

        The wait between cycles returns early when the event is set, so a
        stop request is honored within one cycle.

        Args:
            stop_event: Event ending the loop. Without one, the loop only ends
                with the process.
        """
        stop_event = stop_event if stop_event is not None else threading.Event()
        logger.info(
            "Watching %s every %ss with %d worker(s)",
            self.source_dir,
            self.poll_interval,
            self.max_workers,
        )
        while not stop_event.is_set():
            self.poll_once()
            stop_event.wait(self.poll_interval)
        logger.info("Stop requested, no more files will be picked up")

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop the worker pool.

        Files that were queued but not started are dropped from the queue and
        stay in the source directory untouched. Files already being processed
        run to completion when `wait` is True.

        Args:
            wait: Block until running tasks are finished.
        """
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def _forget_missing(self, paths: list[Path]) -> None:
        listed = set(paths)
        with self._lock:
            for path in [p for p in self._abandoned if p not in listed]:
                del self._abandoned[path]

    def _on_task_done(
        self, path: Path, mtime: Optional[int], future: Future[FileTaskResult]
    ) -> None:
        abandon = False
        if future.cancelled():
            logger.info("File %s left for a later run", path)
        elif future.exception() is not None:
            logger.error("Task for file %s raised: %s", path, future.exception())
        else:
            result = future.result()
            abandon = (
                result.state is TaskState.FAILED
                and not isinstance(result.error, FileDiscardError)
                and mtime is not None
            )

        # Updated together: a finished path is never in neither set
        with self._lock:
            if abandon:
                self._abandoned[path] = mtime  # type: ignore[assignment]
            self._in_flight.discard(path)

        if abandon:
            logger.warning("File %s left in place until it is modified", path)
