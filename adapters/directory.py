"""
Source directory adapter for file discovery.

This module lists the input files waiting in the source directory. It looks
at direct children only and never modifies the directory.
"""

from pathlib import Path
from typing import Generator

from constants import INPUT_EXTENSION, OUTPUT_SUFFIX
from core.exceptions import DirectoryUnavailableError


class DirectoryWatcher:
    """
    Lists eligible input files in a directory.

    A file is eligible when it is a regular file (symlinks are followed, so a
    link to a directory is not eligible), it sits directly in the directory,
    its name ends with the input extension, and it is not itself a report.
    Excluding reports keeps a daemon whose source and destination directories
    are the same from feeding on its own output.

    Attributes:
        extension: Required file name ending of input files.
        exclude_suffixes: File name endings that are never eligible.
    """

    def __init__(
        self,
        extension: str = INPUT_EXTENSION,
        exclude_suffixes: tuple[str, ...] = (OUTPUT_SUFFIX,),
    ):
        self.extension = extension
        self.exclude_suffixes = exclude_suffixes

    def is_eligible(self, path: Path) -> bool:
        """
        Check a single directory entry against the eligibility rules.

        Args:
            path: A direct child of the watched directory.

        Returns:
            bool: True if the entry should be processed.
        """
        name = path.name
        if not name.endswith(self.extension):
            return False
        if any(name.endswith(suffix) for suffix in self.exclude_suffixes):
            return False
        try:
            return path.is_file()
        except OSError:
            return False

    def iter_eligible_files(self, directory: Path) -> Generator[Path, None, None]:
        """
        Lazily yield eligible files of a directory.

        Args:
            directory: The directory to scan.

        Yields:
            Path: Each eligible file, in no particular order.

        Raises:
            DirectoryUnavailableError: If the directory is missing, not a
                directory, or cannot be listed.
        """
        if not directory.is_dir():
            raise DirectoryUnavailableError(
                message=f"Source directory does not exist: {directory}",
                file_path=str(directory),
            )
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            raise DirectoryUnavailableError(
                message=f"Failed to list directory: {directory}",
                file_path=str(directory),
                original_exception=e,
            ) from e

        for entry in entries:
            if self.is_eligible(entry):
                yield entry

    def list_eligible_files(self, directory: Path) -> list[Path]:
        """
        List eligible files of a directory.

        The list is sorted by name for reproducible logs, but callers must
        not rely on any order.

        Args:
            directory: The directory to scan.

        Returns:
            list[Path]: The eligible files.

        Raises:
            DirectoryUnavailableError: If the directory cannot be listed.
        """
        return sorted(self.iter_eligible_files(directory))
