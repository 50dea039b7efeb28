"""
Type definitions and enums shared across the sales inbox daemon.

This module contains the enumerations and TypedDict structures used by the
parsing, processing and configuration layers so that every stage agrees on
record codes, parse outcomes and per-file task states.
"""

from enum import Enum, IntEnum
from typing import TypedDict


class RecordKind(IntEnum):
    """
    Record type carried by the leading field of an input line.

    The values are the decimal record codes found in the files. Leading zeros
    in the input (e.g. "001") are irrelevant because the field is parsed as a
    base-10 integer before it is compared against these values.
    """

    CLIENT = 1
    SELLER = 2
    SALE_BATCH = 3
    UNRECOGNIZED = -1

    @classmethod
    def from_code(cls, code: int) -> "RecordKind":
        """
        Map a parsed record code to its kind.

        Args:
            code: The integer value of the first field of a line.

        Returns:
            RecordKind: The matching kind, or UNRECOGNIZED for any other value.
        """
        if code in (cls.CLIENT, cls.SELLER, cls.SALE_BATCH):
            return cls(code)
        return cls.UNRECOGNIZED


class ParseStatus(Enum):
    """
    Outcome of parsing one line.

    Attributes:
        PARSED: The line produced a record that must be counted or aggregated.
        SKIPPED: The line is blank or carries an unknown record code; ignore it.
        FAILED: The line is structurally broken; the whole file must be abandoned.
    """

    PARSED = "parsed"
    SKIPPED = "skipped"
    FAILED = "failed"


class TaskState(Enum):
    """States a single file moves through while it is being processed."""

    DISCOVERED = "discovered"
    READING = "reading"
    AGGREGATING = "aggregating"
    WRITING = "writing"
    DELETED = "deleted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.DELETED, TaskState.FAILED)


# Keys keep the dotted property names used by existing deployments.
SettingsDict = TypedDict(
    "SettingsDict",
    {
        "source.path": str,
        "destination.path": str,
        "poll.interval": float,
        "workers": int,
    },
    total=False,
)
