"""
Core data models for the file processing pipeline.

This module defines the records produced by the line parser, the per-file
sales accumulator, the immutable summary handed to the report writer and the
result returned for every processed file.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from core.exceptions import FileIOError, MalformedRecordError
from models import ParseStatus, RecordKind, TaskState


@dataclass(frozen=True)
class ClientRecord:
    kind: RecordKind = RecordKind.CLIENT


@dataclass(frozen=True)
class SellerRecord:
    kind: RecordKind = RecordKind.SELLER


@dataclass(frozen=True)
class ItemEntry:
    """
    One item of a sale, e.g. `2-30-2.50`.

    Attributes:
        item_id: Identifier of the item, kept as text.
        quantity: Number of units sold, never negative.
        unit_price: Price of a single unit, never negative.
    """

    item_id: str
    quantity: int
    unit_price: Decimal

    @property
    def total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class SaleBatch:
    """
    A sale line: identifier, sold items and the seller who made the sale.

    Attributes:
        sale_id: Identifier of the sale.
        items: Items in the order they appear on the line.
        seller_name: Name of the seller.
    """

    sale_id: str
    items: tuple[ItemEntry, ...]
    seller_name: str
    kind: RecordKind = field(default=RecordKind.SALE_BATCH, init=False)

    @property
    def revenue(self) -> Decimal:
        """Sum of quantity x unit price over every item."""
        return sum((item.total for item in self.items), Decimal(0))

    @property
    def item_count(self) -> int:
        """Sum of quantities over every item."""
        return sum(item.quantity for item in self.items)


Record = Union[ClientRecord, SellerRecord, SaleBatch]


@dataclass(frozen=True)
class ParseResult:
    """
    Tagged outcome of parsing one line.

    Exactly one of `record` (PARSED) or `error` (FAILED) is set; SKIPPED
    carries neither. Callers branch on `status` instead of catching exceptions,
    which keeps "ignore this line" apart from "abandon this file".
    """

    status: ParseStatus
    record: Optional[Record] = None
    error: Optional[MalformedRecordError] = None

    @classmethod
    def parsed(cls, record: Record) -> "ParseResult":
        return cls(ParseStatus.PARSED, record=record)

    @classmethod
    def skipped(cls) -> "ParseResult":
        return cls(ParseStatus.SKIPPED)

    @classmethod
    def failed(cls, error: MalformedRecordError) -> "ParseResult":
        return cls(ParseStatus.FAILED, error=error)


class SalesTotals:
    """
    Running totals of one file's sale lines.

    Both mappings are plain assignments keyed by sale id and seller name: a
    later sale line with an already seen key replaces the earlier value. The
    key keeps its first insertion position, which is what the summary's
    tie-break relies on.
    """

    def __init__(self) -> None:
        self.revenue_by_sale_id: dict[str, Decimal] = {}
        self.items_sold_by_seller: dict[str, int] = {}

    def __bool__(self) -> bool:
        return bool(self.revenue_by_sale_id)


@dataclass(frozen=True)
class FileAggregateSummary:
    """
    Everything the report needs to know about one file.

    Attributes:
        client_count: Number of client lines.
        seller_count: Number of seller lines.
        top_sale_id: Sale id with the highest revenue, None without sale lines.
        least_active_seller: Seller with the fewest items sold, None without sale lines.
    """

    client_count: int
    seller_count: int
    top_sale_id: Optional[str] = None
    least_active_seller: Optional[str] = None


@dataclass(frozen=True)
class FileTaskResult:
    """
    Final outcome of processing a single input file.

    Attributes:
        source_path: The input file.
        state: Terminal state, DELETED on success or FAILED.
        transitions: Every state the task went through, in order.
        output_path: The report written for the file, when one was written.
        summary: The file's summary, once the whole file was read.
        error: The error that moved the task to FAILED.
    """

    source_path: Path
    state: TaskState
    transitions: tuple[TaskState, ...]
    output_path: Optional[Path] = None
    summary: Optional[FileAggregateSummary] = None
    error: Optional[Union[FileIOError, MalformedRecordError, Exception]] = None

    @property
    def succeeded(self) -> bool:
        return self.state is TaskState.DELETED
