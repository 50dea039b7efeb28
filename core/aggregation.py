"""
Sales aggregation for a single input file.

The accumulator is fed one SaleBatch at a time during the sequential scan of a
file, and the final summary is derived from it once the scan is over.
"""

from typing import Callable, Optional, TypeVar

from core.models import FileAggregateSummary, SaleBatch, SalesTotals

V = TypeVar("V")


def accumulate(totals: SalesTotals, batch: SaleBatch) -> None:
    """
    Fold one sale into the running totals.

    The batch's revenue is stored under its sale id and its item count under
    its seller name. Existing entries are overwritten, not added to: when two
    sale lines of a file share a sale id (or a seller), the later line's value
    is the one that counts.

    Args:
        totals: The accumulator of the file being scanned.
        batch: The sale to fold in.
    """
    totals.revenue_by_sale_id[batch.sale_id] = batch.revenue
    totals.items_sold_by_seller[batch.seller_name] = batch.item_count


def _first_key_by(
    values: dict[str, V], better: Callable[[V, V], bool]
) -> Optional[str]:
    # Single pass in insertion order; a later key only wins when strictly better.
    best_key: Optional[str] = None
    best_value: Optional[V] = None
    for key, value in values.items():
        if best_key is None or better(value, best_value):  # type: ignore[arg-type]
            best_key, best_value = key, value
    return best_key


def top_sale_id(totals: SalesTotals) -> Optional[str]:
    """
    Return the sale id with the highest revenue.

    Ties go to the sale id that was seen first in the file.

    Returns:
        The sale id, or None when the file had no sale lines.
    """
    return _first_key_by(totals.revenue_by_sale_id, lambda a, b: a > b)


def least_active_seller(totals: SalesTotals) -> Optional[str]:
    """
    Return the seller with the fewest items sold.

    Ties go to the seller that was seen first in the file.

    Returns:
        The seller name, or None when the file had no sale lines.
    """
    return _first_key_by(totals.items_sold_by_seller, lambda a, b: a < b)


def build_summary(
    client_count: int, seller_count: int, totals: SalesTotals
) -> FileAggregateSummary:
    """
    Build the immutable summary of a fully scanned file.

    Args:
        client_count: Number of client lines found.
        seller_count: Number of seller lines found.
        totals: The file's sales totals.

    Returns:
        FileAggregateSummary: The summary; sale related fields are None when
        the file had no sale lines.
    """
    return FileAggregateSummary(
        client_count=client_count,
        seller_count=seller_count,
        top_sale_id=top_sale_id(totals),
        least_active_seller=least_active_seller(totals),
    )
