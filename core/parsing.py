"""
Line parser for the input file format.

Every line is a comma separated record whose first field is the record code:

    001,3245678865434,Renato,40000.99                 client
    002,1234567891234,Pedro,50000                     seller
    003,10,[1-10-100;2-30-2.50;3-40-3.10],Pedro       sale

Only the record code matters for client and seller lines; they are counted,
never decoded. Sale lines are fully decoded into a SaleBatch. Sale ids and
seller names are kept exactly as written, so "B" and " B" are two sellers.

Numbers are ASCII only: Python would otherwise accept digit separators such
as "1_0" and digits from other scripts.
"""

from decimal import Decimal, InvalidOperation

from constants import (
    FIELD_SEPARATOR,
    ITEM_FIELD_COUNT,
    ITEM_FIELD_SEPARATOR,
    ITEM_LIST_CLOSE,
    ITEM_LIST_OPEN,
    ITEM_SEPARATOR,
    SALE_BATCH_MIN_FIELDS,
)
from core.exceptions import MalformedRecordError
from core.models import ClientRecord, ItemEntry, ParseResult, SaleBatch, SellerRecord
from models import RecordKind


def parse_line(line: str) -> ParseResult:
    """
    Parse one line into a record.

    Blank lines and lines whose first field is not an integer, or is an
    integer other than 1, 2 or 3, are skipped. A sale line that cannot be
    decoded fails.

    Args:
        line: A single line, with or without its line terminator.

    Returns:
        ParseResult: PARSED with the record, SKIPPED, or FAILED with a
        MalformedRecordError describing the problem.
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return ParseResult.skipped()

    fields = line.split(FIELD_SEPARATOR)
    kind = record_kind(fields[0])

    match kind:
        case RecordKind.CLIENT:
            return ParseResult.parsed(ClientRecord())
        case RecordKind.SELLER:
            return ParseResult.parsed(SellerRecord())
        case RecordKind.SALE_BATCH:
            try:
                return ParseResult.parsed(parse_sale_batch(fields, line))
            except MalformedRecordError as e:
                return ParseResult.failed(e)
        case _:
            return ParseResult.skipped()


def record_kind(code_field: str) -> RecordKind:
    """
    Decode the record code of a line.

    The field is read as a decimal integer, so "003", "03" and "3" are the
    same code.

    Args:
        code_field: The first field of a line.

    Returns:
        RecordKind: The kind for the code, UNRECOGNIZED when the field is not
        an integer or not a known code.
    """
    text = code_field.strip()
    if not _is_ascii_integer(text, signed=True):
        return RecordKind.UNRECOGNIZED
    return RecordKind.from_code(int(text, 10))


def _is_ascii_integer(text: str, signed: bool = False) -> bool:
    digits = text[1:] if signed and text[:1] in ("+", "-") else text
    return digits.isascii() and digits.isdecimal()


def parse_sale_batch(fields: list[str], line: str = "") -> SaleBatch:
    """
    Decode the fields of a sale line.

    Args:
        fields: The comma separated fields, record code included.
        line: The full line, used for error reporting.

    Returns:
        SaleBatch: The decoded sale.

    Raises:
        MalformedRecordError: If a field is missing or an item cannot be decoded.
    """
    if len(fields) < SALE_BATCH_MIN_FIELDS:
        raise MalformedRecordError(
            f"sale line needs {SALE_BATCH_MIN_FIELDS} fields, found {len(fields)}",
            line,
        )

    sale_id = fields[1]
    seller_name = fields[3]
    items = tuple(
        parse_item(entry, line) for entry in _split_item_list(fields[2])
    )
    return SaleBatch(sale_id=sale_id, items=items, seller_name=seller_name)


def _split_item_list(raw: str) -> list[str]:
    # "[a;b;c]" -> ["a", "b", "c"]; "[]" -> [""], which is not a valid item
    body = raw.strip().removeprefix(ITEM_LIST_OPEN).removesuffix(ITEM_LIST_CLOSE)
    return body.split(ITEM_SEPARATOR)


def parse_item(entry: str, line: str = "") -> ItemEntry:
    """
    Decode one `itemId-quantity-price` entry.

    Args:
        entry: The entry text. Stray list brackets are tolerated.
        line: The full line, used for error reporting.

    Returns:
        ItemEntry: The decoded item.

    Raises:
        MalformedRecordError: If the entry does not have exactly three parts,
            or the quantity or price is not a non-negative number.
    """
    tokens = entry.split(ITEM_FIELD_SEPARATOR)
    if len(tokens) != ITEM_FIELD_COUNT:
        raise MalformedRecordError(
            f"item '{entry}' must have {ITEM_FIELD_COUNT} '-' separated parts",
            line,
        )

    item_id = tokens[0].strip().lstrip(ITEM_LIST_OPEN)
    quantity_text = tokens[1].strip()
    price_text = tokens[2].strip().rstrip(ITEM_LIST_CLOSE)

    if not _is_ascii_integer(quantity_text):
        raise MalformedRecordError(
            f"quantity '{quantity_text}' of item '{item_id}' is not an integer", line
        )
    quantity = int(quantity_text, 10)

    price_error = f"price '{price_text}' of item '{item_id}' is not a number"
    if not price_text.isascii() or "_" in price_text:
        raise MalformedRecordError(price_error, line)
    try:
        unit_price = Decimal(price_text)
    except InvalidOperation as e:
        raise MalformedRecordError(price_error, line) from e

    if quantity < 0 or not unit_price.is_finite() or unit_price < 0:
        raise MalformedRecordError(
            f"item '{item_id}' has a negative or non-finite quantity or price", line
        )

    return ItemEntry(item_id=item_id, quantity=quantity, unit_price=unit_price)
