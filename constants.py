"""
Application-wide constants for the sales inbox daemon.

This module defines the file naming conventions, the line format separators,
the fixed report layout and the runtime defaults used throughout the
application.
"""

import os
from pathlib import Path
from typing import Final

# File naming. Input files are picked up by extension; reports replace that
# extension with OUTPUT_SUFFIX. Reports are written under a temporary name
# ending in PARTIAL_SUFFIX and renamed once complete, so a half-written report
# never carries its final name.
INPUT_EXTENSION: Final[str] = ".txt"
OUTPUT_SUFFIX: Final[str] = ".done.txt"
PARTIAL_SUFFIX: Final[str] = ".part"

# Line format, e.g. 003,10,[1-10-100;2-30-2.50],Pedro
FIELD_SEPARATOR: Final[str] = ","
ITEM_SEPARATOR: Final[str] = ";"
ITEM_FIELD_SEPARATOR: Final[str] = "-"
ITEM_LIST_OPEN: Final[str] = "["
ITEM_LIST_CLOSE: Final[str] = "]"
SALE_BATCH_MIN_FIELDS: Final[int] = 4
ITEM_FIELD_COUNT: Final[int] = 3

# Report layout, one label per line in this order.
REPORT_CLIENT_COUNT: Final[str] = "-> Number of Clients found in the file: "
REPORT_SELLER_COUNT: Final[str] = "-> Number of Sellers found in the file: "
REPORT_TOP_SALE: Final[str] = "-> Sales id of the biggest sale: "
REPORT_LEAST_ACTIVE_SELLER: Final[str] = "-> Name of the Seller that sold less items: "
REPORT_ABSENT_VALUE: Final[str] = "none"

# Runtime defaults
DEFAULT_POLL_INTERVAL: Final[float] = 1.0
DEFAULT_MAX_WORKERS: Final[int] = (os.cpu_count() or 1) * 2

CONFIG_DIR: Final[Path] = Path.home() / ".sales_inbox"
CONFIG_FILE: Final[Path] = CONFIG_DIR / "settings.json"
