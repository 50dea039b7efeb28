"""
Daemon configuration.

Settings come from a JSON file (by default ~/.sales_inbox/settings.json)
and can be overridden from the command line:

    {
        "source.path": "/data/in",
        "destination.path": "/data/out",
        "poll.interval": 1.0,
        "workers": 8
    }

Both directories are required. Configuration problems are reported once, at
startup, as InvalidSettingsError.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from constants import CONFIG_FILE, DEFAULT_MAX_WORKERS, DEFAULT_POLL_INTERVAL
from core.exceptions import FileReadError, InvalidSettingsError
from core.file_io import FilesystemFileReader, FilesystemFileWriter
from models import SettingsDict

SOURCE_PATH_KEY = "source.path"
DESTINATION_PATH_KEY = "destination.path"
POLL_INTERVAL_KEY = "poll.interval"
WORKERS_KEY = "workers"


@dataclass(frozen=True)
class Settings:
    """
    Validated daemon settings.

    Attributes:
        source_path: Existing, readable directory scanned for input files.
        destination_path: Existing, writable directory receiving reports.
        poll_interval: Seconds between two scans of the source directory.
        max_workers: Size of the worker pool.
    """

    source_path: Path
    destination_path: Path
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_workers: int = DEFAULT_MAX_WORKERS


def get_config_file(config_file: Path = CONFIG_FILE) -> SettingsDict:
    """
    Read the JSON settings file.

    Args:
        config_file: Location of the settings file.

    Returns:
        SettingsDict: The stored values, or an empty dict when the file does
        not exist.

    Raises:
        InvalidSettingsError: If the file cannot be read or is not a JSON object.
    """
    if not config_file.exists():
        return {}
    try:
        data = json.loads(FilesystemFileReader().read_file(config_file))
    except FileReadError as e:
        raise InvalidSettingsError(str(config_file), e.message) from e
    except json.JSONDecodeError as e:
        raise InvalidSettingsError(
            str(config_file), f"Settings file is not valid JSON: {config_file} ({e})"
        ) from e
    if not isinstance(data, dict):
        raise InvalidSettingsError(
            str(config_file), f"Settings file must hold a JSON object: {config_file}"
        )
    return data  # type: ignore[return-value]


def save_config(
    source_path: Path, destination_path: Path, config_file: Path = CONFIG_FILE
) -> None:
    """
    Store the source and destination directories in the settings file.

    Other keys already present in the file are preserved.

    Raises:
        InvalidSettingsError: If the existing file is unreadable.
        WriteFailureError: If the file cannot be written.
    """
    data: dict[str, Any] = dict(get_config_file(config_file))
    data[SOURCE_PATH_KEY] = str(source_path)
    data[DESTINATION_PATH_KEY] = str(destination_path)

    config_file.parent.mkdir(parents=True, exist_ok=True)
    FilesystemFileWriter().write_file(config_file, json.dumps(data, indent=2))


def _require_directory(key: str, value: Any, access: int) -> Path:
    if value is None or str(value).strip() == "":
        raise InvalidSettingsError(key, f"Setting '{key}' is required")

    path = Path(str(value)).expanduser()
    if not path.is_dir():
        raise InvalidSettingsError(key, f"'{key}' is not an existing directory: {path}")
    if not os.access(path, access):
        verb = "readable" if access & os.R_OK else "writable"
        raise InvalidSettingsError(key, f"'{key}' is not {verb}: {path}")
    return path.resolve()


def _number(key: str, value: Any, kind: type) -> Any:
    if isinstance(value, bool):
        raise InvalidSettingsError(key, f"'{key}' must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise InvalidSettingsError(key, f"'{key}' must be a number, got {value!r}") from e


def load_settings(
    config: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """
    Merge file values with overrides and validate the result.

    Override values that are None are ignored, so CLI options that were not
    given leave the file values in place.

    Args:
        config: Values read from the settings file.
        overrides: Values given on the command line, keyed like the file.

    Returns:
        Settings: The validated settings.

    Raises:
        InvalidSettingsError: If a directory is missing or inaccessible, or a
            numeric setting is out of range.
    """
    merged: dict[str, Any] = dict(config or {})
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})

    source_path = _require_directory(
        SOURCE_PATH_KEY, merged.get(SOURCE_PATH_KEY), os.R_OK | os.X_OK
    )
    destination_path = _require_directory(
        DESTINATION_PATH_KEY, merged.get(DESTINATION_PATH_KEY), os.W_OK | os.X_OK
    )

    poll_interval = _number(
        POLL_INTERVAL_KEY, merged.get(POLL_INTERVAL_KEY, DEFAULT_POLL_INTERVAL), float
    )
    if not poll_interval >= 0:
        raise InvalidSettingsError(
            POLL_INTERVAL_KEY, f"'{POLL_INTERVAL_KEY}' must not be negative"
        )

    max_workers = _number(
        WORKERS_KEY, merged.get(WORKERS_KEY, DEFAULT_MAX_WORKERS), int
    )
    if max_workers < 1:
        raise InvalidSettingsError(WORKERS_KEY, f"'{WORKERS_KEY}' must be at least 1")

    return Settings(
        source_path=source_path,
        destination_path=destination_path,
        poll_interval=poll_interval,
        max_workers=max_workers,
    )
