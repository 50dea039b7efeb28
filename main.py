"""
Sales inbox CLI entry point.

This module implements the command-line interface of the sales inbox daemon.
The daemon watches a source directory for delimited text files, summarizes
the clients, sellers and sales each file contains, writes one report per file
to a destination directory and deletes the input once its report is safely
on disk.

Commands:

1.  **run**: Validates the configuration, then polls the source directory and
    processes every new file on a fixed-size worker pool until the process
    receives SIGINT or SIGTERM. With `--once`, processes the files currently
    waiting and exits.
2.  **configure**: Stores the source and destination directories in the
    settings file so that `run` can be started without options.

Usage:
    $ python main.py run --source /data/in --destination /data/out
    $ python main.py configure --source /data/in --destination /data/out

Dependencies:
    - Typer: CLI argument parsing and app structure.
    - Rich: Terminal output and log formatting.
"""

import signal
import threading
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print as pr

from adapters.directory import DirectoryWatcher
from constants import CONFIG_FILE
from core.dispatcher import Dispatcher
from core.exceptions import FileIOError, InvalidSettingsError
from core.processing import FileTaskProcessor
from core.settings import (
    DESTINATION_PATH_KEY,
    POLL_INTERVAL_KEY,
    SOURCE_PATH_KEY,
    WORKERS_KEY,
    Settings,
    get_config_file,
    load_settings,
    save_config,
)
from ui.console import configure_logging, print_banner, print_results

app = typer.Typer(help="Summarize sales files dropped into a directory.")


@app.command()
def run(
    source: Annotated[
        Optional[Path],
        typer.Option(
            "--source",
            "-s",
            file_okay=False,
            resolve_path=True,
            help="Directory scanned for incoming .txt files",
        ),
    ] = None,
    destination: Annotated[
        Optional[Path],
        typer.Option(
            "--destination",
            "-d",
            file_okay=False,
            resolve_path=True,
            help="Directory receiving the .done.txt reports",
        ),
    ] = None,
    config: Annotated[
        Path,
        typer.Option("--config", "-c", dir_okay=False, help="JSON settings file"),
    ] = CONFIG_FILE,
    interval: Annotated[
        Optional[float],
        typer.Option(min=0, help="Seconds between two scans of the source directory"),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option(min=1, help="Number of files processed in parallel"),
    ] = None,
    once: Annotated[
        bool,
        typer.Option("--once", help="Process the files currently waiting, then exit"),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    ] = "INFO",
):
    """
    Start the daemon.

    Values given on the command line take precedence over the settings file.

    Raises:
        typer.Exit: With code 1 if the configuration is invalid.
    """
    try:
        configure_logging(log_level)
    except ValueError as e:
        pr(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    try:
        settings = load_settings(
            get_config_file(config),
            {
                SOURCE_PATH_KEY: source,
                DESTINATION_PATH_KEY: destination,
                POLL_INTERVAL_KEY: interval,
                WORKERS_KEY: workers,
            },
        )
    except InvalidSettingsError as e:
        print_settings_err(e)
        raise typer.Exit(code=1)

    print_banner(settings)

    dispatcher = build_dispatcher(settings)
    if once:
        with dispatcher:
            print_results(dispatcher.run_until_idle())
        return

    stop_event = install_stop_handlers()
    try:
        dispatcher.run_forever(stop_event)
    finally:
        pr("[yellow]Waiting for files in progress to finish...[/yellow]")
        dispatcher.shutdown(wait=True)


@app.command()
def configure(
    source: Annotated[
        Path,
        typer.Option(
            "--source",
            "-s",
            exists=True,  # Typer throws error if path doesn't exist
            file_okay=False,
            resolve_path=True,
            help="Directory scanned for incoming .txt files",
        ),
    ],
    destination: Annotated[
        Path,
        typer.Option(
            "--destination",
            "-d",
            exists=True,
            file_okay=False,
            resolve_path=True,
            help="Directory receiving the .done.txt reports",
        ),
    ],
    config: Annotated[
        Path,
        typer.Option("--config", "-c", dir_okay=False, help="JSON settings file"),
    ] = CONFIG_FILE,
):
    """
    Save the source and destination directories to the settings file.

    Raises:
        typer.Exit: With code 1 if the settings file cannot be written.
    """
    try:
        save_config(source, destination, config)
    except InvalidSettingsError as e:
        print_settings_err(e)
        raise typer.Exit(code=1)
    except FileIOError as e:
        print_file_io_err(e)
        raise typer.Exit(code=1)

    pr(f"[green]Settings saved to {config}[/green]")


def build_dispatcher(settings: Settings) -> Dispatcher:
    """
    Wire the processing pipeline for the given settings.

    Args:
        settings: Validated settings.

    Returns:
        Dispatcher: A dispatcher with its worker pool started.
    """
    processor = FileTaskProcessor(settings.destination_path)
    return Dispatcher(
        settings.source_path,
        processor,
        watcher=DirectoryWatcher(),
        max_workers=settings.max_workers,
        poll_interval=settings.poll_interval,
    )


def install_stop_handlers() -> threading.Event:
    """
    Turn SIGINT and SIGTERM into a stop request.

    Returns:
        threading.Event: Set when either signal is received.
    """
    stop_event = threading.Event()

    def request_stop(signum, _frame):
        pr(f"\n[yellow]Received {signal.Signals(signum).name}, stopping...[/yellow]")
        stop_event.set()

    signal.signal(signal.SIGINT, request_stop)
    signal.signal(signal.SIGTERM, request_stop)
    return stop_event


def print_settings_err(e: InvalidSettingsError):
    pr(f"[red]Configuration error:[/red] {e.message}")
    pr(f"[yellow]Check the '{e.key}' setting or pass it on the command line.[/yellow]")


def print_file_io_err(e: FileIOError):
    pr(f"[red]Error:[/red] {e.message}")
    if e.original_exception:
        pr(f"[dim]{e.diagnostic_info['type']}: {e.diagnostic_info['details']}[/dim]")


if __name__ == "__main__":
    app()
