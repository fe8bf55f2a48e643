"""
Main entry point for the Directory Compare application.

This module handles:
- Command line argument parsing
- Settings loading
- Logging configuration
- Exception handling
- Scanning and comparing the two folders
- Dispatching to the selected viewer
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, List

from dircompare import APP_NAME, APP_DISPLAY_NAME, __version__
from dircompare.core.folder.comparer import CompareOptions
from dircompare.core.folder.scanner import ScanOptions
from dircompare.services.file_store import FileStore
from dircompare.services.settings import ApplicationSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_ROOT = 2

LOGS_DIR = Path.cwd() / "logs"


# =============================================================================
# Enums
# =============================================================================

class ViewerMode(Enum):
    """How the comparison is presented."""
    WEB = "web"         # HTTP API for the web viewer
    NATIVE = "native"   # PyQt6 window
    CLI = "cli"         # Text report on stdout
    STATIC = "static"   # Standalone HTML file


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    folder_a: Path
    folder_b: Path
    mode: ViewerMode = ViewerMode.WEB
    port: Optional[int] = None
    host: Optional[str] = None
    output_path: Optional[str] = None
    config_file: Optional[str] = None
    log_level: Optional[str] = None
    debug: bool = False


# =============================================================================
# Logging Setup
# =============================================================================

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'

LEVEL_COLORS = {
    logging.DEBUG: '\033[90m',
    logging.WARNING: '\033[33m',
    logging.ERROR: '\033[31m',
    logging.CRITICAL: '\033[1;31m',
}
COLOR_RESET = '\033[0m'


class LogFormatter(logging.Formatter):
    """Formatter that tints whole console lines by level when stderr is a tty."""

    def __init__(self, colored: bool = False):
        super().__init__(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        self.colored = colored

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = LEVEL_COLORS.get(record.levelno) if self.colored else None
        return f"{color}{text}{COLOR_RESET}" if color else text


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Route all log records to stderr, and to ``log_file`` when given.

    stdout stays clean for the cli report. Any handlers left over from an
    earlier call are replaced.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(LogFormatter(colored=sys.stderr.isatty()))
    handlers.append(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(LogFormatter())
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)
    for handler in handlers:
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    # uvicorn logs every request at INFO
    for name in ('uvicorn.access', 'PyQt6'):
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return root_logger


# =============================================================================
# Exception Handling
# =============================================================================

class ExceptionHandler:
    """
    ``sys.excepthook`` replacement.

    Logs uncaught exceptions at CRITICAL. Once the native viewer is up it
    also shows them in a message box.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._show_dialogs = False

    def enable_dialogs(self) -> None:
        self._show_dialogs = True

    def handle_exception(self, exc_type: type, exc_value: BaseException, exc_tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))

        if self._show_dialogs:
            details = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
            self._show_error_dialog(f"{exc_type.__name__}: {exc_value}", details)

    @staticmethod
    def _show_error_dialog(summary: str, details: str) -> None:
        from PyQt6.QtWidgets import QApplication, QMessageBox

        if QApplication.instance() is None:
            return

        box = QMessageBox(QMessageBox.Icon.Critical, f"{APP_DISPLAY_NAME} error", summary)
        box.setDetailedText(details)
        box.exec()


# =============================================================================
# Command Line Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Compare two directory trees and classify every file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -a old/ -b new/                 Serve the web viewer API on port 3000
  %(prog)s -a old/ -b new/ -m cli          Print a text report
  %(prog)s -a old/ -b new/ -m static -o report.html
  %(prog)s -a old/ -b new/ -m native       Open the desktop viewer
        """
    )

    parser.add_argument(
        '-a', '--folder-a',
        required=True,
        help='Path to the first (baseline) folder'
    )
    parser.add_argument(
        '-b', '--folder-b',
        required=True,
        help='Path to the second (candidate) folder'
    )

    parser.add_argument(
        '-m', '--mode',
        choices=[m.value for m in ViewerMode],
        default=ViewerMode.WEB.value,
        help='Viewer mode for displaying differences'
    )

    # Web server
    parser.add_argument(
        '-p', '--port',
        type=int,
        default=None,
        help='Port to use for the web server'
    )
    parser.add_argument(
        '--host',
        default=None,
        help='Address to bind the web server to'
    )

    # Static report
    parser.add_argument(
        '-o', '--output',
        help='Output file for static mode'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Configuration file path'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode (also logs to a file)'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Log level'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {__version__}'
    )

    parsed = parser.parse_args(args)

    result = CommandLineArgs(
        folder_a=Path(parsed.folder_a),
        folder_b=Path(parsed.folder_b),
        mode=ViewerMode(parsed.mode),
        port=parsed.port,
        host=parsed.host,
        output_path=parsed.output,
        config_file=parsed.config,
        debug=parsed.debug,
    )

    if parsed.debug or parsed.verbose:
        result.log_level = 'DEBUG'
    else:
        result.log_level = parsed.log_level

    return result


def load_settings(args: CommandLineArgs) -> ApplicationSettings:
    """Load the settings file and apply command line overrides."""
    settings = SettingsManager(args.config_file).settings

    if args.port is not None:
        settings.server.port = args.port
    if args.host is not None:
        settings.server.host = args.host
    if args.output_path is not None:
        settings.report.static_output = args.output_path
    if args.log_level is not None:
        settings.log_level = args.log_level

    return settings


def validate_roots(args: CommandLineArgs, logger: logging.Logger) -> bool:
    """Both roots must be existing directories."""
    for label, folder in (("A", args.folder_a), ("B", args.folder_b)):
        if not folder.exists():
            logger.error(f"Folder {label} not found: {folder}")
            return False
        if not folder.is_dir():
            logger.error(f"Folder {label} is not a directory: {folder}")
            return False
    return True


# =============================================================================
# Viewers
# =============================================================================

def build_store(args: CommandLineArgs, settings: ApplicationSettings) -> FileStore:
    """Scan both folders and compare them."""
    store = FileStore.load(
        args.folder_a,
        args.folder_b,
        ScanOptions(parallel_workers=settings.comparison.parallel_workers),
    )
    store.compare(CompareOptions(unreadable_policy=settings.comparison.unreadable_policy))
    return store


def run_web(store: FileStore, settings: ApplicationSettings) -> int:
    from dircompare.web.api import run_server

    run_server(store, settings.server, log_level=settings.log_level)
    return EXIT_OK


def run_cli(store: FileStore, settings: ApplicationSettings) -> int:
    from dircompare.services.report import render_text

    print(render_text(store, show_unchanged=settings.report.show_unchanged))
    return EXIT_OK


def run_static(store: FileStore, settings: ApplicationSettings, logger: logging.Logger) -> int:
    from dircompare.services.report import write_static_report

    output = Path(settings.report.static_output)
    result = write_static_report(store, output, show_unchanged=settings.report.show_unchanged)
    if not result.success:
        logger.error(f"Could not write report: {result.error}")
        return EXIT_FAILURE

    print(f"Report written to {output}")
    return EXIT_OK


def run_native(
    args: CommandLineArgs,
    settings: ApplicationSettings,
    exception_handler: ExceptionHandler
) -> int:
    from PyQt6.QtCore import QTimer
    from PyQt6.QtWidgets import QApplication

    from dircompare.ui.main_window import MainWindow

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(APP_DISPLAY_NAME)
    app.setApplicationVersion(__version__)
    exception_handler.enable_dialogs()

    # Let Ctrl+C reach Python while the Qt loop runs
    if sys.platform != 'win32':
        signal.signal(signal.SIGINT, lambda signum, frame: app.quit())
        timer = QTimer()
        timer.timeout.connect(lambda: None)
        timer.start(500)

    window = MainWindow()
    window.show()
    window.compare_folders(
        args.folder_a,
        args.folder_b,
        ScanOptions(parallel_workers=settings.comparison.parallel_workers),
        CompareOptions(unreadable_policy=settings.comparison.unreadable_policy),
    )

    return app.exec()


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success)
    """
    args = parse_arguments(argv)
    settings = load_settings(args)

    log_file = LOGS_DIR / f"{APP_NAME}_{datetime.now():%Y%m%d}.log" if args.debug else None
    logger = setup_logging(settings.log_level, log_file)

    exception_handler = ExceptionHandler(logger)
    sys.excepthook = exception_handler.handle_exception

    logger.debug(f"Starting {APP_NAME} {__version__} in {args.mode.value} mode")

    if not validate_roots(args, logger):
        return EXIT_BAD_ROOT

    if args.mode == ViewerMode.NATIVE:
        return run_native(args, settings, exception_handler)

    try:
        store = build_store(args, settings)
    except (FileNotFoundError, NotADirectoryError) as e:
        logger.error(str(e))
        return EXIT_BAD_ROOT

    if args.mode == ViewerMode.WEB:
        return run_web(store, settings)
    elif args.mode == ViewerMode.CLI:
        return run_cli(store, settings)
    else:
        return run_static(store, settings, logger)


if __name__ == "__main__":
    sys.exit(main())
