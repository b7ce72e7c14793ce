"""
Logging configuration for sins-lsp.

Standard output is reserved for the editor protocol, so console output
goes to stderr. Records can also be mirrored to the editor's output
channel through `EditorLogHandler`.
"""

import logging
import logging.handlers
import sys
from collections import deque
from pathlib import Path
from typing import Callable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..settings import AppSettings

LogCallback = Callable[[logging.LogRecord, str], None]


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        formatted = super().format(record)

        if record.levelname in formatted:
            formatted = formatted.replace(
                record.levelname, f"{color}{record.levelname}{reset}", 1
            )

        return formatted


class CSVFormatter(logging.Formatter):
    """CSV-safe formatter for file logging."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, self.datefmt)
        level = record.levelname.ljust(8)
        duration = f"{int(record.relativeCreated)} ms"
        module = record.name
        line_no = str(record.lineno)
        message = record.getMessage().replace('"', '""')

        return f'"{timestamp}";{level};"{duration}";"{module}";"{line_no}";"{message}"'


class EditorLogFormatter(logging.Formatter):
    """Single-line format for the editor output channel."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, "%H:%M:%S")
        return f"[{timestamp} {record.levelname}] {record.getMessage()} ({record.name}:{record.lineno})"


class EditorLogHandler(logging.Handler):
    """
    Buffers recent records and forwards them to the editor side.

    The protocol layer registers a callback (e.g. one that sends
    `window/logMessage`); until then records are only buffered, so early
    startup messages can be replayed once the connection is up.
    """

    def __init__(self, max_lines: int = 1000):
        super().__init__()
        self.max_lines = max_lines
        self.buffer: deque[logging.LogRecord] = deque(maxlen=max_lines)
        self.log_callback: Optional[LogCallback] = None
        self.error_callback: Optional[LogCallback] = None

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            self.buffer.append(record)

            if self.log_callback:
                self.log_callback(record, msg)

            if record.levelno >= logging.ERROR and self.error_callback:
                self.error_callback(record, msg)

        except Exception:
            # Don't let logging errors crash the server
            self.handleError(record)

    def get_buffer(self) -> List[logging.LogRecord]:
        """Get current log buffer as a list."""
        return list(self.buffer)

    def clear_buffer(self) -> None:
        """Clear the log buffer."""
        self.buffer.clear()

    def set_log_callback(self, callback: Optional[LogCallback], replay: bool = True) -> None:
        """Set the callback for log messages, optionally replaying the buffer."""
        self.log_callback = callback
        if callback and replay:
            for record in list(self.buffer):
                callback(record, self.format(record))

    def set_error_callback(self, callback: Optional[LogCallback]) -> None:
        """Set callback for error messages."""
        self.error_callback = callback


_editor_handler: Optional[EditorLogHandler] = None


def get_editor_log_handler() -> Optional[EditorLogHandler]:
    """Return the handler installed by the last `setup_logging` call."""
    return _editor_handler


def setup_logging(settings: Optional["AppSettings"] = None) -> EditorLogHandler:
    """
    Setup logging with stderr, file and editor-channel handlers.

    Args:
        settings: AppSettings instance; built-in defaults are used when None

    Returns:
        The installed EditorLogHandler
    """
    global _editor_handler

    if settings is not None:
        console_enabled = settings.console_logging
        console_level = settings.console_log_level
        use_colors = settings.console_use_colors
        file_enabled = settings.file_logging
        log_file = settings.log_file_path
        editor_level = settings.editor_log_level
        editor_max_lines = settings.editor_max_lines
    else:
        console_enabled, console_level, use_colors = True, "INFO", False
        file_enabled, log_file = False, ""
        editor_level, editor_max_lines = "INFO", 1000

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    project_logger = logging.getLogger("sins_lsp")
    project_logger.setLevel(logging.DEBUG)

    root_logger.handlers.clear()

    if console_enabled:
        fmt = "%(asctime)s : %(levelname)-8s : %(message)s"
        if use_colors:
            console_formatter: logging.Formatter = ColoredFormatter(fmt=fmt, datefmt="%H:%M:%S")
        else:
            console_formatter = logging.Formatter(fmt=fmt, datefmt="%H:%M:%S")

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    log_path = None
    if file_enabled and log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(CSVFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Could not setup file logging: {e}")
            log_path = None

    # Suppress DEBUG logs from noisy libraries
    logging.getLogger("PIL").setLevel(logging.INFO)
    logging.getLogger("PIL.PngImagePlugin").setLevel(logging.INFO)
    logging.getLogger("PIL.DdsImagePlugin").setLevel(logging.INFO)

    editor_handler = EditorLogHandler(max_lines=editor_max_lines)
    editor_handler.setFormatter(EditorLogFormatter())
    editor_handler.setLevel(getattr(logging, editor_level.upper(), logging.INFO))
    root_logger.addHandler(editor_handler)
    _editor_handler = editor_handler

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
    if console_enabled:
        logger.debug(f"Console logging: {console_level} (colors: {use_colors})")
    if log_path:
        logger.debug(f"File logging: DEBUG at {log_path.absolute()}")
    logger.debug(f"Editor channel logging: {editor_level}")

    return editor_handler
