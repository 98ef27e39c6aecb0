import logging
import logging.handlers

from rich.console import Console
from rich.logging import RichHandler

from .config import Settings


class StartupLogBuffer(logging.handlers.BufferingHandler):
    """
    Hold records emitted before setup_logging has run.

    Settings decide where the log file lives, so anything logged while they
    are being resolved is kept here and replayed once the real handlers exist.
    """

    def __init__(self):
        super().__init__(capacity=0)

    def shouldFlush(self, record: logging.LogRecord) -> bool:
        return False

    def replay(self) -> None:
        root_logger = logging.getLogger()
        root_logger.removeHandler(self)
        self.acquire()
        try:
            for record in self.buffer:
                root_logger.handle(record)
            self.buffer.clear()
        finally:
            self.release()


def start_log_buffer() -> StartupLogBuffer:
    buffer = StartupLogBuffer()
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(buffer)
    return buffer


def setup_logging(settings: Settings) -> None:
    log_dir = settings.log_directory
    log_dir.mkdir(parents=True, exist_ok=True)

    # Console output goes to stderr so prompts on stdout stay readable
    console = Console(stderr=True, width=120)
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=settings.debug,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    rich_handler.setLevel(settings.log_level)

    # File handler with detailed format for debugging
    file_format = (
        "%(asctime)s - %(levelname)s - "
        "%(filename)s:%(lineno)d in %(funcName)s() - "
        "%(message)s"
    )

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=settings.log_file_path,
        when="midnight",
        interval=1,
        backupCount=settings.log_retention_days,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(file_format))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    root_logger.addHandler(rich_handler)
    root_logger.addHandler(file_handler)

    logging.debug(
        f"Logging initialized - File: {settings.log_file_path}, "
        f"Level: {settings.log_level}, "
        f"Retention: {settings.log_retention_days} days"
    )


def log_message(text: str, level: str = "INFO") -> None:
    """Log text at a level given by name (DEBUG, INFO, WARNING, ERROR)."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logging.log(numeric_level, text)
