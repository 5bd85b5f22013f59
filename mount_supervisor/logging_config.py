import logging
import logging.handlers
from rich.logging import RichHandler
from rich.console import Console

from .config import Settings


def get_app_logger(name: str = "") -> logging.Logger:
    """Logger under the mount_supervisor namespace."""
    return logging.getLogger(f"mount_supervisor.{name}" if name else "mount_supervisor")


def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger from settings.

    Raises OSError when the log file cannot be created. The root logger is
    left untouched in that case.
    """
    handlers = []

    # Rich console handler on stderr; stdout stays free for command output.
    # Markup is off: messages carry helper stderr and share names verbatim.
    console = Console(stderr=True, width=120)
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=True,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    rich_handler.setLevel(settings.log_level)
    handlers.append(rich_handler)

    log_dir = settings.log_directory
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

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
        file_handler.setLevel(settings.log_level)
        file_handler.setFormatter(logging.Formatter(file_format))
        handlers.append(file_handler)

    # Configure root logger (catches everything)
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    for handler in handlers:
        root_logger.addHandler(handler)

    # Silence noisy third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.debug(
        f"Logging initialized - "
        f"File: {settings.log_file_path or '(console only)'}, "
        f"Level: {settings.log_level}, "
        f"Retention: {settings.log_retention_days} days"
    )
