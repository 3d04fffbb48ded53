import logging
import logging.handlers

from rich.console import Console
from rich.logging import RichHandler

from .config import JobSettings


def setup_logging(settings: JobSettings) -> None:
    # Rich console handler, stderr so stdout stays clean for the scheduler
    console = Console(width=120, stderr=True)
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

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(rich_handler)

    log_dir = settings.log_directory
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

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
        root_logger.addHandler(file_handler)

    # pyarrow/libhdfs chatter
    logging.getLogger("pyarrow").setLevel(logging.WARNING)

    logging.info(
        f"Logging initialized - "
        f"File: {settings.log_file_path or 'disabled'}, "
        f"Level: {settings.log_level}, "
        f"Retention: {settings.log_retention_days} days"
    )
