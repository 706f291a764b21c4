"""structlog setup for civicscore.

Events are rendered by structlog and written through stdlib logging: a
console handler at the requested level and, optionally, a DEBUG log file per
process.
"""

import logging
import os
import sys
from datetime import datetime
from typing import Any

import structlog

from civicscore.version import get_git_commit

# Loggers that are too chatty at DEBUG
QUIET_LOGGERS = ("psycopg", "psycopg.pool")


class _CivicScoreHandler:
    """Marks handlers installed here so reconfiguring replaces them."""


class _ConsoleHandler(logging.StreamHandler, _CivicScoreHandler):
    pass


class _FileHandler(logging.FileHandler, _CivicScoreHandler):
    pass


def _log_file_path(logs_dir: str) -> str:
    os.makedirs(logs_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    return os.path.join(logs_dir, f"{stamp}-{os.getpid()}.log")


def configure_logging(level: int = logging.INFO, logs_dir: str | None = "logs") -> None:
    """Configure structlog for the application.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Console logging level
        logs_dir: Directory for the DEBUG log file, or None for console only
    """
    shared_processors: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, _CivicScoreHandler)]:
        root.removeHandler(handler)
        handler.close()

    console = _ConsoleHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True)
        )
    )
    root.addHandler(console)

    if logs_dir:
        log_file = _FileHandler(_log_file_path(logs_dir))
        log_file.setLevel(logging.DEBUG)
        log_file.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=False)
            )
        )
        root.addHandler(log_file)

    # The file handler sees everything; the console filters by its own level
    root.setLevel(logging.DEBUG)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "civicscore starting", git_commit=get_git_commit() or "unknown"
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)
