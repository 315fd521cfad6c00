import logging
import os
from collections import OrderedDict
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog


def default_formatter(fmt: Optional[str] = None) -> logging.Formatter:
    """Returns a logging formatter with a default format if none is specified."""
    default_fmt = "%(message)s"
    return logging.Formatter(fmt or default_fmt)


def setup_logger(
    name: str = "taskboard",
    *,
    level: str | int = logging.INFO,
    log_dir: Optional[str | Path] = None,
    add_stream_handler: bool = True,
    json_logs: bool = True,
    propagate: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging for Taskboard components.

    Sets up a console handler and, when ``log_dir`` is given, a rotating file
    handler (``<log_dir>/<name>.log``) on the named stdlib logger, then routes
    structlog through it.

    Args:
        name: Logger name, defaults to "taskboard".
        level: Logger level, as a name ("INFO") or a number.
        log_dir: Directory for the rotating log file. No file handler when None.
        add_stream_handler: Whether to add a stream handler.
        json_logs: Render JSON when True, otherwise use the console/dev renderer.
        propagate: Whether the logger should propagate messages to ancestor loggers.
        max_bytes: Maximum size in bytes before rotating the log file.
        backup_count: Number of backup files to retain.

    Returns:
        structlog.stdlib.BoundLogger: Configured logger instance.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    stdlib_logger = logging.getLogger(name)
    stdlib_logger.handlers.clear()
    stdlib_logger.setLevel(level)
    stdlib_logger.propagate = propagate

    if add_stream_handler:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(default_formatter())
        stdlib_logger.addHandler(stream_handler)

    if log_dir:
        log_file_path = os.path.join(os.path.expanduser(str(log_dir)), f"{name}.log")
        os.makedirs(Path(log_file_path).parent, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_file_path, maxBytes=max_bytes, backupCount=backup_count, mode="a"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(default_formatter())
        stdlib_logger.addHandler(file_handler)

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _enforce_key_order_processor(
                [
                    "timestamp",
                    "event",
                    "method",
                    "path",
                    "status_code",
                    "duration_ms",
                    "level",
                    "logger",
                ]
            ),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger(name)


def _enforce_key_order_processor(key_order: list[str]):
    def _processor(_logger, _method_name, event_dict):
        ordered = OrderedDict()
        for key in key_order:
            if key in event_dict:
                ordered[key] = event_dict.pop(key)
        for k in sorted(event_dict.keys()):
            ordered[k] = event_dict[k]
        return ordered

    return _processor


def get_logger(name: Optional[str] = "taskboard", **initial_values) -> structlog.stdlib.BoundLogger:
    """Create or retrieve a named structured logger.

    Names outside the ``taskboard`` hierarchy are nested under it so that the
    handlers installed by :func:`setup_logger` apply.

    Example:
        .. code-block:: python

            from taskboard.core.logging import get_logger

            logger = get_logger(__name__)
            logger.info("task_created", task_id="65f0c3...")
    """
    if not name:
        name = "taskboard"

    full_name = name if name.startswith("taskboard") else f"taskboard.{name}"
    logger = structlog.get_logger(full_name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger
