#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Logging for repository operations and the ``blogdb`` command line.

Two kinds of records are written:

    <log_dir>/<component>.log   operation trail (debug + completed operations)
    <log_dir>/errors.log        failures with their context and traceback

Components take an optional BlogLogger and call it through safe_logger(),
so running without a log directory costs nothing.

Usage:
    logger = BlogLogger(Path("logs"), component_name="database")
    logger.log_operation("set_tags_completed", {"post": "hello-world"})

    try:
        repo.get_by_slug("missing")
    except NotFoundError as e:
        logger.log_error(e, {"operation": "get_post_by_slug"})
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click

RECORD_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _rotating_handler(
    path: Path, level: int, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(RECORD_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _render(details: Optional[Dict[str, Any]]) -> str:
    """Serialize record details as compact, key-sorted JSON."""
    if not details:
        return ""
    return " " + json.dumps(details, default=str, sort_keys=True)


def _describe(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"


class BlogLogger:
    """
    File logger for one component of the data layer.

    Attributes:
        log_dir: Directory holding the log files
        component_name: Prefix of the logger names and the trail file name
        trail: ``<component>.trail`` logger (DEBUG and up)
        failures: ``<component>.failures`` logger (ERROR only)
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "database",
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.trail = self._open(
            "trail", f"{component_name}.log", logging.DEBUG, max_bytes, backup_count
        )
        self.failures = self._open(
            "failures", "errors.log", logging.ERROR, max_bytes, backup_count
        )

    def _open(
        self, kind: str, filename: str, level: int, max_bytes: int, backup_count: int
    ) -> logging.Logger:
        logger = logging.getLogger(f"{self.component_name}.{kind}")
        logger.setLevel(level)
        logger.propagate = False
        # A second BlogLogger for the same component replaces the first one's files
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.addHandler(
            _rotating_handler(self.log_dir / filename, level, max_bytes, backup_count)
        )
        return logger

    def close(self) -> None:
        """Flush and detach the file handlers."""
        for logger in (self.trail, self.failures):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.trail.debug(message + _render(details))

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Record a finished operation (e.g. ``latest_posts_completed``)."""
        self.trail.info(f"[{operation}]" + _render(details))

    def log_error(self, error: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Record a failure in both the trail and errors.log.

        The context is written as ``key=value`` pairs after the message and
        the error's own traceback (if it was raised) follows on new lines.
        """
        summary = _describe(error)
        if context:
            summary += " | " + ", ".join(f"{k}={v}" for k, v in context.items())

        self.trail.error(summary)
        if error.__traceback__ is not None:
            stack = "".join(traceback.format_tb(error.__traceback__))
            self.failures.error(f"{summary}\n{stack.rstrip()}")
        else:
            self.failures.error(summary)

    def log_cli_error(
        self,
        error: BaseException,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log a command failure and build the line shown to the user.

        Returns:
            ``"Error: <Type>: <message>"``, followed by the traceback when
            ``show_traceback`` is set
        """
        self.log_error(error, context or {"source": "cli"})
        return _cli_message(error, show_traceback)


def _cli_message(error: BaseException, show_traceback: bool) -> str:
    message = f"Error: {_describe(error)}"
    if show_traceback:
        stack = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        return f"{message}\n\n{stack}"
    return message


def handle_cli_error(
    ctx: "click.Context",
    error: BaseException,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Report a failed ``blogdb`` command and exit.

    Uses ``ctx.obj["logger"]`` (may be absent) and ``ctx.obj["verbose"]``.
    Never returns.
    """
    context: Dict[str, Any] = {"operation": operation, **(additional_context or {})}
    verbose = bool(ctx.obj.get("verbose", False))

    message = safe_logger(ctx.obj.get("logger")).log_cli_error(
        error, context, show_traceback=verbose
    )
    click.echo(message, err=True)
    sys.exit(exit_code)


class NullLogger:
    """Stand-in with the BlogLogger interface that records nothing."""

    def close(self) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: BaseException,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return _cli_message(error, show_traceback)


_NULL = NullLogger()


def safe_logger(logger: Optional[BlogLogger]) -> BlogLogger:
    """Return ``logger``, or a shared NullLogger when it is None."""
    return logger if logger is not None else _NULL  # type: ignore[return-value]
