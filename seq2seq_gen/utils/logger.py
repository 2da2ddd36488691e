"""
Structured logging for the seq2seq generation engine.

This module wraps the standard ``logging`` package with context tracking,
an optional rotating file handler and an ``operation`` context manager used
to time generation runs.
"""

import os
import sys
import time
import asyncio
import logging
import threading
from typing import Dict, Optional
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime
from contextlib import contextmanager

from seq2seq_gen.utils.config_manager import config
from seq2seq_gen.utils.error_manager import Seq2SeqError


# Thread local storage for context tracking
_thread_local = threading.local()


class ContextAwareFormatter(logging.Formatter):
    """
    Formatter that appends thread-local context to each record.
    """

    def format(self, record):
        self._add_context_to_record(record)
        return super().format(record)

    def _add_context_to_record(self, record):
        thread_context = getattr(_thread_local, "context", {})
        context = dict(thread_context)

        for key, value in context.items():
            # Don't override existing record attributes
            if not hasattr(record, key):
                setattr(record, key, value)

        if context:
            items = " ".join(f"{key}={value}" for key, value in context.items())
            setattr(record, "context_str", f" [{items}]")
        else:
            setattr(record, "context_str", "")


class RotatingFileHandlerWithHeader(RotatingFileHandler):
    """
    RotatingFileHandler that writes a header when a new log file is created.
    """

    def __init__(self, filename, **kwargs):
        self.header_function = kwargs.pop("header_function", None)
        super().__init__(filename, **kwargs)

        if self.header_function and os.path.getsize(filename) == 0:
            self._write_header()

    def doRollover(self):
        super().doRollover()

        if self.header_function:
            self._write_header()

    def _write_header(self):
        header = self.header_function()
        if header:
            self.stream.write(header + "\n")
            self.stream.flush()


class Seq2SeqLogger:
    """
    Logger used throughout the package.

    Features:
    - Structured logging with context
    - Rotating file handlers (opt-in through ``LoggingConfig``)
    - Context managers for timing operations
    """

    def __init__(self, name: str, log_file: Optional[str] = None):
        """
        Initialize the logger.

        Args:
            name: Logger name
            log_file: Log file name inside ``config.logging.log_dir``
        """
        self.name = name

        self.logger = logging.getLogger(name)
        log_level = getattr(logging, config.logging.log_level.upper(), logging.INFO)
        self.logger.setLevel(log_level)
        self.logger.propagate = False

        # Remove any existing handlers to avoid duplicate logs
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)

        self._setup_handlers(log_file)

        self.log_count_by_level = {
            level: 0 for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        }

    def _setup_handlers(self, log_file: Optional[str]):
        console_formatter = ContextAwareFormatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s%(context_str)s"
        )
        file_formatter = ContextAwareFormatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s%(context_str)s"
        )

        if config.logging.console_logging:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if config.logging.enable_file_logging:
            if log_file is None:
                log_file = f"{self.name.replace('.', '_')}.log"

            log_path = Path(config.logging.log_dir) / log_file
            log_path.parent.mkdir(parents=True, exist_ok=True)

            def header_function():
                return (
                    f"--- Log started at {datetime.now().isoformat()} ---\n"
                    f"--- seq2seq_gen logger: {self.name} ---"
                )

            file_handler = RotatingFileHandlerWithHeader(
                filename=str(log_path),
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                header_function=header_function,
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def _log(self, level: int, msg: str, *args, exc_info=None, stack_info=False,
             stacklevel=1, **kwargs):
        """
        Log a message with the specified level, adding kwargs as temporary context.
        """
        level_name = logging.getLevelName(level)
        self.log_count_by_level[level_name] = self.log_count_by_level.get(level_name, 0) + 1

        with self.context(**kwargs):
            self.logger.log(level, msg, *args, exc_info=exc_info, stack_info=stack_info,
                            stacklevel=stacklevel + 2)

    def debug(self, msg, *args, **kwargs):
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg, *args, **kwargs):
        self._log(logging.CRITICAL, msg, *args, **kwargs)

    @contextmanager
    def context(self, **kwargs):
        """
        Context manager for adding temporary context to logs.

        Args:
            **kwargs: Context key-value pairs
        """
        if not hasattr(_thread_local, "context"):
            _thread_local.context = {}

        old_context = _thread_local.context.copy()
        _thread_local.context.update(kwargs)

        try:
            yield
        finally:
            _thread_local.context = old_context

    @contextmanager
    def operation(self, operation_name: str, level: int = logging.DEBUG):
        """
        Context manager that logs the start, duration and outcome of an operation.

        Exceptions are re-raised unchanged. Cancellation and ``Seq2SeqError``
        (which logs itself on construction) are recorded at ``level``, any other
        failure at ERROR.
        """
        self._log(level, f"Starting operation: {operation_name}")
        start_time = time.time()

        try:
            yield
        except asyncio.CancelledError:
            elapsed = time.time() - start_time
            self._log(level, f"Cancelled operation: {operation_name} after {elapsed:.3f}s",
                      operation=operation_name, status="cancelled")
            raise
        except BaseException as e:
            elapsed = time.time() - start_time
            failure_level = level if isinstance(e, Seq2SeqError) else logging.ERROR
            self._log(failure_level,
                      f"Failed operation: {operation_name} after {elapsed:.3f}s - {type(e).__name__}: {e}",
                      operation=operation_name, status="failed")
            raise
        else:
            elapsed = time.time() - start_time
            self._log(level, f"Completed operation: {operation_name} in {elapsed:.3f}s",
                      operation=operation_name, status="success")


_loggers: Dict[str, Seq2SeqLogger] = {}


def get_logger(name: str, log_file: Optional[str] = None) -> Seq2SeqLogger:
    """
    Get or create a logger by name.

    Args:
        name: Logger name
        log_file: Log file name used when the logger is first created

    Returns:
        Seq2SeqLogger: Logger instance
    """
    if name not in _loggers:
        _loggers[name] = Seq2SeqLogger(name, log_file)

    return _loggers[name]
