"""
Logging helpers shared by the engine, samplers and executors.

Classes mix in ``LoggingMixin`` to get a named logger plus a debug-gated
``log`` method.
"""

from typing import Optional

from seq2seq_gen.utils.config_manager import get_debug_mode
from seq2seq_gen.utils import logger as logger_module

VALID_LEVELS = ["info", "debug", "warning", "error", "critical"]


class LoggingMixin:
    """
    Mixin class to provide consistent logging functionality.

    Usage:
        class MyClass(LoggingMixin):
            def __init__(self):
                super().__init__()
                self.setup_logging("my_class")

            def my_method(self):
                self.log("This is a log message")
    """

    def setup_logging(
        self,
        logger_name: str,
        log_file_name: Optional[str] = None,
        debug_mode: Optional[bool] = None,
    ):
        """
        Set up logging for this class.

        Args:
            logger_name: Name of the logger
            log_file_name: Name of the log file (without directory path)
            debug_mode: Whether to enable debug mode (overrides config if provided)
        """
        if debug_mode is None:
            debug_mode = get_debug_mode(logger_name)

        self._seq2seq_logger = logger_module.get_logger(f"seq2seq_gen.{logger_name}", log_file_name)
        self.logger = self._seq2seq_logger.logger
        self.debug_mode = debug_mode

    def log(self, message: str, level: str = "info", **kwargs):
        """
        Log a message if debug mode is enabled.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error, critical)
            **kwargs: Additional context key-value pairs
        """
        if level not in VALID_LEVELS:
            raise ValueError(
                f"Invalid log level: {level}. Must be one of {VALID_LEVELS}"
            )

        if not getattr(self, "debug_mode", False):
            return

        getattr(self._seq2seq_logger, level)(message, **kwargs)

    def set_debug_mode(self, enabled: bool = True):
        """
        Enable or disable debug mode.

        Args:
            enabled: Whether to enable debug mode
        """
        if not isinstance(enabled, bool):
            raise TypeError("Debug mode must be a boolean")
        self.debug_mode = enabled

    def operation(self, operation_name: str):
        """Create a context manager for tracking operations."""
        return self._seq2seq_logger.operation(operation_name)
