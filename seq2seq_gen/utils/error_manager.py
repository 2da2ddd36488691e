"""
Error management for the seq2seq generation engine.

This module provides standardized error classes with error codes, severity
levels, cause chaining and structured logging of every raised error.
"""

import logging
import traceback
from enum import Enum
from typing import Dict, Any, Optional

from seq2seq_gen.utils.config_manager import ConfigurationError as BaseConfigurationError

logger = logging.getLogger("seq2seq_gen.error")


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    CRITICAL = "CRITICAL"  # Application cannot continue
    ERROR = "ERROR"  # Operation failed, but application can continue
    WARNING = "WARNING"  # Potentially problematic situation
    INFO = "INFO"


class ErrorCategory(Enum):
    """Categories for errors to help with grouping and filtering."""

    CONFIG = "CONFIG"
    MODEL = "MODEL"
    GENERATION = "GENERATION"
    VALIDATION = "VALIDATION"
    UNKNOWN = "UNKNOWN"


class ErrorCode(Enum):
    """
    Standard error codes.

    Format: CATEGORY_DESCRIPTION
    """

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_MISSING = "CONFIG_MISSING"

    # Model executor errors
    MODEL_LOAD_FAILED = "MODEL_LOAD_FAILED"
    MODEL_INFERENCE_FAILED = "MODEL_INFERENCE_FAILED"
    MODEL_OUTPUT_INVALID = "MODEL_OUTPUT_INVALID"

    # Generation errors
    GENERATION_FAILED = "GENERATION_FAILED"
    GENERATION_CALLBACK_FAILED = "GENERATION_CALLBACK_FAILED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @classmethod
    def get_category(cls, code: "ErrorCode") -> ErrorCategory:
        """Get the category for an error code."""
        for category in ErrorCategory:
            if code.value.startswith(category.name):
                return category
        return ErrorCategory.UNKNOWN


class Seq2SeqError(Exception):
    """
    Base exception class for the package.

    Carries an error code, a severity, the original exception (if any) and
    free-form additional info. The error is logged when constructed.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        cause: Optional[BaseException] = None,
        **kwargs,
    ):
        """
        Initialize a Seq2SeqError.

        Args:
            message: Error message
            code: Error code
            severity: Error severity level
            cause: Original exception that caused this error
            **kwargs: Additional context information to add to the error
        """
        self.message = message
        self.code = code
        self.severity = severity
        self.cause = cause
        self.additional_info: Dict[str, Any] = dict(kwargs)

        full_message = f"{code.value}: {message}"
        if cause:
            full_message += f" (Caused by: {type(cause).__name__}: {cause})"

        super().__init__(full_message)

        self._log_error()

    @property
    def category(self) -> ErrorCategory:
        return ErrorCode.get_category(self.code)

    def _log_error(self):
        log_message = self._format_for_logging()

        if self.severity == ErrorSeverity.CRITICAL:
            logger.critical(log_message)
        elif self.severity == ErrorSeverity.ERROR:
            logger.error(log_message)
        elif self.severity == ErrorSeverity.WARNING:
            logger.warning(log_message)
        else:
            logger.info(log_message)

    def _format_for_logging(self) -> str:
        parts = [f"ERROR [{self.code.value}] ({self.severity.value}): {self.message}"]

        if self.additional_info:
            parts.append("Additional Info:")
            for key, value in self.additional_info.items():
                parts.append(f"  {key}: {value}")

        if self.cause is not None:
            parts.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

            if self.cause.__traceback__:
                parts.append("Cause Traceback:")
                for line in traceback.format_tb(self.cause.__traceback__):
                    parts.append(f"  {line.rstrip()}")

        return "\n".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary for serialization."""
        result = {
            "code": self.code.value,
            "category": self.category.value,
            "message": self.message,
            "severity": self.severity.value,
        }

        if self.additional_info:
            result["additional_info"] = self.additional_info

        if self.cause is not None:
            result["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }

        return result


class ConfigurationError(Seq2SeqError, BaseConfigurationError):
    """Invalid generation options, token ids or input sequence."""

    def __init__(
        self, message: str, code: ErrorCode = ErrorCode.CONFIG_INVALID, **kwargs
    ):
        super().__init__(message, code=code, severity=ErrorSeverity.ERROR, **kwargs)


class ModelError(Seq2SeqError):
    """Error while building or loading a model executor."""

    def __init__(
        self, message: str, code: ErrorCode = ErrorCode.MODEL_LOAD_FAILED, **kwargs
    ):
        super().__init__(message, code=code, severity=ErrorSeverity.ERROR, **kwargs)


class ValidationError(Seq2SeqError):
    """Malformed tensor or executor output."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        if field:
            kwargs["field"] = field

        super().__init__(
            message,
            code=ErrorCode.VALIDATION_ERROR,
            severity=ErrorSeverity.WARNING,
            **kwargs,
        )


class GenerationError(Seq2SeqError):
    """Error that aborted a generation run."""

    def __init__(
        self, message: str, code: ErrorCode = ErrorCode.GENERATION_FAILED, **kwargs
    ):
        super().__init__(message, code=code, severity=ErrorSeverity.ERROR, **kwargs)


class ExecutorError(GenerationError):
    """The model executor's forward pass failed."""

    def __init__(
        self, message: str, code: ErrorCode = ErrorCode.MODEL_INFERENCE_FAILED, **kwargs
    ):
        super().__init__(message, code=code, **kwargs)


class ProgressCallbackError(GenerationError):
    """The progress callback raised."""

    def __init__(
        self, message: str, code: ErrorCode = ErrorCode.GENERATION_CALLBACK_FAILED, **kwargs
    ):
        super().__init__(message, code=code, **kwargs)
