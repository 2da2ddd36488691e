import logging

import pytest

from seq2seq_gen.utils.config_manager import ConfigurationError as BaseConfigurationError
from seq2seq_gen.utils.error_manager import (
    ConfigurationError,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
    ExecutorError,
    GenerationError,
    ProgressCallbackError,
    Seq2SeqError,
    ValidationError,
)


class TestSeq2SeqError:
    """Test suite for the error hierarchy."""

    def test_message_includes_code_and_cause(self):
        cause = RuntimeError("boom")
        error = ExecutorError("Forward pass failed at step 3", cause=cause, step=3)

        assert str(error) == (
            "MODEL_INFERENCE_FAILED: Forward pass failed at step 3 (Caused by: RuntimeError: boom)"
        )
        assert error.additional_info == {"step": 3}
        assert error.category is ErrorCategory.MODEL

    def test_hierarchy(self):
        assert issubclass(ExecutorError, GenerationError)
        assert issubclass(ProgressCallbackError, GenerationError)
        assert issubclass(GenerationError, Seq2SeqError)
        assert issubclass(ConfigurationError, BaseConfigurationError)

    def test_categories(self):
        assert ErrorCode.get_category(ErrorCode.CONFIG_INVALID) is ErrorCategory.CONFIG
        assert ErrorCode.get_category(ErrorCode.GENERATION_CALLBACK_FAILED) is ErrorCategory.GENERATION
        assert ErrorCode.get_category(ErrorCode.VALIDATION_ERROR) is ErrorCategory.VALIDATION
        assert ErrorCode.get_category(ErrorCode.UNKNOWN_ERROR) is ErrorCategory.UNKNOWN

    def test_to_dict(self):
        error = ProgressCallbackError("Progress callback failed", cause=KeyError("x"), step=2)
        data = error.to_dict()

        assert data["code"] == "GENERATION_CALLBACK_FAILED"
        assert data["category"] == "GENERATION"
        assert data["severity"] == "ERROR"
        assert data["additional_info"] == {"step": 2}
        assert data["cause"]["type"] == "KeyError"

    def test_validation_error_field(self):
        error = ValidationError("bad logits", field="logits")
        assert error.severity is ErrorSeverity.WARNING
        assert error.additional_info["field"] == "logits"

    def test_errors_are_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="seq2seq_gen.error"):
            ConfigurationError("max_length must be a positive integer", field="max_length")

        assert "CONFIG_INVALID" in caplog.text
        assert "max_length" in caplog.text

    def test_can_be_raised_and_caught_as_base(self):
        with pytest.raises(BaseConfigurationError):
            raise ConfigurationError("bad option")
