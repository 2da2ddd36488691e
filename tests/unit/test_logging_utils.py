import asyncio
from unittest.mock import AsyncMock

import pytest

from seq2seq_gen.application.services.generation_engine import GenerationEngine
from seq2seq_gen.utils.error_manager import ExecutorError
from seq2seq_gen.utils.logger import get_logger
from seq2seq_gen.utils.logging_utils import LoggingMixin


class Component(LoggingMixin):
    def __init__(self, debug_mode=None):
        super().__init__()
        self.setup_logging("test_component", debug_mode=debug_mode)


class TestLoggingMixin:
    """Test suite for the logging mixin."""

    def test_logs_only_in_debug_mode(self):
        component = Component(debug_mode=False)
        counts = component._seq2seq_logger.log_count_by_level
        before = counts["INFO"]

        component.log("hidden")
        assert counts["INFO"] == before

        component.set_debug_mode(True)
        component.log("shown")
        assert counts["INFO"] == before + 1

    def test_invalid_level(self):
        component = Component(debug_mode=False)
        with pytest.raises(ValueError):
            component.log("message", level="verbose")

    def test_set_debug_mode_requires_bool(self):
        component = Component()
        with pytest.raises(TypeError):
            component.set_debug_mode("yes")

    def test_shared_named_logger(self):
        component = Component(debug_mode=True)
        assert component.logger.name == "seq2seq_gen.test_component"
        assert get_logger("seq2seq_gen.test_component") is component._seq2seq_logger


class TestSeq2SeqLogger:
    def test_operation_reraises(self):
        logger = get_logger("seq2seq_gen.test_operation")
        errors_before = logger.log_count_by_level["ERROR"]

        with pytest.raises(RuntimeError):
            with logger.operation("step"):
                raise RuntimeError("failed")

        assert logger.log_count_by_level["ERROR"] == errors_before + 1

    def test_operation_cancellation_is_not_an_error(self):
        logger = get_logger("seq2seq_gen.test_operation")
        errors_before = logger.log_count_by_level["ERROR"]
        debug_before = logger.log_count_by_level["DEBUG"]

        with pytest.raises(asyncio.CancelledError):
            with logger.operation("step"):
                raise asyncio.CancelledError()

        assert logger.log_count_by_level["ERROR"] == errors_before
        assert logger.log_count_by_level["DEBUG"] == debug_before + 2

    def test_operation_does_not_relog_package_errors(self):
        logger = get_logger("seq2seq_gen.test_operation")
        errors_before = logger.log_count_by_level["ERROR"]

        with pytest.raises(ExecutorError):
            with logger.operation("step"):
                raise ExecutorError("Forward pass failed at step 1", step=1)

        assert logger.log_count_by_level["ERROR"] == errors_before

    @pytest.mark.asyncio
    async def test_cancelled_generation_logs_no_error(self, make_model_spec):
        forward = AsyncMock(side_effect=asyncio.CancelledError())
        engine = GenerationEngine(make_model_spec(forward))
        errors_before = engine._seq2seq_logger.log_count_by_level["ERROR"]

        with pytest.raises(asyncio.CancelledError):
            await engine.generate([1])

        assert engine._seq2seq_logger.log_count_by_level["ERROR"] == errors_before

    def test_operation_success(self):
        logger = get_logger("seq2seq_gen.test_operation")
        debug_before = logger.log_count_by_level["DEBUG"]

        with logger.operation("step"):
            pass

        assert logger.log_count_by_level["DEBUG"] == debug_before + 2
