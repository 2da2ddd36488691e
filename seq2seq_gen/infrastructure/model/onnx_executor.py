"""ONNX Runtime model executor.

Adapts an inference session over a combined encoder-decoder graph (inputs
``input_ids``, ``attention_mask``, ``decoder_input_ids``,
``decoder_attention_mask``; outputs ``logits`` and optionally
``hidden_states``) to the executor interface.
"""

import asyncio
from typing import Any, List, Optional, Sequence

import numpy as np
import torch

from seq2seq_gen.domain.entities.forward import ForwardResult, build_forward_inputs
from seq2seq_gen.domain.entities.tensor import LogitsTensor
from seq2seq_gen.domain.interfaces.model_executor import (
    ModelExecutorInterface,
    DEFAULT_START_TOKEN_ID,
    DEFAULT_END_TOKEN_ID,
)
from seq2seq_gen.utils.error_manager import ConfigurationError, ModelError, ValidationError
from seq2seq_gen.utils.logging_utils import LoggingMixin

LOGITS_OUTPUT = "logits"
HIDDEN_STATES_OUTPUT = "hidden_states"


class OnnxSeq2SeqExecutor(LoggingMixin, ModelExecutorInterface):
    """Runs forward passes through an ``onnxruntime.InferenceSession``."""

    def __init__(
        self,
        session: Any,
        start_token_id: int = DEFAULT_START_TOKEN_ID,
        end_token_id: int = DEFAULT_END_TOKEN_ID,
        debug_mode: Optional[bool] = None,
    ):
        """Initialize the executor.

        Args:
            session: Object exposing ``run``, ``get_inputs`` and ``get_outputs``
            start_token_id: Decoder start token of the exported model
            end_token_id: End-of-sequence token of the exported model
            debug_mode: Whether to enable debug logging
        """
        super().__init__()
        self.setup_logging("onnx_executor", "onnx_executor.log", debug_mode)

        if session is None or not hasattr(session, "run"):
            raise ConfigurationError("session must provide a run() method", field="session")

        self.session = session
        self.start_token_id = start_token_id
        self.end_token_id = end_token_id
        self.input_names = {node.name for node in session.get_inputs()}
        self.output_names = [node.name for node in session.get_outputs()]

        if not self.output_names:
            raise ConfigurationError("ONNX session declares no outputs", field="session")

    @classmethod
    def from_path(
        cls,
        model_path: str,
        providers: Optional[Sequence[str]] = None,
        **kwargs,
    ) -> "OnnxSeq2SeqExecutor":
        """Create an inference session for ``model_path`` and wrap it.

        Requires the optional ``onnxruntime`` dependency.
        """
        try:
            import onnxruntime as ort
        except ImportError as e:
            raise ModelError("onnxruntime is not installed; install the 'onnx' extra", cause=e) from e

        providers = list(providers) if providers else ["CPUExecutionProvider"]
        try:
            session = ort.InferenceSession(model_path, providers=providers)
        except Exception as e:
            raise ModelError(f"Could not create ONNX session for '{model_path}'", cause=e,
                             model_path=model_path) from e
        return cls(session, **kwargs)

    async def forward(self, input_ids: List[int], decoder_input_ids: List[int]) -> ForwardResult:
        """Run one forward pass on a worker thread."""
        feeds = build_forward_inputs(input_ids, decoder_input_ids)
        np_feeds = {
            name: tensor.numpy().astype(np.int64)
            for name, tensor in feeds.as_feeds().items()
            if name in self.input_names
        }
        outputs = await asyncio.to_thread(self.session.run, None, np_feeds)
        return self._to_result(outputs)

    def _to_result(self, outputs: Sequence[Any]) -> ForwardResult:
        named = dict(zip(self.output_names, outputs))
        logits = named.get(LOGITS_OUTPUT, outputs[0] if outputs else None)
        if logits is None:
            raise ValidationError("ONNX session returned no logits", field="logits")

        logits = torch.from_numpy(np.ascontiguousarray(logits, dtype=np.float32))
        self.log(f"Forward pass produced logits {tuple(logits.shape)}", "debug")

        return ForwardResult(
            logits=LogitsTensor(logits),
            hidden_states=named.get(HIDDEN_STATES_OUTPUT),
        )
