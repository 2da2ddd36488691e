"""PyTorch model executor.

Adapts an encoder-decoder ``torch.nn.Module`` (typically a
``transformers.AutoModelForSeq2SeqLM``) to the executor interface.
"""

import asyncio
from typing import Any, List, Optional, Union

import torch
from transformers import AutoModelForSeq2SeqLM

from seq2seq_gen.domain.entities.forward import ForwardInputs, ForwardResult, build_forward_inputs
from seq2seq_gen.domain.entities.tensor import LogitsTensor
from seq2seq_gen.domain.interfaces.model_executor import (
    ModelExecutorInterface,
    DEFAULT_START_TOKEN_ID,
    DEFAULT_END_TOKEN_ID,
)
from seq2seq_gen.utils.config_manager import ModelConfig, config as global_config
from seq2seq_gen.utils.error_manager import ConfigurationError, ErrorCode, ModelError, ValidationError
from seq2seq_gen.utils.logging_utils import LoggingMixin

SUPPORTED_DEVICES = ["cpu", "cuda", "mps"]


def _config_token_id(model_config: Any, name: str, default: int) -> int:
    """Read a special token id from a model config, tolerating lists and None."""
    value = getattr(model_config, name, None) if model_config is not None else None
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return default


class TorchSeq2SeqExecutor(LoggingMixin, ModelExecutorInterface):
    """Runs forward passes of a PyTorch encoder-decoder model."""

    def __init__(
        self,
        model: Any,
        device: Optional[Union[str, torch.device]] = None,
        debug_mode: Optional[bool] = None,
    ):
        """Initialize the executor.

        Args:
            model: Callable module accepting ``input_ids``, ``attention_mask``,
                ``decoder_input_ids`` and ``decoder_attention_mask``
            device: Device to place input tensors on, None keeps the default
            debug_mode: Whether to enable debug logging
        """
        super().__init__()
        self.setup_logging("torch_executor", "torch_executor.log", debug_mode)

        if model is None or not callable(model):
            raise ConfigurationError("Model must be a callable module", field="model")
        if device is not None and torch.device(device).type not in SUPPORTED_DEVICES:
            raise ConfigurationError(f"Unsupported device: {device}", field="device")

        self.model = model
        self.device = device

        model_config = getattr(model, "config", None)
        self.start_token_id = _config_token_id(model_config, "decoder_start_token_id", DEFAULT_START_TOKEN_ID)
        self.end_token_id = _config_token_id(model_config, "eos_token_id", DEFAULT_END_TOKEN_ID)

    @classmethod
    def from_pretrained(
        cls,
        model_id: str,
        device: Optional[Union[str, torch.device]] = None,
        debug_mode: Optional[bool] = None,
        **kwargs,
    ) -> "TorchSeq2SeqExecutor":
        """Load a seq2seq checkpoint through ``transformers``.

        Args:
            model_id: Hub id or local path
            device: Device to move the model to
            debug_mode: Whether to enable debug logging
            **kwargs: Passed to ``AutoModelForSeq2SeqLM.from_pretrained``
        """
        try:
            model = AutoModelForSeq2SeqLM.from_pretrained(model_id, **kwargs)
        except (OSError, ValueError) as e:
            raise ModelError(f"Could not load seq2seq model '{model_id}'", cause=e, model_id=model_id) from e

        model.eval()
        if device is not None:
            model.to(device)
        return cls(model, device=device, debug_mode=debug_mode)

    @classmethod
    def from_config(
        cls,
        model_config: Optional[ModelConfig] = None,
        debug_mode: Optional[bool] = None,
        **kwargs,
    ) -> "TorchSeq2SeqExecutor":
        """Load the checkpoint named by ``model_config.model_id`` onto ``model_config.device``.

        Falls back to the global configuration's model section.
        """
        model_config = model_config or global_config.model
        if not model_config.model_id:
            raise ConfigurationError(
                "No model_id configured; set SEQ2SEQ_MODEL_MODEL_ID or model.model_id",
                code=ErrorCode.CONFIG_MISSING,
                field="model_id",
            )
        return cls.from_pretrained(
            model_config.model_id, device=model_config.device, debug_mode=debug_mode, **kwargs
        )

    async def forward(self, input_ids: List[int], decoder_input_ids: List[int]) -> ForwardResult:
        """Run one forward pass on a worker thread."""
        feeds = build_forward_inputs(input_ids, decoder_input_ids, self.device)
        return await asyncio.to_thread(self._run, feeds)

    def _run(self, feeds: ForwardInputs) -> ForwardResult:
        with torch.inference_mode():
            outputs = self.model(**feeds.as_feeds())

        logits = getattr(outputs, "logits", None)
        if logits is None and isinstance(outputs, (tuple, list)) and outputs:
            logits = outputs[0]
        if not isinstance(logits, torch.Tensor):
            raise ValidationError("Model output has no logits tensor", field="logits")

        if not logits.is_floating_point():
            logits = logits.float()

        self.log(
            f"Forward pass: encoder={feeds.input_ids.dims} decoder={feeds.decoder_input_ids.dims} "
            f"logits={tuple(logits.shape)}",
            "debug",
        )

        return ForwardResult(
            logits=LogitsTensor(logits),
            hidden_states=getattr(outputs, "encoder_last_hidden_state", None),
        )
