"""Forward-pass value objects.

Describes what the engine hands to a model executor on each decode step and
what it gets back.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union
import torch

from .tensor import LogitsTensor, TensorDescriptor
from ...utils.error_manager import ValidationError

INPUT_IDS = "input_ids"
ATTENTION_MASK = "attention_mask"
DECODER_INPUT_IDS = "decoder_input_ids"
DECODER_ATTENTION_MASK = "decoder_attention_mask"


@dataclass(frozen=True)
class ForwardInputs:
    """The four int64 tensors of one encoder-decoder forward pass.

    Shapes are ``(1, len(input))`` for the encoder side and
    ``(1, len(decoder))`` for the decoder side. Masks are all ones since a
    single unpadded sequence is assumed.
    """
    input_ids: TensorDescriptor
    attention_mask: TensorDescriptor
    decoder_input_ids: TensorDescriptor
    decoder_attention_mask: TensorDescriptor

    def __post_init__(self):
        if self.input_ids.dims != self.attention_mask.dims:
            raise ValidationError(
                f"input_ids and attention_mask shapes must match: "
                f"{self.input_ids.dims} vs {self.attention_mask.dims}"
            )
        if self.decoder_input_ids.dims != self.decoder_attention_mask.dims:
            raise ValidationError(
                f"decoder_input_ids and decoder_attention_mask shapes must match: "
                f"{self.decoder_input_ids.dims} vs {self.decoder_attention_mask.dims}"
            )

    def as_feeds(self) -> Dict[str, torch.Tensor]:
        """Map input names to raw tensors, ready for ``model(**feeds)``."""
        return {
            INPUT_IDS: self.input_ids.data,
            ATTENTION_MASK: self.attention_mask.data,
            DECODER_INPUT_IDS: self.decoder_input_ids.data,
            DECODER_ATTENTION_MASK: self.decoder_attention_mask.data,
        }


def _row(token_ids: Sequence[int], device) -> torch.Tensor:
    return torch.tensor([list(token_ids)], dtype=torch.long, device=device)


def build_forward_inputs(
    input_ids: Sequence[int],
    decoder_input_ids: Sequence[int],
    device: Optional[Union[str, torch.device]] = None,
) -> ForwardInputs:
    """Build the executor feeds for one decode step.

    Args:
        input_ids: Encoder token ids
        decoder_input_ids: Full decoder context generated so far
        device: Optional device to place the tensors on

    Returns:
        ForwardInputs holding ids and all-ones masks of matching shape
    """
    if len(input_ids) == 0 or len(decoder_input_ids) == 0:
        raise ValidationError("Forward inputs require non-empty encoder and decoder sequences")

    encoder_ids = _row(input_ids, device)
    decoder_ids = _row(decoder_input_ids, device)
    return ForwardInputs(
        input_ids=TensorDescriptor(encoder_ids),
        attention_mask=TensorDescriptor(torch.ones_like(encoder_ids)),
        decoder_input_ids=TensorDescriptor(decoder_ids),
        decoder_attention_mask=TensorDescriptor(torch.ones_like(decoder_ids)),
    )


@dataclass(frozen=True)
class ForwardResult:
    """Output of one forward pass.

    ``hidden_states`` is the encoder hidden state; the engine passes it
    through and never inspects it.
    """
    logits: LogitsTensor
    hidden_states: Optional[Any] = None

    def __post_init__(self):
        if not isinstance(self.logits, LogitsTensor):
            raise ValidationError(
                f"ForwardResult.logits must be a LogitsTensor, got {type(self.logits).__name__}",
                field="logits",
            )
