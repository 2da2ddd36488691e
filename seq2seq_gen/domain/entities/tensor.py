"""Tensor value objects for the generation engine.

These wrap ``torch.Tensor`` buffers with the shape and dtype bookkeeping the
engine relies on when exchanging data with a model executor.
"""

from dataclasses import dataclass
from typing import Tuple
import torch

from ...utils.error_manager import ValidationError


@dataclass(frozen=True)
class TensorDescriptor:
    """Typed, shaped buffer of numeric values."""
    data: torch.Tensor

    def __post_init__(self):
        if not isinstance(self.data, torch.Tensor):
            raise ValidationError(
                f"TensorDescriptor expects a torch.Tensor, got {type(self.data).__name__}",
                field="data",
            )

    @property
    def dims(self) -> Tuple[int, ...]:
        return tuple(self.data.shape)

    @property
    def dtype(self) -> torch.dtype:
        return self.data.dtype

    @property
    def numel(self) -> int:
        return self.data.numel()


@dataclass(frozen=True)
class LogitsTensor(TensorDescriptor):
    """Next-token scores shaped ``(batch=1, sequence_length, vocab_size)``.

    Only the last sequence position matters for choosing the next token.
    """

    def __post_init__(self):
        """Validate the logits layout."""
        super().__post_init__()
        if self.data.dim() != 3:
            raise ValidationError(
                f"Logits tensor must be 3D (batch, seq, vocab), got {self.data.dim()}D",
                field="logits",
            )
        batch_size, seq_length, vocab_size = self.dims
        if batch_size != 1:
            raise ValidationError(f"Logits batch size must be 1, got {batch_size}", field="logits")
        if seq_length < 1 or vocab_size < 1:
            raise ValidationError(
                f"Logits must have non-empty sequence and vocab dims, got {self.dims}",
                field="logits",
            )
        if not self.data.is_floating_point():
            raise ValidationError(f"Logits must be floating point, got {self.dtype}", field="logits")

    @property
    def sequence_length(self) -> int:
        return self.dims[1]

    @property
    def vocab_size(self) -> int:
        return self.dims[2]

    def last_position(self) -> torch.Tensor:
        """Return the final ``vocab_size`` values of the row-major buffer.

        Equivalent to ``data[0, -1, :]``: with ``n = batch * seq * vocab`` the
        slice starts at ``n - vocab_size``.
        """
        flat = self.data.reshape(-1)
        start_index = flat.numel() - self.vocab_size
        return flat[start_index:]
