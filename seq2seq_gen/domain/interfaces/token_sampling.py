"""Token sampling interface.

A sampler maps a logits tensor to a single token id.
"""

from typing import Protocol
from abc import abstractmethod

from ..entities.tensor import LogitsTensor


class TokenSamplerInterface(Protocol):
    """Interface for next-token selection."""

    @abstractmethod
    def __call__(self, logits: LogitsTensor) -> int:
        """Choose the next token id from the last position of ``logits``."""
        ...
