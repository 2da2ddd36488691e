"""Model executor interface.

The engine never runs the network itself. It depends on a ``forward``
capability that takes the encoder ids and the full decoder context and
returns next-token logits.
"""

import numbers
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Protocol, Union
from abc import abstractmethod

from ..entities.forward import ForwardResult
from ...utils.error_manager import ConfigurationError

DEFAULT_START_TOKEN_ID = 0
DEFAULT_END_TOKEN_ID = 1

# forward(input_ids, decoder_input_ids) -> ForwardResult, sync or async
ForwardFn = Callable[[List[int], List[int]], Union[ForwardResult, Awaitable[ForwardResult]]]


class ModelExecutorInterface(Protocol):
    """Interface for encoder-decoder forward passes."""

    @abstractmethod
    async def forward(self, input_ids: List[int], decoder_input_ids: List[int]) -> ForwardResult:
        """Run one forward pass.

        The whole decoder context is passed on every call; implementations
        may cache internally but must not rely on the engine doing so.

        Args:
            input_ids: Encoder token ids
            decoder_input_ids: Decoder token ids generated so far

        Returns:
            ForwardResult with logits of shape (1, len(decoder_input_ids), vocab)
        """
        ...


@dataclass(frozen=True)
class ModelSpec:
    """Everything the engine needs from a model: a forward capability and its
    reserved token ids."""
    forward: ForwardFn
    start_token_id: int = DEFAULT_START_TOKEN_ID
    end_token_id: int = DEFAULT_END_TOKEN_ID

    def __post_init__(self):
        if not callable(self.forward):
            raise ConfigurationError("ModelSpec.forward must be callable", field="forward")
        for name in ("start_token_id", "end_token_id"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral) or isinstance(value, bool) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}", field=name)
            object.__setattr__(self, name, int(value))

    @classmethod
    def from_executor(
        cls,
        executor: Any,
        start_token_id: Optional[int] = None,
        end_token_id: Optional[int] = None,
    ) -> "ModelSpec":
        """Build a spec from an executor object.

        Token ids default to the executor's ``start_token_id`` /
        ``end_token_id`` attributes when present, then to 0 and 1.
        """
        if start_token_id is None:
            start_token_id = getattr(executor, "start_token_id", DEFAULT_START_TOKEN_ID)
        if end_token_id is None:
            end_token_id = getattr(executor, "end_token_id", DEFAULT_END_TOKEN_ID)
        return cls(forward=executor.forward, start_token_id=start_token_id, end_token_id=end_token_id)
