"""Generation state entity.

Holds the mutable state of a single ``generate`` call.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class GenerationState:
    """Entity representing one in-progress decode run.

    ``num_output_tokens`` always equals ``len(output_token_ids)`` and the
    first output token is always the start token.
    """
    start_token_id: int
    max_output_tokens: int
    output_token_ids: List[int] = field(default_factory=list)
    num_output_tokens: int = 0
    step: int = 0
    should_continue: bool = True

    def __post_init__(self):
        """Seed the output with the start token."""
        if self.start_token_id < 0:
            raise ValueError(f"start_token_id must be non-negative, got {self.start_token_id}")
        if self.max_output_tokens < 1:
            raise ValueError(f"max_output_tokens must be positive, got {self.max_output_tokens}")
        if not self.output_token_ids:
            self.output_token_ids = [self.start_token_id]
        if self.output_token_ids[0] != self.start_token_id:
            raise ValueError("Output sequence must begin with the start token")
        self.num_output_tokens = len(self.output_token_ids)

    @classmethod
    def start(cls, start_token_id: int, max_length: int) -> "GenerationState":
        """Create the state for a run that may append up to ``max_length`` tokens."""
        return cls(start_token_id=start_token_id, max_output_tokens=1 + max_length)

    @property
    def has_room(self) -> bool:
        return self.num_output_tokens < self.max_output_tokens

    def append(self, token_id: int) -> None:
        self.output_token_ids.append(token_id)
        self.num_output_tokens += 1
        self.step += 1

    def snapshot(self) -> List[int]:
        return list(self.output_token_ids)
