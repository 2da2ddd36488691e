"""Shared builders for logits and scripted model executors."""

from typing import List, Optional, Sequence
from unittest.mock import AsyncMock

import torch

from seq2seq_gen.domain.entities.forward import ForwardResult
from seq2seq_gen.domain.entities.tensor import LogitsTensor

VOCAB_SIZE = 8
START_TOKEN_ID = 0
END_TOKEN_ID = 1


def make_logits(favored: int, vocab_size: int = VOCAB_SIZE, seq_len: int = 1,
                earlier_favored: Optional[int] = None) -> LogitsTensor:
    """Logits whose last position strongly prefers ``favored``.

    Earlier positions prefer ``earlier_favored`` so tests notice if a sampler
    reads the wrong slice.
    """
    data = torch.zeros((1, seq_len, vocab_size))
    if earlier_favored is not None and seq_len > 1:
        data[0, :-1, earlier_favored] = 50.0
    data[0, -1, favored] = 50.0
    return LogitsTensor(data)


def scripted_forward(tokens: Sequence[int], vocab_size: int = VOCAB_SIZE) -> AsyncMock:
    """Async forward mock that makes the greedy sampler pick ``tokens`` in order.

    After the script runs out it keeps favoring the last scripted token.
    """
    script: List[int] = list(tokens)

    async def forward(input_ids, decoder_input_ids):
        step = len(decoder_input_ids) - 1
        favored = script[min(step, len(script) - 1)]
        logits = make_logits(favored, vocab_size, seq_len=len(decoder_input_ids),
                             earlier_favored=(favored + 1) % vocab_size)
        return ForwardResult(logits=logits, hidden_states=torch.zeros(1, len(input_ids), 4))

    return AsyncMock(side_effect=forward)


def uniform_forward(vocab_size: int = VOCAB_SIZE) -> AsyncMock:
    """Async forward mock returning flat logits over the whole vocabulary."""

    async def forward(input_ids, decoder_input_ids):
        return ForwardResult(logits=LogitsTensor(torch.zeros((1, len(decoder_input_ids), vocab_size))))

    return AsyncMock(side_effect=forward)
