"""Greedy and Top-K token samplers.

Both read only the logits of the final sequence position. Top-K weights are
raw ``exp(logit)`` values with no temperature, so the draw is sensitive to the
scale of the model's logits.
"""

import math
from functools import partial
from typing import Callable, Dict, Optional

import torch

from seq2seq_gen.domain.entities.tensor import LogitsTensor
from seq2seq_gen.domain.entities.generation_options import SamplerKind, SamplingStrategy
from seq2seq_gen.domain.interfaces.token_sampling import TokenSamplerInterface
from seq2seq_gen.utils.error_manager import ConfigurationError
from seq2seq_gen.utils.logger import get_logger

# Weight given to every candidate outside the top k
FLOOR_WEIGHT = math.exp(-100.0)

logger = get_logger("seq2seq_gen.samplers")


def sample_greedy(logits: LogitsTensor) -> int:
    """Return the argmax over the vocabulary.

    Ties go to the lowest index. NaN scores never win: a NaN at index 0
    keeps index 0 (nothing compares greater), any later NaN is skipped.
    """
    scores = logits.last_position()
    nan_mask = torch.isnan(scores)
    if nan_mask[0]:
        return 0
    if nan_mask.any():
        scores = scores.masked_fill(nan_mask, float("-inf"))
    return int(torch.argmax(scores).item())


def sample_top_k(
    logits: LogitsTensor,
    k: int,
    generator: Optional[torch.Generator] = None,
) -> int:
    """Draw a token from the top ``k`` candidates weighted by ``exp(logit)``.

    Candidates outside the top ``k`` keep a tiny floor weight so the total is
    never zero. Candidates with equal logits are ranked by ascending id.

    Args:
        logits: Logits tensor, only the last position is used
        k: Number of candidates, clamped to the vocabulary size
        generator: Optional CPU ``torch.Generator`` for reproducible draws

    Returns:
        The chosen token id
    """
    if k < 1:
        raise ConfigurationError(f"top_k must be >= 1, got {k}", field="top_k")

    scores = logits.last_position().detach().to(device="cpu", dtype=torch.float64)
    k = min(k, scores.numel())

    sorted_scores, sorted_ids = torch.sort(scores, descending=True, stable=True)

    weights = torch.full_like(sorted_scores, FLOOR_WEIGHT)
    weights[:k] = torch.exp(sorted_scores[:k])
    total = weights.sum()

    r = torch.rand(1, generator=generator, dtype=torch.float64)[0] * total

    # Running remainder after subtracting each weight in rank order
    remaining = r - torch.cumsum(weights, dim=0)
    hits = torch.nonzero(remaining <= 0)
    if hits.numel() == 0:
        logger.debug(f"Top-k draw exhausted candidates (total weight {total.item()}), using top-ranked token")
        return int(sorted_ids[0].item())

    return int(sorted_ids[hits[0, 0]].item())


_SAMPLER_TABLE: Dict[SamplerKind, Callable[[SamplingStrategy, Optional[torch.Generator]], TokenSamplerInterface]] = {
    SamplerKind.GREEDY: lambda strategy, generator: sample_greedy,
    SamplerKind.TOP_K: lambda strategy, generator: partial(sample_top_k, k=strategy.k, generator=generator),
}


def resolve_sampler(
    strategy: SamplingStrategy,
    generator: Optional[torch.Generator] = None,
) -> TokenSamplerInterface:
    """Turn a sampling strategy into a one-argument sampler.

    Resolved once per generation run, before the decode loop starts.
    """
    try:
        build = _SAMPLER_TABLE[strategy.kind]
    except KeyError:
        raise ConfigurationError(f"Unsupported sampler: {strategy.kind!r}", field="sampling")
    return build(strategy, generator)
