"""Token selection for the generation engine."""

from .samplers import sample_greedy, sample_top_k, resolve_sampler, FLOOR_WEIGHT

__all__ = ["sample_greedy", "sample_top_k", "resolve_sampler", "FLOOR_WEIGHT"]
