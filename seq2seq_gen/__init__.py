"""
seq2seq_gen: autoregressive decoding for encoder-decoder models.

Drives a model executor step by step, choosing each next token greedily or by
Top-K sampling, until the end token, a length cap or a progress callback
stops generation.
"""

__version__ = "0.1.0"

from seq2seq_gen.application.services.generation_engine import GenerationEngine
from seq2seq_gen.domain.entities import (
    ForwardResult,
    GenerationOptions,
    LogitsTensor,
    SamplingStrategy,
    TensorDescriptor,
)
from seq2seq_gen.domain.interfaces import ModelSpec
from seq2seq_gen.infrastructure.selection import sample_greedy, sample_top_k

__all__ = [
    "GenerationEngine",
    "GenerationOptions",
    "SamplingStrategy",
    "ModelSpec",
    "ForwardResult",
    "LogitsTensor",
    "TensorDescriptor",
    "sample_greedy",
    "sample_top_k",
]
