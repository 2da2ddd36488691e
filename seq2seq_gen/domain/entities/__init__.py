"""Domain entities for the generation engine.

Value objects and entities for tensors, forward passes, options and the
state of a decode run.
"""

from .tensor import TensorDescriptor, LogitsTensor
from .forward import ForwardInputs, ForwardResult, build_forward_inputs
from .generation_options import GenerationOptions, SamplingStrategy, SamplerKind
from .generation_state import GenerationState

__all__ = [
    "TensorDescriptor",
    "LogitsTensor",
    "ForwardInputs",
    "ForwardResult",
    "build_forward_inputs",
    "GenerationOptions",
    "SamplingStrategy",
    "SamplerKind",
    "GenerationState",
]
