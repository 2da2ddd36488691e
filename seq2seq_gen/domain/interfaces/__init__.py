"""Domain interfaces for the generation engine.

Contracts that the infrastructure layer implements.
"""

from .model_executor import ModelExecutorInterface, ModelSpec, ForwardFn
from .token_sampling import TokenSamplerInterface
from .progress import ProgressCallback

__all__ = [
    "ModelExecutorInterface",
    "ModelSpec",
    "ForwardFn",
    "TokenSamplerInterface",
    "ProgressCallback",
]
