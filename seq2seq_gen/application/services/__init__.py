"""Application services."""

from .generation_engine import GenerationEngine

__all__ = ["GenerationEngine"]
