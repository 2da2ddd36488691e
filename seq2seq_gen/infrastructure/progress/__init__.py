"""Progress callbacks for the decode loop."""

from .callbacks import ProgressBar, stop_on_tokens, chain_callbacks

__all__ = ["ProgressBar", "stop_on_tokens", "chain_callbacks"]
