"""
Utilities module for the seq2seq generation engine.

Configuration, logging and error handling shared by every layer.
"""

# Re-export the configuration manager for easy imports
from seq2seq_gen.utils.config_manager import config, Seq2SeqConfig, get_debug_mode

__all__ = ["config", "Seq2SeqConfig", "get_debug_mode"]
