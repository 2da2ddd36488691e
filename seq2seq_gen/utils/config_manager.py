"""
Configuration Manager for the seq2seq generation engine.

This module provides a centralized configuration system. Settings are loaded
from defaults, environment variables (``SEQ2SEQ_*``) or a JSON file, and
validated on construction.
"""

import os
import json
from typing import Dict, Any, Optional, Union
from pathlib import Path
from dataclasses import dataclass, field, asdict

ENV_PREFIX = "SEQ2SEQ_"
TRUTHY = ["true", "1", "yes"]

# Fields typed Optional[int]; every other None default is a string setting
OPTIONAL_INT_FIELDS = {"seed"}


class ConfigurationError(Exception):
    """Exception raised for invalid configuration values.

    The generation layer re-raises this through the richer error hierarchy in
    ``error_manager``; this base stays dependency free so the config module
    can be imported first.
    """

    pass


@dataclass
class LoggingConfig:
    """Configuration settings for logging."""

    enable_file_logging: bool = False
    log_dir: str = field(default_factory=lambda: os.path.join(os.getcwd(), "logs"))
    log_level: str = "INFO"
    console_logging: bool = True

    def __post_init__(self):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() not in valid_levels:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}. Must be one of {valid_levels}"
            )

        self.log_level = self.log_level.upper()


@dataclass
class ModelConfig:
    """Configuration settings for the model executor."""

    model_id: Optional[str] = None
    device: Optional[str] = None  # None means let the executor decide
    start_token_id: int = 0
    end_token_id: int = 1

    def __post_init__(self):
        """Validate model configuration."""
        if self.start_token_id < 0:
            raise ConfigurationError(
                f"start_token_id must be >= 0, got {self.start_token_id}"
            )
        if self.end_token_id < 0:
            raise ConfigurationError(
                f"end_token_id must be >= 0, got {self.end_token_id}"
            )

        valid_devices = [None, "cpu", "cuda", "mps"]
        if self.device is not None and self.device.split(":")[0] not in valid_devices:
            raise ConfigurationError(
                f"Invalid device: {self.device}. Must be one of {valid_devices}"
            )


@dataclass
class GenerationConfig:
    """Configuration settings for the decode loop."""

    max_length: int = 100
    top_k: int = 0  # 0 means greedy decoding
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate generation configuration."""
        for name in ("max_length", "top_k"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if self.seed is not None and (not isinstance(self.seed, int) or isinstance(self.seed, bool)):
            raise ConfigurationError(f"seed must be an integer or null, got {self.seed!r}")

        if self.max_length < 1:
            raise ConfigurationError(f"max_length must be >= 1, got {self.max_length}")

        if self.top_k < 0:
            raise ConfigurationError(f"top_k must be >= 0, got {self.top_k}")


@dataclass
class DebugConfig:
    """Configuration settings for debugging."""

    global_debug: bool = False
    module_debug: Dict[str, bool] = field(default_factory=dict)

    def is_debug_enabled(self, module_name: str) -> bool:
        """
        Check if debug is enabled for a module.

        The environment variable ``SEQ2SEQ_DEBUG_<MODULE>`` wins over the
        ``module_debug`` mapping, which wins over ``global_debug``.
        """
        env_var = f"{ENV_PREFIX}DEBUG_{module_name.upper()}"
        if env_var in os.environ:
            return os.environ[env_var].lower() in TRUTHY

        if module_name in self.module_debug:
            return self.module_debug[module_name]

        return self.global_debug


def _coerce(key: str, current_value: Any, raw: str) -> Any:
    """Convert an environment string to the type of the field it overrides."""
    if isinstance(current_value, bool):
        return raw.lower() in TRUTHY
    if isinstance(current_value, int):
        return int(raw)
    if isinstance(current_value, float):
        return float(raw)
    if key in OPTIONAL_INT_FIELDS:
        return None if raw.lower() in ("", "none") else int(raw)
    return raw


@dataclass
class Seq2SeqConfig:
    """
    Central configuration for the generation engine.

    Holds every section in one structured object.
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "Seq2SeqConfig":
        """
        Create a configuration instance from environment variables.

        Variables take the form ``SEQ2SEQ_<SECTION>_<KEY>``, for example
        ``SEQ2SEQ_GENERATION_MAX_LENGTH=50``.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            Seq2SeqConfig: Configuration instance with values from the environment
        """
        environ = os.environ if environ is None else environ
        config = cls()

        for env_name, env_value in environ.items():
            if not env_name.startswith(ENV_PREFIX):
                continue

            # Module debug switches are handled below
            if env_name.startswith(f"{ENV_PREFIX}DEBUG_"):
                continue

            if env_name == f"{ENV_PREFIX}DEBUG":
                config.debug.global_debug = env_value.lower() in TRUTHY
                continue

            parts = env_name.replace(ENV_PREFIX, "", 1).lower().split("_", 1)
            if len(parts) != 2:
                continue

            section, key = parts
            if hasattr(config, section) and hasattr(getattr(config, section), key):
                section_obj = getattr(config, section)
                try:
                    new_value = _coerce(key, getattr(section_obj, key), env_value)
                except ValueError as e:
                    raise ConfigurationError(f"Invalid value for {env_name}: {e}")
                setattr(section_obj, key, new_value)

        for env_name, env_value in environ.items():
            if env_name.startswith(f"{ENV_PREFIX}DEBUG_"):
                module_name = env_name.replace(f"{ENV_PREFIX}DEBUG_", "", 1).lower()
                config.debug.module_debug[module_name] = env_value.lower() in TRUTHY

        config.validate()
        return config

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "Seq2SeqConfig":
        """
        Load configuration from a JSON file.

        Unknown sections and keys are ignored.

        Args:
            file_path: Path to the JSON configuration file

        Returns:
            Seq2SeqConfig: Configuration instance with values from the file
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ConfigurationError(f"Configuration file not found: {file_path}")

        try:
            with file_path.open("r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {e}")

        config = cls()
        for section_name, section_data in data.items():
            if not hasattr(config, section_name):
                continue

            section = getattr(config, section_name)
            for key, value in section_data.items():
                if hasattr(section, key):
                    setattr(section, key, value)

        config.validate()
        return config

    def validate(self) -> None:
        """Re-run section validation after fields were assigned in place."""
        for section in (self.logging, self.model, self.generation):
            try:
                section.__post_init__()
            except (TypeError, AttributeError) as e:
                raise ConfigurationError(
                    f"Invalid value in {type(section).__name__}: {e}"
                ) from e

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to a dictionary.

        Returns:
            Dict[str, Any]: Configuration as a nested dictionary
        """
        return {
            "logging": asdict(self.logging),
            "model": asdict(self.model),
            "generation": asdict(self.generation),
            "debug": {
                "global_debug": self.debug.global_debug,
                "module_debug": dict(self.debug.module_debug),
            },
        }

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """
        Save configuration to a JSON file.

        Args:
            file_path: Path to save the configuration file
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with file_path.open("w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def get_debug_mode(self, module_name: str) -> bool:
        """Get debug mode for a specific module."""
        return self.debug.is_debug_enabled(module_name)


# Global configuration instance, initialized from defaults and the environment
config = Seq2SeqConfig.from_env()


def get_debug_mode(module_name: str) -> bool:
    """
    Get debug mode for a specific module from the global configuration.

    Args:
        module_name: Name of the module

    Returns:
        bool: Whether debug is enabled for the module
    """
    return config.get_debug_mode(module_name)
