"""Generation options and the sampling strategy variant.

Options are validated up front so that the decode loop never starts with a
length cap or K it cannot honour.
"""

import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from ...utils.config_manager import GenerationConfig
from ...utils.error_manager import ConfigurationError

DEFAULT_MAX_LENGTH = 100
DEFAULT_TOP_K = 0

# Accepted spellings for option keys passed as a mapping
_OPTION_ALIASES = {
    "max_length": "max_length",
    "maxLength": "max_length",
    "top_k": "top_k",
    "topK": "top_k",
}


class SamplerKind(Enum):
    GREEDY = "greedy"
    TOP_K = "top_k"


@dataclass(frozen=True)
class SamplingStrategy:
    """Tagged variant ``Greedy | TopK(k)``."""
    kind: SamplerKind
    k: int = 0

    def __post_init__(self):
        if self.kind is SamplerKind.TOP_K and self.k < 1:
            raise ConfigurationError(f"TopK sampling needs k >= 1, got {self.k}", field="top_k")

    @classmethod
    def greedy(cls) -> "SamplingStrategy":
        return cls(SamplerKind.GREEDY)

    @classmethod
    def top_k(cls, k: int) -> "SamplingStrategy":
        return cls(SamplerKind.TOP_K, k)

    @classmethod
    def from_top_k(cls, top_k: int) -> "SamplingStrategy":
        """0 selects greedy decoding, any positive value Top-K with that K."""
        return cls.top_k(top_k) if top_k > 0 else cls.greedy()


def _is_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call options for ``GenerationEngine.generate``.

    Attributes:
        max_length: Maximum number of tokens appended after the start token
        top_k: 0 for greedy decoding, otherwise the K of Top-K sampling
    """
    max_length: int = DEFAULT_MAX_LENGTH
    top_k: int = DEFAULT_TOP_K

    def __post_init__(self):
        """Validate options."""
        if not _is_int(self.max_length) or self.max_length < 1:
            raise ConfigurationError(
                f"max_length must be a positive integer, got {self.max_length!r}",
                field="max_length",
            )
        if not _is_int(self.top_k) or self.top_k < 0:
            raise ConfigurationError(
                f"top_k must be a non-negative integer, got {self.top_k!r}",
                field="top_k",
            )
        # numpy and torch integers are stored as plain ints
        object.__setattr__(self, "max_length", int(self.max_length))
        object.__setattr__(self, "top_k", int(self.top_k))

    @property
    def sampling(self) -> SamplingStrategy:
        return SamplingStrategy.from_top_k(self.top_k)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "GenerationOptions":
        """Build options from a dict using snake_case or camelCase keys.

        Unknown keys are rejected so that typos do not silently fall back to
        defaults.
        """
        values = {}
        for key, value in options.items():
            if key not in _OPTION_ALIASES:
                raise ConfigurationError(f"Unknown generation option: {key!r}", field=key)
            values[_OPTION_ALIASES[key]] = value
        return cls(**values)

    @classmethod
    def from_config(cls, config: GenerationConfig) -> "GenerationOptions":
        return cls(max_length=config.max_length, top_k=config.top_k)

    @classmethod
    def coerce(
        cls,
        options: Optional[Union["GenerationOptions", Mapping[str, Any]]],
        default: Optional["GenerationOptions"] = None,
    ) -> "GenerationOptions":
        """Normalize whatever the caller passed into a GenerationOptions."""
        if options is None:
            return default if default is not None else cls()
        if isinstance(options, GenerationOptions):
            return options
        if isinstance(options, Mapping):
            return cls.from_mapping(options)
        raise ConfigurationError(
            f"options must be GenerationOptions, a mapping or None, got {type(options).__name__}"
        )
