"""Autoregressive decode loop for encoder-decoder models.

The engine repeatedly asks a model executor for next-token logits, picks a
token with the configured sampler and appends it to the output until the end
token is sampled, the length cap is reached or the progress callback asks to
stop.
"""

import asyncio
import inspect
import numbers
from typing import Any, List, Mapping, Optional, Sequence, Union

import torch

from seq2seq_gen.domain.entities.forward import ForwardResult
from seq2seq_gen.domain.entities.generation_options import GenerationOptions
from seq2seq_gen.domain.entities.generation_state import GenerationState
from seq2seq_gen.domain.interfaces.model_executor import ModelSpec
from seq2seq_gen.domain.interfaces.progress import ProgressCallback
from seq2seq_gen.infrastructure.selection.samplers import resolve_sampler
from seq2seq_gen.utils.config_manager import Seq2SeqConfig, config as global_config
from seq2seq_gen.utils.error_manager import (
    ConfigurationError,
    ErrorCode,
    ExecutorError,
    ProgressCallbackError,
)
from seq2seq_gen.utils.logging_utils import LoggingMixin

OptionsLike = Optional[Union[GenerationOptions, Mapping[str, Any]]]

# Termination causes reported in the logs
STOP_END_TOKEN = "end_token"
STOP_MAX_LENGTH = "max_length"
STOP_CALLBACK = "callback"


class GenerationEngine(LoggingMixin):
    """Generates an output token sequence for one encoder input at a time.

    The engine holds no per-run state: every ``generate`` call owns its own
    ``GenerationState``, so concurrent calls on one engine do not interfere.
    The only source of randomness is the optional ``torch.Generator`` used by
    Top-K sampling.
    """

    def __init__(
        self,
        model: ModelSpec,
        generator: Optional[torch.Generator] = None,
        default_options: Optional[GenerationOptions] = None,
        debug_mode: Optional[bool] = None,
    ):
        """Initialize the engine.

        Args:
            model: Forward capability plus start and end token ids
            generator: Random source for Top-K sampling, None uses torch's global RNG
            default_options: Options used when ``generate`` gets none
            debug_mode: Whether to enable debug logging
        """
        super().__init__()
        self.setup_logging("generation_engine", "generation_engine.log", debug_mode)

        if not isinstance(model, ModelSpec):
            raise ConfigurationError(
                f"model must be a ModelSpec, got {type(model).__name__}", field="model"
            )

        self.model = model
        self.generator = generator
        self.default_options = default_options or GenerationOptions()

    @classmethod
    def from_config(
        cls,
        model: ModelSpec,
        config: Optional[Seq2SeqConfig] = None,
        debug_mode: Optional[bool] = None,
    ) -> "GenerationEngine":
        """Create an engine whose defaults and seed come from configuration."""
        config = config or global_config
        generator = None
        if config.generation.seed is not None:
            generator = torch.Generator().manual_seed(config.generation.seed)

        if debug_mode is None:
            debug_mode = config.get_debug_mode("generation_engine")

        return cls(
            model,
            generator=generator,
            default_options=GenerationOptions.from_config(config.generation),
            debug_mode=debug_mode,
        )

    @classmethod
    def from_executor(
        cls,
        executor: Any,
        config: Optional[Seq2SeqConfig] = None,
        debug_mode: Optional[bool] = None,
    ) -> "GenerationEngine":
        """Create an engine around an executor object.

        Token ids the executor reports win over the configured ones.
        """
        config = config or global_config
        model = ModelSpec.from_executor(
            executor,
            start_token_id=getattr(executor, "start_token_id", config.model.start_token_id),
            end_token_id=getattr(executor, "end_token_id", config.model.end_token_id),
        )
        return cls.from_config(model, config, debug_mode=debug_mode)

    async def generate(
        self,
        input_token_ids: Sequence[int],
        options: OptionsLike = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[int]:
        """Generate the output token sequence for ``input_token_ids``.

        Args:
            input_token_ids: Non-empty encoder input, not mutated
            options: ``GenerationOptions``, a mapping of ``max_length``/``top_k``
                (camelCase accepted) or None for the engine defaults
            on_progress: Called after every appended token with the output so
                far and the input; a falsy result stops generation

        Returns:
            The output sequence, starting with the start token and ending with
            the end token when that is what stopped generation

        Raises:
            ConfigurationError: Invalid input or options
            ExecutorError: The forward pass failed
            ProgressCallbackError: The progress callback raised
        """
        input_ids = self._validate_input(input_token_ids)
        options = GenerationOptions.coerce(options, self.default_options)
        sampler = resolve_sampler(options.sampling, self.generator)
        end_token_id = self.model.end_token_id

        state = GenerationState.start(self.model.start_token_id, options.max_length)
        stop_reason = STOP_MAX_LENGTH

        self.log(
            f"Starting generation: input_len={len(input_ids)} max_length={options.max_length} "
            f"sampling={options.sampling.kind.value}"
        )

        with self.operation("generate"):
            while state.should_continue and state.has_room:
                result = await self._forward(input_ids, state)
                new_token_id = sampler(result.logits)
                state.append(new_token_id)

                self.log(f"Step {state.step}: token={new_token_id}", "debug")

                if on_progress is not None:
                    state.should_continue = await self._notify(on_progress, state, input_ids)
                    if not state.should_continue:
                        stop_reason = STOP_CALLBACK

                # The end token is kept and always ends the run
                if new_token_id == end_token_id:
                    stop_reason = STOP_END_TOKEN
                    break

        self.log(
            f"Generation finished after {state.step} steps ({stop_reason}), "
            f"output_len={state.num_output_tokens}"
        )
        return state.output_token_ids

    def generate_sync(
        self,
        input_token_ids: Sequence[int],
        options: OptionsLike = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[int]:
        """Blocking wrapper around ``generate`` for callers without an event loop."""
        return asyncio.run(self.generate(input_token_ids, options, on_progress))

    async def _forward(self, input_ids: List[int], state: GenerationState) -> ForwardResult:
        try:
            result = self.model.forward(input_ids, state.snapshot())
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise ExecutorError(
                f"Forward pass failed at step {state.step + 1}", cause=e, step=state.step + 1
            ) from e

        if not isinstance(result, ForwardResult):
            raise ExecutorError(
                f"Forward pass returned {type(result).__name__}, expected ForwardResult",
                code=ErrorCode.MODEL_OUTPUT_INVALID,
                step=state.step + 1,
            )
        return result

    async def _notify(
        self, on_progress: ProgressCallback, state: GenerationState, input_ids: List[int]
    ) -> bool:
        try:
            keep_going = on_progress(state.snapshot(), list(input_ids))
            if inspect.isawaitable(keep_going):
                keep_going = await keep_going
        except Exception as e:
            raise ProgressCallbackError(
                f"Progress callback failed at step {state.step}", cause=e, step=state.step
            ) from e
        return bool(keep_going)

    @staticmethod
    def _validate_input(input_token_ids: Sequence[int]) -> List[int]:
        if isinstance(input_token_ids, torch.Tensor):
            if input_token_ids.dim() == 2 and input_token_ids.shape[0] == 1:
                input_token_ids = input_token_ids[0]
            if input_token_ids.dim() != 1:
                raise ConfigurationError(
                    f"input_token_ids tensor must be 1D or (1, L), got shape {tuple(input_token_ids.shape)}",
                    field="input_token_ids",
                )
            input_token_ids = input_token_ids.tolist()

        if isinstance(input_token_ids, (str, bytes)) or not isinstance(input_token_ids, Sequence):
            raise ConfigurationError(
                f"input_token_ids must be a sequence of token ids, got {type(input_token_ids).__name__}",
                field="input_token_ids",
            )
        if len(input_token_ids) == 0:
            raise ConfigurationError("input_token_ids must not be empty", field="input_token_ids")

        for position, token_id in enumerate(input_token_ids):
            if not isinstance(token_id, numbers.Integral) or isinstance(token_id, bool) or token_id < 0:
                raise ConfigurationError(
                    f"Invalid token id {token_id!r} at position {position}",
                    field="input_token_ids",
                )
        return [int(token_id) for token_id in input_token_ids]
