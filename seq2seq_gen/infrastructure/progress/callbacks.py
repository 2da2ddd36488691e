"""Ready-made progress callbacks for ``GenerationEngine.generate``."""

import inspect
from typing import Iterable, List, Optional

from tqdm import tqdm

from seq2seq_gen.domain.interfaces.progress import ProgressCallback


class ProgressBar:
    """Progress callback that advances a tqdm bar once per generated token.

    Never asks generation to stop. Use as a context manager or call
    ``close()`` when done.
    """

    def __init__(self, max_length: int, desc: str = "Generating tokens", **tqdm_kwargs):
        self.bar = tqdm(total=max_length, desc=desc, unit="tok", **tqdm_kwargs)

    def __call__(self, output_token_ids: List[int], input_token_ids: List[int]) -> bool:
        self.bar.update(1)
        return True

    def close(self) -> None:
        self.bar.close()

    def __enter__(self) -> "ProgressBar":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def stop_on_tokens(token_ids: Iterable[int]) -> ProgressCallback:
    """Build a callback that stops generation once the latest token is in ``token_ids``.

    The matching token is kept in the output; the stop takes effect before
    the next forward pass.
    """
    stop_ids = frozenset(token_ids)

    def callback(output_token_ids: List[int], input_token_ids: List[int]) -> bool:
        return output_token_ids[-1] not in stop_ids

    return callback


def chain_callbacks(*callbacks: Optional[ProgressCallback]) -> ProgressCallback:
    """Combine callbacks into one.

    Every callback runs on every step, in order; generation continues only
    if all of them return a truthy value. ``None`` entries are skipped.
    """
    active = [cb for cb in callbacks if cb is not None]

    async def callback(output_token_ids: List[int], input_token_ids: List[int]) -> bool:
        keep_going = True
        for cb in active:
            result = cb(output_token_ids, input_token_ids)
            if inspect.isawaitable(result):
                result = await result
            keep_going = bool(result) and keep_going
        return keep_going

    return callback
