"""Progress callback interface.

Called after each appended token with the output so far and the original
input. A falsy return value stops generation after the current step.
"""

from typing import Awaitable, Callable, List, Union

ProgressCallback = Callable[[List[int], List[int]], Union[bool, Awaitable[bool]]]
