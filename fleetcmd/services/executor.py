"""Single-thread executor bridging async request handlers to blocking device I/O.

One worker means device work submitted from concurrent requests is still
processed strictly one job at a time.
"""

from __future__ import annotations

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TypeVar

T = TypeVar("T")

_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fleet")


async def run_sync(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, functools.partial(fn, *args, **kwargs))


def shutdown() -> None:
    _executor.shutdown(wait=True)
