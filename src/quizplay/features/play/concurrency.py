"""Bridges from the event loop to blocking calls.

Catalog reads and writes are short, so they share one worker pool. A console
read may block for as long as the user likes, so each one gets its own daemon
thread: the process can exit on Ctrl+C without waiting for a pending line.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, TypeVar

__all__ = ["read_in_daemon", "run_blocking"]

T = TypeVar("T")

_POOL_SIZE = 8
_pool: ThreadPoolExecutor | None = None
_pool_lock = threading.Lock()


def _catalog_pool() -> ThreadPoolExecutor:
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = ThreadPoolExecutor(max_workers=_POOL_SIZE, thread_name_prefix="quizplay-catalog")
        return _pool


async def run_blocking(func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_catalog_pool(), partial(func, *args, **kwargs))


async def read_in_daemon(read: Callable[..., T], /, *args: Any) -> T:
    """Run ``read`` on a fresh daemon thread and await its result.

    If the awaiting task is cancelled the thread is left to finish (or die
    with the process); its late result is dropped.
    """

    loop = asyncio.get_running_loop()
    future: asyncio.Future[T] = loop.create_future()

    def settle(result: Any, error: BaseException | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def target() -> None:
        try:
            result, error = read(*args), None
        except Exception as exc:
            result, error = None, exc
        try:
            loop.call_soon_threadsafe(settle, result, error)
        except RuntimeError:
            # Loop already closed; nobody is waiting any more.
            pass

    threading.Thread(target=target, name="quizplay-console-reader", daemon=True).start()
    return await future
