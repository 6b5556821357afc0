"""Run bounded waits on a dedicated worker thread."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)

CoroutineFactory = Callable[[], Coroutine[Any, Any, Any]]


def run_in_background(coroutine_factory: CoroutineFactory, *, name: str) -> "Future[Any]":
    """
    Run the coroutine on its own event loop in a daemon thread.

    The returned future resolves with the coroutine's result, or with the
    exception it raised. Cancelling the future before the thread picks it up
    prevents the wait from starting; once running, the wait ends at its deadline.
    """
    future: "Future[Any]" = Future()

    def _worker() -> None:
        if not future.set_running_or_notify_cancel():
            logger.debug("Background wait %s cancelled before start", name)
            return
        try:
            result = asyncio.run(coroutine_factory())
        except BaseException as exc:  # handed to the future's consumer
            future.set_exception(exc)
        else:
            future.set_result(result)

    thread = threading.Thread(target=_worker, name=name, daemon=True)
    thread.start()
    return future
