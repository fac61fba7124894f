"""Drive the coroutine-based rebuild loops from synchronous entry points.

`crop_document`, `remove_pages` and the `EditorSession` sync methods all go
through `run_async`; the page-copy coroutines themselves never block the loop.
"""

from __future__ import annotations

import asyncio
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any, TypeVar

from pagecrop.exceptions import AsyncExecutionError, PackageError

if TYPE_CHECKING:
    from collections.abc import Coroutine

T = TypeVar("T")


def _run_on_private_loop(coro: Coroutine[Any, Any, T]) -> T:
    """Finish a rebuild on a private loop in a `pagecrop-rebuild` worker thread.

    `SelectionError`, `RebuildError` and the other package errors cross the
    thread unchanged so CLI and session callers can report them as-is; anything
    else is wrapped.

    Args:
        coro: The coroutine to run.

    Raises:
        PackageError: Propagated from the coroutine.
        AsyncExecutionError: If the coroutine raises any other exception.

    Returns:
        The result of the coroutine.
    """
    output: Queue[T | BaseException] = Queue(maxsize=1)

    def _worker() -> None:
        try:
            output.put(asyncio.run(coro))
        except BaseException as exc:
            output.put(exc)

    worker = threading.Thread(target=_worker, name="pagecrop-rebuild", daemon=True)
    worker.start()
    worker.join()

    result = output.get()
    if isinstance(result, PackageError):
        raise result
    if isinstance(result, BaseException):
        raise AsyncExecutionError(result=result) from result
    return result


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Return the result of a rebuild coroutine to a synchronous caller.

    Without a running loop (the CLI) the coroutine gets its own loop via
    `asyncio.run`. When a UI shell already runs a loop, the rebuild is finished
    on a worker thread so that loop is never re-entered; async callers should
    await `crop_document_async` or `remove_pages_async` directly instead.

    Args:
        coro: The coroutine to run.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    return _run_on_private_loop(coro)
