"""iter_coroutine - drive the shared async core from synchronous clients."""

from __future__ import annotations

import typing

_T = typing.TypeVar("_T")


def iter_coroutine(coro: typing.Coroutine[None, None, _T]) -> _T:
    """
    Execute a coroutine that never suspends.

    The blocking transport declares ``send`` as ``async`` but performs its I/O
    synchronously, so a coroutine built on top of it finishes on the first
    ``send(None)``. This lets the sync and async clients share one
    implementation without an event loop.

    Raises:
        RuntimeError: If the coroutine suspends (for example because it awaited
            a real asynchronous transport).
    """
    try:
        coro.send(None)
    except StopIteration as ex:
        return ex.value  # type: ignore [no-any-return]
    else:
        raise RuntimeError(f"coroutine {coro!r} suspended; use the async client instead")
    finally:
        coro.close()


__all__ = ["iter_coroutine"]
