"""Bounded background producer for listing streams.

:class:`background` runs an iterator in a daemon thread and hands its
items over through a queue of capacity 1, so a slow consumer throttles
the producer and at most one item is in flight per stream.  Closing the
consumer (or dropping it) stops the producer, which then closes the
wrapped iterator so the listing releases its directory handles or HTTP
connections.
"""

from __future__ import annotations

import queue
import threading
from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")

_POLL_INTERVAL = 0.05
_DONE = object()


class _Failure:
    __slots__ = ("exc",)

    def __init__(self, exc: BaseException) -> None:
        self.exc = exc


def _produce(it: Iterator, q: queue.Queue, stop: threading.Event) -> None:
    def _put(item) -> bool:
        while not stop.is_set():
            try:
                q.put(item, timeout=_POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        return False

    try:
        for item in it:
            if not _put(item):
                return
        _put(_DONE)
    except Exception as exc:
        _put(_Failure(exc))
    finally:
        close = getattr(it, "close", None)
        if close is not None:
            close()


class background(Generic[T]):
    """Iterate *iterable* in a producer thread, one item ahead of the consumer.

    The producer starts immediately, so several listings wrapped this
    way progress concurrently.  Items arrive in production order.  An
    exception raised by the producer is re-raised in the consumer at the
    point it occurred.
    """

    def __init__(self, iterable: Iterable[T], *, name: str = "listing") -> None:
        self._queue: queue.Queue = queue.Queue(maxsize=1)
        self._stop = threading.Event()
        self._finished = False
        self._thread = threading.Thread(
            target=_produce, args=(iter(iterable), self._queue, self._stop),
            name=f"mirrorcp-{name}", daemon=True,
        )
        self._thread.start()

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._finished:
            raise StopIteration
        item = self._queue.get()
        if item is _DONE:
            self.close()
            raise StopIteration
        if isinstance(item, _Failure):
            self.close()
            raise item.exc
        return item

    def close(self) -> None:
        """Stop the producer; further ``next()`` calls end the iteration."""
        self._finished = True
        self._stop.set()
        # Unblock a producer waiting on a full queue.
        try:
            self._queue.get_nowait()
        except queue.Empty:
            pass

    def __enter__(self) -> background[T]:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __del__(self) -> None:
        stop = getattr(self, "_stop", None)
        if stop is not None:
            stop.set()
