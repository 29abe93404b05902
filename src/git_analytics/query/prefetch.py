"""Bounded producer/consumer handoff between the reader and the index."""

from __future__ import annotations

import queue
import threading
from typing import Iterable, Iterator, Optional, TypeVar

from ..exceptions import Cancelled
from ..logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_DONE = object()
_POLL_SECONDS = 0.1


class _Failure:
    def __init__(self, error: Exception):
        self.error = error


def prefetch(
    source: Iterable[T], maxsize: int, cancel: Optional[threading.Event] = None
) -> Iterator[T]:
    """Iterate ``source`` on a background thread, at most ``maxsize`` items ahead.

    Exceptions raised by the producer are re-raised in the consumer. When the
    consumer stops early the producer is told to stop and ``source`` is
    closed on its own thread (which terminates a git subprocess).
    """
    handoff: queue.Queue = queue.Queue(maxsize=max(1, maxsize))
    stop = threading.Event()

    def put(item: object) -> bool:
        while not stop.is_set():
            try:
                handoff.put(item, timeout=_POLL_SECONDS)
                return True
            except queue.Full:
                if cancel is not None and cancel.is_set():
                    return False
        return False

    def produce() -> None:
        iterator = iter(source)
        try:
            for item in iterator:
                if not put(item):
                    return
            put(_DONE)
        except Exception as e:
            put(_Failure(e))
        finally:
            close = getattr(iterator, "close", None)
            if close is not None:
                close()

    thread = threading.Thread(target=produce, name="git-analytics-reader", daemon=True)
    thread.start()
    try:
        while True:
            try:
                item = handoff.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                if cancel is not None and cancel.is_set():
                    raise Cancelled("reading history")
                continue
            if item is _DONE:
                return
            if isinstance(item, _Failure):
                raise item.error
            yield item
    finally:
        stop.set()
        while True:
            try:
                handoff.get_nowait()
            except queue.Empty:
                break
        thread.join(timeout=5)
        if thread.is_alive():
            logger.warning("Reader thread did not exit within 5 seconds")
