"""
Sync Bridge — DSQL Auth

Turns a callback-style asynchronous operation into a blocking call.

Usage:
    bridge = SyncBridge()
    result, error = bridge.wait(lambda on_complete: source.get_credentials(on_complete))

The operation may complete inline (before wait() starts blocking) or from
any other thread. Each bridge accepts exactly one completion.
"""

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

OnComplete = Callable[..., None]


class SyncBridge(Generic[T]):
    """Single-shot barrier between a completion callback and a waiting caller."""

    def __init__(self):
        self._condition = threading.Condition()
        self._completed = False
        self._started = False
        self._result: T | None = None
        self._error: BaseException | None = None

    @property
    def completed(self) -> bool:
        with self._condition:
            return self._completed

    def on_complete(self, result: T | None, error: BaseException | None = None) -> None:
        """Completion callback handed to the asynchronous operation."""
        with self._condition:
            if self._completed:
                logger.warning("Ignoring extra completion on a single-shot bridge")
                return
            self._result = result
            self._error = error
            self._completed = True
            self._condition.notify_all()

    def wait(self, trigger: Callable[[OnComplete], Any]) -> tuple[T | None, BaseException | None]:
        """
        Start the operation and block until it completes.

        Exceptions raised by trigger itself propagate immediately, without
        waiting for a completion that will never come.
        """
        with self._condition:
            if self._started:
                raise RuntimeError("SyncBridge can only be used once")
            self._started = True

        trigger(self.on_complete)

        with self._condition:
            self._condition.wait_for(lambda: self._completed)
            return self._result, self._error
