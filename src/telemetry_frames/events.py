"""
Signals
=======

Synchronous publish/subscribe channel.

Delivery is in-order and on the caller's thread: ``emit`` returns only
after every subscriber has run. A subscriber that raises is logged and
skipped; the remaining subscribers still receive the value.
"""

import logging
from typing import Callable, Generic, List, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Signal(Generic[T]):
    """
    Named callback registry.

    Example:
        frame_ready: Signal[Frame] = Signal("frame_ready")
        unsubscribe = frame_ready.connect(lambda frame: print(frame.title))
        frame_ready.emit(frame)
        unsubscribe()
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._callbacks: List[Callable[[T], None]] = []

    def connect(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """
        Register ``callback``; registering twice is a no-op.

        Returns:
            A function that disconnects the callback
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)
        return lambda: self.disconnect(callback)

    def disconnect(self, callback: Callable[[T], None]) -> None:
        try:
            self._callbacks.remove(callback)
        except ValueError:
            pass

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def emit(self, value: T) -> None:
        for callback in tuple(self._callbacks):
            try:
                callback(value)
            except Exception:
                logger.exception(f"{self.name}: subscriber raised")
