"""
Listener Model

Single-shot wakeup registrations used by long-poll connections.
"""

import threading
from enum import Enum
from typing import Callable, Optional


class ListenerKind(Enum):
    """What a listener is waiting for."""
    WATCH = "WATCH"  # the list of waiting matches changes
    WAIT = "WAIT"    # the player's match starts
    PLAY = "PLAY"    # the player's match state changes


class Listener:
    """
    One registration, fired at most once.

    The Game service fires a listener under its lock: the optional callback
    runs first, then the event is set. The connection that registered it
    blocks in wait() outside the lock. A cancelled listener also releases its
    waiter, but reports cancelled instead of fired.
    """

    def __init__(self, kind: ListenerKind, player: Optional[str] = None,
                 callback: Optional[Callable[[], None]] = None):
        self.kind = kind
        self.player = player
        self._callback = callback
        self._event = threading.Event()
        self.fired = False
        self.cancelled = False

    @property
    def done(self) -> bool:
        return self.fired or self.cancelled

    def fire(self) -> None:
        if self.done:
            return
        self.fired = True
        if self._callback is not None:
            self._callback()
        self._event.set()

    def cancel(self) -> None:
        if self.done:
            return
        self.cancelled = True
        self._event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the listener fires or is cancelled.

        Args:
            timeout: Seconds to wait, or None to wait forever

        Returns:
            bool: True if the listener fired
        """
        self._event.wait(timeout)
        return self.fired

    def __repr__(self) -> str:
        state = 'fired' if self.fired else 'cancelled' if self.cancelled else 'pending'
        return f"Listener({self.kind.value}, player={self.player!r}, {state})"
