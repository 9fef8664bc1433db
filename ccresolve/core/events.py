# SPDX-License-Identifier: MIT
"""Change notification for compile commands.

Layers broadcast the paths of files whose effective compile command
changed; consumers subscribe once at the outermost layer.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

Listener = Callable[[list[str]], None]


class Subscription:
    """Handle for a registered listener.

    Calling unsubscribe() (or leaving a ``with`` block) removes the
    listener. Unsubscribing twice is harmless.
    """

    def __init__(self, event: CommandChanged, token: int) -> None:
        self._event = event
        self._token: int | None = token

    @property
    def active(self) -> bool:
        return self._token is not None

    def unsubscribe(self) -> None:
        if self._token is not None:
            self._event._remove(self._token)
            self._token = None

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class CommandChanged:
    """Synchronous broadcaster of "these files' commands changed".

    Listeners run on the broadcasting thread in registration order.
    They must not block.

    Example:
        event = CommandChanged()
        sub = event.subscribe(lambda paths: print(paths))
        event.broadcast(["/src/a.cpp"])
        sub.unsubscribe()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[int, Listener] = {}
        self._next_token = 0

    def subscribe(self, listener: Listener) -> Subscription:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._listeners[token] = listener
        return Subscription(self, token)

    def broadcast(self, paths: Sequence[str]) -> None:
        """Deliver paths to every listener registered at this moment."""
        # Copy so listeners can (un)subscribe from inside a callback
        with self._lock:
            listeners = list(self._listeners.values())
        changed = list(paths)
        logger.debug("Broadcasting %d changed file(s)", len(changed))
        # Each listener gets its own list
        for listener in listeners:
            listener(list(changed))

    def _remove(self, token: int) -> None:
        with self._lock:
            self._listeners.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
