from __future__ import annotations

import threading
from typing import Optional


class CancellationToken:
    """Cooperative cancellation signal shared between threads.

    A token may be linked to a parent: cancelling the parent cancels every
    child, cancelling a child never touches the parent. This lets a run-scoped
    token observe the process-wide one while staying independent of it.
    Short-lived children must be detached once done with.
    """

    def __init__(self, parent: Optional[CancellationToken] = None) -> None:
        self._event = threading.Event()
        self._guard = threading.Lock()
        self._children: set[CancellationToken] = set()
        self._parent = parent
        if parent is not None:
            parent._link(self)

    def _link(self, child: CancellationToken) -> None:
        with self._guard:
            cancelled = self._event.is_set()
            if not cancelled:
                self._children.add(child)
        if cancelled:
            child.cancel()

    def _unlink(self, child: CancellationToken) -> None:
        with self._guard:
            self._children.discard(child)

    def child(self) -> CancellationToken:
        return CancellationToken(parent=self)

    def detach(self) -> None:
        """Stop following the parent; the token keeps its current state."""
        parent, self._parent = self._parent, None
        if parent is not None:
            parent._unlink(self)

    def cancel(self) -> None:
        with self._guard:
            if self._event.is_set():
                return
            self._event.set()
            children, self._children = self._children, set()
        for child in children:
            child.cancel()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block up to ``timeout`` seconds; True if the token is cancelled."""
        return self._event.wait(timeout)
