"""Synchronous change notification.

Observers register with an :class:`EventSource` and get back an
:class:`ObserverToken`. The token is the only way to detach again and must be
released exactly once.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pystatekit.exceptions import ObserverReleasedError


class ObserverToken:
    """Capability returned by :meth:`EventSource.subscribe`."""

    __slots__ = ("_source", "_callback", "_active")

    def __init__(self, source: EventSource, callback: Callable[..., Any]) -> None:
        self._source = source
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def release(self) -> None:
        """Detach the observer from its event source.

        Raises
        ------
        ObserverReleasedError
            When the token was already released.
        """
        if not self._active:
            raise ObserverReleasedError(f"Observer already released from {self._source.name!r}")
        self._active = False
        self._source._detach(self)

    def __repr__(self) -> str:
        state = "active" if self._active else "released"
        return f"<ObserverToken {self._source.name!r} {state}>"


class EventSource:
    """Ordered list of observers notified synchronously on :meth:`emit`."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._tokens: list[ObserverToken] = []

    @property
    def observer_count(self) -> int:
        return len(self._tokens)

    def subscribe(self, callback: Callable[..., Any]) -> ObserverToken:
        token = ObserverToken(self, callback)
        self._tokens.append(token)
        return token

    def emit(self, *args: Any) -> None:
        """Call every attached observer with *args*.

        Observers attached or released while an emit is running take effect
        from the next emit, except that released observers are skipped.
        Exceptions raised by an observer propagate to the caller.
        """
        for token in tuple(self._tokens):
            if token.active:
                token._callback(*args)

    def _detach(self, token: ObserverToken) -> None:
        self._tokens.remove(token)
