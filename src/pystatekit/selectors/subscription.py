"""Live binding between a memoized selector and a store.

A :class:`SelectorSubscription` attaches to the ``state_changed`` event of
every feature in the store (there is no store-wide event), re-runs its
memoized selector on each notification and raises its own notifications only
when the selected value really changed. Everything happens synchronously on
the stack of the write that triggered the feature event; selector errors
propagate to that writer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from types import TracebackType
from typing import Any, Generic, Protocol, TypeVar

from pystatekit.config import DEFAULT_CONFIG, StateKitConfig
from pystatekit.events import EventSource, ObserverToken
from pystatekit.selectors.selector import Equality, MemoizedSelector, Selector, create_selector

_logger = logging.getLogger(__name__)

T = TypeVar("T")

VALUE_PROPERTY = "value"


class _FeatureLike(Protocol):
    name: str
    state_changed: EventSource


class SubscriptionStatus(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"
    DISPOSED = "disposed"


class SelectorSubscription(Generic[T]):
    """Keeps ``value`` in sync with a selector over a store.

    Parameters
    ----------
    store
        Any object with a ``features`` mapping of feature objects exposing a
        ``state_changed`` event source. The store is passed as-is to the
        selector.
    selector
        ``store -> value`` callable or :class:`Selector`.
    handler
        Optional callback receiving every new value (including the initial
        one, which is computed before the handler could be replaced).
    equals
        Comparison deciding whether a value changed. Defaults to the one named
        by the configuration.
    config
        Falls back to ``store.config`` when the store has one.
    """

    def __init__(
        self,
        store: Any,
        selector: Selector[T] | Callable[[Any], T],
        handler: Callable[[T], Any] | None = None,
        *,
        equals: Equality | None = None,
        config: StateKitConfig | None = None,
    ) -> None:
        self._store = store
        if config is None:
            config = getattr(store, "config", None)
        self._config = config if config is not None else DEFAULT_CONFIG
        self._handler = handler
        self._status = SubscriptionStatus.ACTIVE
        self._last_value: T | None = None

        self.state_changed = EventSource("selector.state_changed")
        self.property_changed = EventSource("selector.property_changed")

        features: list[_FeatureLike] = list(store.features.values())
        self._tokens: list[ObserverToken] = [
            feature.state_changed.subscribe(self._on_feature_state_changed) for feature in features
        ]
        _logger.debug("Selector subscription attached to features=%s", [feature.name for feature in features])

        self._selector: MemoizedSelector[T] = create_selector(
            selector,
            self._on_value_changed,
            equals=equals,
            config=self._config,
        )
        self._selector.select(self._store)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def value(self) -> T:
        return self._last_value  # type: ignore[return-value]

    @property
    def status(self) -> SubscriptionStatus:
        return self._status

    @property
    def is_paused(self) -> bool:
        return self._status is SubscriptionStatus.PAUSED

    @property
    def selector(self) -> MemoizedSelector[T]:
        return self._selector

    def on_state_changed(self, callback: Callable[[SelectorSubscription[T]], Any]) -> ObserverToken:
        """Observe value changes; *callback* receives this subscription."""
        return self.state_changed.subscribe(callback)

    def on_property_changed(self, callback: Callable[[SelectorSubscription[T], str], Any]) -> ObserverToken:
        """Observe property changes; *callback* receives this subscription and ``"value"``."""
        return self.property_changed.subscribe(callback)

    def pause(self) -> None:
        """Ignore feature notifications until :meth:`resume`; ``value`` goes stale.

        Has no effect once the subscription is disposed.
        """
        if self._status is SubscriptionStatus.DISPOSED:
            return
        self._status = SubscriptionStatus.PAUSED
        _logger.debug("Selector subscription paused: %r", self._selector)

    def resume(self) -> None:
        """Reactivate and evaluate once to catch up with changes missed while paused.

        Has no effect once the subscription is disposed.
        """
        if self._status is SubscriptionStatus.DISPOSED:
            return
        self._status = SubscriptionStatus.ACTIVE
        _logger.debug("Selector subscription resumed: %r", self._selector)
        self._evaluate()

    def dispose(self) -> None:
        """Detach from every feature.

        Must be called at most once: a second call raises
        :class:`~pystatekit.exceptions.ObserverReleasedError`.
        """
        for token in self._tokens:
            token.release()
        self._status = SubscriptionStatus.DISPOSED
        _logger.debug("Selector subscription disposed: %r", self._selector)

    def __enter__(self) -> SelectorSubscription[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return f"<SelectorSubscription {self._selector!r} {self._status}>"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_feature_state_changed(self) -> None:
        self._evaluate()

    def _evaluate(self) -> None:
        if self._status is not SubscriptionStatus.ACTIVE:
            return
        if self._config.trace_selectors:
            _logger.debug("Evaluating %r", self._selector)
        self._selector.select(self._store)

    def _on_value_changed(self, new_value: T) -> None:
        self._last_value = new_value
        self.state_changed.emit(self)
        self.property_changed.emit(self, VALUE_PROPERTY)
        if self._handler is not None:
            self._handler(new_value)


def subscribe_selector(
    store: Any,
    selector: Selector[T] | Callable[[Any], T],
    handler: Callable[[T], Any] | None = None,
    *,
    equals: Equality | None = None,
    config: StateKitConfig | None = None,
) -> SelectorSubscription[T]:
    """Create a :class:`SelectorSubscription` of *selector* on *store*."""
    return SelectorSubscription(store, selector, handler, equals=equals, config=config)
