"""Custom exception hierarchy for pystatekit."""

from __future__ import annotations

from typing import Any


class StateKitError(Exception):
    """Base exception for all pystatekit errors."""


class StateKitConfigError(StateKitError):
    """Invalid or missing configuration."""


class AdapterNotRegisteredError(StateKitError, KeyError):
    """No adapter has been registered for the requested entity type."""

    def __init__(self, entity_type: type) -> None:
        self.entity_type = entity_type
        name = f"{entity_type.__module__}.{entity_type.__qualname__}"
        super().__init__(f"Adapter for {name} not registered.")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])


class EntityNotFoundError(StateKitError, KeyError):
    """An operation needed an existing entity but the key is absent.

    Only :meth:`pystatekit.entity.adapter.EntityAdapter.map` raises this;
    every other adapter operation treats a missing key as a no-op.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Entity with key {key!r} not found.")

    def __str__(self) -> str:
        return str(self.args[0])


class FeatureNotFoundError(StateKitError, KeyError):
    """The store has no feature with the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Feature {name!r} not found.")

    def __str__(self) -> str:
        return str(self.args[0])


class SelectorNotEvaluatedError(StateKitError):
    """A memoized selector's cached value was read before its first evaluation."""


class ObserverReleasedError(StateKitError):
    """An observer token was released more than once.

    Disposing a :class:`~pystatekit.selectors.subscription.SelectorSubscription`
    twice ends up here: callers must dispose at most once.
    """
