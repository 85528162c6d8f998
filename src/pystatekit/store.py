"""Deterministic in-memory store.

The store is split into named features (slices). Each feature owns one
immutable state value and exposes its own ``state_changed`` event; the store
itself has no top-level change event. Writes are synchronous and single
writer: observers run on the caller's stack before :meth:`Store.dispatch`
returns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any

from pystatekit.config import DEFAULT_CONFIG, StateKitConfig
from pystatekit.events import EventSource
from pystatekit.exceptions import FeatureNotFoundError, StateKitConfigError

_logger = logging.getLogger(__name__)

Reducer = Callable[[Any, Any], Any]


class Feature:
    """One independently observable slice of the store."""

    def __init__(self, name: str, initial_state: Any, reducer: Reducer | None = None) -> None:
        name = name.strip()
        if not name:
            raise StateKitConfigError("feature name must be non-empty")
        self.name = name
        self._state = initial_state
        self._reducer = reducer
        self.state_changed = EventSource(name)

    @property
    def state(self) -> Any:
        return self._state

    def restore(self, state: Any) -> None:
        """Replace the state and notify observers unconditionally."""
        self._state = state
        self.state_changed.emit()

    def reduce(self, action: Any) -> bool:
        """Run the reducer for *action*.

        Observers are notified only when the reducer returned a different
        state object. Returns whether the state changed.
        """
        if self._reducer is None:
            return False
        new_state = self._reducer(self._state, action)
        if new_state is self._state:
            return False
        self._state = new_state
        self.state_changed.emit()
        return True

    def __repr__(self) -> str:
        return f"<Feature {self.name!r}>"


class Store:
    """In-memory store holding a fixed set of features.

    Given the same sequence of actions, it will produce the same states and
    the same notification order (feature registration order).
    """

    def __init__(self, features: Iterable[Feature] = (), *, config: StateKitConfig | None = None) -> None:
        self.config = config if config is not None else DEFAULT_CONFIG
        self._features: dict[str, Feature] = {}
        for feature in features:
            self.add_feature(feature)

    @property
    def features(self) -> Mapping[str, Feature]:
        return MappingProxyType(self._features)

    @property
    def state(self) -> dict[str, Any]:
        """Snapshot of every feature's current state, keyed by feature name."""
        return {name: feature.state for name, feature in self._features.items()}

    def add_feature(self, feature: Feature) -> Feature:
        if feature.name in self._features:
            raise StateKitConfigError(f"Feature {feature.name!r} already added")
        self._features[feature.name] = feature
        _logger.debug("Feature %s added to store", feature.name)
        return feature

    def feature(self, name: str) -> Feature:
        feature = self._features.get(name)
        if feature is None:
            raise FeatureNotFoundError(name)
        return feature

    def get_state(self, name: str) -> Any:
        return self.feature(name).state

    def dispatch(self, action: Any) -> None:
        """Apply *action* to every feature's reducer, in registration order."""
        changed = [feature.name for feature in self._features.values() if feature.reduce(action)]
        _logger.debug("Dispatched %s; changed features=%s", type(action).__name__, changed)
