"""pystatekit - Normalized entity collections and memoized selector subscriptions."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pystatekit")
except PackageNotFoundError:
    __version__ = "0+local"
from pystatekit.config import EqualityMode, StateKitConfig
from pystatekit.entity import (
    AdapterRegistry,
    DataclassLens,
    EntityAdapter,
    EntityState,
    ModelLens,
    default_registry,
    get_adapter,
    register_adapter,
)
from pystatekit.events import EventSource, ObserverToken
from pystatekit.exceptions import (
    AdapterNotRegisteredError,
    EntityNotFoundError,
    FeatureNotFoundError,
    ObserverReleasedError,
    SelectorNotEvaluatedError,
    StateKitConfigError,
    StateKitError,
)
from pystatekit.selectors import (
    MemoizedSelector,
    Selector,
    SelectorSubscription,
    SubscriptionStatus,
    create_selector,
    identity_equals,
    select,
    subscribe_selector,
    value_equals,
)
from pystatekit.store import Feature, Store

__all__ = [
    "__version__",
    "AdapterNotRegisteredError",
    "AdapterRegistry",
    "DataclassLens",
    "EntityAdapter",
    "EntityNotFoundError",
    "EntityState",
    "EqualityMode",
    "EventSource",
    "Feature",
    "FeatureNotFoundError",
    "MemoizedSelector",
    "ModelLens",
    "ObserverReleasedError",
    "ObserverToken",
    "Selector",
    "SelectorNotEvaluatedError",
    "SelectorSubscription",
    "StateKitConfig",
    "StateKitConfigError",
    "StateKitError",
    "Store",
    "SubscriptionStatus",
    "create_selector",
    "default_registry",
    "get_adapter",
    "identity_equals",
    "register_adapter",
    "select",
    "subscribe_selector",
    "value_equals",
]
