"""Memoized selectors and selector subscriptions."""

from pystatekit.selectors.selector import (
    MemoizedSelector,
    Selector,
    create_selector,
    identity_equals,
    select,
    value_equals,
)
from pystatekit.selectors.subscription import SelectorSubscription, SubscriptionStatus, subscribe_selector

__all__ = [
    "MemoizedSelector",
    "Selector",
    "SelectorSubscription",
    "SubscriptionStatus",
    "create_selector",
    "identity_equals",
    "select",
    "subscribe_selector",
    "value_equals",
]
