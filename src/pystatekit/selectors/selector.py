"""Memoized selectors.

A selector is a pure projection of the store. :func:`create_selector` wraps one
so that a change callback fires only when the projected value actually
differs from the last one seen.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pystatekit.config import DEFAULT_CONFIG, EqualityMode, StateKitConfig
from pystatekit.exceptions import SelectorNotEvaluatedError

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

Equality = Callable[[Any, Any], bool]


@runtime_checkable
class Selector(Protocol[T_co]):
    def select(self, store: Any) -> T_co: ...


def value_equals(old: Any, new: Any) -> bool:
    """Structural equality (``==``)."""
    return bool(old == new)


identity_equals: Equality = operator.is_
"""Reference equality (``is``)."""


def default_equality(config: StateKitConfig | None = None) -> Equality:
    mode = (config if config is not None else DEFAULT_CONFIG).default_equality
    return identity_equals if mode is EqualityMode.IDENTITY else value_equals


def _as_function(selector: Selector[T] | Callable[[Any], T]) -> Callable[[Any], T]:
    if isinstance(selector, MemoizedSelector):
        return selector.projector
    if isinstance(selector, Selector):
        return selector.select
    return selector


class MemoizedSelector(Generic[T]):
    """Selector wrapper that remembers the last value it produced.

    ``select`` always evaluates the projector. The first result, and every
    later result that is not equal to the cached one, replaces the cache and
    is passed to ``on_change``; otherwise the cached value is returned and the
    callback is not called.
    """

    __slots__ = ("_projector", "_on_change", "_equals", "_last_value", "_has_value")

    def __init__(
        self,
        projector: Callable[[Any], T],
        on_change: Callable[[T], Any] | None = None,
        *,
        equals: Equality | None = None,
    ) -> None:
        self._projector = projector
        self._on_change = on_change
        self._equals = equals or value_equals
        self._last_value: T | None = None
        self._has_value = False

    @property
    def projector(self) -> Callable[[Any], T]:
        return self._projector

    @property
    def has_value(self) -> bool:
        return self._has_value

    @property
    def last_value(self) -> T:
        if not self._has_value:
            raise SelectorNotEvaluatedError("Selector has not been evaluated yet")
        return self._last_value  # type: ignore[return-value]

    def select(self, store: Any) -> T:
        new_value = self._projector(store)
        if self._has_value and self._equals(self._last_value, new_value):
            return self._last_value  # type: ignore[return-value]
        self._last_value = new_value
        self._has_value = True
        if self._on_change is not None:
            self._on_change(new_value)
        return new_value

    __call__ = select

    def reset(self) -> None:
        """Discard the cached value; the next ``select`` counts as a change."""
        self._last_value = None
        self._has_value = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MemoizedSelector):
            return NotImplemented
        return self._projector is other._projector

    def __hash__(self) -> int:
        return hash(id(self._projector))

    def __repr__(self) -> str:
        name = getattr(self._projector, "__qualname__", repr(self._projector))
        return f"<MemoizedSelector {name}>"


def create_selector(
    selector: Selector[T] | Callable[[Any], T],
    on_change: Callable[[T], Any] | None = None,
    *,
    equals: Equality | None = None,
    config: StateKitConfig | None = None,
) -> MemoizedSelector[T]:
    """Wrap *selector* into a :class:`MemoizedSelector`.

    Parameters
    ----------
    selector
        Plain ``store -> value`` callable or any object with ``select(store)``.
        Wrapping an existing memoized selector reuses its projector, not its
        cache.
    on_change
        Called with the new value on the first evaluation and on every
        evaluation that yields a different value.
    equals
        ``(old, new) -> bool``. Defaults to the comparison named by
        ``config.default_equality``.
    """
    return MemoizedSelector(
        _as_function(selector),
        on_change,
        equals=equals or default_equality(config),
    )


def select(store: Any, selector: Selector[T] | Callable[[Any], T]) -> T:
    """Evaluate *selector* once against *store*, without memoization."""
    return _as_function(selector)(store)
