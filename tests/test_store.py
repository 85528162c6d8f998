from __future__ import annotations

from typing import Any

import pytest

from pystatekit.exceptions import FeatureNotFoundError, StateKitConfigError
from pystatekit.store import Feature, Store


def _append_reducer(state: tuple[str, ...], action: Any) -> tuple[str, ...]:
    if isinstance(action, str):
        return (*state, action)
    return state


def test_dispatch_applies_reducers_and_notifies_changed_features_only() -> None:
    log = Feature("log", (), _append_reducer)
    static = Feature("static", {"a": 1}, lambda state, action: state)
    store = Store([log, static])
    calls: list[str] = []
    log.state_changed.subscribe(lambda: calls.append("log"))
    static.state_changed.subscribe(lambda: calls.append("static"))

    store.dispatch("hello")
    store.dispatch(42)

    assert store.get_state("log") == ("hello",)
    assert calls == ["log"]


def test_notifications_follow_feature_registration_order() -> None:
    first = Feature("first", (), _append_reducer)
    second = Feature("second", (), _append_reducer)
    store = Store([first, second])
    calls: list[str] = []
    second.state_changed.subscribe(lambda: calls.append("second"))
    first.state_changed.subscribe(lambda: calls.append("first"))

    store.dispatch("x")

    assert calls == ["first", "second"]


def test_state_snapshot_is_keyed_by_feature_name() -> None:
    store = Store([Feature("a", 1), Feature("b", "two")])

    snapshot = store.state
    snapshot["a"] = 99

    assert store.state == {"a": 1, "b": "two"}


def test_restore_notifies_unconditionally() -> None:
    feature = Feature("a", 1)
    calls: list[int] = []
    feature.state_changed.subscribe(lambda: calls.append(feature.state))

    feature.restore(1)
    feature.restore(2)

    assert calls == [1, 2]


def test_feature_without_reducer_ignores_actions() -> None:
    feature = Feature("a", 1)

    assert feature.reduce("anything") is False
    assert feature.state == 1


def test_unknown_feature_raises() -> None:
    store = Store()

    with pytest.raises(FeatureNotFoundError) as excinfo:
        store.feature("missing")
    assert excinfo.value.name == "missing"


def test_duplicate_and_blank_feature_names_rejected() -> None:
    store = Store([Feature("a", 1)])

    with pytest.raises(StateKitConfigError):
        store.add_feature(Feature("a", 2))
    with pytest.raises(StateKitConfigError):
        Feature("  ", 1)


def test_features_mapping_is_read_only() -> None:
    store = Store([Feature("a", 1)])

    with pytest.raises(TypeError):
        store.features["b"] = Feature("b", 2)  # type: ignore[index]
