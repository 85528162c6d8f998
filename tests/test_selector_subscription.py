from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar

import pytest
from pydantic import BaseModel, ConfigDict

from pystatekit.config import StateKitConfig
from pystatekit.entity.adapter import EntityAdapter
from pystatekit.entity.state import EntityState
from pystatekit.exceptions import ObserverReleasedError
from pystatekit.selectors.subscription import SelectorSubscription, SubscriptionStatus, subscribe_selector
from pystatekit.store import Feature, Store


@dataclass(frozen=True)
class Counter:
    count: int = 0


@dataclass(frozen=True)
class SetCount:
    value: int


def _counter_reducer(state: Counter, action: Any) -> Counter:
    if isinstance(action, SetCount):
        return Counter(count=action.value)
    return state


def _store() -> Store:
    return Store(
        [
            Feature("counter", Counter(count=1), _counter_reducer),
            Feature("settings", {"theme": "dark"}),
        ]
    )


def _select_count(store: Store) -> int:
    return store.get_state("counter").count


def test_value_is_available_right_after_subscribe() -> None:
    store = _store()

    sub = subscribe_selector(store, _select_count)

    assert sub.value == 1
    assert sub.status is SubscriptionStatus.ACTIVE


def test_attaches_to_every_feature() -> None:
    store = _store()

    sub = subscribe_selector(store, _select_count)

    assert all(feature.state_changed.observer_count == 1 for feature in store.features.values())
    sub.dispose()
    assert all(feature.state_changed.observer_count == 0 for feature in store.features.values())


def test_change_notifications_fire_synchronously_on_real_changes_only() -> None:
    store = _store()
    sub = subscribe_selector(store, _select_count)
    seen: list[int] = []
    sub.on_state_changed(lambda s: seen.append(s.value))

    store.dispatch(SetCount(2))
    assert seen == [2]

    # Unrelated feature write: selector runs, value unchanged, no notification.
    store.feature("settings").restore({"theme": "light"})
    store.dispatch(SetCount(2))
    assert seen == [2]

    store.dispatch(SetCount(5))
    assert seen == [2, 5]


def test_notification_order_and_property_name() -> None:
    store = _store()
    events: list[tuple[str, Any]] = []
    sub = SelectorSubscription(store, _select_count, lambda value: events.append(("handler", value)))
    sub.on_state_changed(lambda s: events.append(("state", s.value)))
    sub.on_property_changed(lambda s, name: events.append(("property", name)))
    events.clear()

    store.dispatch(SetCount(3))

    assert events == [("state", 3), ("property", "value"), ("handler", 3)]


def test_handler_receives_initial_value() -> None:
    store = _store()
    received: list[int] = []

    subscribe_selector(store, _select_count, received.append)

    assert received == [1]


def test_pause_suppresses_and_resume_reconciles_once() -> None:
    store = _store()
    sub = subscribe_selector(store, _select_count)
    seen: list[int] = []
    sub.on_state_changed(lambda s: seen.append(s.value))

    sub.pause()
    assert sub.is_paused
    store.dispatch(SetCount(2))
    store.dispatch(SetCount(3))
    assert seen == []
    assert sub.value == 1

    sub.resume()

    assert seen == [3]
    assert sub.value == 3
    assert sub.status is SubscriptionStatus.ACTIVE


def test_resume_without_drift_does_not_notify() -> None:
    store = _store()
    sub = subscribe_selector(store, _select_count)
    seen: list[int] = []
    sub.on_state_changed(lambda s: seen.append(s.value))

    sub.pause()
    sub.resume()

    assert seen == []


def test_dispose_detaches() -> None:
    store = _store()
    sub = subscribe_selector(store, _select_count)
    seen: list[int] = []
    sub.on_state_changed(lambda s: seen.append(s.value))

    sub.dispose()
    store.dispatch(SetCount(7))
    store.dispatch(SetCount(8))

    assert seen == []
    assert sub.status is SubscriptionStatus.DISPOSED
    assert sub.value == 1


def test_double_dispose_raises() -> None:
    sub = subscribe_selector(_store(), _select_count)
    sub.dispose()

    with pytest.raises(ObserverReleasedError):
        sub.dispose()


def test_context_manager_disposes() -> None:
    store = _store()

    with subscribe_selector(store, _select_count) as sub:
        store.dispatch(SetCount(4))
        assert sub.value == 4

    assert sub.status is SubscriptionStatus.DISPOSED
    assert store.feature("counter").state_changed.observer_count == 0


def test_selector_error_propagates_to_dispatch() -> None:
    store = _store()

    def fragile(store: Store) -> int:
        count = store.get_state("counter").count
        if count > 5:
            raise RuntimeError("too big")
        return count

    sub = subscribe_selector(store, fragile)

    with pytest.raises(RuntimeError, match="too big"):
        store.dispatch(SetCount(6))
    assert sub.value == 1


def test_independent_subscriptions_on_one_store() -> None:
    store = _store()
    doubled = subscribe_selector(store, lambda s: s.get_state("counter").count * 2)
    parity = subscribe_selector(store, lambda s: s.get_state("counter").count % 2)
    parity_changes: list[int] = []
    parity.on_state_changed(lambda s: parity_changes.append(s.value))

    store.dispatch(SetCount(3))

    assert doubled.value == 6
    assert parity.value == 1
    assert parity_changes == []


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    done: bool = False


class TaskState(EntityState):
    entity_type: ClassVar[type] = Task


@dataclass(frozen=True)
class AddTasks:
    tasks: tuple[Task, ...]


@dataclass(frozen=True)
class CompleteTask:
    id: str


tasks_adapter: EntityAdapter[str, Task] = EntityAdapter(lambda task: task.id)


def _tasks_reducer(state: TaskState, action: Any) -> TaskState:
    if isinstance(action, AddTasks):
        return tasks_adapter.add_range(action.tasks, state)
    if isinstance(action, CompleteTask):
        return tasks_adapter.map(action.id, lambda task: task.model_copy(update={"done": True}), state)
    return state


def test_entity_adapter_drives_selector_subscription() -> None:
    store = Store([Feature("tasks", TaskState(), _tasks_reducer)])
    open_ids = subscribe_selector(
        store,
        lambda s: sorted(task.id for task in s.get_state("tasks").entities.values() if not task.done),
    )
    history: list[list[str]] = []
    open_ids.on_state_changed(lambda s: history.append(s.value))

    store.dispatch(AddTasks((Task(id="b"), Task(id="a"))))
    store.dispatch(AddTasks((Task(id="a"),)))
    store.dispatch(CompleteTask("a"))

    assert history == [["a", "b"], ["b"]]
    assert open_ids.value == ["b"]


def test_trace_selectors_logs_each_evaluation(caplog: pytest.LogCaptureFixture) -> None:
    store = Store([Feature("counter", Counter(count=1), _counter_reducer)], config=StateKitConfig(trace_selectors=True))
    sub = subscribe_selector(store, _select_count)

    with caplog.at_level(logging.DEBUG, logger="pystatekit.selectors.subscription"):
        store.dispatch(SetCount(2))

    assert sub.value == 2
    assert any(record.getMessage().startswith("Evaluating") for record in caplog.records)


def test_disposed_is_terminal() -> None:
    store = _store()
    sub = subscribe_selector(store, _select_count)
    seen: list[int] = []
    sub.on_state_changed(lambda s: seen.append(s.value))
    sub.dispose()
    store.dispatch(SetCount(9))

    sub.resume()
    sub.pause()

    assert sub.status is SubscriptionStatus.DISPOSED
    assert seen == []
    assert sub.value == 1
