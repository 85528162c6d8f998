"""Normalized collection algebra.

An :class:`EntityAdapter` is a stateless set of pure functions over a state
value that carries a keyed entity collection. Every operation takes its inputs
first and the state last, and returns a state value:

* the input state and its collection are never mutated;
* entries an operation does not touch are carried over by reference;
* an operation that changes nothing returns the input state object itself,
  so upstream ``is`` checks stay cheap.

Missing keys and duplicate inserts are silently skipped. :meth:`map` is the one
operation that raises, since its transform needs an existing entity.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, TypeVar, overload

from pystatekit.entity.state import ENTITY_STATE_LENS, CollectionLens
from pystatekit.exceptions import EntityNotFoundError

K = TypeVar("K")
E = TypeVar("E")
S = TypeVar("S")

_MISSING = object()


class EntityAdapter(Generic[K, E]):
    """Operations over the collection of one entity type.

    Parameters
    ----------
    select_id
        Pure function returning an entity's key. Keys are never recomputed
        for stored entities.
    lens
        Accessor pair used to read and replace the collection inside the
        state value. Defaults to the ``entities`` field of
        :class:`~pystatekit.entity.state.EntityState`.
    """

    __slots__ = ("_select_id", "_lens")

    def __init__(self, select_id: Callable[[E], K], *, lens: CollectionLens[Any] = ENTITY_STATE_LENS) -> None:
        self._select_id = select_id
        self._lens = lens

    @property
    def select_id(self) -> Callable[[E], K]:
        return self._select_id

    @property
    def lens(self) -> CollectionLens[Any]:
        return self._lens

    def __repr__(self) -> str:
        return f"{type(self).__name__}(lens={self._lens!r})"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_entities(self, state: Any) -> Mapping[K, E]:
        return self._lens.get(state)

    def ids(self, state: Any) -> list[K]:
        return list(self._lens.get(state))

    def get(self, id: K, state: Any, default: E | None = None) -> E | None:
        return self._lens.get(state).get(id, default)

    def contains(self, id: K, state: Any) -> bool:
        return id in self._lens.get(state)

    def count(self, state: Any) -> int:
        return len(self._lens.get(state))

    def _with(self, state: S, collection: dict[K, E]) -> S:
        return self._lens.replace(state, collection)

    # ------------------------------------------------------------------
    # Add
    # ------------------------------------------------------------------

    def add(self, entity: E, state: S) -> S:
        """Add one entity unless its key is already present."""
        current = self._lens.get(state)
        key = self._select_id(entity)
        if key in current:
            return state
        return self._with(state, {**current, key: entity})

    def add_range(self, entities: Iterable[E], state: S) -> S:
        """Add every entity whose key is absent.

        Keys already in the collection are skipped, and within *entities* the
        first occurrence of a key wins.
        """
        current = self._lens.get(state)
        pending: dict[K, E] = {}
        for entity in entities:
            key = self._select_id(entity)
            if key in current or key in pending:
                continue
            pending[key] = entity
        if not pending:
            return state
        return self._with(state, {**current, **pending})

    # ------------------------------------------------------------------
    # Set
    # ------------------------------------------------------------------

    def set_all(self, entities: Iterable[E], state: S) -> S:
        """Replace the whole collection with *entities*."""
        return self._with(state, self._keyed(entities))

    def set_one(self, entity: E, state: S) -> S:
        """Add or replace one entity."""
        current = self._lens.get(state)
        return self._with(state, {**current, self._select_id(entity): entity})

    def set_many(self, entities: Iterable[E], state: S) -> S:
        """Add or replace each of *entities*."""
        incoming = self._keyed(entities)
        if not incoming:
            return state
        return self._with(state, {**self._lens.get(state), **incoming})

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------

    def remove(self, id: K, state: S) -> S:
        """Remove one entity by key; absent keys are ignored."""
        current = self._lens.get(state)
        if id not in current:
            return state
        return self._with(state, {key: value for key, value in current.items() if key != id})

    @overload
    def remove_range(self, ids: Iterable[K], state: S) -> S: ...

    @overload
    def remove_range(self, ids: Callable[[E], bool], state: S) -> S: ...

    def remove_range(self, ids: Iterable[K] | Callable[[E], bool], state: S) -> S:
        """Remove entities by key, or by predicate when *ids* is callable."""
        if callable(ids):
            return self.remove_where(ids, state)
        current = self._lens.get(state)
        doomed = {id for id in ids if id in current}
        if not doomed:
            return state
        return self._with(state, {key: value for key, value in current.items() if key not in doomed})

    def remove_where(self, predicate: Callable[[E], bool], state: S) -> S:
        """Remove every entity for which *predicate* holds."""
        current = self._lens.get(state)
        kept = {key: value for key, value in current.items() if not predicate(value)}
        if len(kept) == len(current):
            return state
        return self._with(state, kept)

    def remove_all(self, state: S) -> S:
        return self._with(state, {})

    # ------------------------------------------------------------------
    # Update / upsert
    # ------------------------------------------------------------------

    def update(self, entity: E, state: S) -> S:
        """Replace an existing entity; nothing is inserted for unknown keys."""
        current = self._lens.get(state)
        key = self._select_id(entity)
        if key not in current:
            return state
        return self._with(state, {**current, key: entity})

    def update_range(self, entities: Iterable[E], state: S) -> S:
        """Replace each entity whose key exists; unknown keys are dropped."""
        current = self._lens.get(state)
        targets = {key: entity for key, entity in self._keyed(entities).items() if key in current}
        if not targets:
            return state
        return self._with(state, {**current, **targets})

    def upsert(self, entity: E, state: S) -> S:
        return self.set_one(entity, state)

    def upsert_range(self, entities: Iterable[E], state: S) -> S:
        """Insert or replace each entity; entries not mentioned are kept."""
        return self.set_many(entities, state)

    # ------------------------------------------------------------------
    # Map
    # ------------------------------------------------------------------

    def map(self, id: K, transform: Callable[[E], E], state: S) -> S:
        """Replace the entity at *id* with ``transform(entity)``.

        Raises
        ------
        EntityNotFoundError
            When *id* is not in the collection. The state is left untouched.
        """
        current = self._lens.get(state)
        entity = current.get(id, _MISSING)
        if entity is _MISSING:
            raise EntityNotFoundError(id)
        return self._with(state, {**current, id: transform(entity)})

    def map_range(self, ids: Iterable[K], transform: Callable[[E], E], state: S) -> S:
        """Apply *transform* to each present entity in *ids*; others are skipped."""
        current = self._lens.get(state)
        wanted = set(ids)
        mapped = {key: transform(value) for key, value in current.items() if key in wanted}
        if not mapped:
            return state
        return self._with(state, {**current, **mapped})

    def _keyed(self, entities: Iterable[E]) -> dict[K, E]:
        return {self._select_id(entity): entity for entity in entities}
