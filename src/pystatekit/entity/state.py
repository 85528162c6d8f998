"""Collection-bearing state values.

The adapter never knows the concrete state class. It reads and replaces the
collection through a :class:`CollectionLens`, so any immutable record can
carry a normalized collection:

* :class:`EntityState` subclasses (frozen pydantic models) use
  :data:`ENTITY_STATE_LENS`.
* Other pydantic models use :class:`ModelLens` with their field name.
* Frozen dataclasses use :class:`DataclassLens`.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from pystatekit.exceptions import StateKitConfigError

if TYPE_CHECKING:
    from pystatekit.entity.adapter import EntityAdapter

S = TypeVar("S")


class CollectionLens(Protocol[S]):
    """Accessor pair for the collection embedded in a state value."""

    def get(self, state: S) -> Mapping[Any, Any]: ...

    def replace(self, state: S, collection: dict[Any, Any]) -> S: ...


class ModelLens:
    """Lens over a field of a pydantic model.

    ``replace`` goes through ``model_copy`` so the new collection is stored
    as given (no re-validation, entity identity preserved).
    """

    __slots__ = ("field",)

    def __init__(self, field: str) -> None:
        self.field = field

    def get(self, state: BaseModel) -> Mapping[Any, Any]:
        return getattr(state, self.field)

    def replace(self, state: Any, collection: dict[Any, Any]) -> Any:
        return state.model_copy(update={self.field: collection})

    def __repr__(self) -> str:
        return f"ModelLens({self.field!r})"


class DataclassLens:
    """Lens over a field of a (frozen) dataclass."""

    __slots__ = ("field",)

    def __init__(self, field: str) -> None:
        self.field = field

    def get(self, state: Any) -> Mapping[Any, Any]:
        return getattr(state, self.field)

    def replace(self, state: Any, collection: dict[Any, Any]) -> Any:
        return dataclasses.replace(state, **{self.field: collection})

    def __repr__(self) -> str:
        return f"DataclassLens({self.field!r})"


class EntityState(BaseModel):
    """Base for immutable state values owning one normalized collection.

    Subclasses add their own fields and name the entity type they hold::

        class TodoState(EntityState):
            entity_type: ClassVar[type] = Todo

            filter: str = "all"
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    entity_type: ClassVar[type | None] = None

    entities: dict[Any, Any] = Field(default_factory=dict)

    @classmethod
    def get_adapter(cls) -> EntityAdapter[Any, Any]:
        """Return the adapter registered for ``entity_type``.

        Raises
        ------
        StateKitConfigError
            When the class does not declare an ``entity_type``.
        AdapterNotRegisteredError
            When no adapter is registered for it.
        """
        from pystatekit.entity.registry import default_registry

        if cls.entity_type is None:
            raise StateKitConfigError(f"{cls.__name__} does not declare an entity_type")
        return default_registry.lookup(cls.entity_type)


ENTITY_STATE_LENS: ModelLens = ModelLens("entities")
