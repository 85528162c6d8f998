"""Normalized entity collections.

This package holds the adapter algebra, the collection-bearing state base and
the registry that maps entity types to their adapters.
"""

from pystatekit.entity.adapter import EntityAdapter
from pystatekit.entity.registry import AdapterRegistry, default_registry, get_adapter, register_adapter
from pystatekit.entity.state import ENTITY_STATE_LENS, CollectionLens, DataclassLens, EntityState, ModelLens

__all__ = [
    "ENTITY_STATE_LENS",
    "AdapterRegistry",
    "CollectionLens",
    "DataclassLens",
    "EntityAdapter",
    "EntityState",
    "ModelLens",
    "default_registry",
    "get_adapter",
    "register_adapter",
]
