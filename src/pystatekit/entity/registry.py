"""Entity type -> adapter registry.

Adapters are registered explicitly at application start-up, once per entity
type, and looked up many times afterwards. The first registration for a type
wins; later ones are ignored.
"""

from __future__ import annotations

import logging
from typing import Any

from pystatekit.config import DEFAULT_CONFIG, StateKitConfig
from pystatekit.entity.adapter import EntityAdapter
from pystatekit.exceptions import AdapterNotRegisteredError

_logger = logging.getLogger(__name__)


def _type_name(entity_type: type) -> str:
    return f"{entity_type.__module__}.{entity_type.__qualname__}"


class AdapterRegistry:
    """Process-wide map from entity type to its adapter."""

    def __init__(self, *, config: StateKitConfig | None = None) -> None:
        self._config = config if config is not None else DEFAULT_CONFIG
        self._adapters: dict[type, EntityAdapter[Any, Any]] = {}

    def register(self, entity_type: type, adapter: EntityAdapter[Any, Any]) -> EntityAdapter[Any, Any]:
        """Register *adapter* for *entity_type* unless one is already registered.

        Returns the adapter in effect for the type after the call.
        """
        existing = self._adapters.get(entity_type)
        if existing is not None:
            level = logging.WARNING if self._config.warn_on_duplicate_registration else logging.DEBUG
            _logger.log(level, "Adapter for %s already registered; ignoring %r", _type_name(entity_type), adapter)
            return existing
        self._adapters[entity_type] = adapter
        _logger.debug("Registered %r for %s", adapter, _type_name(entity_type))
        return adapter

    def lookup(self, entity_type: type) -> EntityAdapter[Any, Any]:
        adapter = self._adapters.get(entity_type)
        if adapter is None:
            raise AdapterNotRegisteredError(entity_type)
        return adapter

    def is_registered(self, entity_type: type) -> bool:
        return entity_type in self._adapters

    def clear(self) -> None:
        self._adapters.clear()

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)


default_registry = AdapterRegistry()


def register_adapter(
    entity_type: type,
    adapter: EntityAdapter[Any, Any],
    *,
    registry: AdapterRegistry | None = None,
) -> EntityAdapter[Any, Any]:
    target = registry if registry is not None else default_registry
    return target.register(entity_type, adapter)


def get_adapter(entity_type: type, *, registry: AdapterRegistry | None = None) -> EntityAdapter[Any, Any]:
    target = registry if registry is not None else default_registry
    return target.lookup(entity_type)
