"""Library configuration for pystatekit."""

from __future__ import annotations

import dataclasses
import os
from enum import StrEnum
from typing import Any

from pystatekit.exceptions import StateKitConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


class EqualityMode(StrEnum):
    """How memoized selectors decide that a freshly computed value is new."""

    VALUE = "value"
    IDENTITY = "identity"


def parse_equality_mode(value: str | EqualityMode) -> EqualityMode:
    """Parse *value* into an :class:`EqualityMode`.

    Raises
    ------
    StateKitConfigError
        When *value* names no known mode.
    """
    if isinstance(value, EqualityMode):
        return value
    try:
        return EqualityMode(value.strip().lower())
    except ValueError:
        choices = ", ".join(mode.value for mode in EqualityMode)
        raise StateKitConfigError(f"Unknown equality mode {value!r} (expected one of: {choices})") from None


@dataclasses.dataclass(frozen=True)
class StateKitConfig:
    """Library configuration.

    Parameters
    ----------
    default_equality : EqualityMode
        Comparison used by memoized selectors that were not given an explicit
        ``equals`` function. ``value`` compares with ``==``, ``identity``
        with ``is``.
    warn_on_duplicate_registration : bool
        Log a WARNING (instead of DEBUG) when an adapter registration for an
        already registered entity type is ignored.
    trace_selectors : bool
        Emit a DEBUG record for every evaluation a selector subscription runs.
    """

    default_equality: EqualityMode = EqualityMode.VALUE
    warn_on_duplicate_registration: bool = False
    trace_selectors: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_equality", parse_equality_mode(self.default_equality))

    @classmethod
    def from_env(cls, **overrides: Any) -> StateKitConfig:
        """Create configuration from environment variables.

        Reads ``STATEKIT_DEFAULT_EQUALITY``,
        ``STATEKIT_WARN_DUPLICATE_REGISTRATION`` and
        ``STATEKIT_TRACE_SELECTORS``. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        StateKitConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        equality_env = env.get("STATEKIT_DEFAULT_EQUALITY")
        if equality_env is not None and "default_equality" not in overrides:
            config_kwargs["default_equality"] = parse_equality_mode(equality_env)

        if "warn_on_duplicate_registration" not in overrides:
            config_kwargs["warn_on_duplicate_registration"] = _env_bool(
                env.get("STATEKIT_WARN_DUPLICATE_REGISTRATION"),
                False,
            )

        if "trace_selectors" not in overrides:
            config_kwargs["trace_selectors"] = _env_bool(env.get("STATEKIT_TRACE_SELECTORS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)


DEFAULT_CONFIG = StateKitConfig()
