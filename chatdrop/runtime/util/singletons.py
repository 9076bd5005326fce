"""Registry of module-level singleton reset hooks.

Modules that keep process-wide state (the settings object, telemetry
flags) register a reset callable here so tests can rebuild them from a
clean environment.
"""

from __future__ import annotations

from collections.abc import Callable

_RESET_HOOKS: list[Callable[[], None]] = []


def register_singleton(reset: Callable[[], None]) -> None:
    if reset not in _RESET_HOOKS:
        _RESET_HOOKS.append(reset)


def reset_all_singletons() -> None:
    for reset in list(_RESET_HOOKS):
        reset()
