"""Modifier key tracking and step resolution.

The host owns one ModifierState per interaction surface and feeds it key
events; controllers subscribe to it while they are enabled. This keeps
modifier state correct even while focus moves between controls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .logging_config import get_logger

logger = get_logger("modifiers")

MODIFIER_KEYS = {"Shift": "shift", "Meta": "meta", "Alt": "alt"}


@dataclass(frozen=True)
class ModifierSnapshot:
    shift: bool = False
    meta: bool = False
    alt: bool = False


Listener = Callable[[ModifierSnapshot], None]


class ModifierState:
    """Subscribable Shift/Meta/Alt state for an interaction surface."""

    def __init__(self) -> None:
        self._snapshot = ModifierSnapshot()
        self._listeners: list[Listener] = []

    @property
    def snapshot(self) -> ModifierSnapshot:
        return self._snapshot

    def key_down(self, key: str) -> None:
        self._set(key, True)

    def key_up(self, key: str) -> None:
        self._set(key, False)

    def reset(self) -> None:
        """Release every modifier, e.g. when the surface loses focus."""
        self._update(ModifierSnapshot())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, key: str, pressed: bool) -> None:
        attr = MODIFIER_KEYS.get(key)
        if attr is None:
            return
        values = {
            "shift": self._snapshot.shift,
            "meta": self._snapshot.meta,
            "alt": self._snapshot.alt,
        }
        values[attr] = pressed
        self._update(ModifierSnapshot(**values))

    def _update(self, snapshot: ModifierSnapshot) -> None:
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        logger.debug("Modifiers changed: %s", snapshot)
        for listener in list(self._listeners):
            listener(snapshot)


def resolve_step(modifiers: ModifierSnapshot, step: float, shift_step: float) -> float:
    """Shift uses ``shift_step``, Meta or Alt a fine step of 1, otherwise ``step``."""
    if modifiers.shift:
        return shift_step
    if modifiers.meta or modifiers.alt:
        return 1
    return step
