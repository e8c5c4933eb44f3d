"""Interaction state machine for a numeric input control.

The controller owns the committed NumberResult and the display text of one
control. It reacts to focus, typing, commit (blur/Enter), arrow-key
stepping and pointer drags on an adjustment handle, and reports committed
values through callbacks. Platform effects (text selection, refocus,
pointer lock, deferred callbacks) go through an InteractionHost so the
machine can run without any real UI.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Callable

from .compare import compare_results
from .config import (
    DEFAULT_DECIMAL,
    DEFAULT_PATTERN,
    DEFAULT_SHIFT_STEP,
    DEFAULT_STEP,
    DRAG_DISTANCE_THRESHOLD,
)
from .logging_config import get_logger
from .modifiers import ModifierSnapshot, ModifierState, resolve_step
from .processor import Transform, process, process_catch, reshape_value
from .types import Constraints, InteractionState, NumberResult, NumerikError

logger = get_logger("controller")

ChangeCallback = Callable[[Any, NumberResult], None]

PRIMARY_BUTTON = 0
PRIMARY_BUTTON_MASK = 1


class InteractionHost:
    """Platform effects requested by the controller.

    UI layers subclass this and wire the methods to their widgets. The base
    class does nothing except queue deferred callbacks until run_pending().
    """

    def __init__(self) -> None:
        self.pending: list[Callable[[], None]] = []

    def select_all(self) -> None:
        """Select the whole text of the input."""

    def refocus(self) -> None:
        """Give focus back to the input."""

    def blur_input(self) -> None:
        """Move focus away from the input."""

    def request_pointer_lock(self) -> None:
        """Capture the pointer so drags report relative movement."""

    def exit_pointer_lock(self) -> None:
        """Release the pointer captured for a drag."""

    def schedule(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` after the current event has been handled."""
        self.pending.append(callback)

    def run_pending(self) -> None:
        callbacks, self.pending = self.pending, []
        for callback in callbacks:
            callback()


class NumericInputController:
    """State machine behind a numeric input with a drag handle.

    States are IDLE and EDITING; ``dragging`` is an orthogonal flag. Typed
    text is only buffered while editing and is processed on blur or Enter.
    Arrow keys and drags step the last committed value directly.

    Example:
        >>> changes = []
        >>> ctrl = NumericInputController(value=50, step=5,
        ...     on_change=lambda value, detail: changes.append(value))
        >>> ctrl.key_down("ArrowUp")
        True
        >>> changes
        [55.0]
    """

    def __init__(
        self,
        value: Any = None,
        default_value: Any = None,
        pattern: str = DEFAULT_PATTERN,
        min_value: float = -math.inf,
        max_value: float = math.inf,
        decimal: int = DEFAULT_DECIMAL,
        step: float = DEFAULT_STEP,
        shift_step: float = DEFAULT_SHIFT_STEP,
        on_change: ChangeCallback | None = None,
        on_empty: Callable[[], None] | None = None,
        on_press_start: Callable[[], None] | None = None,
        on_press_end: Callable[[], None] | None = None,
        modifiers: ModifierState | None = None,
        host: InteractionHost | None = None,
        disabled: bool = False,
        read_only: bool = False,
        drag_threshold: float = DRAG_DISTANCE_THRESHOLD,
    ) -> None:
        if drag_threshold <= 0:
            raise ValueError(f"drag_threshold must be positive, got {drag_threshold}")

        self.pattern = pattern
        self.constraints = Constraints(min_value, max_value, decimal)
        self.step = step
        self.shift_step = shift_step
        self.drag_threshold = drag_threshold
        self.on_change = on_change
        self.on_empty = on_empty
        self.on_press_start = on_press_start
        self.on_press_end = on_press_end
        self.host = host or InteractionHost()
        self.modifiers = modifiers or ModifierState()
        self.read_only = read_only
        self.disabled = disabled

        # Emitted values take the runtime shape of the external value
        self._reference = value if value is not None else default_value
        self.committed: NumberResult | None = process_catch(
            self._reference, pattern, self.constraints
        )
        self.display_text = self.committed.string if self.committed else ""

        self.state = InteractionState.IDLE
        self.focused = False
        self.dragging = False
        self._pristine_text = ""
        self._last_x = 0.0
        self._movement = 0.0

        self._modifier_snapshot = ModifierSnapshot()
        self._unsubscribe: Callable[[], None] | None = None
        if not disabled:
            self._attach_modifiers()

    @property
    def pressed(self) -> bool:
        """True while the adjustment handle is being dragged."""
        return self.dragging

    @property
    def editing(self) -> bool:
        return self.state is InteractionState.EDITING

    def current_step(self) -> float:
        return resolve_step(self._modifier_snapshot, self.step, self.shift_step)

    # Focus and text

    def focus(self) -> None:
        if self.disabled:
            return
        self.focused = True
        if not self.editing:
            self._pristine_text = self.display_text
            self.state = InteractionState.EDITING
        self.host.select_all()

    def change_text(self, text: str) -> None:
        if self.disabled or not self.editing:
            return
        self.display_text = text

    def blur(self) -> None:
        if self.disabled:
            return
        was_editing = self.editing
        self.focused = False
        self.state = InteractionState.IDLE
        if not was_editing:
            return
        if self.read_only:
            self.display_text = self._pristine_text
            return
        self._commit_text()

    def key_down(self, key: str) -> bool:
        """Handle a key press. Returns True when the key was consumed."""
        if self.disabled:
            return False
        if key == "Enter":
            self.host.blur_input()
            self.blur()
            return True
        if key in ("ArrowUp", "ArrowDown"):
            if self.read_only:
                return False
            direction = 1 if key == "ArrowUp" else -1
            amount = self.current_step()
            self._update_value(lambda value: value + direction * amount)
            return True
        return False

    # Dragging

    def pointer_down(self, x: float, button: int = PRIMARY_BUTTON) -> bool:
        """Start dragging from the adjustment handle at horizontal position ``x``."""
        if self.disabled or self.read_only or button != PRIMARY_BUTTON:
            return False
        self.dragging = True
        self._last_x = x
        self._movement = 0.0
        self.host.request_pointer_lock()
        if self.focused:
            self.host.schedule(self._restore_focus)
        if self.on_press_start:
            self.on_press_start()
        return True

    def pointer_move(self, x: float, buttons: int = PRIMARY_BUTTON_MASK) -> None:
        """Drag to horizontal position ``x``."""
        if not self.dragging:
            return
        delta = x - self._last_x
        self._last_x = x
        self.pointer_move_by(delta, buttons)

    def pointer_move_by(self, delta: float, buttons: int = PRIMARY_BUTTON_MASK) -> None:
        """Drag by ``delta`` pixels, as reported under pointer lock."""
        if not self.dragging or self.disabled or not buttons & PRIMARY_BUTTON_MASK:
            return
        self._movement += delta
        units = math.floor(abs(self._movement) / self.drag_threshold)
        if units == 0:
            return
        sign = 1 if self._movement > 0 else -1
        self._movement = math.fmod(self._movement, self.drag_threshold)
        amount = self.current_step()
        self._update_value(lambda value: value + sign * units * amount)

    def pointer_up(self) -> None:
        """Pointer released anywhere on the surface."""
        if self.dragging:
            self._end_drag()

    # Host-driven updates

    def set_value(self, value: Any) -> None:
        """Apply a new controlled value from the host."""
        if value is not None:
            self._reference = value
        self.committed = process_catch(value, self.pattern, self.constraints)
        if not self.editing:
            self.display_text = self.committed.string if self.committed else ""

    def set_pattern(self, pattern: str) -> None:
        self.pattern = pattern
        self._rederive()

    def set_constraints(
        self,
        min_value: float | None = None,
        max_value: float | None = None,
        decimal: int | None = None,
    ) -> None:
        changes: dict[str, Any] = {}
        if min_value is not None:
            changes["min"] = min_value
        if max_value is not None:
            changes["max"] = max_value
        if decimal is not None:
            changes["decimal"] = decimal
        self.constraints = replace(self.constraints, **changes)
        self._rederive()

    def set_disabled(self, disabled: bool) -> None:
        if disabled == self.disabled:
            return
        self.disabled = disabled
        if not disabled:
            self._attach_modifiers()
            return
        self.focused = False
        self.state = InteractionState.IDLE
        self.display_text = self.committed.string if self.committed else ""
        if self.dragging:
            self._end_drag()
        self._detach_modifiers()

    def set_read_only(self, read_only: bool) -> None:
        self.read_only = read_only
        if read_only and self.dragging:
            self._end_drag()

    def dispose(self) -> None:
        """Release shared resources when the control goes away."""
        if self.dragging:
            self._end_drag()
        self._detach_modifiers()

    # Internals

    def _commit(self, result: NumberResult) -> None:
        self.committed = result
        self.display_text = result.string
        logger.debug("Committed %r", result.string)
        if self.on_change:
            self.on_change(reshape_value(result, self._reference), result)

    def _commit_text(self) -> None:
        text = self.display_text
        try:
            result = process(text, self.pattern, self.constraints)
        except NumerikError as e:
            logger.debug("Rejected input %r: %s", text, e, extra={"error_code": e.code})
            if not text.strip():
                if self.on_empty:
                    self.on_empty()
            else:
                self.display_text = self._pristine_text
            return

        if compare_results(result, self.committed):
            self.committed = result
            self.display_text = result.string
            return
        self._commit(result)

    def _update_value(self, transform: Transform) -> None:
        base: Any = self.committed.object if self.committed is not None else 0
        try:
            result = process(base, self.pattern, self.constraints, transform)
        except NumerikError as e:
            logger.warning(
                "Could not step value %r: %s", base, e, extra={"error_code": e.code}
            )
            return
        self._commit(result)

    def _rederive(self) -> None:
        if self.committed is None:
            return
        result = process_catch(self.committed.object, self.pattern, self.constraints)
        if result is None:
            return
        self.committed = result
        if not self.editing:
            self.display_text = result.string

    def _end_drag(self) -> None:
        self.dragging = False
        self._movement = 0.0
        self.host.exit_pointer_lock()
        if self.focused:
            self.host.schedule(self._restore_focus)
        if self.on_press_end:
            self.on_press_end()

    def _restore_focus(self) -> None:
        if self.disabled:
            return
        self.host.refocus()
        self.host.select_all()

    def _attach_modifiers(self) -> None:
        if self._unsubscribe is not None:
            return
        self._modifier_snapshot = self.modifiers.snapshot
        self._unsubscribe = self.modifiers.subscribe(self._on_modifiers)

    def _detach_modifiers(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._modifier_snapshot = ModifierSnapshot()

    def _on_modifiers(self, snapshot: ModifierSnapshot) -> None:
        self._modifier_snapshot = snapshot
