"""Tests for the interaction controller state machine."""

import pytest

from numerik_pkg.controller import InteractionHost, NumericInputController
from numerik_pkg.modifiers import ModifierState
from numerik_pkg.types import InteractionState, NumberResult


class RecordingHost(InteractionHost):
    """Host that records every platform effect."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def select_all(self):
        self.calls.append("select_all")

    def refocus(self):
        self.calls.append("refocus")

    def blur_input(self):
        self.calls.append("blur_input")

    def request_pointer_lock(self):
        self.calls.append("lock")

    def exit_pointer_lock(self):
        self.calls.append("unlock")


class Recorder:
    def __init__(self):
        self.changes = []
        self.empty_calls = 0
        self.press_events = []

    def on_change(self, value, detail):
        assert isinstance(detail, NumberResult)
        self.changes.append(value)

    def on_empty(self):
        self.empty_calls += 1


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def modifiers():
    return ModifierState()


@pytest.fixture
def make(recorder, host, modifiers):
    def factory(**kwargs):
        kwargs.setdefault("value", 50)
        return NumericInputController(
            on_change=recorder.on_change,
            on_empty=recorder.on_empty,
            on_press_start=lambda: recorder.press_events.append("start"),
            on_press_end=lambda: recorder.press_events.append("end"),
            host=host,
            modifiers=modifiers,
            **kwargs,
        )

    return factory


def type_and_commit(ctrl, text, key=None):
    ctrl.focus()
    ctrl.change_text(text)
    if key:
        ctrl.key_down(key)
    else:
        ctrl.blur()


class TestInitialDisplay:
    def test_number(self, make):
        assert make(value=42).display_text == "42"

    def test_pattern(self, make):
        assert make(value=100, pattern="{value}px").display_text == "100px"

    def test_record(self, make):
        assert make(value={"x": 10, "y": 20}, pattern="{x},{y}").display_text == "10,20"

    def test_sequence(self, make):
        ctrl = make(value=[5, 10, 15], pattern="{value1},{value2},{value3}")
        assert ctrl.display_text == "5,10,15"

    def test_no_value(self, make):
        ctrl = make(value=None)
        assert ctrl.committed is None
        assert ctrl.display_text == ""

    def test_default_value(self, make):
        assert make(value=None, default_value=7).display_text == "7"


class TestTextCommit:
    def test_focus_enters_editing_and_selects(self, make, host):
        ctrl = make()
        ctrl.focus()
        assert ctrl.state is InteractionState.EDITING
        assert host.calls == ["select_all"]

    def test_typing_only_buffers(self, make, recorder):
        ctrl = make()
        ctrl.focus()
        ctrl.change_text("75")
        assert ctrl.display_text == "75"
        assert recorder.changes == []
        assert ctrl.committed.array == [50]

    def test_typing_outside_editing_is_ignored(self, make):
        ctrl = make()
        ctrl.change_text("75")
        assert ctrl.display_text == "50"

    def test_blur_commits_change(self, make, recorder):
        ctrl = make()
        type_and_commit(ctrl, "75")
        assert recorder.changes == [75]
        assert ctrl.display_text == "75"
        assert ctrl.state is InteractionState.IDLE

    def test_enter_commits_and_blurs(self, make, recorder, host):
        ctrl = make()
        type_and_commit(ctrl, "10+15", key="Enter")
        assert recorder.changes == [25]
        assert "blur_input" in host.calls
        assert ctrl.state is InteractionState.IDLE

    def test_second_blur_does_nothing(self, make, recorder):
        ctrl = make()
        type_and_commit(ctrl, "75", key="Enter")
        ctrl.blur()
        assert recorder.changes == [75]

    def test_complex_expression(self, make, recorder):
        type_and_commit(make(value=0), "(100 / 4) * 2")
        assert recorder.changes == [50]

    def test_unchanged_expression_resyncs_without_callback(self, make, recorder):
        ctrl = make(value=2)
        type_and_commit(ctrl, "1+1")
        assert recorder.changes == []
        assert ctrl.display_text == "2"

    def test_same_value_with_unit_text(self, make, recorder):
        ctrl = make(value=24, pattern="{value}px")
        type_and_commit(ctrl, "12+12")
        assert recorder.changes == []
        assert ctrl.display_text == "24px"

    def test_min_constraint(self, make, recorder):
        type_and_commit(make(min_value=10), "5")
        assert recorder.changes == [10]

    def test_max_constraint(self, make, recorder):
        type_and_commit(make(max_value=100), "150")
        assert recorder.changes == [100]

    def test_decimal_precision(self, make, recorder):
        type_and_commit(make(decimal=2), "12.3456")
        assert recorder.changes == [12.35]

    def test_empty_buffer_calls_on_empty(self, make, recorder):
        ctrl = make()
        type_and_commit(ctrl, "")
        assert recorder.empty_calls == 1
        assert recorder.changes == []

    def test_whitespace_buffer_counts_as_empty(self, make, recorder):
        type_and_commit(make(), "   ")
        assert recorder.empty_calls == 1

    def test_invalid_text_rolls_back(self, make, recorder):
        ctrl = make()
        type_and_commit(ctrl, "abc")
        assert ctrl.display_text == "50"
        assert recorder.changes == []
        assert recorder.empty_calls == 0

    def test_record_value_is_emitted_as_record(self, make, recorder):
        ctrl = make(value={"x": 10, "y": 20}, pattern="{x},{y}")
        type_and_commit(ctrl, "30,40")
        assert recorder.changes == [{"x": 30, "y": 40}]

    def test_string_value_is_emitted_as_string(self, make, recorder):
        ctrl = make(value="10px", pattern="{value}px")
        type_and_commit(ctrl, "20")
        assert recorder.changes == ["20px"]


class TestStepping:
    def test_arrow_up(self, make, recorder):
        assert make(step=5).key_down("ArrowUp") is True
        assert recorder.changes == [55]

    def test_arrow_down(self, make, recorder):
        make(step=5).key_down("ArrowDown")
        assert recorder.changes == [45]

    def test_shift_uses_shift_step(self, make, recorder, modifiers):
        ctrl = make(step=5, shift_step=10)
        modifiers.key_down("Shift")
        ctrl.key_down("ArrowUp")
        assert recorder.changes == [60]

    def test_alt_uses_fine_step(self, make, recorder, modifiers):
        ctrl = make(step=5)
        modifiers.key_down("Alt")
        ctrl.key_down("ArrowUp")
        assert recorder.changes == [51]

    def test_meta_uses_fine_step(self, make, recorder, modifiers):
        ctrl = make(step=5)
        modifiers.key_down("Meta")
        ctrl.key_down("ArrowDown")
        assert recorder.changes == [49]

    def test_modifier_released(self, make, recorder, modifiers):
        ctrl = make(step=5)
        modifiers.key_down("Shift")
        modifiers.key_up("Shift")
        ctrl.key_down("ArrowUp")
        assert recorder.changes == [55]

    def test_stepping_ignores_text_buffer(self, make, recorder):
        ctrl = make(step=5)
        ctrl.focus()
        ctrl.change_text("999")
        ctrl.key_down("ArrowUp")
        assert recorder.changes == [55]
        assert ctrl.display_text == "55"

    def test_stepping_at_bound_still_commits(self, make, recorder):
        ctrl = make(value=100, max_value=100)
        ctrl.key_down("ArrowUp")
        assert recorder.changes == [100]

    def test_stepping_every_key(self, make, recorder):
        ctrl = make(value=[5, 10, 15], pattern="{a},{b},{c}")
        ctrl.key_down("ArrowUp")
        assert recorder.changes == [[6, 11, 16]]

    def test_stepping_string_value(self, make, recorder):
        make(value="10px", pattern="{value}px").key_down("ArrowUp")
        assert recorder.changes == ["11px"]

    def test_stepping_without_committed_value(self, make, recorder):
        ctrl = make(value=None)
        ctrl.key_down("ArrowUp")
        assert recorder.changes == [{"value": 1}]
        assert ctrl.display_text == "1"

    def test_stepping_default_value_keeps_its_shape(self, make, recorder):
        make(value=None, default_value=5).key_down("ArrowUp")
        assert recorder.changes == [6]

    def test_fractional_step_is_rounded(self, make, recorder):
        ctrl = make(value=0, step=0.1, decimal=1)
        for _ in range(3):
            ctrl.key_down("ArrowUp")
        assert recorder.changes == [0.1, 0.2, 0.3]

    def test_other_keys_are_not_consumed(self, make, recorder):
        assert make().key_down("a") is False
        assert recorder.changes == []


class TestDragging:
    def test_drag_right_and_left(self, make, recorder):
        ctrl = make()
        assert ctrl.pointer_down(100) is True
        assert ctrl.pressed is True
        ctrl.pointer_move(103)
        ctrl.pointer_move(101)
        ctrl.pointer_up()
        assert recorder.changes == [53, 51]
        assert ctrl.pressed is False
        assert recorder.press_events == ["start", "end"]

    def test_pointer_lock(self, make, host):
        ctrl = make()
        ctrl.pointer_down(0)
        ctrl.pointer_up()
        assert host.calls == ["lock", "unlock"]

    def test_every_move_commits(self, make, recorder):
        ctrl = make()
        ctrl.pointer_down(0)
        for x in range(1, 6):
            ctrl.pointer_move(x)
        assert recorder.changes == [51, 52, 53, 54, 55]

    def test_drag_uses_current_step(self, make, recorder, modifiers):
        ctrl = make(step=2, shift_step=10)
        ctrl.pointer_down(0)
        ctrl.pointer_move(1)
        modifiers.key_down("Shift")
        ctrl.pointer_move(2)
        assert recorder.changes == [52, 62]

    def test_relative_moves(self, make, recorder):
        ctrl = make()
        ctrl.pointer_down(0)
        ctrl.pointer_move_by(-4)
        assert recorder.changes == [46]

    def test_threshold_carries_remainder(self, make, recorder):
        ctrl = make(drag_threshold=5)
        ctrl.pointer_down(0)
        ctrl.pointer_move(3)
        assert recorder.changes == []
        ctrl.pointer_move(7)
        assert recorder.changes == [51]
        ctrl.pointer_move(10)
        assert recorder.changes == [51, 52]

    def test_move_without_primary_button_is_ignored(self, make, recorder):
        ctrl = make()
        ctrl.pointer_down(0)
        ctrl.pointer_move(5, buttons=0)
        assert recorder.changes == []

    def test_secondary_button_does_not_start_drag(self, make):
        ctrl = make()
        assert ctrl.pointer_down(0, button=2) is False
        assert ctrl.pressed is False

    def test_moves_after_pointer_up_are_ignored(self, make, recorder):
        ctrl = make()
        ctrl.pointer_down(0)
        ctrl.pointer_up()
        ctrl.pointer_move(10)
        assert recorder.changes == []

    def test_pointer_up_without_drag(self, make, recorder, host):
        ctrl = make()
        ctrl.pointer_up()
        assert host.calls == []
        assert recorder.press_events == []

    def test_focus_is_restored_around_drag(self, make, host):
        ctrl = make()
        ctrl.focus()
        ctrl.pointer_down(0)
        assert len(host.pending) == 1
        host.run_pending()
        assert host.calls[-2:] == ["refocus", "select_all"]
        ctrl.pointer_up()
        assert len(host.pending) == 1
        host.run_pending()
        assert host.calls[-2:] == ["refocus", "select_all"]

    def test_no_refocus_when_not_focused(self, make, host):
        ctrl = make()
        ctrl.pointer_down(0)
        ctrl.pointer_up()
        assert host.pending == []


class TestDisabledAndReadOnly:
    def test_disabled_suppresses_everything(self, make, recorder, host):
        ctrl = make(disabled=True)
        ctrl.focus()
        assert ctrl.state is InteractionState.IDLE
        assert ctrl.key_down("ArrowUp") is False
        assert ctrl.key_down("Enter") is False
        assert ctrl.pointer_down(0) is False
        assert recorder.changes == []
        assert host.calls == []

    def test_disabling_ends_drag(self, make, recorder, host):
        ctrl = make()
        ctrl.focus()
        ctrl.pointer_down(0)
        host.run_pending()
        ctrl.set_disabled(True)
        assert ctrl.pressed is False
        assert "unlock" in host.calls
        assert recorder.press_events == ["start", "end"]
        assert host.pending == []
        ctrl.pointer_move(10)
        assert recorder.changes == []

    def test_disabling_drops_edit_buffer(self, make):
        ctrl = make()
        ctrl.focus()
        ctrl.change_text("12")
        ctrl.set_disabled(True)
        assert ctrl.state is InteractionState.IDLE
        assert ctrl.display_text == "50"

    def test_disabled_detaches_modifiers(self, make, modifiers):
        ctrl = make(step=5, shift_step=10)
        modifiers.key_down("Shift")
        assert ctrl.current_step() == 10
        ctrl.set_disabled(True)
        assert ctrl.current_step() == 5
        ctrl.set_disabled(False)
        assert ctrl.current_step() == 10

    def test_pending_refocus_skipped_when_disabled(self, make, host):
        ctrl = make()
        ctrl.focus()
        ctrl.pointer_down(0)
        ctrl.set_disabled(True)
        host.run_pending()
        assert "refocus" not in host.calls

    def test_read_only_echoes_but_does_not_commit(self, make, recorder):
        ctrl = make(read_only=True)
        ctrl.focus()
        assert ctrl.state is InteractionState.EDITING
        ctrl.change_text("75")
        assert ctrl.display_text == "75"
        ctrl.blur()
        assert recorder.changes == []
        assert ctrl.display_text == "50"

    def test_read_only_blocks_stepping_and_dragging(self, make, recorder):
        ctrl = make(read_only=True)
        assert ctrl.key_down("ArrowUp") is False
        assert ctrl.pointer_down(0) is False
        assert recorder.changes == []

    def test_becoming_read_only_ends_drag(self, make):
        ctrl = make()
        ctrl.pointer_down(0)
        ctrl.set_read_only(True)
        assert ctrl.pressed is False


class TestHostUpdates:
    def test_set_value_while_idle(self, make, recorder):
        ctrl = make()
        ctrl.set_value(80)
        assert ctrl.display_text == "80"
        assert recorder.changes == []

    def test_set_value_while_editing_keeps_buffer(self, make):
        ctrl = make()
        ctrl.focus()
        ctrl.change_text("1")
        ctrl.set_value(80)
        assert ctrl.display_text == "1"
        assert ctrl.committed.array == [80]

    def test_set_pattern(self, make, recorder):
        ctrl = make()
        ctrl.set_pattern("{value}%")
        assert ctrl.display_text == "50%"
        assert recorder.changes == []

    def test_set_constraints(self, make, recorder):
        ctrl = make()
        ctrl.set_constraints(max_value=10)
        assert ctrl.display_text == "10"
        assert ctrl.committed.array == [10]
        assert recorder.changes == []

    def test_invalid_drag_threshold(self):
        with pytest.raises(ValueError):
            NumericInputController(value=1, drag_threshold=0)


class TestSharedModifiers:
    def test_controls_share_modifier_state(self, modifiers):
        first = NumericInputController(value=1, modifiers=modifiers)
        second = NumericInputController(value=1, modifiers=modifiers)
        modifiers.key_down("Shift")
        assert first.current_step() == second.current_step() == 10

    def test_dispose_unsubscribes(self, modifiers):
        ctrl = NumericInputController(value=1, step=3, modifiers=modifiers)
        ctrl.dispose()
        modifiers.key_down("Shift")
        assert ctrl.current_step() == 3


def test_base_host_hooks_are_no_ops():
    host = InteractionHost()
    for hook in (
        host.select_all,
        host.refocus,
        host.blur_input,
        host.request_pointer_lock,
        host.exit_pointer_lock,
    ):
        assert hook() is None
        assert hook.__doc__
    assert host.pending == []
