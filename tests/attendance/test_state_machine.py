import pytest

from conftest import DAY_SHIFT, SPLIT_SHIFT, WORK_DAY, at

from src.timeclock.timeclock.attendance.model import AttendanceRecord, ClosedBreak, OpenBreak
from src.timeclock.timeclock.attendance.state_machine import ClockStateMachine, derive_state
from src.timeclock.timeclock.core.enums import AttendanceStatus, BreakType, ClockAction, ClockState


def _record(status: AttendanceStatus, *, breaks=(), clock_in_2=None) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=1,
        user_id=7,
        store_id=1,
        work_date=WORK_DAY,
        status=status,
        clock_in=at(9),
        clock_in_2=clock_in_2,
        breaks=tuple(breaks),
    )


def _closed(n: int) -> ClosedBreak:
    return ClosedBreak(
        break_id=n,
        attendance_id=1,
        start_time=at(10 + n),
        break_type=BreakType.REST,
        end_time=at(10 + n, 10),
        duration_minutes=10,
    )


def test_derive_state_from_facts():
    assert derive_state(None, DAY_SHIFT) == ClockState.NOT_CLOCKED_IN
    assert derive_state(_record(AttendanceStatus.CLOCKED_IN), DAY_SHIFT) == ClockState.WORKING
    assert derive_state(_record(AttendanceStatus.ON_BREAK), DAY_SHIFT) == ClockState.ON_BREAK
    assert derive_state(_record(AttendanceStatus.CLOCKED_OUT), DAY_SHIFT) == ClockState.CLOCKED_OUT
    assert derive_state(_record(AttendanceStatus.PENDING_REVIEW), DAY_SHIFT) == ClockState.CLOCKED_OUT


def test_split_shift_first_segment_done_is_split_break():
    assert derive_state(_record(AttendanceStatus.CLOCKED_OUT), SPLIT_SHIFT) == ClockState.SPLIT_BREAK
    done = _record(AttendanceStatus.CLOCKED_OUT, clock_in_2=at(17))
    assert derive_state(done, SPLIT_SHIFT) == ClockState.CLOCKED_OUT


@pytest.mark.parametrize("state", list(ClockState))
@pytest.mark.parametrize("action", list(ClockAction))
def test_every_pair_is_answered_without_raising(state, action):
    machine = ClockStateMachine(state, ClockStateMachine.from_attendance(None, DAY_SHIFT).context)
    result = machine.can_transition(action)
    if machine.next_state(action) is None:
        assert result.allowed is False
        assert result.reason


def test_no_double_clock_in():
    machine = ClockStateMachine.from_attendance(_record(AttendanceStatus.CLOCKED_IN), DAY_SHIFT)
    assert machine.can_transition(ClockAction.CLOCK_IN).allowed is False


def test_clock_in_from_nothing():
    machine = ClockStateMachine.from_attendance(None, DAY_SHIFT)
    assert machine.can_transition(ClockAction.CLOCK_IN).allowed
    assert machine.next_state(ClockAction.CLOCK_IN) == ClockState.WORKING


def test_break_ceiling_counts_closed_breaks():
    machine = ClockStateMachine.from_attendance(
        _record(AttendanceStatus.CLOCKED_IN, breaks=[_closed(1), _closed(2), _closed(3)]), DAY_SHIFT
    )
    result = machine.can_transition(ClockAction.START_BREAK)
    assert result.allowed is False
    assert "3" in result.reason


def test_break_allowed_below_ceiling():
    machine = ClockStateMachine.from_attendance(_record(AttendanceStatus.CLOCKED_IN, breaks=[_closed(1)]), DAY_SHIFT)
    assert machine.can_transition(ClockAction.START_BREAK).allowed
    assert machine.next_state(ClockAction.START_BREAK) == ClockState.ON_BREAK


def test_open_break_blocks_clock_out():
    open_break = OpenBreak(break_id=9, attendance_id=1, start_time=at(12), break_type=BreakType.MEAL)
    machine = ClockStateMachine.from_attendance(_record(AttendanceStatus.CLOCKED_IN, breaks=[open_break]), DAY_SHIFT)
    result = machine.can_transition(ClockAction.CLOCK_OUT)
    assert result.allowed is False
    assert result.reason == "end break before clocking out"


def test_clock_out_from_clocked_out_needs_split_shift():
    machine = ClockStateMachine(ClockState.CLOCKED_OUT, ClockStateMachine.from_attendance(None, DAY_SHIFT).context)
    result = machine.can_transition(ClockAction.CLOCK_OUT)
    assert result.allowed is False
    assert result.reason == "not a split shift"

    split = ClockStateMachine(ClockState.CLOCKED_OUT, ClockStateMachine.from_attendance(None, SPLIT_SHIFT).context)
    assert split.can_transition(ClockAction.CLOCK_OUT).allowed
    assert split.next_state(ClockAction.CLOCK_OUT) == ClockState.SPLIT_BREAK


def test_segment_2_clock_out_requires_segment_2_start():
    machine = ClockStateMachine.from_attendance(_record(AttendanceStatus.CLOCKED_IN), SPLIT_SHIFT)
    result = machine.can_transition(ClockAction.CLOCK_OUT_SEGMENT_2)
    assert result.allowed is False
    assert result.reason == "segment 2 not started"

    resumed = ClockStateMachine.from_attendance(_record(AttendanceStatus.CLOCKED_IN, clock_in_2=at(17)), SPLIT_SHIFT)
    assert resumed.can_transition(ClockAction.CLOCK_OUT_SEGMENT_2).allowed


def test_available_actions_while_working():
    machine = ClockStateMachine.from_attendance(_record(AttendanceStatus.CLOCKED_IN), DAY_SHIFT)
    actions = {a.action: a for a in machine.available_actions()}
    assert set(actions) == {ClockAction.START_BREAK, ClockAction.CLOCK_OUT, ClockAction.CLOCK_OUT_SEGMENT_2}
    assert actions[ClockAction.START_BREAK].allowed
    assert actions[ClockAction.CLOCK_OUT].allowed
    assert actions[ClockAction.CLOCK_OUT_SEGMENT_2].allowed is False


def test_available_actions_in_split_break():
    machine = ClockStateMachine.from_attendance(_record(AttendanceStatus.CLOCKED_OUT), SPLIT_SHIFT)
    assert [a.action for a in machine.available_actions()] == [ClockAction.CLOCK_IN_SEGMENT_2]


def test_completed_split_day_offers_no_clock_out():
    done = _record(AttendanceStatus.CLOCKED_OUT, clock_in_2=at(17))
    machine = ClockStateMachine.from_attendance(done, SPLIT_SHIFT)

    assert machine.state == ClockState.CLOCKED_OUT
    actions = machine.available_actions()
    assert [(a.action, a.allowed, a.reason) for a in actions] == [
        (ClockAction.CLOCK_OUT, False, "split shift already completed")
    ]
