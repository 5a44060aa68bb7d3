"""Clock state machine.

The current state is derived from the day's attendance record and shift on
every call; legal moves are an explicit transition table evaluated by a single
dispatcher, so the set of available actions is always enumerable.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional, Sequence

from ..core.constants import DEFAULT_MAX_BREAK_COUNT
from ..core.enums import AttendanceStatus, ClockAction, ClockState
from ..shifts.model import Shift
from .model import AttendanceRecord


@dataclass(frozen=True)
class GuardResult:
    allowed: bool
    reason: Optional[str] = None


ALLOWED = GuardResult(allowed=True)


@dataclass(frozen=True)
class ClockContext:
    """Immutable snapshot the guards evaluate against."""

    attendance: Optional[AttendanceRecord] = None
    shift: Optional[Shift] = None


Guard = Callable[[ClockContext], GuardResult]


@dataclass(frozen=True)
class Transition:
    action: ClockAction
    from_states: FrozenSet[ClockState]
    to_state: ClockState
    guard: Optional[Guard] = None


@dataclass(frozen=True)
class AvailableAction:
    action: ClockAction
    allowed: bool
    reason: Optional[str] = None


def _break_count_below_max(ctx: ClockContext) -> GuardResult:
    # Every break taken today counts, open or closed.
    taken = len(ctx.attendance.breaks) if ctx.attendance else 0
    max_breaks = ctx.shift.max_break_count if ctx.shift else DEFAULT_MAX_BREAK_COUNT
    if taken >= max_breaks:
        return GuardResult(False, f"max break count reached ({max_breaks})")
    return ALLOWED


def _no_open_break(ctx: ClockContext) -> GuardResult:
    if ctx.attendance and ctx.attendance.has_open_break:
        return GuardResult(False, "end break before clocking out")
    return ALLOWED


def _is_split_shift(ctx: ClockContext) -> GuardResult:
    if not (ctx.shift and ctx.shift.is_split):
        return GuardResult(False, "not a split shift")
    if ctx.attendance and ctx.attendance.clock_in_2:
        return GuardResult(False, "split shift already completed")
    return ALLOWED


def _segment_2_started(ctx: ClockContext) -> GuardResult:
    if not (ctx.attendance and ctx.attendance.clock_in_2):
        return GuardResult(False, "segment 2 not started")
    return ALLOWED


TRANSITIONS: Sequence[Transition] = (
    Transition(ClockAction.CLOCK_IN, frozenset({ClockState.NOT_CLOCKED_IN}), ClockState.WORKING),
    Transition(ClockAction.START_BREAK, frozenset({ClockState.WORKING}), ClockState.ON_BREAK, _break_count_below_max),
    Transition(ClockAction.END_BREAK, frozenset({ClockState.ON_BREAK}), ClockState.WORKING),
    Transition(ClockAction.CLOCK_OUT, frozenset({ClockState.WORKING}), ClockState.CLOCKED_OUT, _no_open_break),
    # Re-evaluating a finished first segment: only split shifts move on to the split break.
    Transition(ClockAction.CLOCK_OUT, frozenset({ClockState.CLOCKED_OUT}), ClockState.SPLIT_BREAK, _is_split_shift),
    Transition(ClockAction.CLOCK_IN_SEGMENT_2, frozenset({ClockState.SPLIT_BREAK}), ClockState.WORKING),
    Transition(ClockAction.CLOCK_OUT_SEGMENT_2, frozenset({ClockState.WORKING}), ClockState.CLOCKED_OUT, _segment_2_started),
)


def derive_state(attendance: Optional[AttendanceRecord], shift: Optional[Shift]) -> ClockState:
    if attendance is None:
        return ClockState.NOT_CLOCKED_IN
    if attendance.status == AttendanceStatus.ON_BREAK:
        return ClockState.ON_BREAK
    if attendance.status == AttendanceStatus.CLOCKED_IN:
        return ClockState.WORKING
    if attendance.status == AttendanceStatus.CLOCKED_OUT and shift and shift.is_split and attendance.clock_in_2 is None:
        return ClockState.SPLIT_BREAK
    # CLOCKED_OUT and every post-clock-out status (review, approval, ...) end the day.
    return ClockState.CLOCKED_OUT


class ClockStateMachine:
    """Pure decision component over one immutable snapshot."""

    def __init__(self, state: ClockState, context: ClockContext, *, transitions: Sequence[Transition] = TRANSITIONS):
        self._state = state
        self._context = context
        self._transitions = transitions

    @classmethod
    def from_attendance(cls, attendance: Optional[AttendanceRecord], shift: Optional[Shift]) -> "ClockStateMachine":
        return cls(derive_state(attendance, shift), ClockContext(attendance=attendance, shift=shift))

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def context(self) -> ClockContext:
        return self._context

    def _find(self, action: ClockAction) -> Optional[Transition]:
        return next(
            (t for t in self._transitions if t.action == action and self._state in t.from_states),
            None,
        )

    def can_transition(self, action: ClockAction) -> GuardResult:
        transition = self._find(action)
        if transition is None:
            return GuardResult(False, f"cannot {action.value} while {self._state.value}")
        if transition.guard is None:
            return ALLOWED
        return transition.guard(self._context)

    def next_state(self, action: ClockAction) -> Optional[ClockState]:
        transition = self._find(action)
        return transition.to_state if transition else None

    def available_actions(self) -> list[AvailableAction]:
        out = []
        for t in self._transitions:
            if self._state not in t.from_states:
                continue
            result = t.guard(self._context) if t.guard else ALLOWED
            out.append(AvailableAction(action=t.action, allowed=result.allowed, reason=result.reason))
        return out
