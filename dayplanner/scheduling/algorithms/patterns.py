"""
Session ordering patterns.

A pattern decides how Work and Side sessions are interleaved. Every pattern keeps the exact
number of Work and Side tokens it was given; only the order differs.
"""

import enum
from typing import List

from ..core.exceptions import InvalidConfiguration
from ..core.session import SessionType


class SchedulePattern(str, enum.Enum):
    ALTERNATING = "Alternating"
    ALTERNATING_REVERSE = "Alternating Reverse"
    ALL_WORK_FIRST = "All Work First"
    ALL_SIDE_FIRST = "All Side First"
    SIDES_FIRST_AND_LAST = "Sides First & Last"
    CUSTOM_RATIO = "Custom Ratio"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    SchedulePattern.ALTERNATING: "Work first, then Side (e.g., W→W→S→W→W→S)",
    SchedulePattern.ALTERNATING_REVERSE: "Side first, then Work (e.g., S→W→W→S→W→W)",
    SchedulePattern.ALL_WORK_FIRST: "Schedules all Work sessions first, then Side sessions",
    SchedulePattern.ALL_SIDE_FIRST: "Schedules all Side sessions first, then Work sessions",
    SchedulePattern.SIDES_FIRST_AND_LAST: "Sides at the beginning and end, with all Work sessions in between",
    SchedulePattern.CUSTOM_RATIO: "Custom pattern with configurable Work:Side ratio",
}


def generate_order(pattern: SchedulePattern, work_count: int, side_count: int,
                   work_per_cycle: int = 2, side_per_cycle: int = 1, side_first: bool = False) -> List[SessionType]:
    """
    Build the ordered sequence of Work/Side tokens for a pattern.
    """
    if work_count < 0 or side_count < 0:
        raise InvalidConfiguration(f"Session counts must not be negative (work={work_count}, side={side_count})")
    if work_per_cycle < 1 or side_per_cycle < 1:
        raise InvalidConfiguration(
            f"Sessions per cycle must be at least 1 (work={work_per_cycle}, side={side_per_cycle})"
        )

    pattern = SchedulePattern(pattern)
    if pattern == SchedulePattern.ALL_WORK_FIRST:
        return [SessionType.WORK] * work_count + [SessionType.SIDE] * side_count
    if pattern == SchedulePattern.ALL_SIDE_FIRST:
        return [SessionType.SIDE] * side_count + [SessionType.WORK] * work_count
    if pattern == SchedulePattern.ALTERNATING:
        return _alternating(work_count, side_count, work_per_cycle)
    if pattern == SchedulePattern.ALTERNATING_REVERSE:
        return _alternating_reverse(work_count, side_count, work_per_cycle)
    if pattern == SchedulePattern.CUSTOM_RATIO:
        return _custom_ratio(work_count, side_count, work_per_cycle, side_per_cycle, side_first)
    return _sides_first_and_last(work_count, side_count, side_per_cycle)


# ================================
# PATTERN IMPLEMENTATIONS
# ================================

def _alternating(work_count: int, side_count: int, work_per_cycle: int) -> List[SessionType]:
    """N work sessions, then one side session, repeated."""
    order = []
    remaining_work, remaining_side = work_count, side_count
    work_in_cycle = 0

    while remaining_work > 0 or remaining_side > 0:
        if work_in_cycle < work_per_cycle and remaining_work > 0:
            order.append(SessionType.WORK)
            remaining_work -= 1
            work_in_cycle += 1
        elif remaining_side > 0:
            order.append(SessionType.SIDE)
            remaining_side -= 1
            work_in_cycle = 0
        else:
            # Sides exhausted, drain work
            order.append(SessionType.WORK)
            remaining_work -= 1
    return order


def _alternating_reverse(work_count: int, side_count: int, work_per_cycle: int) -> List[SessionType]:
    """One side session, then N work sessions, repeated."""
    order = []
    remaining_work, remaining_side = work_count, side_count
    work_in_cycle = 0
    side_due = True

    while remaining_work > 0 or remaining_side > 0:
        if side_due and remaining_side > 0:
            order.append(SessionType.SIDE)
            remaining_side -= 1
            side_due = False
            work_in_cycle = 0
        elif work_in_cycle < work_per_cycle and remaining_work > 0:
            order.append(SessionType.WORK)
            remaining_work -= 1
            work_in_cycle += 1
        elif remaining_side > 0:
            order.append(SessionType.SIDE)
            remaining_side -= 1
            work_in_cycle = 0
        else:
            order.append(SessionType.WORK)
            remaining_work -= 1
    return order


def _custom_ratio(work_count: int, side_count: int, work_per_cycle: int, side_per_cycle: int,
                  side_first: bool) -> List[SessionType]:
    """X work sessions, then Y side sessions per cycle. A turn whose type is used up is skipped."""
    order = []
    remaining = {SessionType.WORK: work_count, SessionType.SIDE: side_count}
    per_cycle = {SessionType.WORK: work_per_cycle, SessionType.SIDE: side_per_cycle}
    turn = SessionType.SIDE if side_first else SessionType.WORK
    in_cycle = 0

    while remaining[SessionType.WORK] > 0 or remaining[SessionType.SIDE] > 0:
        if in_cycle < per_cycle[turn] and remaining[turn] > 0:
            order.append(turn)
            remaining[turn] -= 1
            in_cycle += 1
            continue

        other = SessionType.SIDE if turn == SessionType.WORK else SessionType.WORK
        in_cycle = 0
        if remaining[other] > 0:
            turn = other
    return order


def _sides_first_and_last(work_count: int, side_count: int, side_per_cycle: int) -> List[SessionType]:
    leading = min(side_per_cycle, side_count)
    return ([SessionType.SIDE] * leading
            + [SessionType.WORK] * work_count
            + [SessionType.SIDE] * (side_count - leading))
