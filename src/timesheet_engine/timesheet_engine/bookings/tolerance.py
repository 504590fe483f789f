from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from ..core.constants import MINUTES_PER_DAY
from ..core.enums import ErrorCode, PairKind, PunchSource, ScheduleMode
from ..core.issues import CalcIssue, issue
from ..masterdata.model import RoundingRule, Schedule
from .model import Pair, Punch
from .rounding import apply_rounding


@dataclass(frozen=True)
class Adjustment:
    minutes: int
    violation: bool = False
    capped: int = 0
    # Snapped, clamped and violating values keep their adjusted time as-is.
    roundable: bool = True


@dataclass(frozen=True)
class ToleranceResult:
    pairs: Tuple[Pair, ...]
    issues: Tuple[CalcIssue, ...]
    capped_minutes: int


def uses_window_logic(schedule: Schedule) -> bool:
    return schedule.mode == ScheduleMode.FLEXTIME or schedule.tolerance.variable_work_time


def arrival_floor(schedule: Schedule) -> int:
    return schedule.come_from - schedule.tolerance.come_minus


def departure_ceiling(schedule: Schedule) -> Optional[int]:
    if schedule.go_to is None:
        return None
    return schedule.go_to + schedule.tolerance.go_plus


def classify_flex_arrival(minutes: int, schedule: Schedule) -> Adjustment:
    floor = arrival_floor(schedule)
    if minutes < floor:
        return Adjustment(floor, violation=True, capped=floor - minutes, roundable=False)
    if schedule.come_to is not None and minutes > schedule.come_to:
        return Adjustment(minutes, violation=True, roundable=False)
    return Adjustment(minutes)


def classify_flex_departure(minutes: int, schedule: Schedule) -> Adjustment:
    ceiling = departure_ceiling(schedule)
    if ceiling is not None and minutes > ceiling:
        return Adjustment(ceiling, violation=True, capped=minutes - ceiling, roundable=False)
    if minutes < schedule.go_from:
        return Adjustment(minutes, violation=True, roundable=False)
    return Adjustment(minutes)


def classify_fixed_arrival(minutes: int, schedule: Schedule) -> Adjustment:
    target = schedule.come_from
    tol = schedule.tolerance
    if minutes < target - tol.come_minus:
        return Adjustment(minutes)
    if minutes <= target + tol.come_plus:
        return Adjustment(target, roundable=False)
    return Adjustment(minutes, violation=True, roundable=False)


def classify_fixed_departure(minutes: int, schedule: Schedule) -> Adjustment:
    target = schedule.go_from
    tol = schedule.tolerance
    if minutes < target - tol.go_minus:
        return Adjustment(minutes, violation=True, roundable=False)
    if minutes <= target + tol.go_plus:
        return Adjustment(target, roundable=False)
    return Adjustment(minutes)


def clamp_inner(minutes: int, schedule: Schedule) -> Adjustment:
    """Endpoints between the first arrival and last departure only get window capping."""
    if not uses_window_logic(schedule):
        return Adjustment(minutes)
    floor = arrival_floor(schedule)
    if minutes < floor:
        return Adjustment(floor, capped=floor - minutes, roundable=False)
    ceiling = departure_ceiling(schedule)
    if ceiling is not None and minutes > ceiling:
        return Adjustment(ceiling, capped=minutes - ceiling, roundable=False)
    return Adjustment(minutes)


def _in_scope(rule: Optional[RoundingRule], is_boundary: bool) -> bool:
    if rule is None:
        return False
    return is_boundary or rule.apply_to_all_punches


def day_shift(minutes: int, *, arrival: bool) -> int:
    """Whole-day offset of a re-dated punch; 24:00 still closes the current day."""
    if arrival:
        return (minutes // MINUTES_PER_DAY) * MINUTES_PER_DAY
    return ((minutes - 1) // MINUTES_PER_DAY) * MINUTES_PER_DAY


def _adjust(
    punch: Punch,
    schedule: Schedule,
    *,
    arrival: bool,
    is_boundary: bool,
) -> Adjustment:
    # Midnight markers from auto-complete are taken as booked.
    if punch.source == PunchSource.AUTO_COMPLETE:
        return Adjustment(punch.minutes, roundable=False)

    shift = day_shift(punch.minutes, arrival=arrival)
    minutes = punch.minutes - shift
    if is_boundary:
        if uses_window_logic(schedule):
            adj = classify_flex_arrival(minutes, schedule) if arrival else classify_flex_departure(minutes, schedule)
        else:
            adj = classify_fixed_arrival(minutes, schedule) if arrival else classify_fixed_departure(minutes, schedule)
    else:
        adj = clamp_inner(minutes, schedule)

    rule = schedule.rounding_come if arrival else schedule.rounding_go
    if adj.roundable and _in_scope(rule, is_boundary):
        adj = Adjustment(apply_rounding(adj.minutes, rule), capped=adj.capped)
    return replace(adj, minutes=adj.minutes + shift)


def apply_tolerance(pairs: Sequence[Pair], schedule: Schedule) -> ToleranceResult:
    """Set calculated times on every pair according to the schedule's tolerance and rounding rules.

    Only the day's first arrival and last departure are checked against the
    arrival/departure windows; inner main endpoints are capped to the
    evaluation window. Break and trip pairs keep their booked times.
    """
    mains = [i for i, p in enumerate(pairs) if p.kind == PairKind.MAIN]
    first_idx = mains[0] if mains else None
    last_idx = mains[-1] if mains else None

    out: List[Pair] = []
    issues: List[CalcIssue] = []
    capped = 0

    for idx, pair in enumerate(pairs):
        if pair.kind != PairKind.MAIN:
            out.append(
                Pair(
                    kind=pair.kind,
                    start=pair.start.with_calculated(pair.start.minutes),
                    end=pair.end.with_calculated(pair.end.minutes),
                )
            )
            continue

        start_adj = _adjust(pair.start, schedule, arrival=True, is_boundary=idx == first_idx)
        end_adj = _adjust(pair.end, schedule, arrival=False, is_boundary=idx == last_idx)

        for punch, adj in ((pair.start, start_adj), (pair.end, end_adj)):
            if adj.violation:
                issues.append(issue(ErrorCode.CORE_TIME_VIOLATION, punch_id=punch.punch_id))
            capped += adj.capped

        end_minutes = max(end_adj.minutes, start_adj.minutes)
        out.append(
            Pair(
                kind=pair.kind,
                start=pair.start.with_calculated(start_adj.minutes),
                end=pair.end.with_calculated(end_minutes),
            )
        )

    return ToleranceResult(pairs=tuple(out), issues=tuple(issues), capped_minutes=capped)
