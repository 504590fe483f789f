from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ..absences.model import AbsenceDay
from ..bookings.model import Pair, Punch
from ..bookings.pairing import pair_punches
from ..bookings.tolerance import apply_tolerance
from ..core.enums import ErrorCode, PairKind, PunchType, Severity
from ..core.issues import CalcIssue, codes_with, issue, promote
from ..masterdata.model import AbsenceType, Holiday, Schedule
from ..shifts.detector import ShiftDetector
from .breaks.factory import BreakStrategyFactory, calculate_breaks
from .model import DailyValue, SurchargeMinutes
from .no_punch.factory import NoPunchStrategyFactory
from .surcharges import calculate_surcharges, work_periods


@dataclass(frozen=True)
class DayInput:
    """Everything one employee-day calculation reads, resolved up front."""

    employee_id: str
    day: date
    schedule: Schedule
    punches: Tuple[Punch, ...] = ()
    absence: Optional[AbsenceDay] = None
    absence_type: Optional[AbsenceType] = None
    holiday: Optional[Holiday] = None
    # Alternate type named by absence_type.holiday_code, when the day is a holiday.
    holiday_absence_type: Optional[AbsenceType] = None
    promoted_warnings: FrozenSet[ErrorCode] = field(default_factory=frozenset)


@dataclass(frozen=True)
class DayResult:
    value: DailyValue
    pairs: Tuple[Pair, ...] = ()

    @property
    def calculated_punches(self) -> Tuple[Punch, ...]:
        out: List[Punch] = []
        for pair in self.pairs:
            out.extend((pair.start, pair.end))
        return tuple(out)


def overlap_minutes(pair: Pair, mains: Sequence[Pair]) -> int:
    total = 0
    for main in mains:
        start = max(pair.start.effective_minutes, main.start.effective_minutes)
        end = min(pair.end.effective_minutes, main.end.effective_minutes)
        if end > start:
            total += end - start
    return total


def inside_any(pair: Pair, mains: Sequence[Pair]) -> bool:
    return any(
        main.start.effective_minutes <= pair.start.effective_minutes
        and pair.end.effective_minutes <= main.end.effective_minutes
        for main in mains
    )


def credit_minutes(target: int, *portions: Decimal) -> int:
    value = Decimal(target)
    for portion in portions:
        value *= Decimal(portion)
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def core_time_issues(schedule: Schedule, first_come: int, last_go: int) -> List[CalcIssue]:
    """Core time must be covered from the first arrival to the last departure."""
    out: List[CalcIssue] = []
    if schedule.core_start is not None and first_come > schedule.core_start:
        out.append(issue(ErrorCode.MISSED_CORE_START))
    if schedule.core_end is not None and last_go < schedule.core_end:
        out.append(issue(ErrorCode.MISSED_CORE_END))
    return out


class DailyAggregator:
    """Turn one employee-day's punches into a DailyValue.

    Pure: reads only the DayInput, so recalculating with the same input
    returns an equal record.
    """

    def __init__(
        self,
        *,
        shift_detector: Optional[ShiftDetector] = None,
        break_factory: Optional[BreakStrategyFactory] = None,
        no_punch_factory: Optional[NoPunchStrategyFactory] = None,
    ):
        self.shift_detector = shift_detector
        self.break_factory = break_factory or BreakStrategyFactory()
        self.no_punch_factory = no_punch_factory or NoPunchStrategyFactory()

    def aggregate(self, inp: DayInput) -> DayResult:
        if inp.absence is not None and (inp.holiday is None or self._absence_overrides_holiday(inp)):
            return self._absence_day(inp)
        if inp.holiday is not None and not inp.punches:
            return self._holiday_day(inp)
        return self._booked_day(inp)

    @staticmethod
    def _absence_overrides_holiday(inp: DayInput) -> bool:
        return bool(inp.absence_type and inp.absence_type.holiday_code and inp.holiday_absence_type)

    def _absence_day(self, inp: DayInput) -> DayResult:
        target = inp.schedule.effective_target(is_absence_day=True)
        issues: List[CalcIssue] = []
        absence_type = inp.absence_type
        if inp.holiday is not None:
            absence_type = inp.holiday_absence_type
            issues.append(issue(ErrorCode.ABSENCE_ON_HOLIDAY))
        else:
            issues.append(issue(ErrorCode.ABSENCE))
        if inp.punches:
            issues.append(issue(ErrorCode.BOOKINGS_ON_ABSENCE_DAY))

        type_portion = absence_type.portion if absence_type is not None else Decimal("1")
        credit = credit_minutes(target, type_portion, inp.absence.portion)
        return self._finish(
            inp,
            inp.schedule,
            gross=credit,
            net=credit,
            target=target,
            issues=issues,
            absence_code=absence_type.code if absence_type is not None else inp.absence.absence_code,
        )

    def _holiday_day(self, inp: DayInput) -> DayResult:
        credit = inp.schedule.holiday_credit(inp.holiday.category)
        return self._finish(
            inp,
            inp.schedule,
            gross=credit,
            net=credit,
            target=inp.schedule.effective_target(),
            issues=[issue(ErrorCode.HOLIDAY)],
        )

    def _booked_day(self, inp: DayInput) -> DayResult:
        issues: List[CalcIssue] = []
        schedule = inp.schedule
        if self.shift_detector is not None:
            decision = self.shift_detector.detect(schedule, inp.punches)
            schedule = decision.schedule
            issues.extend(decision.issues)

        pairing = pair_punches(inp.punches)
        issues.extend(pairing.issues)
        for punch in pairing.unpaired:
            if punch.punch_type == PunchType.ARRIVE:
                issues.append(issue(ErrorCode.MISSING_GO, punch_id=punch.punch_id))
            elif punch.punch_type == PunchType.LEAVE:
                issues.append(issue(ErrorCode.MISSING_COME, punch_id=punch.punch_id))

        tolerance = apply_tolerance(pairing.pairs, schedule)
        issues.extend(tolerance.issues)
        pairs = tolerance.pairs
        mains = [p for p in pairs if p.kind == PairKind.MAIN]
        target = schedule.effective_target()
        if inp.holiday is not None:
            issues.append(issue(ErrorCode.HOLIDAY_WORKED))

        if not mains:
            outcome = self.no_punch_factory.for_policy(schedule.no_punch_policy).evaluate(
                target_minutes=target, has_punches=bool(inp.punches)
            )
            issues.extend(outcome.issues)
            return self._finish(
                inp, schedule, gross=outcome.gross_minutes, net=outcome.net_minutes, target=target,
                issues=issues, pairs=pairs,
            )

        gross = sum(p.duration for p in mains)
        booked_break = 0
        for pair in pairs:
            if pair.kind != PairKind.BREAK:
                continue
            if not inside_any(pair, mains):
                issues.append(issue(ErrorCode.BOOKING_OUTSIDE_WINDOW, punch_id=pair.start.punch_id))
            booked_break += overlap_minutes(pair, mains)
        breaks = calculate_breaks(
            gross_minutes=gross, booked_break_minutes=booked_break, rules=schedule.breaks, factory=self.break_factory
        ).total

        net = max(gross - breaks, 0)
        capped = tolerance.capped_minutes
        if schedule.max_net_minutes is not None and net > schedule.max_net_minutes:
            capped += net - schedule.max_net_minutes
            net = schedule.max_net_minutes
            issues.append(issue(ErrorCode.MAX_HOURS_EXCEEDED))
        if schedule.min_work_minutes is not None and net < schedule.min_work_minutes:
            issues.append(issue(ErrorCode.BELOW_MIN_WORK_TIME))

        first_come = mains[0].start.effective_minutes
        last_go = mains[-1].end.effective_minutes
        issues.extend(core_time_issues(schedule, first_come, last_go))
        surcharges = calculate_surcharges(
            work_periods(mains),
            schedule.surcharges,
            holiday_category=inp.holiday.category if inp.holiday is not None else None,
        )

        return self._finish(
            inp,
            schedule,
            gross=gross,
            net=net,
            target=target,
            breaks=breaks,
            capped=capped,
            trip=sum(p.duration for p in pairs if p.kind == PairKind.TRIP),
            first_come=first_come,
            last_go=last_go,
            issues=issues,
            pairs=pairs,
            surcharges=surcharges,
        )

    def _finish(
        self,
        inp: DayInput,
        schedule: Schedule,
        *,
        gross: int,
        net: int,
        target: int,
        issues: Iterable[CalcIssue],
        breaks: int = 0,
        capped: int = 0,
        trip: int = 0,
        first_come: Optional[int] = None,
        last_go: Optional[int] = None,
        absence_code: Optional[str] = None,
        pairs: Tuple[Pair, ...] = (),
        surcharges: Tuple[SurchargeMinutes, ...] = (),
    ) -> DayResult:
        final = promote(issues, inp.promoted_warnings)
        errors = codes_with(final, Severity.ERROR)
        value = DailyValue(
            employee_id=inp.employee_id,
            value_date=inp.day,
            schedule_id=schedule.schedule_id,
            gross_minutes=gross,
            net_minutes=net,
            target_minutes=target,
            overtime_minutes=max(net - target, 0),
            undertime_minutes=max(target - net, 0),
            break_minutes=breaks,
            capped_minutes=capped,
            trip_minutes=trip,
            first_come=first_come,
            last_go=last_go,
            punch_count=len(inp.punches),
            is_manually_changed=any(p.is_edited for p in inp.punches),
            has_error=bool(errors),
            error_codes=errors,
            warnings=codes_with(final, Severity.WARNING),
            absence_code=absence_code,
            holiday_name=inp.holiday.name if inp.holiday is not None else None,
            issues=final,
            surcharges=surcharges,
        )
        return DayResult(value=value, pairs=tuple(pairs))
