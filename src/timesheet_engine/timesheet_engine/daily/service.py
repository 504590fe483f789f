from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List

from ..absences.repository import AbsenceRepository
from ..bookings.day_change import resolve_day
from ..bookings.model import Punch
from ..bookings.repository import PunchRepository
from ..core.enums import DayChangePolicy
from ..core.exceptions import (
    EmployeeNotFoundError,
    MonthClosedError,
    NotFoundError,
    ScheduleNotFoundError,
    ValidationError,
)
from ..core.settings import CalculationSettings
from ..corrections.sink import CorrectionSink, items_for
from ..hooks import HookRegistry
from ..masterdata.repository import MasterDataRepository
from ..monthly.repository import MonthlyValueRepository
from ..shifts.detector import ShiftDetector
from .aggregator import DailyAggregator, DayInput
from .model import DailyValue
from .repository import DailyValueRepository

logger = logging.getLogger(__name__)


class DailyCalculationService:
    def __init__(
        self,
        punches: PunchRepository,
        daily_values: DailyValueRepository,
        absences: AbsenceRepository,
        masterdata: MasterDataRepository,
        monthly_values: MonthlyValueRepository | None = None,
        *,
        corrections: CorrectionSink | None = None,
        hooks: HookRegistry | None = None,
        settings: CalculationSettings | None = None,
        aggregator: DailyAggregator | None = None,
    ):
        self._punches = punches
        self._daily_values = daily_values
        self._absences = absences
        self._masterdata = masterdata
        self._monthly_values = monthly_values
        self._corrections = corrections
        self._hooks = hooks or HookRegistry()
        self._settings = settings or CalculationSettings()
        self._aggregator = aggregator or DailyAggregator(shift_detector=ShiftDetector(masterdata.get_schedule))

    def _ensure_month_open(self, employee_id: str, day: date) -> None:
        if not self._monthly_values:
            return
        month = self._monthly_values.get(employee_id, day.year, day.month)
        if month and month.is_closed:
            raise MonthClosedError(f"Month {day.year}-{day.month:02d} is closed for employee {employee_id}")

    def _previous_policy(self, employee_id: str, day: date) -> DayChangePolicy:
        previous = self._masterdata.schedule_for(employee_id, day - timedelta(days=1))
        return previous.day_change_policy if previous else DayChangePolicy.NONE

    def _load_punches(self, employee_id: str, day: date, policy: DayChangePolicy) -> tuple[List[Punch], List[Punch]]:
        """Return (punches evaluated on `day`, punches stored on `day`)."""
        previous_policy = self._previous_policy(employee_id, day)
        if policy == DayChangePolicy.NONE and previous_policy == DayChangePolicy.NONE:
            own = self._punches.list_for_employee_range(employee_id, day, day)
            return list(own), list(own)

        by_date: Dict[date, List[Punch]] = defaultdict(list)
        for p in self._punches.list_for_employee_range(employee_id, day - timedelta(days=1), day + timedelta(days=1)):
            by_date[p.punch_date].append(p)
        resolved = resolve_day(day, by_date, policy, previous_policy=previous_policy)
        # Both halves of a midnight split are stored together or not at all.
        for split_day in sorted({p.punch_date for p in resolved.synthesized}):
            self._ensure_month_open(employee_id, split_day)
        for p in resolved.synthesized:
            if self._punches.add_if_absent(p):
                logger.info("Auto-completed overnight shift: %s on %s", p.punch_id, p.punch_date.isoformat())
        own_ids = {p.punch_id for p in by_date.get(day, ())}
        own_ids.update(p.punch_id for p in resolved.synthesized if p.punch_date == day)
        stored = [p for p in resolved.punches if p.punch_id in own_ids]
        return list(resolved.punches), stored

    def build_input(self, employee_id: str, day: date) -> tuple[DayInput, List[Punch]]:
        if not self._masterdata.get_employee(employee_id):
            raise EmployeeNotFoundError(f"Employee {employee_id} does not exist")

        schedule = self._masterdata.schedule_for(employee_id, day)
        if schedule is None:
            raise ScheduleNotFoundError(f"No day plan for employee {employee_id} on {day.isoformat()}")

        punches, stored = self._load_punches(employee_id, day, schedule.day_change_policy)

        absence = self._absences.get(employee_id, day)
        absence_type = None
        if absence:
            absence_type = self._masterdata.get_absence_type(absence.absence_code)
            if absence_type is None:
                raise NotFoundError(f"Unknown absence type {absence.absence_code}")

        holiday = self._masterdata.get_holiday(day)
        holiday_absence_type = None
        if holiday and absence_type and absence_type.holiday_code:
            holiday_absence_type = self._masterdata.get_absence_type(absence_type.holiday_code)

        inp = DayInput(
            employee_id=employee_id,
            day=day,
            schedule=schedule,
            punches=tuple(punches),
            absence=absence,
            absence_type=absence_type,
            holiday=holiday,
            holiday_absence_type=holiday_absence_type,
            promoted_warnings=self._settings.promoted_warnings,
        )
        return inp, stored

    def calculate_day(self, employee_id: str, day: date) -> DailyValue:
        """Recalculate and replace the daily value of one employee-day."""
        self._ensure_month_open(employee_id, day)
        inp, stored = self.build_input(employee_id, day)
        result = self._aggregator.aggregate(inp)

        value = self._hooks.after_daily.run(result.value)
        if (value.employee_id, value.value_date) != (employee_id, day):
            raise ValidationError("after_daily hook must not change the employee or date of a daily value")

        stored_ids = {p.punch_id for p in stored}
        self._punches.update_calculated([p for p in result.calculated_punches if p.punch_id in stored_ids])
        self._daily_values.replace(value)
        if self._corrections:
            self._corrections.replace_for_day(employee_id, day, items_for(value))

        logger.debug(
            "Daily value %s %s: net=%s target=%s errors=%s",
            employee_id,
            day.isoformat(),
            value.net_minutes,
            value.target_minutes,
            ",".join(value.error_codes) or "-",
        )
        return value
