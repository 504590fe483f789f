from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from ..absences.model import AbsenceDay
from ..absences.repository import AbsenceRepository
from ..common.time_utils import iter_months, month_bounds, previous_month
from ..core.enums import AbsenceCategory
from ..core.exceptions import (
    EmployeeNotFoundError,
    MonthClosedError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from ..daily.repository import DailyValueRepository
from ..hooks import HookRegistry
from ..masterdata.model import Employee, Tariff
from ..masterdata.repository import MasterDataRepository
from ..vacation.repository import VacationBalanceRepository
from .evaluator import evaluate_flextime, sum_daily_values
from .model import MonthlyValue
from .repository import MonthlyValueRepository

logger = logging.getLogger(__name__)


class MonthlyCalculationService:
    def __init__(
        self,
        daily_values: DailyValueRepository,
        monthly_values: MonthlyValueRepository,
        absences: AbsenceRepository,
        masterdata: MasterDataRepository,
        vacation_balances: VacationBalanceRepository | None = None,
        *,
        hooks: HookRegistry | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._daily_values = daily_values
        self._monthly_values = monthly_values
        self._absences = absences
        self._masterdata = masterdata
        self._vacation_balances = vacation_balances
        self._hooks = hooks or HookRegistry()
        self._clock = clock

    def _employee(self, employee_id: str) -> Employee:
        employee = self._masterdata.get_employee(employee_id)
        if not employee:
            raise EmployeeNotFoundError(f"Employee {employee_id} does not exist")
        return employee

    def _tariff(self, employee: Employee) -> Optional[Tariff]:
        if not employee.tariff_id:
            return None
        tariff = self._masterdata.get_tariff(employee.tariff_id)
        if tariff is None:
            raise NotFoundError(f"Tariff {employee.tariff_id} does not exist")
        return tariff

    def _flextime_start(self, employee: Employee, year: int, month: int) -> int:
        first = employee.first_tracked_month
        if (year, month) < first:
            raise ValidationError(f"{year}-{month:02d} is before flextime tracking starts for {employee.employee_id}")
        prev = self._monthly_values.get(employee.employee_id, *previous_month(year, month))
        if prev is not None:
            return prev.flextime_carryover
        if (year, month) == first:
            return 0
        py, pm = previous_month(year, month)
        raise PreconditionFailedError(f"Month {py}-{pm:02d} must be calculated before {year}-{month:02d}")

    def _absence_summary(self, employee_id: str, year: int, month: int) -> Tuple[Decimal, int, int]:
        first, last = month_bounds(year, month)
        vacation = Decimal("0")
        sick = other = 0
        for absence in self._absences.list_for_employee_range(employee_id, first, last):
            vacation += absence.vacation_deduction
            absence_type = self._masterdata.get_absence_type(absence.absence_code)
            category = absence_type.category if absence_type else AbsenceCategory.OTHER
            if category == AbsenceCategory.SICK:
                sick += 1
            elif category == AbsenceCategory.OTHER:
                other += 1
        return vacation, sick, other

    def _vacation_start(self, employee_id: str, year: int, month: int) -> Decimal:
        if not self._vacation_balances:
            return Decimal("0")
        balance = self._vacation_balances.get(employee_id, year)
        if balance is None:
            return Decimal("0")
        first, _ = month_bounds(year, month)
        taken_before = sum(
            (a.vacation_deduction for a in self._taken_between(employee_id, date(year, 1, 1), first)),
            Decimal("0"),
        )
        return balance.available - taken_before

    def _taken_between(self, employee_id: str, start: date, end_exclusive: date) -> List[AbsenceDay]:
        if end_exclusive <= start:
            return []
        return [
            a
            for a in self._absences.list_for_employee_range(employee_id, start, end_exclusive)
            if a.absence_date < end_exclusive
        ]

    def calculate_month(self, employee_id: str, year: int, month: int) -> MonthlyValue:
        """Aggregate the month's daily values and carry the flextime balance forward.

        Replaces any stored value for the month; a closed month must be
        reopened first.
        """
        employee = self._employee(employee_id)
        existing = self._monthly_values.get(employee_id, year, month)
        if existing and existing.is_closed:
            raise MonthClosedError(f"Month {year}-{month:02d} is closed for employee {employee_id}")

        tariff = self._tariff(employee)
        start = self._flextime_start(employee, year, month)

        first, last = month_bounds(year, month)
        totals = sum_daily_values(self._daily_values.list_for_employee_range(employee_id, first, last))
        outcome = evaluate_flextime(start=start, change=totals.change, tariff=tariff, month=month)

        taken, sick, other = self._absence_summary(employee_id, year, month)
        vacation_start = self._vacation_start(employee_id, year, month)

        value = MonthlyValue(
            employee_id=employee_id,
            year=year,
            month=month,
            total_gross_minutes=totals.gross,
            total_net_minutes=totals.net,
            total_target_minutes=totals.target,
            total_overtime_minutes=totals.overtime,
            total_undertime_minutes=totals.undertime,
            total_break_minutes=totals.breaks,
            flextime_start=outcome.start,
            flextime_change=outcome.change,
            flextime_end=outcome.end,
            flextime_carryover=outcome.carryover,
            flextime_credited=outcome.credited,
            flextime_forfeited=outcome.forfeited,
            work_days=totals.work_days,
            days_with_errors=totals.days_with_errors,
            vacation_start=vacation_start,
            vacation_taken=taken,
            vacation_end=vacation_start - taken,
            sick_days=sick,
            other_absence_days=other,
            warnings=outcome.warnings,
            reopened_at=existing.reopened_at if existing else None,
            reopened_by=existing.reopened_by if existing else None,
        )

        value = self._hooks.after_monthly.run(value)
        if value.key != (employee_id, year, month):
            raise ValidationError("after_monthly hook must not change the employee or month of a monthly value")

        self._monthly_values.replace(value)
        logger.debug(
            "Monthly value %s %s-%02d: change=%s carryover=%s",
            employee_id,
            year,
            month,
            value.flextime_change,
            value.flextime_carryover,
        )
        return value

    def close_month(self, employee_id: str, year: int, month: int, *, closed_by: str) -> MonthlyValue:
        value = self._monthly_values.get(employee_id, year, month)
        if value is None:
            raise PreconditionFailedError(f"Month {year}-{month:02d} has not been calculated for {employee_id}")
        if value.is_closed:
            raise ValidationError(f"Month {year}-{month:02d} is already closed")
        closed = replace(value, is_closed=True, closed_at=self._clock(), closed_by=closed_by)
        self._monthly_values.replace(closed)
        logger.info("Month %s-%02d closed for %s by %s", year, month, employee_id, closed_by)
        return closed

    def reopen_month(self, employee_id: str, year: int, month: int, *, reopened_by: str) -> MonthlyValue:
        value = self._monthly_values.get(employee_id, year, month)
        if value is None or not value.is_closed:
            raise ValidationError(f"Month {year}-{month:02d} is not closed")
        reopened = replace(
            value,
            is_closed=False,
            closed_at=None,
            closed_by=None,
            reopened_at=self._clock(),
            reopened_by=reopened_by,
        )
        self._monthly_values.replace(reopened)
        logger.info("Month %s-%02d reopened for %s by %s", year, month, employee_id, reopened_by)
        return reopened

    def recalculate_from(
        self,
        employee_id: str,
        year: int,
        month: int,
        until: Tuple[int, int] | None = None,
    ) -> List[MonthlyValue]:
        """Recalculate (year, month) through `until` in order, leaving closed months untouched."""
        if until is None:
            now = self._clock()
            until = (now.year, now.month)
        out: List[MonthlyValue] = []
        for y, m in iter_months((year, month), until):
            existing = self._monthly_values.get(employee_id, y, m)
            if existing and existing.is_closed:
                logger.info("Skipping closed month %s-%02d for %s", y, m, employee_id)
                continue
            out.append(self.calculate_month(employee_id, y, m))
        return out
