from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Callable

from ..absences.model import AbsenceDay
from ..absences.repository import AbsenceRepository
from ..core.exceptions import (
    EmployeeNotFoundError,
    InsufficientVacationError,
    NotFoundError,
    ScheduleNotFoundError,
    ValidationError,
)
from ..core.settings import CalculationSettings
from ..masterdata.model import AbsenceType, Employee, Tariff
from ..masterdata.repository import MasterDataRepository
from .entitlement import ZERO, calculate_entitlement, cap_carryover, mid_year_forfeit, vacation_deduction
from .model import VacationBalance
from .repository import VacationBalanceRepository

logger = logging.getLogger(__name__)


class VacationService:
    def __init__(
        self,
        balances: VacationBalanceRepository,
        absences: AbsenceRepository,
        masterdata: MasterDataRepository,
        *,
        settings: CalculationSettings | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._balances = balances
        self._absences = absences
        self._masterdata = masterdata
        self._settings = settings or CalculationSettings()
        self._today = today

    def _employee(self, employee_id: str) -> Employee:
        employee = self._masterdata.get_employee(employee_id)
        if not employee:
            raise EmployeeNotFoundError(f"Employee {employee_id} does not exist")
        return employee

    def _tariff(self, employee: Employee) -> Tariff:
        tariff = self._masterdata.get_tariff(employee.tariff_id) if employee.tariff_id else None
        if tariff is None:
            raise NotFoundError(f"No tariff assigned to employee {employee.employee_id}")
        return tariff

    def _taken(self, employee_id: str, start: date, end: date) -> Decimal:
        return sum(
            (a.vacation_deduction for a in self._absences.list_for_employee_range(employee_id, start, end)),
            ZERO,
        )

    def recompute_vacation_balance(self, employee_id: str, year: int) -> VacationBalance:
        """Rebuild the year's balance from entitlement, prior-year carryover and recorded absences."""
        employee = self._employee(employee_id)
        tariff = self._tariff(employee)
        entitlement = calculate_entitlement(employee, tariff, year)

        prior = self._balances.get(employee_id, year - 1)
        carryover_in = prior.remaining if prior else ZERO
        carryover = cap_carryover(carryover_in, tariff.capping_rules)

        taken = self._taken(employee_id, date(year, 1, 1), date(year, 12, 31))
        forfeited = ZERO
        for rule in tariff.capping_rules:
            cutoff = date(year, rule.cutoff_month, rule.cutoff_day)
            forfeited = max(
                forfeited,
                mid_year_forfeit(
                    carryover,
                    self._taken(employee_id, date(year, 1, 1), cutoff),
                    (rule,),
                    year=year,
                    as_of=self._today(),
                ),
            )

        remaining = entitlement.total + carryover - forfeited - taken
        if remaining < 0 and not self._settings.allow_negative_vacation:
            logger.warning(
                "Vacation balance of %s for %s would be %s days; clamped to 0",
                employee_id,
                year,
                remaining,
            )
            remaining = ZERO

        balance = VacationBalance(
            employee_id=employee_id,
            year=year,
            base_entitlement=entitlement.base,
            special_entitlement=entitlement.special,
            months_active=entitlement.months_active,
            proration_factor=entitlement.proration_factor,
            part_time_factor=entitlement.part_time_factor,
            total_entitlement=entitlement.total,
            carryover_in=carryover_in,
            carryover_capped=carryover,
            forfeited=forfeited,
            taken=taken,
            remaining=remaining,
        )
        self._balances.replace(balance)
        logger.debug("Vacation balance %s %s: remaining=%s", employee_id, year, remaining)
        return balance

    def _effective_type(self, absence_type: AbsenceType, day: date) -> AbsenceType:
        """On a holiday the alternate type named by holiday_code applies, if any."""
        if self._masterdata.get_holiday(day) is None or not absence_type.holiday_code:
            return absence_type
        alternate = self._masterdata.get_absence_type(absence_type.holiday_code)
        return alternate or absence_type

    def deduction_for(self, employee_id: str, day: date, absence_type: AbsenceType, portion: Decimal) -> Decimal:
        effective = self._effective_type(absence_type, day)
        if not effective.deducts_vacation:
            return ZERO
        # Holiday wins over an absence without an alternate type.
        if self._masterdata.get_holiday(day) is not None and not absence_type.holiday_code:
            return ZERO
        schedule = self._masterdata.schedule_for(employee_id, day)
        if schedule is None:
            raise ScheduleNotFoundError(f"No day plan for employee {employee_id} on {day.isoformat()}")
        return vacation_deduction(schedule.vacation_deduction, portion)

    def record_absence(
        self,
        employee_id: str,
        day: date,
        absence_code: str,
        *,
        portion: Decimal = Decimal("1"),
    ) -> AbsenceDay:
        """Store an approved absence and update the vacation balance.

        Refuses a second absence on the same date and any vacation deduction
        that would overdraw the balance, unless negative balances are allowed.
        """
        self._employee(employee_id)
        absence_type = self._masterdata.get_absence_type(absence_code)
        if absence_type is None:
            raise NotFoundError(f"Unknown absence type {absence_code}")
        if self._absences.get(employee_id, day):
            raise ValidationError(f"Employee {employee_id} already has an absence on {day.isoformat()}")

        deduction = self.deduction_for(employee_id, day, absence_type, Decimal(portion))
        if deduction > 0:
            balance = self._balances.get(employee_id, day.year) or self.recompute_vacation_balance(employee_id, day.year)
            if balance.remaining - deduction < 0 and not self._settings.allow_negative_vacation:
                raise InsufficientVacationError(
                    f"Only {balance.remaining} vacation days left for {employee_id}, {deduction} requested"
                )

        absence = AbsenceDay(
            employee_id=employee_id,
            absence_date=day,
            absence_code=absence_code,
            portion=Decimal(portion),
            vacation_deduction=deduction,
        )
        self._absences.add(absence)
        if deduction > 0:
            self.recompute_vacation_balance(employee_id, day.year)
        logger.info("Absence %s recorded for %s on %s", absence_code, employee_id, day.isoformat())
        return absence
