from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

import pytest

from src.timesheet_engine.timesheet_engine.absences.model import AbsenceDay
from src.timesheet_engine.timesheet_engine.core.enums import AbsenceCategory, CreditType
from src.timesheet_engine.timesheet_engine.core.exceptions import (
    MonthClosedError,
    PreconditionFailedError,
    ValidationError,
)
from src.timesheet_engine.timesheet_engine.hooks import HookRegistry
from src.timesheet_engine.timesheet_engine.masterdata.model import AbsenceType, Employee, Tariff
from src.timesheet_engine.timesheet_engine.masterdata.snapshot import MasterDataSnapshot
from src.timesheet_engine.timesheet_engine.monthly.service import MonthlyCalculationService
from src.timesheet_engine.timesheet_engine.vacation.model import VacationBalance

from tests.fakes import (
    EMP,
    InMemoryAbsences,
    InMemoryDailyValues,
    InMemoryMonthlyValues,
    InMemoryVacationBalances,
    daily,
)

NOW = datetime(2025, 6, 1, 12, 0)


def _service(dailies=(), *, absences=(), balances=(), hooks=None, credit_type=CreditType.COMPLETE):
    masterdata = MasterDataSnapshot.build(
        employees=[Employee(employee_id=EMP, full_name="Nguyen Van A", entry_date=date(2025, 1, 1), tariff_id="T")],
        tariffs=[Tariff(tariff_id="T", credit_type=credit_type, flextime_threshold=60)],
        absence_types=[
            AbsenceType(code="UL", category=AbsenceCategory.VACATION, deducts_vacation=True),
            AbsenceType(code="K", category=AbsenceCategory.SICK),
        ],
    )
    monthly = InMemoryMonthlyValues()
    svc = MonthlyCalculationService(
        InMemoryDailyValues(dailies),
        monthly,
        InMemoryAbsences(absences),
        masterdata,
        InMemoryVacationBalances(balances),
        hooks=hooks,
        clock=lambda: NOW,
    )
    return svc, monthly


def _q1():
    return [
        daily(date(2025, 1, 6), overtime=60),
        daily(date(2025, 1, 7), undertime=30),
        daily(date(2025, 2, 3), overtime=20),
        daily(date(2025, 3, 3), overtime=100, has_error=True),
    ]


def test_first_month_starts_at_zero_and_carries_forward():
    svc, _ = _service(_q1())

    jan = svc.calculate_month(EMP, 2025, 1)
    feb = svc.calculate_month(EMP, 2025, 2)

    assert (jan.flextime_start, jan.flextime_change, jan.flextime_carryover) == (0, 30, 30)
    assert jan.total_overtime_minutes == 60
    assert jan.total_undertime_minutes == 30
    assert jan.work_days == 2
    assert feb.flextime_start == jan.flextime_carryover
    assert feb.flextime_carryover == 50


def test_missing_previous_month_is_a_precondition_failure():
    svc, _ = _service(_q1())
    svc.calculate_month(EMP, 2025, 1)

    with pytest.raises(PreconditionFailedError):
        svc.calculate_month(EMP, 2025, 3)


def test_month_before_tracking_start_is_rejected():
    svc, _ = _service()

    with pytest.raises(ValidationError):
        svc.calculate_month(EMP, 2024, 12)


def test_close_and_reopen():
    svc, monthly = _service(_q1())
    svc.calculate_month(EMP, 2025, 1)

    closed = svc.close_month(EMP, 2025, 1, closed_by="hr")
    assert closed.is_closed
    assert closed.closed_by == "hr"
    assert closed.closed_at == NOW

    with pytest.raises(MonthClosedError):
        svc.calculate_month(EMP, 2025, 1)
    with pytest.raises(ValidationError):
        svc.close_month(EMP, 2025, 1, closed_by="hr")

    reopened = svc.reopen_month(EMP, 2025, 1, reopened_by="lead")
    assert not reopened.is_closed
    assert reopened.closed_by is None

    again = svc.calculate_month(EMP, 2025, 1)
    assert again.reopened_by == "lead"
    assert monthly.get(EMP, 2025, 1) == again


def test_close_requires_calculated_month_and_reopen_requires_closed():
    svc, _ = _service(_q1())

    with pytest.raises(PreconditionFailedError):
        svc.close_month(EMP, 2025, 1, closed_by="hr")

    svc.calculate_month(EMP, 2025, 1)
    with pytest.raises(ValidationError):
        svc.reopen_month(EMP, 2025, 1, reopened_by="hr")


def test_recalculate_from_skips_closed_months():
    svc, monthly = _service(_q1())
    svc.recalculate_from(EMP, 2025, 1, until=(2025, 2))
    svc.close_month(EMP, 2025, 2, closed_by="hr")
    feb_before = monthly.get(EMP, 2025, 2)

    out = svc.recalculate_from(EMP, 2025, 1, until=(2025, 3))

    assert [(v.year, v.month) for v in out] == [(2025, 1), (2025, 3)]
    assert monthly.get(EMP, 2025, 2) == feb_before
    march = monthly.get(EMP, 2025, 3)
    assert march.flextime_start == feb_before.flextime_carryover
    assert march.days_with_errors == 1


def test_recalculate_defaults_to_current_month():
    svc, _ = _service(_q1())

    out = svc.recalculate_from(EMP, 2025, 1)

    assert [(v.year, v.month) for v in out][-1] == (2025, 6)


def test_after_threshold_below_threshold_keeps_balance():
    svc, _ = _service([daily(date(2025, 1, 6), overtime=45)], credit_type=CreditType.AFTER_THRESHOLD)

    jan = svc.calculate_month(EMP, 2025, 1)

    assert jan.flextime_end == 45
    assert jan.flextime_carryover == 0
    assert jan.flextime_forfeited == 45
    assert "BELOW_THRESHOLD" in jan.warnings


def test_absence_and_vacation_summary():
    balance = VacationBalance(
        employee_id=EMP,
        year=2025,
        base_entitlement=Decimal("24"),
        special_entitlement=Decimal("0"),
        months_active=12,
        proration_factor=Decimal("1"),
        part_time_factor=Decimal("1"),
        total_entitlement=Decimal("24"),
        carryover_in=Decimal("0"),
        carryover_capped=Decimal("0"),
        forfeited=Decimal("0"),
        taken=Decimal("3"),
        remaining=Decimal("21"),
    )
    absences = [
        AbsenceDay(EMP, date(2025, 1, 20), "UL", vacation_deduction=Decimal("1")),
        AbsenceDay(EMP, date(2025, 2, 10), "UL", vacation_deduction=Decimal("1")),
        AbsenceDay(EMP, date(2025, 2, 11), "UL", portion=Decimal("0.5"), vacation_deduction=Decimal("0.5")),
        AbsenceDay(EMP, date(2025, 2, 12), "K"),
    ]
    svc, _ = _service(_q1(), absences=absences, balances=[balance])
    svc.calculate_month(EMP, 2025, 1)

    feb = svc.calculate_month(EMP, 2025, 2)

    assert feb.vacation_start == Decimal("23")
    assert feb.vacation_taken == Decimal("1.5")
    assert feb.vacation_end == Decimal("21.5")
    assert feb.sick_days == 1
    assert feb.other_absence_days == 0


def test_after_monthly_hook_result_is_stored():
    hooks = HookRegistry()
    hooks.after_monthly.register("tag", lambda v: replace(v, warnings=v.warnings + ("REVIEWED",)))
    svc, monthly = _service(_q1(), hooks=hooks)

    jan = svc.calculate_month(EMP, 2025, 1)

    assert "REVIEWED" in jan.warnings
    assert monthly.get(EMP, 2025, 1).warnings == jan.warnings
