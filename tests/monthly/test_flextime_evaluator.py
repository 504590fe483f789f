from datetime import date

import pytest

from src.timesheet_engine.timesheet_engine.core.enums import CreditType
from src.timesheet_engine.timesheet_engine.masterdata.model import Tariff
from src.timesheet_engine.timesheet_engine.monthly.evaluator import (
    WARN_ANNUAL_FLOOR,
    WARN_BELOW_THRESHOLD,
    WARN_FLEXTIME_CAPPED,
    WARN_MONTHLY_CAP,
    WARN_NO_CARRYOVER,
    evaluate_flextime,
    sum_daily_values,
)

from tests.fakes import daily


def _tariff(credit_type, **kw):
    return Tariff(tariff_id="T", credit_type=credit_type, **kw)


def test_sum_daily_values():
    totals = sum_daily_values(
        [
            daily(date(2025, 3, 3), overtime=60),
            daily(date(2025, 3, 4), undertime=30, has_error=True),
        ]
    )

    assert totals.overtime == 60
    assert totals.undertime == 30
    assert totals.change == 30
    assert totals.target == 960
    assert totals.work_days == 2
    assert totals.days_with_errors == 1


def test_no_evaluation_keeps_everything():
    out = evaluate_flextime(start=100, change=-30, tariff=_tariff(CreditType.NONE), month=3)

    assert (out.end, out.carryover, out.credited, out.forfeited) == (70, 70, -30, 0)


def test_missing_tariff_behaves_like_no_evaluation():
    out = evaluate_flextime(start=100, change=30, tariff=None, month=12)

    assert out.carryover == 130


def test_complete_applies_monthly_cap():
    out = evaluate_flextime(start=0, change=900, tariff=_tariff(CreditType.COMPLETE, max_monthly_flextime=600), month=3)

    assert out.end == 900
    assert out.credited == 600
    assert out.forfeited == 300
    assert out.carryover == 600
    assert out.warnings == (WARN_MONTHLY_CAP,)


def test_complete_clamps_to_annual_limits():
    tariff = _tariff(CreditType.COMPLETE, upper_annual_limit=1200, lower_annual_limit=600)

    high = evaluate_flextime(start=1000, change=500, tariff=tariff, month=3)
    low = evaluate_flextime(start=-500, change=-300, tariff=tariff, month=3)

    assert (high.carryover, high.forfeited) == (1200, 300)
    assert high.warnings == (WARN_FLEXTIME_CAPPED,)
    assert low.carryover == -600
    assert low.end == -800


def test_after_threshold_drops_small_overtime():
    tariff = _tariff(CreditType.AFTER_THRESHOLD, flextime_threshold=60)

    out = evaluate_flextime(start=0, change=45, tariff=tariff, month=3)

    assert out.end == 45
    assert out.carryover == 0
    assert out.credited == 0
    assert out.forfeited == 45
    assert out.warnings == (WARN_BELOW_THRESHOLD,)


def test_after_threshold_credits_once_reached():
    tariff = _tariff(CreditType.AFTER_THRESHOLD, flextime_threshold=60)

    assert evaluate_flextime(start=10, change=60, tariff=tariff, month=3).carryover == 70
    assert evaluate_flextime(start=10, change=-45, tariff=tariff, month=3).carryover == -35


def test_no_transfer_resets_balance():
    out = evaluate_flextime(start=120, change=30, tariff=_tariff(CreditType.NO_TRANSFER), month=3)

    assert out.end == 150
    assert out.carryover == 0
    assert out.forfeited == 30
    assert out.warnings == (WARN_NO_CARRYOVER,)


def test_annual_floor_applies_in_december_only():
    tariff = _tariff(CreditType.COMPLETE, annual_floor=300)

    assert evaluate_flextime(start=-200, change=-200, tariff=tariff, month=11).carryover == -400
    december = evaluate_flextime(start=-200, change=-200, tariff=tariff, month=12)
    assert december.carryover == -300
    assert WARN_ANNUAL_FLOOR in december.warnings


@pytest.mark.parametrize("credit_type", list(CreditType))
def test_carryover_chains_month_to_month(credit_type):
    tariff = _tariff(
        credit_type,
        flextime_threshold=60,
        max_monthly_flextime=600,
        upper_annual_limit=900,
        lower_annual_limit=900,
    )
    changes = [45, 700, -120, 300, -1500, 90, 0, 59, 600, -30, 240, -600]

    start = 0
    for month, change in enumerate(changes, start=1):
        out = evaluate_flextime(start=start, change=change, tariff=tariff, month=month)
        assert out.start == start
        assert out.end == start + change
        start = out.carryover
