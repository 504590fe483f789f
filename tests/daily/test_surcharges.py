import pytest

from src.timesheet_engine.timesheet_engine.core.exceptions import ValidationError
from src.timesheet_engine.timesheet_engine.daily.model import SurchargeMinutes
from src.timesheet_engine.timesheet_engine.daily.surcharges import (
    calculate_surcharges,
    rule_applies,
    split_at_midnight,
    window_minutes,
)
from src.timesheet_engine.timesheet_engine.masterdata.model import SurchargeRule

from tests.fakes import hm


def _night():
    return SurchargeRule(account_code="NIGHT", from_minutes=hm(22), to_minutes=hm(6))


def _holiday(*categories):
    return SurchargeRule(
        account_code="HOLIDAY",
        from_minutes=0,
        to_minutes=hm(24),
        applies_on_workday=False,
        applies_on_holiday=True,
        holiday_categories=categories,
    )


def test_overnight_window_is_split_at_midnight():
    assert split_at_midnight(_night()) == [(hm(22), hm(24)), (0, hm(6))]
    day = SurchargeRule(account_code="LATE", from_minutes=hm(18), to_minutes=hm(22))
    assert split_at_midnight(day) == [(hm(18), hm(22))]


def test_empty_window_is_rejected():
    with pytest.raises(ValidationError):
        SurchargeRule(account_code="X", from_minutes=hm(6), to_minutes=hm(6))


def test_minutes_inside_window_only():
    assert window_minutes([(hm(20), hm(23))], _night()) == 60
    assert window_minutes([(hm(4), hm(12))], _night()) == 120
    assert window_minutes([(hm(8), hm(16))], _night()) == 0


def test_redated_night_shift_counts_both_halves():
    # evaluate_come keeps a 22:00-06:00 shift on the arrival day as 22:00-30:00.
    assert window_minutes([(hm(22), hm(30))], _night()) == 480


def test_holiday_category_filter():
    assert rule_applies(_holiday(), 2)
    assert rule_applies(_holiday(1), 1)
    assert not rule_applies(_holiday(1), 2)
    assert not rule_applies(_holiday(), None)
    assert rule_applies(_night(), None)
    assert not rule_applies(_night(), 1)


def test_calculate_per_account():
    rules = (
        _night(),
        SurchargeRule(account_code="NIGHT", from_minutes=hm(20), to_minutes=hm(22)),
        _holiday(1),
    )

    workday = calculate_surcharges([(hm(19), hm(23))], rules)
    holiday = calculate_surcharges([(hm(19), hm(23))], rules, holiday_category=1)
    half_holiday = calculate_surcharges([(hm(19), hm(23))], rules, holiday_category=2)

    assert workday == (SurchargeMinutes("NIGHT", 180),)
    assert holiday == (SurchargeMinutes("HOLIDAY", 240),)
    assert half_holiday == ()
