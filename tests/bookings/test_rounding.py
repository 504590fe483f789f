import pytest

from src.timesheet_engine.timesheet_engine.bookings.rounding import (
    add_interval,
    apply_rounding,
    round_down,
    round_mathematical,
    round_up,
    subtract_interval,
)
from src.timesheet_engine.timesheet_engine.core.enums import RoundingMode
from src.timesheet_engine.timesheet_engine.masterdata.model import RoundingRule


@pytest.mark.parametrize(
    "value, interval, expected",
    [(487, 15, 495), (480, 15, 480), (-7, 15, 0), (487, 0, 487)],
)
def test_round_up(value, interval, expected):
    assert round_up(value, interval) == expected


@pytest.mark.parametrize(
    "value, interval, expected",
    [(487, 15, 480), (495, 15, 495), (-7, 15, -15)],
)
def test_round_down(value, interval, expected):
    assert round_down(value, interval) == expected


@pytest.mark.parametrize(
    "value, interval, expected",
    [(22, 15, 15), (23, 15, 30), (5, 10, 10), (-5, 10, -10), (-4, 10, 0), (7, 0, 7)],
)
def test_round_mathematical_half_away_from_zero(value, interval, expected):
    assert round_mathematical(value, interval) == expected


def test_add_and_subtract():
    assert add_interval(480, 10) == 490
    assert subtract_interval(480, 10) == 470


def test_apply_rounding_dispatches_on_mode():
    assert apply_rounding(487, RoundingRule(mode=RoundingMode.UP, interval_minutes=5)) == 490
    assert apply_rounding(487, RoundingRule(mode=RoundingMode.SUBTRACT, interval_minutes=5)) == 482
    assert apply_rounding(487, None) == 487
