from src.timesheet_engine.timesheet_engine.bookings.model import Punch
from src.timesheet_engine.timesheet_engine.bookings.pairing import pair_punches
from src.timesheet_engine.timesheet_engine.bookings.tolerance import apply_tolerance
from src.timesheet_engine.timesheet_engine.core.enums import ErrorCode, PunchSource, PunchType, RoundingMode
from src.timesheet_engine.timesheet_engine.masterdata.model import RoundingRule, ToleranceConfig

from tests.fakes import DAY, EMP, fixed_schedule, flex_schedule, hm, punch


def _calc(schedule, *punches):
    result = apply_tolerance(pair_punches(list(punches)).pairs, schedule)
    times = [(p.start.calculated_minutes, p.end.calculated_minutes) for p in result.pairs]
    return result, times


def _day(arrive, leave):
    return punch("a", PunchType.ARRIVE, arrive), punch("l", PunchType.LEAVE, leave)


def test_flextime_inside_windows_is_unchanged():
    result, times = _calc(flex_schedule(), *_day(hm(8, 3), hm(17, 12)))

    assert times == [(hm(8, 3), hm(17, 12))]
    assert result.issues == ()
    assert result.capped_minutes == 0


def test_flextime_early_arrival_is_clamped_and_flagged():
    result, times = _calc(flex_schedule(), *_day(hm(6, 30), hm(16)))

    assert times == [(hm(7), hm(16))]
    assert [(i.code, i.punch_id) for i in result.issues] == [(ErrorCode.CORE_TIME_VIOLATION, "a")]
    assert result.capped_minutes == 30


def test_flextime_arrival_floor_includes_come_minus():
    schedule = flex_schedule(tolerance=ToleranceConfig(come_minus=15))

    result, times = _calc(schedule, *_day(hm(6, 50), hm(16)))

    assert times == [(hm(6, 50), hm(16))]
    assert result.issues == ()


def test_flextime_late_arrival_is_flagged_but_kept():
    result, times = _calc(flex_schedule(), *_day(hm(9, 30), hm(17)))

    assert times == [(hm(9, 30), hm(17))]
    assert [i.code for i in result.issues] == [ErrorCode.CORE_TIME_VIOLATION]


def test_flextime_early_departure_is_flagged_but_kept():
    result, times = _calc(flex_schedule(), *_day(hm(8), hm(14)))

    assert times == [(hm(8), hm(14))]
    assert [(i.code, i.punch_id) for i in result.issues] == [(ErrorCode.CORE_TIME_VIOLATION, "l")]


def test_flextime_late_departure_is_capped():
    result, times = _calc(flex_schedule(), *_day(hm(8), hm(19, 30)))

    assert times == [(hm(8), hm(19))]
    assert result.capped_minutes == 30
    assert [i.code for i in result.issues] == [ErrorCode.CORE_TIME_VIOLATION]


def test_fixed_arrival_within_tolerance_snaps_to_target():
    schedule = fixed_schedule(tolerance=ToleranceConfig(come_minus=5, come_plus=5))

    for booked in (hm(7, 57), hm(8, 4)):
        result, times = _calc(schedule, *_day(booked, hm(16, 30)))
        assert times[0][0] == hm(8)
        assert result.issues == ()


def test_fixed_late_arrival_is_violation():
    schedule = fixed_schedule(tolerance=ToleranceConfig(come_minus=5, come_plus=5))

    result, times = _calc(schedule, *_day(hm(8, 10), hm(16, 30)))

    assert times[0][0] == hm(8, 10)
    assert [(i.code, i.punch_id) for i in result.issues] == [(ErrorCode.CORE_TIME_VIOLATION, "a")]


def test_fixed_early_arrival_is_rounded():
    schedule = fixed_schedule(
        tolerance=ToleranceConfig(come_minus=5),
        rounding_come=RoundingRule(mode=RoundingMode.UP, interval_minutes=15),
    )

    result, times = _calc(schedule, *_day(hm(7, 40), hm(16, 30)))

    assert times[0][0] == hm(7, 45)
    assert result.issues == ()


def test_fixed_departure_rules():
    schedule = fixed_schedule(
        tolerance=ToleranceConfig(go_minus=5, go_plus=5),
        rounding_go=RoundingRule(mode=RoundingMode.DOWN, interval_minutes=15),
    )

    early, early_times = _calc(schedule, *_day(hm(8), hm(16, 20)))
    assert early_times[0][1] == hm(16, 20)
    assert [i.code for i in early.issues] == [ErrorCode.CORE_TIME_VIOLATION]

    _, snapped = _calc(schedule, *_day(hm(8), hm(16, 33)))
    assert snapped[0][1] == hm(16, 30)

    late, late_times = _calc(schedule, *_day(hm(8), hm(16, 50)))
    assert late_times[0][1] == hm(16, 45)
    assert late.issues == ()


def test_rounding_applies_to_boundaries_unless_configured_for_all():
    punches = (
        punch("a1", PunchType.ARRIVE, hm(7, 52)),
        punch("l1", PunchType.LEAVE, hm(12)),
        punch("a2", PunchType.ARRIVE, hm(12, 38)),
        punch("l2", PunchType.LEAVE, hm(17)),
    )
    boundary_only = flex_schedule(rounding_come=RoundingRule(mode=RoundingMode.UP, interval_minutes=15))
    everywhere = flex_schedule(
        rounding_come=RoundingRule(mode=RoundingMode.UP, interval_minutes=15, apply_to_all_punches=True)
    )

    _, times = _calc(boundary_only, *punches)
    assert times == [(hm(8), hm(12)), (hm(12, 38), hm(17))]

    _, times = _calc(everywhere, *punches)
    assert times == [(hm(8), hm(12)), (hm(12, 45), hm(17))]


def test_end_never_before_start():
    result, times = _calc(flex_schedule(), *_day(hm(6), hm(6, 30)))

    start, end = times[0]
    assert end >= start
    assert result.pairs[0].duration == 0


def test_break_pairs_keep_booked_times():
    punches = (
        punch("a", PunchType.ARRIVE, hm(6)),
        punch("bs", PunchType.BREAK_START, hm(6, 10)),
        punch("be", PunchType.BREAK_END, hm(6, 40)),
        punch("l", PunchType.LEAVE, hm(16)),
    )

    result, _ = _calc(flex_schedule(), *punches)

    brk = [p for p in result.pairs if p.start.punch_id == "bs"][0]
    assert (brk.start.calculated_minutes, brk.end.calculated_minutes) == (hm(6, 10), hm(6, 40))


def test_departure_moved_from_next_day_is_checked_against_its_clock_time():
    night = flex_schedule(come_from=hm(21), come_to=hm(23), go_from=hm(5), go_to=hm(7))

    result, times = _calc(night, *_day(hm(22), hm(24) + hm(6)))

    assert times == [(hm(22), hm(30))]
    assert result.issues == ()


def test_auto_complete_markers_are_taken_as_booked():
    night = flex_schedule(come_from=hm(21), come_to=hm(23), go_from=hm(5), go_to=hm(7))
    marker = Punch(
        punch_id="a:auto-leave",
        employee_id=EMP,
        punch_date=DAY,
        punch_type=PunchType.LEAVE,
        original_minutes=hm(24),
        source=PunchSource.AUTO_COMPLETE,
    )

    result, times = _calc(night, punch("a", PunchType.ARRIVE, hm(22)), marker)

    assert times == [(hm(22), hm(24))]
    assert result.issues == ()
