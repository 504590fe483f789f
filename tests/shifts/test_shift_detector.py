from src.timesheet_engine.timesheet_engine.core.enums import ErrorCode, PunchType
from src.timesheet_engine.timesheet_engine.masterdata.model import ShiftDetection, ShiftWindow
from src.timesheet_engine.timesheet_engine.shifts.detector import ShiftDetector, in_window

from tests.fakes import fixed_schedule, hm, punch


def _plans():
    early = fixed_schedule(
        schedule_id="EARLY",
        code="EARLY",
        come_from=hm(6),
        go_from=hm(14),
        shift_detection=ShiftDetection(window=ShiftWindow(hm(5), hm(7)), alternatives=("LATE", "NIGHT", "GONE")),
    )
    late = fixed_schedule(
        schedule_id="LATE",
        code="LATE",
        come_from=hm(14),
        go_from=hm(22),
        shift_detection=ShiftDetection(window=ShiftWindow(hm(13), hm(15))),
    )
    night = fixed_schedule(
        schedule_id="NIGHT",
        code="NIGHT",
        come_from=hm(22),
        go_from=hm(6),
        shift_detection=ShiftDetection(window=ShiftWindow(hm(21), hm(1))),
    )
    plans = {s.schedule_id: s for s in (early, late, night)}
    return early, ShiftDetector(plans.get)


def test_window_wraps_midnight():
    assert in_window(hm(23), hm(22), hm(2))
    assert in_window(hm(1), hm(22), hm(2))
    assert not in_window(hm(12), hm(22), hm(2))


def test_base_plan_kept_when_its_window_matches():
    base, detector = _plans()

    decision = detector.detect(base, [punch("a", PunchType.ARRIVE, hm(6, 10))])

    assert decision.schedule is base
    assert not decision.switched
    assert decision.issues == ()


def test_switches_to_first_matching_alternative():
    base, detector = _plans()

    decision = detector.detect(base, [punch("a", PunchType.ARRIVE, hm(14, 5)), punch("l", PunchType.LEAVE, hm(22))])

    assert decision.schedule.schedule_id == "LATE"
    assert decision.switched
    assert [i.code for i in decision.issues] == [ErrorCode.SHIFT_SWITCHED]


def test_wrapping_alternative_window():
    base, detector = _plans()

    decision = detector.detect(base, [punch("a", PunchType.ARRIVE, hm(21, 45))])

    assert decision.schedule.schedule_id == "NIGHT"


def test_no_match_keeps_base_and_reports_error():
    base, detector = _plans()

    decision = detector.detect(base, [punch("a", PunchType.ARRIVE, hm(10))])

    assert decision.schedule is base
    assert [i.code for i in decision.issues] == [ErrorCode.NO_MATCHING_SHIFT]


def test_departure_window_must_match_when_configured():
    base, detector = _plans()
    strict = fixed_schedule(
        shift_detection=ShiftDetection(window=ShiftWindow(hm(7), hm(9), depart_from=hm(15), depart_to=hm(18)))
    )

    ok = detector.detect(strict, [punch("a", PunchType.ARRIVE, hm(8)), punch("l", PunchType.LEAVE, hm(16))])
    bad = detector.detect(strict, [punch("a", PunchType.ARRIVE, hm(8)), punch("l", PunchType.LEAVE, hm(20))])

    assert ok.issues == ()
    assert [i.code for i in bad.issues] == [ErrorCode.NO_MATCHING_SHIFT]


def test_detection_disabled_returns_base():
    _, detector = _plans()
    plain = fixed_schedule()

    decision = detector.detect(plain, [punch("a", PunchType.ARRIVE, hm(3))])

    assert decision.schedule is plain
    assert decision.issues == ()
