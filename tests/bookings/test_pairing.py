from src.timesheet_engine.timesheet_engine.bookings.pairing import pair_punches
from src.timesheet_engine.timesheet_engine.core.enums import ErrorCode, PairKind, PunchType

from tests.fakes import hm, punch


def test_pairs_main_and_break():
    punches = [
        punch("p1", PunchType.ARRIVE, hm(8)),
        punch("p2", PunchType.BREAK_START, hm(12)),
        punch("p3", PunchType.BREAK_END, hm(12, 30)),
        punch("p4", PunchType.LEAVE, hm(17)),
    ]

    result = pair_punches(punches)

    assert result.issues == ()
    assert {(p.kind, p.start.punch_id, p.end.punch_id) for p in result.pairs} == {
        (PairKind.MAIN, "p1", "p4"),
        (PairKind.BREAK, "p2", "p3"),
    }


def test_second_start_replaces_pending_one():
    punches = [
        punch("a1", PunchType.ARRIVE, hm(7)),
        punch("a2", PunchType.ARRIVE, hm(8)),
        punch("l1", PunchType.LEAVE, hm(16)),
    ]

    result = pair_punches(punches)

    assert [(i.code, i.punch_id) for i in result.issues] == [(ErrorCode.UNPAIRED_BOOKING, "a1")]
    assert len(result.pairs) == 1
    assert result.pairs[0].start.punch_id == "a2"


def test_end_without_start_is_unpaired():
    result = pair_punches([punch("l1", PunchType.LEAVE, hm(16))])

    assert result.pairs == ()
    assert [(i.code, i.punch_id) for i in result.issues] == [(ErrorCode.UNPAIRED_BOOKING, "l1")]


def test_start_left_pending_is_missing_end():
    result = pair_punches([punch("a1", PunchType.ARRIVE, hm(8))])

    assert result.pairs == ()
    assert [i.code for i in result.issues] == [ErrorCode.MISSING_END_BOOKING]
    assert [p.punch_id for p in result.unpaired] == ["a1"]


def test_sorts_by_edited_time():
    punches = [
        punch("l1", PunchType.LEAVE, hm(17)),
        punch("a1", PunchType.ARRIVE, hm(18), edited=hm(8)),
    ]

    result = pair_punches(punches)

    assert result.issues == ()
    assert result.pairs[0].start.punch_id == "a1"


def test_leave_and_arrive_at_same_minute_make_two_pairs():
    punches = [
        punch("a2", PunchType.ARRIVE, hm(12)),
        punch("a1", PunchType.ARRIVE, hm(8)),
        punch("l2", PunchType.LEAVE, hm(16)),
        punch("l1", PunchType.LEAVE, hm(12)),
    ]

    result = pair_punches(punches)

    assert result.issues == ()
    assert [(p.start.punch_id, p.end.punch_id) for p in result.pairs] == [("a1", "l1"), ("a2", "l2")]


def test_result_does_not_depend_on_input_order():
    punches = [
        punch("a", PunchType.ARRIVE, hm(8)),
        punch("b", PunchType.ARRIVE, hm(8)),
        punch("c", PunchType.LEAVE, hm(12)),
        punch("d", PunchType.TRIP_START, hm(9)),
    ]

    assert pair_punches(punches) == pair_punches(list(reversed(punches)))
