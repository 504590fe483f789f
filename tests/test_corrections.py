from dataclasses import replace
from datetime import date

from src.timesheet_engine.timesheet_engine.core.enums import ErrorCode, Severity
from src.timesheet_engine.timesheet_engine.core.issues import issue
from src.timesheet_engine.timesheet_engine.corrections.sink import (
    InMemoryCorrectionSink,
    LoggingCorrectionSink,
    items_for,
)

from tests.fakes import daily


def _value(day, *codes):
    return replace(daily(day), issues=tuple(issue(c) for c in codes))


def test_items_for_skips_hints():
    value = _value(date(2025, 3, 4), ErrorCode.MISSING_GO, ErrorCode.CORE_TIME_VIOLATION, ErrorCode.HOLIDAY)

    items = items_for(value)

    assert [(i.code, i.severity) for i in items] == [
        ("MISSING_GO", Severity.ERROR),
        ("CORE_TIME_VIOLATION", Severity.WARNING),
    ]


def _report(sink, value):
    sink.replace_for_day(value.employee_id, value.value_date, items_for(value))


def test_sink_replaces_items_per_day(caplog):
    inner = InMemoryCorrectionSink()
    sink = LoggingCorrectionSink(inner)
    day = date(2025, 3, 4)

    _report(sink, _value(day, ErrorCode.MISSING_GO))
    _report(sink, _value(date(2025, 3, 5), ErrorCode.CORE_TIME_VIOLATION))
    assert len(inner.list_items()) == 2
    assert [i.code for i in inner.list_items(severity=Severity.ERROR)] == ["MISSING_GO"]
    assert "MISSING_GO" in caplog.text

    _report(sink, _value(day))
    assert [i.item_date for i in inner.list_items()] == [date(2025, 3, 5)]
    assert inner.list_items(employee_id="someone-else") == []
