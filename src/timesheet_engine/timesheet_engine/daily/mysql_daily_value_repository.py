from __future__ import annotations

import json
from datetime import date
from typing import List, Optional

from ..core.enums import ErrorCode, Severity
from ..core.issues import CalcIssue
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_codes, fetchall, fetchone, load_codes
from .model import DailyValue, SurchargeMinutes
from .repository import DailyValueRepository

_COLUMNS = (
    "employee_id",
    "value_date",
    "schedule_id",
    "gross_minutes",
    "net_minutes",
    "target_minutes",
    "overtime_minutes",
    "undertime_minutes",
    "break_minutes",
    "capped_minutes",
    "trip_minutes",
    "first_come",
    "last_go",
    "punch_count",
    "is_manually_changed",
    "has_error",
    "error_codes",
    "warnings",
    "issues",
    "absence_code",
    "holiday_name",
    "surcharges",
)
_INT_COLUMNS = (
    "gross_minutes",
    "net_minutes",
    "target_minutes",
    "overtime_minutes",
    "undertime_minutes",
    "break_minutes",
    "capped_minutes",
    "trip_minutes",
    "punch_count",
)


def _dump_issues(value: DailyValue) -> str:
    return json.dumps(
        [
            {"code": i.code.value, "severity": i.severity.value, "message": i.message, "punch_id": i.punch_id}
            for i in value.issues
        ]
    )


def _load_issues(raw) -> tuple:
    return tuple(
        CalcIssue(
            code=ErrorCode(i["code"]),
            severity=Severity(i["severity"]),
            message=i.get("message") or "",
            punch_id=i.get("punch_id"),
        )
        for i in load_codes(raw)
    )


def _to_value(r: dict) -> DailyValue:
    return DailyValue(
        employee_id=str(r["employee_id"]),
        value_date=r["value_date"],
        schedule_id=r.get("schedule_id"),
        **{col: int(r[col] or 0) for col in _INT_COLUMNS},
        first_come=r.get("first_come"),
        last_go=r.get("last_go"),
        is_manually_changed=bool(r.get("is_manually_changed")),
        has_error=bool(r.get("has_error")),
        error_codes=load_codes(r.get("error_codes")),
        warnings=load_codes(r.get("warnings")),
        absence_code=r.get("absence_code"),
        holiday_name=r.get("holiday_name"),
        issues=_load_issues(r.get("issues")),
        surcharges=tuple(
            SurchargeMinutes(account_code=s["account_code"], minutes=int(s["minutes"]))
            for s in load_codes(r.get("surcharges"))
        ),
    )


class MySQLDailyValueRepository(DailyValueRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: str, day: date) -> Optional[DailyValue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM daily_values WHERE employee_id=%s AND value_date=%s",
                (employee_id, day),
            )
            r = fetchone(cur)
            return _to_value(r) if r else None

    def replace(self, value: DailyValue) -> DailyValue:
        params = (
            value.employee_id,
            value.value_date,
            value.schedule_id,
            *(getattr(value, col) for col in _INT_COLUMNS[:8]),
            value.first_come,
            value.last_go,
            value.punch_count,
            int(value.is_manually_changed),
            int(value.has_error),
            dump_codes(value.error_codes),
            dump_codes(value.warnings),
            _dump_issues(value),
            value.absence_code,
            value.holiday_name,
            json.dumps([{"account_code": s.account_code, "minutes": s.minutes} for s in value.surcharges]),
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"REPLACE INTO daily_values({', '.join(_COLUMNS)}) VALUES({', '.join(['%s'] * len(_COLUMNS))})",
                params,
            )
        return value

    def list_for_employee_range(self, employee_id: str, start: date, end: date) -> List[DailyValue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {', '.join(_COLUMNS)}
                FROM daily_values
                WHERE employee_id=%s AND value_date BETWEEN %s AND %s
                ORDER BY value_date
                """,
                (employee_id, start, end),
            )
            return [_to_value(r) for r in fetchall(cur)]
