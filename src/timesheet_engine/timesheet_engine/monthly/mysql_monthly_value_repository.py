from __future__ import annotations

from dataclasses import fields
from typing import List, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_codes, fetchall, fetchone, load_codes, to_decimal
from .model import MonthlyValue
from .repository import MonthlyValueRepository

_COLUMNS = tuple(f.name for f in fields(MonthlyValue))
_DECIMAL_COLUMNS = {"vacation_start", "vacation_taken", "vacation_end"}
_PASSTHROUGH = {"employee_id", "closed_at", "closed_by", "reopened_at", "reopened_by"}


def _to_value(r: dict) -> MonthlyValue:
    data = {}
    for col in _COLUMNS:
        raw = r.get(col)
        if col in _PASSTHROUGH:
            data[col] = raw
        elif col in _DECIMAL_COLUMNS:
            data[col] = to_decimal(raw)
        elif col == "warnings":
            data[col] = load_codes(raw)
        elif col == "is_closed":
            data[col] = bool(raw)
        else:
            data[col] = int(raw or 0)
    return MonthlyValue(**data)


def _to_params(value: MonthlyValue) -> tuple:
    out = []
    for col in _COLUMNS:
        raw = getattr(value, col)
        if col == "warnings":
            raw = dump_codes(raw)
        elif col == "is_closed":
            raw = int(raw)
        out.append(raw)
    return tuple(out)


class MySQLMonthlyValueRepository(MonthlyValueRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: str, year: int, month: int) -> Optional[MonthlyValue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM monthly_values WHERE employee_id=%s AND year=%s AND month=%s",
                (employee_id, int(year), int(month)),
            )
            r = fetchone(cur)
            return _to_value(r) if r else None

    def replace(self, value: MonthlyValue) -> MonthlyValue:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"REPLACE INTO monthly_values({', '.join(_COLUMNS)}) VALUES({', '.join(['%s'] * len(_COLUMNS))})",
                _to_params(value),
            )
        return value

    def list_for_employee(self, employee_id: str) -> List[MonthlyValue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM monthly_values WHERE employee_id=%s ORDER BY year, month",
                (employee_id,),
            )
            return [_to_value(r) for r in fetchall(cur)]
