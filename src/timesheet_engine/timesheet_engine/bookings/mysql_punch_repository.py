from __future__ import annotations

from datetime import date
from typing import Iterable, List

from ..core.enums import PunchSource, PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Punch
from .repository import PunchRepository


def _to_punch(r: dict) -> Punch:
    return Punch(
        punch_id=str(r["punch_id"]),
        employee_id=str(r["employee_id"]),
        punch_date=r["punch_date"],
        punch_type=PunchType(r["punch_type"]),
        original_minutes=int(r["original_minutes"]),
        edited_minutes=None if r.get("edited_minutes") is None else int(r["edited_minutes"]),
        calculated_minutes=None if r.get("calculated_minutes") is None else int(r["calculated_minutes"]),
        source=PunchSource(r.get("source") or PunchSource.TERMINAL.value),
    )


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee_range(self, employee_id: str, start: date, end: date) -> List[Punch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT punch_id, employee_id, punch_date, punch_type, original_minutes,
                       edited_minutes, calculated_minutes, source
                FROM punches
                WHERE employee_id=%s AND punch_date BETWEEN %s AND %s
                ORDER BY punch_date, COALESCE(edited_minutes, original_minutes), punch_id
                """,
                (employee_id, start, end),
            )
            return [_to_punch(r) for r in fetchall(cur)]

    def add_if_absent(self, punch: Punch) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO punches(
                    punch_id, employee_id, punch_date, punch_type, original_minutes, edited_minutes, source
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    punch.punch_id,
                    punch.employee_id,
                    punch.punch_date,
                    punch.punch_type.value,
                    punch.original_minutes,
                    punch.edited_minutes,
                    punch.source.value,
                ),
            )
            return cur.rowcount == 1

    def update_calculated(self, punches: Iterable[Punch]) -> None:
        rows = [(p.calculated_minutes, p.punch_id) for p in punches]
        if not rows:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany("UPDATE punches SET calculated_minutes=%s WHERE punch_id=%s", rows)
