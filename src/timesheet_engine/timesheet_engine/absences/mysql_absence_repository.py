from __future__ import annotations

from datetime import date
from typing import List, Optional

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import AbsenceDay
from .repository import AbsenceRepository

_COLUMNS = "employee_id, absence_date, absence_code, portion, vacation_deduction"


def _to_absence(r: dict) -> AbsenceDay:
    return AbsenceDay(
        employee_id=str(r["employee_id"]),
        absence_date=r["absence_date"],
        absence_code=str(r["absence_code"]),
        portion=to_decimal(r["portion"]).normalize(),
        vacation_deduction=to_decimal(r["vacation_deduction"]),
    )


class MySQLAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: str, day: date) -> Optional[AbsenceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM absence_days WHERE employee_id=%s AND absence_date=%s",
                (employee_id, day),
            )
            r = fetchone(cur)
            return _to_absence(r) if r else None

    def list_for_employee_range(self, employee_id: str, start: date, end: date) -> List[AbsenceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM absence_days
                WHERE employee_id=%s AND absence_date BETWEEN %s AND %s
                ORDER BY absence_date
                """,
                (employee_id, start, end),
            )
            return [_to_absence(r) for r in fetchall(cur)]

    def add(self, absence: AbsenceDay) -> AbsenceDay:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT IGNORE INTO absence_days({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    absence.employee_id,
                    absence.absence_date,
                    absence.absence_code,
                    absence.portion,
                    absence.vacation_deduction,
                ),
            )
            if cur.rowcount != 1:
                raise ValidationError(
                    f"Employee {absence.employee_id} already has an absence on {absence.absence_date.isoformat()}"
                )
        return absence

    def delete(self, employee_id: str, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM absence_days WHERE employee_id=%s AND absence_date=%s", (employee_id, day))
            return cur.rowcount > 0
