from __future__ import annotations

from dataclasses import fields
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, to_decimal
from .model import VacationBalance
from .repository import VacationBalanceRepository

_COLUMNS = tuple(f.name for f in fields(VacationBalance))


class MySQLVacationBalanceRepository(VacationBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: str, year: int) -> Optional[VacationBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM vacation_balances WHERE employee_id=%s AND year=%s",
                (employee_id, int(year)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return VacationBalance(
                employee_id=str(r["employee_id"]),
                year=int(r["year"]),
                months_active=int(r["months_active"]),
                **{
                    col: to_decimal(r[col])
                    for col in _COLUMNS
                    if col not in {"employee_id", "year", "months_active"}
                },
            )

    def replace(self, balance: VacationBalance) -> VacationBalance:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"REPLACE INTO vacation_balances({', '.join(_COLUMNS)}) VALUES({', '.join(['%s'] * len(_COLUMNS))})",
                tuple(getattr(balance, col) for col in _COLUMNS),
            )
        return balance
