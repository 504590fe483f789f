from __future__ import annotations

from typing import List, Optional, Protocol

from .model import MonthlyValue


class MonthlyValueRepository(Protocol):
    def get(self, employee_id: str, year: int, month: int) -> Optional[MonthlyValue]:
        raise NotImplementedError

    def replace(self, value: MonthlyValue) -> MonthlyValue:
        """Upsert the whole record for (employee_id, year, month)."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> List[MonthlyValue]:
        raise NotImplementedError
