from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from .model import DailyValue


class DailyValueRepository(Protocol):
    def get(self, employee_id: str, day: date) -> Optional[DailyValue]:
        raise NotImplementedError

    def replace(self, value: DailyValue) -> DailyValue:
        """Upsert the whole record for (employee_id, value_date)."""

        raise NotImplementedError

    def list_for_employee_range(self, employee_id: str, start: date, end: date) -> List[DailyValue]:
        raise NotImplementedError
