from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from .model import AbsenceDay


class AbsenceRepository(Protocol):
    def get(self, employee_id: str, day: date) -> Optional[AbsenceDay]:
        raise NotImplementedError

    def list_for_employee_range(self, employee_id: str, start: date, end: date) -> List[AbsenceDay]:
        raise NotImplementedError

    def add(self, absence: AbsenceDay) -> AbsenceDay:
        """Store a new absence; one absence per employee and date."""

        raise NotImplementedError

    def delete(self, employee_id: str, day: date) -> bool:
        raise NotImplementedError
