from __future__ import annotations

from datetime import date
from typing import Iterable, List, Protocol

from .model import Punch


class PunchRepository(Protocol):
    def list_for_employee_range(self, employee_id: str, start: date, end: date) -> List[Punch]:
        raise NotImplementedError

    def add_if_absent(self, punch: Punch) -> bool:
        """Insert unless a punch with the same id exists. Returns True when inserted."""

        raise NotImplementedError

    def update_calculated(self, punches: Iterable[Punch]) -> None:
        """Persist calculated_minutes only; original and edited values are left alone."""

        raise NotImplementedError
