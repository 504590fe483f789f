from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol

from .model import AbsenceType, Employee, Holiday, Schedule, Tariff


class MasterDataRepository(Protocol):
    """Read-only lookups for schedule/tariff/absence-type/holiday master data."""

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_tariff(self, tariff_id: str) -> Optional[Tariff]:
        raise NotImplementedError

    def get_schedule(self, schedule_id: str) -> Optional[Schedule]:
        raise NotImplementedError

    def schedule_for(self, employee_id: str, day: date) -> Optional[Schedule]:
        """Resolve the day plan for an employee-date (override first, then week plan)."""

        raise NotImplementedError

    def schedules(self) -> Mapping[str, Schedule]:
        raise NotImplementedError

    def get_absence_type(self, code: str) -> Optional[AbsenceType]:
        raise NotImplementedError

    def get_holiday(self, day: date) -> Optional[Holiday]:
        raise NotImplementedError
