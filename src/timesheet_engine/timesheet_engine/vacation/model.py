from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class VacationBalance:
    """Thực thể miền (domain): Số ngày phép năm của một nhân viên."""

    employee_id: str
    year: int
    base_entitlement: Decimal
    special_entitlement: Decimal
    months_active: int
    proration_factor: Decimal
    part_time_factor: Decimal
    total_entitlement: Decimal
    carryover_in: Decimal
    carryover_capped: Decimal
    forfeited: Decimal
    taken: Decimal
    remaining: Decimal

    @property
    def available(self) -> Decimal:
        """Days granted for the year before anything is taken."""
        return self.total_entitlement + self.carryover_capped - self.forfeited
