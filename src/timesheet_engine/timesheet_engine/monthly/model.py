from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class MonthlyValue:
    """Thực thể miền (domain): Tổng hợp công và tài khoản giờ linh hoạt theo tháng.

    `flextime_end` is start + change before any evaluation rule;
    `flextime_carryover` is what the next month starts with.
    """

    employee_id: str
    year: int
    month: int
    total_gross_minutes: int = 0
    total_net_minutes: int = 0
    total_target_minutes: int = 0
    total_overtime_minutes: int = 0
    total_undertime_minutes: int = 0
    total_break_minutes: int = 0
    flextime_start: int = 0
    flextime_change: int = 0
    flextime_end: int = 0
    flextime_carryover: int = 0
    flextime_credited: int = 0
    flextime_forfeited: int = 0
    work_days: int = 0
    days_with_errors: int = 0
    vacation_start: Decimal = Decimal("0")
    vacation_taken: Decimal = Decimal("0")
    vacation_end: Decimal = Decimal("0")
    sick_days: int = 0
    other_absence_days: int = 0
    warnings: Tuple[str, ...] = ()
    is_closed: bool = False
    closed_at: Optional[datetime] = None
    closed_by: Optional[str] = None
    reopened_at: Optional[datetime] = None
    reopened_by: Optional[str] = None

    @property
    def key(self) -> Tuple[str, int, int]:
        return self.employee_id, self.year, self.month
