from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.issues import CalcIssue


@dataclass(frozen=True)
class SurchargeMinutes:
    account_code: str
    minutes: int


@dataclass(frozen=True)
class DailyValue:
    """Thực thể miền (domain): Kết quả tính công của một nhân viên trong một ngày.

    Always replaced as a whole for (employee_id, value_date). Carries no
    calculation timestamp, so unchanged inputs give an equal record.
    """

    employee_id: str
    value_date: date
    schedule_id: Optional[str]
    gross_minutes: int = 0
    net_minutes: int = 0
    target_minutes: int = 0
    overtime_minutes: int = 0
    undertime_minutes: int = 0
    break_minutes: int = 0
    capped_minutes: int = 0
    trip_minutes: int = 0
    first_come: Optional[int] = None
    last_go: Optional[int] = None
    punch_count: int = 0
    is_manually_changed: bool = False
    has_error: bool = False
    error_codes: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    absence_code: Optional[str] = None
    holiday_name: Optional[str] = None
    issues: Tuple[CalcIssue, ...] = ()
    surcharges: Tuple[SurchargeMinutes, ...] = ()

    @property
    def balance_minutes(self) -> int:
        return self.overtime_minutes - self.undertime_minutes
