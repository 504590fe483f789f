from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..core.exceptions import ValidationError

ALLOWED_PORTIONS = (Decimal("0"), Decimal("0.5"), Decimal("1"))


@dataclass(frozen=True)
class AbsenceDay:
    """Thực thể miền (domain): Một ngày vắng mặt đã được duyệt.

    `portion` is the credited share of the day (0, 1/2 or 1);
    `vacation_deduction` is the amount taken off the vacation balance.
    """

    employee_id: str
    absence_date: date
    absence_code: str
    portion: Decimal = Decimal("1")
    vacation_deduction: Decimal = Decimal("0")

    def __post_init__(self):
        if Decimal(self.portion) not in ALLOWED_PORTIONS:
            raise ValidationError("portion must be 0, 0.5 or 1")
        if Decimal(self.vacation_deduction) < 0:
            raise ValidationError("vacation_deduction must not be negative")
