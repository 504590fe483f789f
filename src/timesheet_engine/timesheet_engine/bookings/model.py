from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Tuple

from ..core.enums import PairKind, PunchSource, PunchType
from ..core.issues import CalcIssue


@dataclass(frozen=True)
class Punch:
    """Thực thể miền (domain): Một lần chấm công.

    Times are minutes from local midnight of `punch_date`. Re-dated punches
    (day change) may fall outside 0..1440.
    """

    punch_id: str
    employee_id: str
    punch_date: date
    punch_type: PunchType
    original_minutes: int
    edited_minutes: Optional[int] = None
    calculated_minutes: Optional[int] = None
    source: PunchSource = PunchSource.TERMINAL

    @property
    def minutes(self) -> int:
        """Effective booked time: the edited value when present."""
        return self.original_minutes if self.edited_minutes is None else self.edited_minutes

    @property
    def effective_minutes(self) -> int:
        """Calculated time when the pipeline has set one, else the booked time."""
        return self.minutes if self.calculated_minutes is None else self.calculated_minutes

    @property
    def kind(self) -> PairKind:
        return self.punch_type.kind

    @property
    def is_edited(self) -> bool:
        return self.edited_minutes is not None and self.edited_minutes != self.original_minutes

    def with_calculated(self, minutes: int) -> "Punch":
        return replace(self, calculated_minutes=int(minutes))

    def moved_to(self, new_date: date, offset_minutes: int) -> "Punch":
        """Re-date the punch, shifting its times so the absolute instant is unchanged."""
        return replace(
            self,
            punch_date=new_date,
            original_minutes=self.original_minutes + offset_minutes,
            edited_minutes=None if self.edited_minutes is None else self.edited_minutes + offset_minutes,
            calculated_minutes=None,
        )


@dataclass(frozen=True)
class Pair:
    kind: PairKind
    start: Punch
    end: Punch

    @property
    def duration(self) -> int:
        return self.end.effective_minutes - self.start.effective_minutes


@dataclass(frozen=True)
class PairingResult:
    pairs: Tuple[Pair, ...]
    issues: Tuple[CalcIssue, ...]
    unpaired: Tuple[Punch, ...]
