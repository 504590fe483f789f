from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..bookings.model import Punch
from ..core.constants import MINUTES_PER_DAY
from ..core.enums import ErrorCode, PunchType
from ..core.issues import CalcIssue, issue
from ..masterdata.model import Schedule, ShiftWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftDecision:
    schedule: Schedule
    switched: bool = False
    issues: Tuple[CalcIssue, ...] = ()


def in_window(minutes: int, start: int, end: int) -> bool:
    """Membership test on the 24h clock; `start > end` wraps midnight."""
    m = minutes % MINUTES_PER_DAY
    if start <= end:
        return start <= m <= end
    return m >= start or m <= end


def window_matches(window: Optional[ShiftWindow], arrival: int, departure: Optional[int]) -> bool:
    if window is None:
        return False
    if not in_window(arrival, window.from_minutes, window.to_minutes):
        return False
    if window.has_departure_window:
        if departure is None:
            return False
        return in_window(departure, window.depart_from, window.depart_to)
    return True


class ShiftDetector:
    """Pick the effective day plan from the first (and optionally last) punch of the day."""

    def __init__(self, resolve_schedule: Callable[[str], Optional[Schedule]]):
        self.resolve_schedule = resolve_schedule

    def _candidates(self, base: Schedule) -> Iterable[Schedule]:
        yield base
        for schedule_id in base.shift_detection.alternatives:
            alt = self.resolve_schedule(schedule_id)
            if alt is None:
                logger.debug("Skipping unknown alternative schedule %s", schedule_id)
                continue
            yield alt

    def detect(self, base: Schedule, punches: Sequence[Punch]) -> ShiftDecision:
        if not base.shift_detection_enabled or not punches:
            return ShiftDecision(schedule=base)

        arrival = min(p.minutes for p in punches)
        leaves: List[int] = [p.minutes for p in punches if p.punch_type == PunchType.LEAVE]
        departure = max(leaves) if leaves else None

        for candidate in self._candidates(base):
            window = candidate.shift_detection.window if candidate.shift_detection else None
            if window_matches(window, arrival, departure):
                if candidate.schedule_id == base.schedule_id:
                    return ShiftDecision(schedule=base)
                return ShiftDecision(
                    schedule=candidate,
                    switched=True,
                    issues=(issue(ErrorCode.SHIFT_SWITCHED, message=f"Alternative shift {candidate.code} detected"),),
                )

        return ShiftDecision(schedule=base, issues=(issue(ErrorCode.NO_MATCHING_SHIFT),))
