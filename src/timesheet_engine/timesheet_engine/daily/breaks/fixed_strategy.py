from __future__ import annotations

from ...masterdata.model import BreakRule
from .base import BreakStrategy


class FixedBreakStrategy(BreakStrategy):
    """Always deducted, booked or not."""

    def deduct(self, *, rule: BreakRule, gross_minutes: int, break_booked: bool) -> int:
        return rule.duration_minutes
