from __future__ import annotations

from ...masterdata.model import BreakRule
from .base import BreakStrategy


class VariableBreakStrategy(BreakStrategy):
    """Only deducted when the employee booked no break; booked time replaces it."""

    def deduct(self, *, rule: BreakRule, gross_minutes: int, break_booked: bool) -> int:
        if break_booked:
            return 0
        return rule.duration_minutes
