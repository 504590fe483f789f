from __future__ import annotations

from ...masterdata.model import BreakRule
from .base import BreakStrategy


class MinimumBreakStrategy(BreakStrategy):
    """Deducted once gross time exceeds the rule's threshold."""

    def deduct(self, *, rule: BreakRule, gross_minutes: int, break_booked: bool) -> int:
        after = rule.after_minutes or 0
        if gross_minutes <= after:
            return 0
        if rule.only_deduct_overage:
            return min(gross_minutes - after, rule.duration_minutes)
        return rule.duration_minutes
