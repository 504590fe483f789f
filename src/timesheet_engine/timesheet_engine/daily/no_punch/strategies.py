from __future__ import annotations

from ...core.enums import ErrorCode
from ...core.issues import issue
from .base import NoPunchOutcome, NoPunchStrategy


class ErrorStrategy(NoPunchStrategy):
    """Flag the day for correction; target stays open as undertime."""

    def evaluate(self, *, target_minutes: int, has_punches: bool) -> NoPunchOutcome:
        # Days with unpaired punches already carry their pairing errors.
        if has_punches:
            return NoPunchOutcome(gross_minutes=0, net_minutes=0)
        return NoPunchOutcome(gross_minutes=0, net_minutes=0, issues=(issue(ErrorCode.NO_BOOKINGS),))


class DeductTargetStrategy(NoPunchStrategy):
    def evaluate(self, *, target_minutes: int, has_punches: bool) -> NoPunchOutcome:
        return NoPunchOutcome(gross_minutes=0, net_minutes=0, issues=(issue(ErrorCode.NO_BOOKINGS_DEDUCTED),))


class CreditTargetStrategy(NoPunchStrategy):
    """Target time counts as worked."""

    def evaluate(self, *, target_minutes: int, has_punches: bool) -> NoPunchOutcome:
        return NoPunchOutcome(
            gross_minutes=target_minutes,
            net_minutes=target_minutes,
            issues=(issue(ErrorCode.NO_BOOKINGS_CREDITED),),
        )


class VocationalSchoolStrategy(NoPunchStrategy):
    def evaluate(self, *, target_minutes: int, has_punches: bool) -> NoPunchOutcome:
        return NoPunchOutcome(
            gross_minutes=target_minutes,
            net_minutes=target_minutes,
            issues=(issue(ErrorCode.VOCATIONAL_SCHOOL),),
        )
