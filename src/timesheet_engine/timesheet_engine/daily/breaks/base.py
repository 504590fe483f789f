from __future__ import annotations

from abc import ABC, abstractmethod

from ...masterdata.model import BreakRule


class BreakStrategy(ABC):
    """Strategy Pattern: how one break rule contributes to the day's deduction."""

    @abstractmethod
    def deduct(self, *, rule: BreakRule, gross_minutes: int, break_booked: bool) -> int:
        raise NotImplementedError
