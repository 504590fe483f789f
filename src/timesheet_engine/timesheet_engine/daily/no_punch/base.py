from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple

from ...core.issues import CalcIssue


@dataclass(frozen=True)
class NoPunchOutcome:
    gross_minutes: int
    net_minutes: int
    issues: Tuple[CalcIssue, ...] = ()


class NoPunchStrategy(ABC):
    """Strategy Pattern: what a working day without an arrival/departure pair is worth."""

    @abstractmethod
    def evaluate(self, *, target_minutes: int, has_punches: bool) -> NoPunchOutcome:
        raise NotImplementedError
