from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from ...core.enums import NoPunchPolicy
from .base import NoPunchStrategy
from .strategies import CreditTargetStrategy, DeductTargetStrategy, ErrorStrategy, VocationalSchoolStrategy

_STRATEGIES: Dict[NoPunchPolicy, NoPunchStrategy] = {
    NoPunchPolicy.ERROR: ErrorStrategy(),
    NoPunchPolicy.DEDUCT_TARGET: DeductTargetStrategy(),
    NoPunchPolicy.CREDIT_TARGET: CreditTargetStrategy(),
    NoPunchPolicy.VOCATIONAL: VocationalSchoolStrategy(),
}

if set(_STRATEGIES) != set(NoPunchPolicy):
    raise RuntimeError("no-punch strategy missing for some NoPunchPolicy")


@dataclass
class NoPunchStrategyFactory:
    """Factory Pattern: one handler per no-punch policy."""

    def for_policy(self, policy: NoPunchPolicy) -> NoPunchStrategy:
        return _STRATEGIES[policy]
