from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

from ...core.enums import BreakKind
from ...masterdata.model import BreakRule
from .base import BreakStrategy
from .fixed_strategy import FixedBreakStrategy
from .minimum_strategy import MinimumBreakStrategy
from .variable_strategy import VariableBreakStrategy

_STRATEGIES: Dict[BreakKind, BreakStrategy] = {
    BreakKind.FIXED: FixedBreakStrategy(),
    BreakKind.VARIABLE: VariableBreakStrategy(),
    BreakKind.MINIMUM: MinimumBreakStrategy(),
}

if set(_STRATEGIES) != set(BreakKind):
    raise RuntimeError("break strategy missing for some BreakKind")


@dataclass
class BreakStrategyFactory:
    """Factory Pattern: choose the strategy for a break rule."""

    def for_rule(self, rule: BreakRule) -> BreakStrategy:
        return _STRATEGIES[rule.kind]


@dataclass(frozen=True)
class BreakResult:
    booked_minutes: int
    rule_minutes: int

    @property
    def total(self) -> int:
        return self.booked_minutes + self.rule_minutes


def calculate_breaks(
    *,
    gross_minutes: int,
    booked_break_minutes: int,
    rules: Iterable[BreakRule],
    factory: BreakStrategyFactory = BreakStrategyFactory(),
) -> BreakResult:
    """Total break deduction for one day.

    Booked break time is always deducted; configured rules are added on top
    (variable rules drop out as soon as any break was booked).
    """
    break_booked = booked_break_minutes > 0
    rule_minutes = 0
    for rule in rules:
        rule_minutes += factory.for_rule(rule).deduct(
            rule=rule, gross_minutes=gross_minutes, break_booked=break_booked
        )
    return BreakResult(booked_minutes=max(booked_break_minutes, 0), rule_minutes=rule_minutes)
