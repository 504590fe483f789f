from __future__ import annotations

from typing import Callable, Dict, Optional

from ..core.enums import RoundingMode
from ..masterdata.model import RoundingRule


def round_up(value: int, interval: int) -> int:
    if interval <= 0:
        return value
    return -((-value) // interval) * interval


def round_down(value: int, interval: int) -> int:
    if interval <= 0:
        return value
    return (value // interval) * interval


def round_mathematical(value: int, interval: int) -> int:
    """Nearest multiple of interval; halves round away from zero."""
    if interval <= 0:
        return value
    magnitude = abs(value)
    lower = (magnitude // interval) * interval
    rounded = lower + interval if (magnitude - lower) * 2 >= interval else lower
    return rounded if value >= 0 else -rounded


def add_interval(value: int, interval: int) -> int:
    return value + interval


def subtract_interval(value: int, interval: int) -> int:
    return value - interval


_ROUNDERS: Dict[RoundingMode, Callable[[int, int], int]] = {
    RoundingMode.UP: round_up,
    RoundingMode.DOWN: round_down,
    RoundingMode.MATHEMATICAL: round_mathematical,
    RoundingMode.ADD: add_interval,
    RoundingMode.SUBTRACT: subtract_interval,
}

if set(_ROUNDERS) != set(RoundingMode):
    raise RuntimeError("rounding handler missing for some RoundingMode")


def apply_rounding(value: int, rule: Optional[RoundingRule]) -> int:
    if rule is None:
        return value
    return _ROUNDERS[rule.mode](int(value), int(rule.interval_minutes))
