from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..bookings.model import Pair
from ..core.constants import MINUTES_PER_DAY
from ..core.enums import PairKind
from ..masterdata.model import SurchargeRule
from .model import SurchargeMinutes

Period = Tuple[int, int]


def split_at_midnight(rule: SurchargeRule) -> List[Period]:
    """22:00-06:00 becomes [22:00-24:00, 00:00-06:00]; other windows are kept."""
    if rule.from_minutes < rule.to_minutes:
        return [(rule.from_minutes, rule.to_minutes)]
    return [(rule.from_minutes, MINUTES_PER_DAY), (0, rule.to_minutes)]


def rule_applies(rule: SurchargeRule, holiday_category: Optional[int]) -> bool:
    if holiday_category is None:
        return rule.applies_on_workday
    if not rule.applies_on_holiday:
        return False
    return not rule.holiday_categories or holiday_category in rule.holiday_categories


def work_periods(pairs: Iterable[Pair]) -> List[Period]:
    return [(p.start.effective_minutes, p.end.effective_minutes) for p in pairs if p.kind == PairKind.MAIN]


def overlap(a: Period, b: Period) -> int:
    return max(min(a[1], b[1]) - max(a[0], b[0]), 0)


def window_minutes(periods: Sequence[Period], rule: SurchargeRule) -> int:
    total = 0
    for start, end in split_at_midnight(rule):
        # Re-dated punches reach into the neighbouring days.
        for shift in (-MINUTES_PER_DAY, 0, MINUTES_PER_DAY):
            window = (start + shift, end + shift)
            total += sum(overlap(period, window) for period in periods)
    return total


def calculate_surcharges(
    periods: Sequence[Period],
    rules: Sequence[SurchargeRule],
    *,
    holiday_category: Optional[int] = None,
) -> Tuple[SurchargeMinutes, ...]:
    """Minutes worked inside each applicable window, summed per account.

    `holiday_category` is None on regular workdays. Accounts without minutes
    are left out; the order follows the first rule naming each account.
    """
    totals = {}
    for rule in rules:
        if not rule_applies(rule, holiday_category):
            continue
        minutes = window_minutes(periods, rule)
        if minutes > 0:
            totals[rule.account_code] = totals.get(rule.account_code, 0) + minutes
    return tuple(SurchargeMinutes(account_code=code, minutes=minutes) for code, minutes in totals.items())
