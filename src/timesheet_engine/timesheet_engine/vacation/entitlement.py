"""Pure vacation arithmetic: entitlement, proration, rounding and carryover capping.

All day amounts are Decimal. Nothing here touches storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..common.time_utils import full_years_between
from ..core.enums import CappingRuleType, SpecialRuleKind, VacationRounding
from ..masterdata.model import CappingRule, Employee, SpecialRule, Tariff

ZERO = Decimal("0")
ONE = Decimal("1")
TWELVE = Decimal("12")


@dataclass(frozen=True)
class Entitlement:
    base: Decimal
    special: Decimal
    months_active: int
    proration_factor: Decimal
    part_time_factor: Decimal
    total: Decimal


def months_active(entry: date, exit_date: Optional[date], year: int) -> int:
    """Months employed within the calendar year; a started month counts as a full one."""
    start = max(entry, date(year, 1, 1))
    end = date(year, 12, 31)
    if exit_date is not None and exit_date < end:
        end = exit_date
    if start > end:
        return 0
    months = (end.year - start.year) * 12 + end.month - start.month
    if end.day >= start.day:
        months += 1
    return min(max(months, 0), 12)


def special_days(rules: Iterable[SpecialRule], employee: Employee, reference: date) -> Decimal:
    total = ZERO
    for rule in rules:
        if rule.kind == SpecialRuleKind.AGE:
            if employee.birth_date is not None and full_years_between(employee.birth_date, reference) >= rule.threshold:
                total += Decimal(rule.bonus_days)
        elif rule.kind == SpecialRuleKind.TENURE:
            if full_years_between(employee.entry_date, reference) >= rule.threshold:
                total += Decimal(rule.bonus_days)
        elif rule.kind == SpecialRuleKind.DISABILITY:
            if employee.has_disability:
                total += Decimal(rule.bonus_days)
    return total


def part_time_factor(employee: Employee, tariff: Tariff) -> Decimal:
    if employee.weekly_hours is None or not tariff.standard_weekly_hours:
        return ONE
    if Decimal(tariff.standard_weekly_hours) <= 0:
        return ONE
    return Decimal(employee.weekly_hours) / Decimal(tariff.standard_weekly_hours)


def round_days(value: Decimal, policy: VacationRounding) -> Decimal:
    if policy == VacationRounding.HALF_DAY:
        return (value * 2).to_integral_value(rounding=ROUND_HALF_UP) / 2
    if policy == VacationRounding.FULL_DAY:
        return value.to_integral_value(rounding=ROUND_HALF_UP)
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def calculate_entitlement(employee: Employee, tariff: Tariff, year: int) -> Entitlement:
    """(base + matched special rules) x months_active/12 x part-time factor, rounded per tariff.

    Age and tenure thresholds are evaluated on January 1st of the year.
    """
    base = Decimal(tariff.base_vacation_days)
    special = special_days(tariff.special_rules, employee, date(year, 1, 1))
    months = months_active(employee.entry_date, employee.exit_date, year)
    proration = Decimal(months) / TWELVE
    factor = part_time_factor(employee, tariff)
    total = round_days((base + special) * Decimal(months) * factor / TWELVE, tariff.vacation_rounding)
    return Entitlement(
        base=base,
        special=special,
        months_active=months,
        proration_factor=proration,
        part_time_factor=factor,
        total=total,
    )


def cap_carryover(carryover_in: Decimal, rules: Iterable[CappingRule]) -> Decimal:
    """Apply year-end capping to the prior year's remaining days. Negative rests are not carried."""
    if carryover_in <= 0:
        return ZERO
    capped = carryover_in
    for rule in rules:
        if rule.rule_type != CappingRuleType.YEAR_END:
            continue
        cap = Decimal(rule.cap_value)
        capped = ZERO if cap <= 0 else min(capped, cap)
    return capped


def mid_year_forfeit(
    carryover: Decimal,
    taken_until_cutoff: Decimal,
    rules: Iterable[CappingRule],
    *,
    year: int,
    as_of: date,
) -> Decimal:
    """Carryover still unused at a passed mid-year cutoff is forfeited; days taken use carryover first."""
    forfeited = ZERO
    for rule in rules:
        if rule.rule_type != CappingRuleType.MID_YEAR:
            continue
        if as_of <= date(year, rule.cutoff_month, rule.cutoff_day):
            continue
        forfeited = max(forfeited, max(carryover - taken_until_cutoff, ZERO))
    return forfeited


def vacation_deduction(schedule_deduction: Decimal, portion: Decimal) -> Decimal:
    return Decimal(schedule_deduction) * Decimal(portion)
