from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..core.enums import CreditType
from ..daily.model import DailyValue
from ..masterdata.model import Tariff

WARN_MONTHLY_CAP = "MONTHLY_CAP_REACHED"
WARN_FLEXTIME_CAPPED = "FLEXTIME_CAPPED"
WARN_BELOW_THRESHOLD = "BELOW_THRESHOLD"
WARN_NO_CARRYOVER = "NO_CARRYOVER"
WARN_ANNUAL_FLOOR = "ANNUAL_FLOOR_APPLIED"


@dataclass(frozen=True)
class MonthTotals:
    gross: int = 0
    net: int = 0
    target: int = 0
    overtime: int = 0
    undertime: int = 0
    breaks: int = 0
    work_days: int = 0
    days_with_errors: int = 0

    @property
    def change(self) -> int:
        return self.overtime - self.undertime


@dataclass(frozen=True)
class FlextimeOutcome:
    start: int
    change: int
    end: int
    carryover: int
    credited: int
    forfeited: int
    warnings: Tuple[str, ...] = ()


def sum_daily_values(values: Iterable[DailyValue]) -> MonthTotals:
    gross = net = target = overtime = undertime = breaks = work_days = errors = 0
    for v in values:
        gross += v.gross_minutes
        net += v.net_minutes
        target += v.target_minutes
        overtime += v.overtime_minutes
        undertime += v.undertime_minutes
        breaks += v.break_minutes
        if v.gross_minutes > 0 or v.net_minutes > 0:
            work_days += 1
        if v.has_error:
            errors += 1
    return MonthTotals(gross, net, target, overtime, undertime, breaks, work_days, errors)


def clamp_balance(balance: int, tariff: Tariff) -> Tuple[int, int]:
    """Clamp into [-lower_annual_limit, upper_annual_limit]; returns (balance, forfeited)."""
    forfeited = 0
    if tariff.upper_annual_limit is not None and balance > tariff.upper_annual_limit:
        forfeited = balance - tariff.upper_annual_limit
        balance = tariff.upper_annual_limit
    if tariff.lower_annual_limit is not None and balance < -tariff.lower_annual_limit:
        balance = -tariff.lower_annual_limit
    return balance, forfeited


def _credit_capped(start: int, credited: int, tariff: Tariff, warnings: List[str]) -> Tuple[int, int, int]:
    """Monthly cap on a positive change, then the balance limits. Returns (carryover, credited, forfeited)."""
    forfeited = 0
    cap = tariff.max_monthly_flextime
    if cap is not None and credited > cap:
        forfeited += credited - cap
        credited = cap
        warnings.append(WARN_MONTHLY_CAP)
    balance, lost = clamp_balance(start + credited, tariff)
    if balance != start + credited:
        warnings.append(WARN_FLEXTIME_CAPPED)
    return balance, credited, forfeited + lost


def _no_evaluation(start: int, change: int, tariff: Tariff, warnings: List[str]) -> Tuple[int, int, int]:
    return start + change, change, 0


def _complete(start: int, change: int, tariff: Tariff, warnings: List[str]) -> Tuple[int, int, int]:
    return _credit_capped(start, change, tariff, warnings)


def _after_threshold(start: int, change: int, tariff: Tariff, warnings: List[str]) -> Tuple[int, int, int]:
    threshold = tariff.flextime_threshold or 0
    # Undertime is always deducted; only overtime below the threshold is dropped.
    if 0 < change < threshold:
        warnings.append(WARN_BELOW_THRESHOLD)
        return start, 0, change
    return _credit_capped(start, change, tariff, warnings)


def _no_transfer(start: int, change: int, tariff: Tariff, warnings: List[str]) -> Tuple[int, int, int]:
    warnings.append(WARN_NO_CARRYOVER)
    return 0, 0, change


_HANDLERS: Dict[CreditType, Callable[[int, int, Tariff, List[str]], Tuple[int, int, int]]] = {
    CreditType.NONE: _no_evaluation,
    CreditType.COMPLETE: _complete,
    CreditType.AFTER_THRESHOLD: _after_threshold,
    CreditType.NO_TRANSFER: _no_transfer,
}

if set(_HANDLERS) != set(CreditType):
    raise RuntimeError("credit handler missing for some CreditType")


def evaluate_flextime(*, start: int, change: int, tariff: Optional[Tariff], month: int) -> FlextimeOutcome:
    """Apply the tariff's credit type to a month's flextime change.

    The annual floor bounds the December carryover from below.
    """
    warnings: List[str] = []
    if tariff is None:
        carryover, credited, forfeited = _no_evaluation(start, change, Tariff(tariff_id="-"), warnings)
    else:
        carryover, credited, forfeited = _HANDLERS[tariff.credit_type](start, change, tariff, warnings)
        if month == 12 and tariff.annual_floor is not None and carryover < -tariff.annual_floor:
            carryover = -tariff.annual_floor
            warnings.append(WARN_ANNUAL_FLOOR)
    return FlextimeOutcome(
        start=start,
        change=change,
        end=start + change,
        carryover=carryover,
        credited=credited,
        forfeited=forfeited,
        warnings=tuple(warnings),
    )
