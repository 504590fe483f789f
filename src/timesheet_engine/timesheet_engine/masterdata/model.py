from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Tuple

from ..common.validators import require_minute_of_day, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_TARGET_MINUTES, MAX_ALTERNATIVE_SCHEDULES
from ..core.enums import (
    AbsenceCategory,
    BreakKind,
    CappingRuleType,
    CreditType,
    DayChangePolicy,
    NoPunchPolicy,
    RoundingMode,
    ScheduleMode,
    SpecialRuleKind,
    VacationRounding,
)
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ToleranceConfig:
    come_plus: int = 0
    come_minus: int = 0
    go_plus: int = 0
    go_minus: int = 0
    variable_work_time: bool = False


@dataclass(frozen=True)
class RoundingRule:
    mode: RoundingMode
    interval_minutes: int
    apply_to_all_punches: bool = False


@dataclass(frozen=True)
class BreakRule:
    kind: BreakKind
    duration_minutes: int
    after_minutes: Optional[int] = None
    only_deduct_overage: bool = False

    def __post_init__(self):
        require_non_negative(self.duration_minutes, "duration_minutes")
        if self.kind == BreakKind.MINIMUM and self.after_minutes is None:
            raise ValidationError("minimum break requires after_minutes")


@dataclass(frozen=True)
class ShiftWindow:
    """Khung giờ nhận diện ca (arrival window, optional departure window).

    `from_minutes > to_minutes` describes a window that wraps midnight.
    """

    from_minutes: int
    to_minutes: int
    depart_from: Optional[int] = None
    depart_to: Optional[int] = None

    @property
    def has_departure_window(self) -> bool:
        return self.depart_from is not None and self.depart_to is not None


@dataclass(frozen=True)
class ShiftDetection:
    window: Optional[ShiftWindow] = None
    alternatives: Tuple[str, ...] = ()

    def __post_init__(self):
        if len(self.alternatives) > MAX_ALTERNATIVE_SCHEDULES:
            raise ValidationError(f"at most {MAX_ALTERNATIVE_SCHEDULES} alternative schedules are allowed")


@dataclass(frozen=True)
class SurchargeRule:
    """Khung giờ phụ cấp (night/holiday bonus window) feeding one account.

    `from_minutes > to_minutes` describes a window that wraps midnight.
    An empty `holiday_categories` matches every holiday category.
    """

    account_code: str
    from_minutes: int
    to_minutes: int
    applies_on_workday: bool = True
    applies_on_holiday: bool = False
    holiday_categories: Tuple[int, ...] = ()

    def __post_init__(self):
        require_non_empty(self.account_code, "account_code")
        require_minute_of_day(self.from_minutes, "from_minutes")
        require_minute_of_day(self.to_minutes, "to_minutes")
        if self.from_minutes == self.to_minutes:
            raise ValidationError("surcharge window must not be empty")


@dataclass(frozen=True)
class Schedule:
    """Thực thể miền (domain): Kế hoạch ngày làm việc (day plan)."""

    schedule_id: str
    code: str
    mode: ScheduleMode
    come_from: int
    go_from: int
    come_to: Optional[int] = None
    go_to: Optional[int] = None
    target_minutes: int = DEFAULT_TARGET_MINUTES
    absence_target_minutes: Optional[int] = None
    tolerance: ToleranceConfig = ToleranceConfig()
    rounding_come: Optional[RoundingRule] = None
    rounding_go: Optional[RoundingRule] = None
    breaks: Tuple[BreakRule, ...] = ()
    max_net_minutes: Optional[int] = None
    min_work_minutes: Optional[int] = None
    core_start: Optional[int] = None
    core_end: Optional[int] = None
    no_punch_policy: NoPunchPolicy = NoPunchPolicy.ERROR
    day_change_policy: DayChangePolicy = DayChangePolicy.NONE
    shift_detection: Optional[ShiftDetection] = None
    holiday_credits: Mapping[int, int] = field(default_factory=dict)
    surcharges: Tuple[SurchargeRule, ...] = ()
    vacation_deduction: Decimal = Decimal("1")

    def __post_init__(self):
        require_non_empty(self.schedule_id, "schedule_id")
        require_minute_of_day(self.come_from, "come_from")
        require_minute_of_day(self.go_from, "go_from")
        require_minute_of_day(self.come_to, "come_to", optional=True)
        require_minute_of_day(self.go_to, "go_to", optional=True)
        require_non_negative(self.target_minutes, "target_minutes")
        require_non_negative(self.max_net_minutes, "max_net_minutes")
        require_non_negative(self.min_work_minutes, "min_work_minutes")
        require_minute_of_day(self.core_start, "core_start", optional=True)
        require_minute_of_day(self.core_end, "core_end", optional=True)
        if self.come_to is not None and self.come_to < self.come_from:
            raise ValidationError("come_to must not be before come_from")
        if self.go_to is not None and self.go_to < self.go_from:
            raise ValidationError("go_to must not be before go_from")
        if self.core_start is not None and self.core_end is not None and self.core_end < self.core_start:
            raise ValidationError("core_end must not be before core_start")

    @property
    def shift_detection_enabled(self) -> bool:
        return self.shift_detection is not None

    def effective_target(self, *, is_absence_day: bool = False) -> int:
        if is_absence_day and self.absence_target_minutes is not None:
            return self.absence_target_minutes
        return self.target_minutes

    def holiday_credit(self, category: int) -> int:
        return int(self.holiday_credits.get(category, 0))


@dataclass(frozen=True)
class WeekPlan:
    """Seven schedule ids, Monday first; no weekday may be left empty."""

    week_plan_id: str
    schedule_ids: Tuple[str, ...]

    def __post_init__(self):
        if len(self.schedule_ids) != 7 or any(not sid for sid in self.schedule_ids):
            raise ValidationError(f"week plan {self.week_plan_id} must assign a schedule to every weekday")

    def schedule_id_for(self, day: date) -> str:
        return self.schedule_ids[day.weekday()]


@dataclass(frozen=True)
class SpecialRule:
    kind: SpecialRuleKind
    bonus_days: Decimal
    threshold: int = 0


@dataclass(frozen=True)
class CappingRule:
    rule_type: CappingRuleType
    cap_value: Decimal = Decimal("0")
    cutoff_month: int = 3
    cutoff_day: int = 31


@dataclass(frozen=True)
class Tariff:
    tariff_id: str
    credit_type: CreditType = CreditType.NONE
    flextime_threshold: Optional[int] = None
    max_monthly_flextime: Optional[int] = None
    upper_annual_limit: Optional[int] = None
    lower_annual_limit: Optional[int] = None
    annual_floor: Optional[int] = None
    base_vacation_days: Decimal = Decimal("0")
    standard_weekly_hours: Optional[Decimal] = None
    special_rules: Tuple[SpecialRule, ...] = ()
    capping_rules: Tuple[CappingRule, ...] = ()
    vacation_rounding: VacationRounding = VacationRounding.HALF_DAY


@dataclass(frozen=True)
class Employee:
    employee_id: str
    full_name: str
    entry_date: date
    tariff_id: Optional[str] = None
    week_plan_id: Optional[str] = None
    exit_date: Optional[date] = None
    birth_date: Optional[date] = None
    has_disability: bool = False
    weekly_hours: Optional[Decimal] = None
    calculation_start: Optional[date] = None

    @property
    def first_tracked_month(self) -> Tuple[int, int]:
        start = self.calculation_start or self.entry_date
        return start.year, start.month


@dataclass(frozen=True)
class AbsenceType:
    code: str
    category: AbsenceCategory = AbsenceCategory.OTHER
    portion: Decimal = Decimal("1")
    deducts_vacation: bool = False
    holiday_code: Optional[str] = None


@dataclass(frozen=True)
class Holiday:
    holiday_date: date
    name: str
    category: int = 1
