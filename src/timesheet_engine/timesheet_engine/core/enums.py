from __future__ import annotations

from enum import Enum


class PunchType(str, Enum):
    """Loại sự kiện chấm công thô từ máy chấm công hoặc nhập tay."""

    ARRIVE = "arrive"
    LEAVE = "leave"
    BREAK_START = "break_start"
    BREAK_END = "break_end"
    TRIP_START = "trip_start"
    TRIP_END = "trip_end"

    @property
    def kind(self) -> "PairKind":
        return _PUNCH_KIND[self]

    @property
    def is_start(self) -> bool:
        return self in {PunchType.ARRIVE, PunchType.BREAK_START, PunchType.TRIP_START}


class PairKind(str, Enum):
    MAIN = "main"
    BREAK = "break"
    TRIP = "trip"


_PUNCH_KIND = {
    PunchType.ARRIVE: PairKind.MAIN,
    PunchType.LEAVE: PairKind.MAIN,
    PunchType.BREAK_START: PairKind.BREAK,
    PunchType.BREAK_END: PairKind.BREAK,
    PunchType.TRIP_START: PairKind.TRIP,
    PunchType.TRIP_END: PairKind.TRIP,
}


class PunchSource(str, Enum):
    TERMINAL = "terminal"
    MANUAL = "manual"
    AUTO_COMPLETE = "auto_complete"


class ScheduleMode(str, Enum):
    FIXED = "fixed"
    FLEXTIME = "flextime"


class RoundingMode(str, Enum):
    UP = "up"
    DOWN = "down"
    MATHEMATICAL = "mathematical"
    ADD = "add"
    SUBTRACT = "subtract"


class BreakKind(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"
    MINIMUM = "minimum"


class NoPunchPolicy(str, Enum):
    """Cách xử lý ngày không có cặp vào/ra."""

    ERROR = "error"
    DEDUCT_TARGET = "deduct_target"
    CREDIT_TARGET = "credit_target"
    VOCATIONAL = "vocational"


class DayChangePolicy(str, Enum):
    """Cách xử lý ca làm qua nửa đêm."""

    NONE = "none"
    EVALUATE_COME = "evaluate_come"
    EVALUATE_GO = "evaluate_go"
    AUTO_COMPLETE = "auto_complete"


class CreditType(str, Enum):
    """Cách chuyển giờ dư/thiếu của tháng sang tài khoản flextime."""

    NONE = "none"
    COMPLETE = "complete"
    AFTER_THRESHOLD = "after_threshold"
    NO_TRANSFER = "no_transfer"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    HINT = "hint"


class ErrorCode(str, Enum):
    MISSING_COME = "MISSING_COME"
    MISSING_GO = "MISSING_GO"
    UNPAIRED_BOOKING = "UNPAIRED_BOOKING"
    MISSING_END_BOOKING = "MISSING_END_BOOKING"
    CORE_TIME_VIOLATION = "CORE_TIME_VIOLATION"
    NO_MATCHING_SHIFT = "NO_MATCHING_SHIFT"
    NO_DAY_PLAN = "NO_DAY_PLAN"
    MAX_HOURS_EXCEEDED = "MAX_HOURS_EXCEEDED"
    BOOKING_OUTSIDE_WINDOW = "BOOKING_OUTSIDE_WINDOW"
    NO_BOOKINGS = "NO_BOOKINGS"
    MISSED_CORE_START = "MISSED_CORE_START"
    MISSED_CORE_END = "MISSED_CORE_END"
    BELOW_MIN_WORK_TIME = "BELOW_MIN_WORK_TIME"

    # Hints: informational, never routed to the correction stream.
    NO_BOOKINGS_CREDITED = "NO_BOOKINGS_CREDITED"
    NO_BOOKINGS_DEDUCTED = "NO_BOOKINGS_DEDUCTED"
    VOCATIONAL_SCHOOL = "VOCATIONAL_SCHOOL"
    HOLIDAY = "HOLIDAY"
    HOLIDAY_WORKED = "HOLIDAY_WORKED"
    ABSENCE = "ABSENCE"
    ABSENCE_ON_HOLIDAY = "ABSENCE_ON_HOLIDAY"
    BOOKINGS_ON_ABSENCE_DAY = "BOOKINGS_ON_ABSENCE_DAY"
    SHIFT_SWITCHED = "SHIFT_SWITCHED"


class AbsenceCategory(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    OTHER = "other"


class VacationRounding(str, Enum):
    NONE = "none"
    HALF_DAY = "half_day"
    FULL_DAY = "full_day"


class SpecialRuleKind(str, Enum):
    AGE = "age"
    TENURE = "tenure"
    DISABILITY = "disability"


class CappingRuleType(str, Enum):
    YEAR_END = "year_end"
    MID_YEAR = "mid_year"
