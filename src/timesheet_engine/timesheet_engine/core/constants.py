"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import ErrorCode, Severity

MINUTES_PER_DAY = 1440
MAX_ALTERNATIVE_SCHEDULES = 6
DEFAULT_TARGET_MINUTES = 480
DEFAULT_BATCH_WORKERS = 4

DEFAULT_SEVERITIES = {
    ErrorCode.MISSING_COME: Severity.ERROR,
    ErrorCode.MISSING_GO: Severity.ERROR,
    ErrorCode.UNPAIRED_BOOKING: Severity.ERROR,
    ErrorCode.MISSING_END_BOOKING: Severity.ERROR,
    ErrorCode.NO_MATCHING_SHIFT: Severity.ERROR,
    ErrorCode.NO_DAY_PLAN: Severity.ERROR,
    ErrorCode.NO_BOOKINGS: Severity.ERROR,
    ErrorCode.MISSED_CORE_START: Severity.ERROR,
    ErrorCode.MISSED_CORE_END: Severity.ERROR,
    ErrorCode.BELOW_MIN_WORK_TIME: Severity.ERROR,
    ErrorCode.CORE_TIME_VIOLATION: Severity.WARNING,
    ErrorCode.MAX_HOURS_EXCEEDED: Severity.WARNING,
    ErrorCode.BOOKING_OUTSIDE_WINDOW: Severity.WARNING,
}

# Default correction-assistant texts, keyed by code.
DEFAULT_MESSAGES = {
    ErrorCode.MISSING_COME: "Departure booking without a matching arrival",
    ErrorCode.MISSING_GO: "Arrival booking without a matching departure",
    ErrorCode.UNPAIRED_BOOKING: "Booking could not be paired",
    ErrorCode.MISSING_END_BOOKING: "Start booking has no end booking",
    ErrorCode.CORE_TIME_VIOLATION: "Booking outside the permitted time window",
    ErrorCode.NO_MATCHING_SHIFT: "No shift matches the booked times",
    ErrorCode.NO_DAY_PLAN: "No day plan assigned",
    ErrorCode.MAX_HOURS_EXCEEDED: "Maximum net working time exceeded",
    ErrorCode.BOOKING_OUTSIDE_WINDOW: "Break booked outside attendance",
    ErrorCode.NO_BOOKINGS: "No bookings on a working day",
    ErrorCode.MISSED_CORE_START: "Arrived after core time started",
    ErrorCode.MISSED_CORE_END: "Left before core time ended",
    ErrorCode.BELOW_MIN_WORK_TIME: "Net working time below the minimum",
    ErrorCode.NO_BOOKINGS_CREDITED: "No bookings, target time credited",
    ErrorCode.NO_BOOKINGS_DEDUCTED: "No bookings, target time deducted",
    ErrorCode.VOCATIONAL_SCHOOL: "Vocational school day",
    ErrorCode.HOLIDAY: "Holiday",
    ErrorCode.HOLIDAY_WORKED: "Bookings on a holiday",
    ErrorCode.ABSENCE: "Absence day",
    ErrorCode.ABSENCE_ON_HOLIDAY: "Absence overrides holiday",
    ErrorCode.BOOKINGS_ON_ABSENCE_DAY: "Bookings on an absence day were not evaluated",
    ErrorCode.SHIFT_SWITCHED: "Alternative shift detected",
}


def default_severity(code: ErrorCode) -> Severity:
    return DEFAULT_SEVERITIES.get(code, Severity.HINT)
