from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .constants import DEFAULT_MESSAGES, default_severity
from .enums import ErrorCode, Severity


@dataclass(frozen=True)
class CalcIssue:
    """A data-quality finding attached to a calculated record."""

    code: ErrorCode
    severity: Severity
    message: str
    punch_id: Optional[str] = None


def issue(code: ErrorCode, *, punch_id: Optional[str] = None, message: Optional[str] = None) -> CalcIssue:
    return CalcIssue(
        code=code,
        severity=default_severity(code),
        message=message or DEFAULT_MESSAGES.get(code, code.value),
        punch_id=punch_id,
    )


def promote(issues: Iterable[CalcIssue], promoted: Iterable[ErrorCode]) -> Tuple[CalcIssue, ...]:
    """Raise configured warning codes to error severity."""
    promoted = frozenset(promoted)
    out = []
    for i in issues:
        if i.severity == Severity.WARNING and i.code in promoted:
            i = CalcIssue(code=i.code, severity=Severity.ERROR, message=i.message, punch_id=i.punch_id)
        out.append(i)
    return tuple(out)


def codes_with(issues: Iterable[CalcIssue], severity: Severity) -> Tuple[str, ...]:
    """Distinct codes of the given severity, in first-seen order."""
    seen = []
    for i in issues:
        if i.severity == severity and i.code.value not in seen:
            seen.append(i.code.value)
    return tuple(seen)
