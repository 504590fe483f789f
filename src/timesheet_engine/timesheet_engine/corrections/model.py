from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import Severity


@dataclass(frozen=True)
class CorrectionItem:
    """One entry for the correction assistant: what is wrong, for whom, on which day."""

    employee_id: str
    item_date: date
    code: str
    severity: Severity
    message: str
