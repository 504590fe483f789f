from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ..core.enums import Severity
from ..daily.model import DailyValue
from .model import CorrectionItem

logger = logging.getLogger(__name__)


class CorrectionSink(Protocol):
    def replace_for_day(self, employee_id: str, day: date, items: Sequence[CorrectionItem]) -> None:
        """Drop whatever was reported for the employee-day and store `items` instead."""

        raise NotImplementedError


def items_for(value: DailyValue) -> List[CorrectionItem]:
    """Errors and warnings of a daily value; hints stay on the record only."""
    return [
        CorrectionItem(
            employee_id=value.employee_id,
            item_date=value.value_date,
            code=i.code.value,
            severity=i.severity,
            message=i.message,
        )
        for i in value.issues
        if i.severity in (Severity.ERROR, Severity.WARNING)
    ]


class InMemoryCorrectionSink(CorrectionSink):
    def __init__(self):
        self._items: Dict[Tuple[str, date], Tuple[CorrectionItem, ...]] = {}
        self._lock = threading.Lock()

    def replace_for_day(self, employee_id: str, day: date, items: Sequence[CorrectionItem]) -> None:
        with self._lock:
            if items:
                self._items[(employee_id, day)] = tuple(items)
            else:
                self._items.pop((employee_id, day), None)

    def list_items(
        self,
        *,
        employee_id: Optional[str] = None,
        severity: Optional[Severity] = None,
    ) -> List[CorrectionItem]:
        with self._lock:
            snapshot = sorted(self._items.items(), key=lambda kv: (kv[0][0], kv[0][1]))
        out: List[CorrectionItem] = []
        for (emp, _), items in snapshot:
            if employee_id is not None and emp != employee_id:
                continue
            out.extend(i for i in items if severity is None or i.severity == severity)
        return out


class LoggingCorrectionSink(CorrectionSink):
    """Forward to another sink and log each reported item."""

    def __init__(self, inner: CorrectionSink):
        self._inner = inner

    def replace_for_day(self, employee_id: str, day: date, items: Sequence[CorrectionItem]) -> None:
        for item in items:
            level = logging.WARNING if item.severity == Severity.ERROR else logging.INFO
            logger.log(level, "Correction needed %s %s: %s (%s)", employee_id, day.isoformat(), item.code, item.message)
        self._inner.replace_for_day(employee_id, day, items)
