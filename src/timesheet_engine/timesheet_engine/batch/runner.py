from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Iterable, Tuple

from ..common.time_utils import iter_dates, iter_months
from ..core.exceptions import DomainError, MonthClosedError
from ..daily.service import DailyCalculationService
from ..monthly.service import MonthlyCalculationService

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    processed: int = 0
    failed: int = 0
    skipped: int = 0
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.failed == 0


@dataclass(frozen=True)
class DirtyRange:
    """A retroactive recalculation request: these employees, from `start` through `end`."""

    employee_ids: Tuple[str, ...]
    start: date
    end: date


class BatchCalculator:
    """Worker-pool driver: employees in parallel, each employee's dates and months in order."""

    def __init__(
        self,
        daily: DailyCalculationService,
        monthly: MonthlyCalculationService,
        *,
        workers: int = 4,
    ):
        self._daily = daily
        self._monthly = monthly
        self._workers = max(int(workers), 1)

    def _run(self, employee_ids: Iterable[str], task: Callable[[str], Tuple[int, int]]) -> BatchResult:
        result = BatchResult()
        ids = list(dict.fromkeys(employee_ids))
        with ThreadPoolExecutor(max_workers=self._workers) as pool:
            futures = [(emp, pool.submit(task, emp)) for emp in ids]
            for emp, future in futures:
                try:
                    processed, skipped = future.result()
                except DomainError as exc:
                    result.failed += 1
                    result.errors[emp] = f"{exc.code}: {exc}"
                    logger.warning("Batch calculation failed for %s: %s", emp, exc)
                    continue
                except Exception as exc:
                    result.failed += 1
                    result.errors[emp] = f"{type(exc).__name__}: {exc}"
                    logger.exception("Unexpected batch failure for %s", emp)
                    continue
                result.processed += processed
                result.skipped += skipped
        logger.info(
            "Batch finished: processed=%s skipped=%s failed=%s", result.processed, result.skipped, result.failed
        )
        return result

    def _days(self, emp: str, start: date, end: date) -> Tuple[int, int]:
        processed = skipped = 0
        for day in iter_dates(start, end):
            try:
                self._daily.calculate_day(emp, day)
            except MonthClosedError:
                skipped += 1
                continue
            processed += 1
        return processed, skipped

    def _months(self, emp: str, start: Tuple[int, int], end: Tuple[int, int]) -> Tuple[int, int]:
        total = sum(1 for _ in iter_months(start, end))
        done = len(self._monthly.recalculate_from(emp, start[0], start[1], until=end))
        return done, total - done

    def calculate_days(self, employee_ids: Iterable[str], start: date, end: date) -> BatchResult:
        return self._run(employee_ids, lambda emp: self._days(emp, start, end))

    def calculate_months(
        self,
        employee_ids: Iterable[str],
        start: Tuple[int, int],
        end: Tuple[int, int],
    ) -> BatchResult:
        return self._run(employee_ids, lambda emp: self._months(emp, start, end))

    def recalculate(self, dirty: DirtyRange) -> BatchResult:
        """Daily values first, then the months they touch, per employee."""

        def task(emp: str) -> Tuple[int, int]:
            days_done, days_skipped = self._days(emp, dirty.start, dirty.end)
            months_done, months_skipped = self._months(
                emp, (dirty.start.year, dirty.start.month), (dirty.end.year, dirty.end.month)
            )
            return days_done + months_done, days_skipped + months_skipped

        return self._run(dirty.employee_ids, task)
