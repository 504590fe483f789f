from __future__ import annotations

from typing import Optional, Protocol

from .model import VacationBalance


class VacationBalanceRepository(Protocol):
    def get(self, employee_id: str, year: int) -> Optional[VacationBalance]:
        raise NotImplementedError

    def replace(self, balance: VacationBalance) -> VacationBalance:
        raise NotImplementedError
