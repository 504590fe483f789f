from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..core.exceptions import ValidationError
from .model import AbsenceType, Employee, Holiday, Schedule, Tariff, WeekPlan
from .repository import MasterDataRepository


@dataclass(frozen=True)
class MasterDataSnapshot(MasterDataRepository):
    """Immutable id -> record lookup tables handed to every calculation.

    Records reference each other by id only; changes to master data take
    effect by building a new snapshot and recalculating.
    """

    employees: Mapping[str, Employee] = field(default_factory=dict)
    tariffs: Mapping[str, Tariff] = field(default_factory=dict)
    schedule_table: Mapping[str, Schedule] = field(default_factory=dict)
    week_plans: Mapping[str, WeekPlan] = field(default_factory=dict)
    day_overrides: Mapping[Tuple[str, date], str] = field(default_factory=dict)
    absence_types: Mapping[str, AbsenceType] = field(default_factory=dict)
    holidays: Mapping[date, Holiday] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        *,
        employees: Iterable[Employee] = (),
        tariffs: Iterable[Tariff] = (),
        schedules: Iterable[Schedule] = (),
        week_plans: Iterable[WeekPlan] = (),
        day_overrides: Optional[Mapping[Tuple[str, date], str]] = None,
        absence_types: Iterable[AbsenceType] = (),
        holidays: Iterable[Holiday] = (),
    ) -> "MasterDataSnapshot":
        schedule_table = {s.schedule_id: s for s in schedules}
        plans = {p.week_plan_id: p for p in week_plans}

        for plan in plans.values():
            missing = [sid for sid in plan.schedule_ids if sid not in schedule_table]
            if missing:
                raise ValidationError(f"week plan {plan.week_plan_id} references unknown schedules: {missing}")

        overrides: Dict[Tuple[str, date], str] = dict(day_overrides or {})
        for key, sid in overrides.items():
            if sid not in schedule_table:
                raise ValidationError(f"day override {key} references unknown schedule {sid}")

        return cls(
            employees=MappingProxyType({e.employee_id: e for e in employees}),
            tariffs=MappingProxyType({t.tariff_id: t for t in tariffs}),
            schedule_table=MappingProxyType(schedule_table),
            week_plans=MappingProxyType(plans),
            day_overrides=MappingProxyType(overrides),
            absence_types=MappingProxyType({a.code: a for a in absence_types}),
            holidays=MappingProxyType({h.holiday_date: h for h in holidays}),
        )

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def get_tariff(self, tariff_id: str) -> Optional[Tariff]:
        return self.tariffs.get(tariff_id)

    def get_schedule(self, schedule_id: str) -> Optional[Schedule]:
        return self.schedule_table.get(schedule_id)

    def schedule_for(self, employee_id: str, day: date) -> Optional[Schedule]:
        override = self.day_overrides.get((employee_id, day))
        if override:
            return self.schedule_table.get(override)

        employee = self.employees.get(employee_id)
        if not employee or not employee.week_plan_id:
            return None
        plan = self.week_plans.get(employee.week_plan_id)
        if not plan:
            return None
        return self.schedule_table.get(plan.schedule_id_for(day))

    def schedules(self) -> Mapping[str, Schedule]:
        return self.schedule_table

    def get_absence_type(self, code: str) -> Optional[AbsenceType]:
        return self.absence_types.get(code)

    def get_holiday(self, day: date) -> Optional[Holiday]:
        return self.holidays.get(day)
