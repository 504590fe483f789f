from __future__ import annotations

from dataclasses import dataclass

from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .batch.runner import BatchCalculator
from .bookings.mysql_punch_repository import MySQLPunchRepository
from .core.settings import CalculationSettings
from .corrections.sink import CorrectionSink, InMemoryCorrectionSink, LoggingCorrectionSink
from .daily.mysql_daily_value_repository import MySQLDailyValueRepository
from .daily.service import DailyCalculationService
from .database.connection import DBConfig, DatabaseConnection
from .hooks import HookRegistry
from .masterdata.repository import MasterDataRepository
from .monthly.mysql_monthly_value_repository import MySQLMonthlyValueRepository
from .monthly.service import MonthlyCalculationService
from .vacation.mysql_vacation_balance_repository import MySQLVacationBalanceRepository
from .vacation.service import VacationService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    settings: CalculationSettings
    masterdata: MasterDataRepository
    hooks: HookRegistry
    corrections: CorrectionSink

    punches_repo: MySQLPunchRepository
    daily_values_repo: MySQLDailyValueRepository
    monthly_values_repo: MySQLMonthlyValueRepository
    absences_repo: MySQLAbsenceRepository
    vacation_balances_repo: MySQLVacationBalanceRepository

    daily_service: DailyCalculationService
    monthly_service: MonthlyCalculationService
    vacation_service: VacationService
    batch: BatchCalculator


def build_container(
    *,
    db_config: dict,
    masterdata: MasterDataRepository,
    settings: CalculationSettings | None = None,
    corrections: CorrectionSink | None = None,
) -> Container:
    settings = settings or CalculationSettings()
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    hooks = HookRegistry()
    corrections = corrections or LoggingCorrectionSink(InMemoryCorrectionSink())

    punches_repo = MySQLPunchRepository(conn)
    daily_values_repo = MySQLDailyValueRepository(conn)
    monthly_values_repo = MySQLMonthlyValueRepository(conn)
    absences_repo = MySQLAbsenceRepository(conn)
    vacation_balances_repo = MySQLVacationBalanceRepository(conn)

    daily_service = DailyCalculationService(
        punches_repo,
        daily_values_repo,
        absences_repo,
        masterdata,
        monthly_values_repo,
        corrections=corrections,
        hooks=hooks,
        settings=settings,
    )
    monthly_service = MonthlyCalculationService(
        daily_values_repo,
        monthly_values_repo,
        absences_repo,
        masterdata,
        vacation_balances_repo,
        hooks=hooks,
    )
    vacation_service = VacationService(vacation_balances_repo, absences_repo, masterdata, settings=settings)
    batch = BatchCalculator(daily_service, monthly_service, workers=settings.batch_workers)

    return Container(
        conn=conn,
        settings=settings,
        masterdata=masterdata,
        hooks=hooks,
        corrections=corrections,
        punches_repo=punches_repo,
        daily_values_repo=daily_values_repo,
        monthly_values_repo=monthly_values_repo,
        absences_repo=absences_repo,
        vacation_balances_repo=vacation_balances_repo,
        daily_service=daily_service,
        monthly_service=monthly_service,
        vacation_service=vacation_service,
        batch=batch,
    )
