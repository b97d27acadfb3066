from __future__ import annotations

from dataclasses import dataclass

from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .absences.service import AbsenceService
from .database.connection import DBConfig, DatabaseConnection
from .entries.mysql_entry_repository import MySQLTimeEntryRepository
from .reports.service import ReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService
from .timebank.service import TimeBankService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService
from .workday.factory import ClockActionFactory
from .workday.service import WorkdayService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    user_service: UserService
    settings_service: SettingsService
    workday_service: WorkdayService
    time_bank_service: TimeBankService
    report_service: ReportService
    absence_service: AbsenceService


def build_services(*, users, entries, settings, absences) -> Container:
    """Wire the services on top of any set of repositories."""
    settings_service = SettingsService(settings)
    return Container(
        auth_service=AuthService(users),
        user_service=UserService(users),
        settings_service=settings_service,
        workday_service=WorkdayService(entries, settings_service, factory=ClockActionFactory()),
        time_bank_service=TimeBankService(entries, settings_service),
        report_service=ReportService(entries, settings_service),
        absence_service=AbsenceService(absences, settings_service),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        users=MySQLUserRepository(conn),
        entries=MySQLTimeEntryRepository(conn),
        settings=MySQLSettingsRepository(conn),
        absences=MySQLAbsenceRepository(conn),
    )
