from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .attendance.factory import CheckInStatusFactory
from .attendance.gateway import AttendanceGateway, IdentityVerifier
from .attendance.http_gateway import HttpAttendanceGateway, HttpIdentityVerifier
from .attendance.mysql_timesheet_repository import MySQLTimesheetRepository
from .attendance.repository import TimesheetRepository
from .attendance.service import AttendanceService
from .attendance.station_service import StationAttendanceService
from .clock.authority import Clock, ClockAuthority, SystemClock
from .clock.http_time_source import HttpServerTimeSource
from .common.api_client import ApiClient
from .common.datetime_utils import get_timezone
from .core.constants import (
    DEFAULT_CHECKIN_LEAD_MINUTES,
    DEFAULT_COUNTDOWN_TICK_SECONDS,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_REFRESH_INTERVAL_SECONDS,
)
from .database.connection import DBConfig, DatabaseConnection
from .payroll.service import PeriodSummaryService
from .schedules.clone import ShiftCloneEngine
from .schedules.http_schedule_repository import HttpScheduleRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .stations.credential_store import FileStationCredentialStore, StationCredentialStore
from .stations.mysql_station_repository import MySQLStationRepository
from .stations.repository import StationRepository
from .terminal.view import StationView


@dataclass(frozen=True)
class Container:
    """Server-side composition root used by the Flask controllers."""

    tz: tzinfo
    clock: Clock

    schedules_repo: ScheduleRepository
    timesheets_repo: TimesheetRepository
    stations_repo: StationRepository

    schedule_service: ScheduleService
    clone_engine: ShiftCloneEngine
    summary_service: PeriodSummaryService
    attendance_service: AttendanceService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    tz: tzinfo,
    clock: Clock,
    schedules_repo: ScheduleRepository,
    timesheets_repo: TimesheetRepository,
    stations_repo: StationRepository,
    verifier: IdentityVerifier,
    lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    return Container(
        tz=tz,
        clock=clock,
        schedules_repo=schedules_repo,
        timesheets_repo=timesheets_repo,
        stations_repo=stations_repo,
        schedule_service=ScheduleService(schedules_repo, tz=tz),
        clone_engine=ShiftCloneEngine(schedules_repo, tz=tz),
        summary_service=PeriodSummaryService(schedules_repo),
        attendance_service=AttendanceService(
            timesheets_repo,
            schedules_repo,
            stations_repo,
            verifier,
            clock=clock,
            status_factory=CheckInStatusFactory(grace_minutes=grace_minutes),
            lead_minutes=lead_minutes,
        ),
        conn=conn,
    )


def build_container(*, db_config: dict, settings: object = None) -> Container:
    tz = get_timezone(getattr(settings, "BUSINESS_TIMEZONE", None))
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    verifier = HttpIdentityVerifier(
        str(getattr(settings, "FACE_VERIFIER_URL", "")),
        timeout=float(getattr(settings, "HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS)),
    )
    return build_services(
        tz=tz,
        clock=SystemClock(tz),
        schedules_repo=MySQLScheduleRepository(conn, tz=tz),
        timesheets_repo=MySQLTimesheetRepository(conn, tz=tz),
        stations_repo=MySQLStationRepository(conn),
        verifier=verifier,
        lead_minutes=int(getattr(settings, "CHECKIN_LEAD_MINUTES", DEFAULT_CHECKIN_LEAD_MINUTES)),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        conn=conn,
    )


@dataclass(frozen=True)
class StationContainer:
    """Station/planner-side wiring against the REST backend."""

    tz: tzinfo
    clock: ClockAuthority
    credentials: StationCredentialStore

    schedules_repo: ScheduleRepository
    gateway: AttendanceGateway

    schedule_service: ScheduleService
    clone_engine: ShiftCloneEngine
    summary_service: PeriodSummaryService
    attendance: StationAttendanceService

    lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL_SECONDS
    tick_interval: float = DEFAULT_COUNTDOWN_TICK_SECONDS

    def station_view(self, user_id: int, **kwargs) -> StationView:
        return StationView(
            user_id=user_id,
            clock=self.clock,
            schedules=self.schedules_repo,
            gateway=self.gateway,
            attendance=self.attendance,
            refresh_interval=self.refresh_interval,
            tick_interval=self.tick_interval,
            lead_minutes=self.lead_minutes,
            **kwargs,
        )


def build_station_container(*, settings: object, session=None) -> StationContainer:
    tz = get_timezone(getattr(settings, "BUSINESS_TIMEZONE", None))
    lead_minutes = int(getattr(settings, "CHECKIN_LEAD_MINUTES", DEFAULT_CHECKIN_LEAD_MINUTES))
    credentials = FileStationCredentialStore(getattr(settings, "STATION_TOKEN_PATH"))
    api = ApiClient(
        str(getattr(settings, "API_BASE_URL")),
        timeout=float(getattr(settings, "HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS)),
        session=session,
        station_token=credentials.get,
    )
    clock = ClockAuthority(HttpServerTimeSource(api, tz=tz), tz=tz)
    schedules_repo = HttpScheduleRepository(api, tz=tz)
    gateway = HttpAttendanceGateway(api, tz=tz)

    return StationContainer(
        tz=tz,
        clock=clock,
        credentials=credentials,
        schedules_repo=schedules_repo,
        gateway=gateway,
        schedule_service=ScheduleService(schedules_repo, tz=tz),
        clone_engine=ShiftCloneEngine(schedules_repo, tz=tz),
        summary_service=PeriodSummaryService(schedules_repo),
        attendance=StationAttendanceService(gateway, credentials, clock=clock, lead_minutes=lead_minutes),
        lead_minutes=lead_minutes,
        refresh_interval=float(getattr(settings, "REFRESH_INTERVAL_SECONDS", DEFAULT_REFRESH_INTERVAL_SECONDS)),
        tick_interval=float(getattr(settings, "COUNTDOWN_TICK_SECONDS", DEFAULT_COUNTDOWN_TICK_SECONDS)),
    )
