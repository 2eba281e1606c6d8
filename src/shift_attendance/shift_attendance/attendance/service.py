from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..clock.authority import Clock
from ..core.constants import DEFAULT_CHECKIN_LEAD_MINUTES
from ..core.enums import CheckAction
from ..core.exceptions import AuthorizationError, IdentityRejectedError, NotFoundError, StationInvalidError
from ..schedules.model import WorkSchedule
from ..schedules.repository import ScheduleRepository
from ..stations.model import Station
from ..stations.repository import StationRepository
from .factory import CheckInStatusFactory
from .gateway import IdentityVerifier
from .model import Timesheet
from .repository import TimesheetRepository
from .state import ensure_transition
from .window import ensure_check_in_open

logger = logging.getLogger(__name__)


class AttendanceService:
    """Server-side authority for check-in/check-out.

    Re-checks everything a station already checked locally (state, window) on
    the server clock; the store's one-Timesheet-per-schedule constraint is the
    final word on races.
    """

    def __init__(
        self,
        timesheets: TimesheetRepository,
        schedules: ScheduleRepository,
        stations: StationRepository,
        verifier: IdentityVerifier,
        *,
        clock: Clock,
        status_factory: Optional[CheckInStatusFactory] = None,
        lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES,
    ):
        self._timesheets = timesheets
        self._schedules = schedules
        self._stations = stations
        self._verifier = verifier
        self._clock = clock
        self._factory = status_factory or CheckInStatusFactory()
        self._lead_minutes = int(lead_minutes)

    def list_timesheets(self, schedule_ids: Sequence[int]) -> Sequence[Timesheet]:
        return self._timesheets.list_for_schedules([int(i) for i in schedule_ids])

    def _authorize(self, *, schedule_id: int, employee_id: int, station_token: str) -> tuple[Station, WorkSchedule]:
        station = self._stations.authenticate(station_token or "")
        if station is None:
            raise StationInvalidError("This station is not registered or has been revoked")

        schedule = self._schedules.get_by_id(int(schedule_id))
        if schedule is None:
            raise NotFoundError(f"Schedule {schedule_id} not found")
        if schedule.user_id != int(employee_id):
            raise AuthorizationError("This shift belongs to another employee")
        return station, schedule

    def _verify(self, *, employee_id: int, verification: Mapping[str, Any]) -> None:
        if not self._verifier.verify(employee_id=int(employee_id), verification=verification):
            raise IdentityRejectedError("Identity not recognized")

    def check_in(
        self,
        *,
        schedule_id: int,
        employee_id: int,
        station_token: str,
        verification: Mapping[str, Any],
    ) -> Timesheet:
        station, schedule = self._authorize(schedule_id=schedule_id, employee_id=employee_id, station_token=station_token)

        ensure_transition(CheckAction.CHECK_IN, self._timesheets.get_for_schedule(schedule.schedule_id))
        now = self._clock.now()
        ensure_check_in_open(now, schedule.expected_start, lead_minutes=self._lead_minutes)
        self._verify(employee_id=employee_id, verification=verification)

        strategy = self._factory.for_checkin(check_in_at=now, expected_start=schedule.expected_start)
        decision = strategy.decide(check_in_at=now, expected_start=schedule.expected_start)
        timesheet = self._timesheets.create_checkin(
            schedule_id=schedule.schedule_id,
            check_in_at=now,
            status=decision.status,
            station_id=station.station_id,
        )
        logger.info(
            "attendance_checked_in",
            extra={
                "schedule_id": schedule.schedule_id,
                "user_id": schedule.user_id,
                "station_id": station.station_id,
                "status": decision.status.value,
                "late_minutes": decision.late_minutes,
            },
        )
        return timesheet

    def check_out(
        self,
        *,
        schedule_id: int,
        employee_id: int,
        station_token: str,
        verification: Mapping[str, Any],
    ) -> Timesheet:
        station, schedule = self._authorize(schedule_id=schedule_id, employee_id=employee_id, station_token=station_token)

        current = self._timesheets.get_for_schedule(schedule.schedule_id)
        ensure_transition(CheckAction.CHECK_OUT, current)
        self._verify(employee_id=employee_id, verification=verification)

        now = self._clock.now()
        if current.check_in_at is not None and now < current.check_in_at:
            now = current.check_in_at
        timesheet = self._timesheets.update_checkout(timesheet_id=current.timesheet_id, check_out_at=now)
        logger.info(
            "attendance_checked_out",
            extra={"schedule_id": schedule.schedule_id, "user_id": schedule.user_id, "station_id": station.station_id},
        )
        return timesheet
