from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..clock.authority import Clock
from ..core.constants import DEFAULT_CHECKIN_LEAD_MINUTES
from ..core.enums import CheckAction
from ..core.exceptions import StationInvalidError
from ..schedules.model import WorkSchedule
from ..stations.credential_store import StationCredentialStore
from .gateway import AttendanceGateway
from .model import Timesheet
from .state import ensure_transition
from .window import ensure_check_in_open

logger = logging.getLogger(__name__)


class StationAttendanceService:
    """Station-side driver of the attendance state machine.

    Local checks give immediate feedback without a network round trip; the
    collaborator still decides and its rejections are passed through as-is.
    """

    def __init__(
        self,
        gateway: AttendanceGateway,
        credentials: StationCredentialStore,
        *,
        clock: Clock,
        lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES,
    ):
        self._gateway = gateway
        self._credentials = credentials
        self._clock = clock
        self._lead_minutes = int(lead_minutes)

    def check_in(
        self,
        *,
        schedule: WorkSchedule,
        timesheet: Optional[Timesheet],
        verification: Mapping[str, Any],
    ) -> Timesheet:
        ensure_transition(CheckAction.CHECK_IN, timesheet)
        ensure_check_in_open(self._clock.now(), schedule.expected_start, lead_minutes=self._lead_minutes)
        return self._submit(CheckAction.CHECK_IN, schedule, verification)

    def check_out(
        self,
        *,
        schedule: WorkSchedule,
        timesheet: Optional[Timesheet],
        verification: Mapping[str, Any],
    ) -> Timesheet:
        ensure_transition(CheckAction.CHECK_OUT, timesheet)
        return self._submit(CheckAction.CHECK_OUT, schedule, verification)

    def _submit(self, action: CheckAction, schedule: WorkSchedule, verification: Mapping[str, Any]) -> Timesheet:
        token = self._credentials.get()
        if not token:
            raise StationInvalidError("This station is not registered")

        try:
            timesheet = self._gateway.submit(
                action=action,
                schedule_id=schedule.schedule_id,
                employee_id=schedule.user_id,
                station_token=token,
                verification=verification,
            )
        except StationInvalidError:
            self._credentials.clear()
            logger.warning("station_credential_rejected", extra={"schedule_id": schedule.schedule_id})
            raise

        logger.info("attendance_submitted", extra={"action": action.value, "schedule_id": schedule.schedule_id})
        return timesheet
