"""Employee-facing station screen model.

Two background tasks run while the view is open: a refresh task that reloads
schedules and timesheets every ``refresh_interval`` seconds, and a countdown
task that recomputes the cards every ``tick_interval`` seconds from the
authoritative clock without any network call. Both are torn down by ``stop``.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional, Sequence

from ..attendance.gateway import AttendanceGateway
from ..attendance.model import Timesheet
from ..attendance.state import derive_state
from ..attendance.station_service import StationAttendanceService
from ..attendance.window import Countdown, countdown_to_open, is_check_in_open
from ..clock.authority import ClockAuthority
from ..core.constants import (
    DEFAULT_CHECKIN_LEAD_MINUTES,
    DEFAULT_COUNTDOWN_TICK_SECONDS,
    DEFAULT_REFRESH_INTERVAL_SECONDS,
)
from ..core.enums import AttendanceState, CheckAction
from ..core.exceptions import ActionInProgressError, DomainError, NotFoundError, StationInvalidError
from ..schedules.model import WorkSchedule
from ..schedules.repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftCard:
    schedule: WorkSchedule
    timesheet: Optional[Timesheet]
    state: AttendanceState
    window_open: bool
    countdown: Optional[Countdown]

    @property
    def can_check_in(self) -> bool:
        return self.state == AttendanceState.AWAITING_CHECK_IN and self.window_open

    @property
    def can_check_out(self) -> bool:
        return self.state == AttendanceState.CHECKED_IN


class StationView:
    def __init__(
        self,
        *,
        user_id: int,
        clock: ClockAuthority,
        schedules: ScheduleRepository,
        gateway: AttendanceGateway,
        attendance: StationAttendanceService,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        tick_interval: float = DEFAULT_COUNTDOWN_TICK_SECONDS,
        lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES,
        on_registration_required: Optional[Callable[[], None]] = None,
    ):
        self.user_id = int(user_id)
        self._clock = clock
        self._schedules = schedules
        self._gateway = gateway
        self._attendance = attendance
        self._refresh_interval = float(refresh_interval)
        self._tick_interval = float(tick_interval)
        self._lead_minutes = int(lead_minutes)
        self._on_registration_required = on_registration_required

        self._rows: list[WorkSchedule] = []
        self._timesheets: dict[int, Timesheet] = {}
        self._in_flight = False
        # Bumped by every completed action; older refresh results are dropped.
        self._generation = 0
        self._stop_event: Optional[asyncio.Event] = None
        self._tasks: list[asyncio.Task] = []

        self.cards: list[ShiftCard] = []
        self.registration_required = False

    @property
    def busy(self) -> bool:
        """True while a check-in/out round trip is outstanding."""
        return self._in_flight

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    async def start(self) -> None:
        if self._tasks:
            return
        await asyncio.to_thread(self._clock.sync_clock)
        await self.refresh()

        self._stop_event = asyncio.Event()
        self._tasks = [
            asyncio.create_task(self._every(self._refresh_interval, self.refresh)),
            asyncio.create_task(self._every(self._tick_interval, self._tick)),
        ]
        logger.info(
            "station_view_started",
            extra={"user_id": self.user_id, "clock_degraded": self._clock.degraded},
        )

    async def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with suppress(asyncio.CancelledError):
                await task
        self._tasks = []
        self._stop_event = None

    async def _every(self, interval: float, job: Callable[[], Any]) -> None:
        stop_event = self._stop_event
        while stop_event is not None and not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                result = job()
                if asyncio.iscoroutine(result):
                    await result

    async def _tick(self) -> None:
        self.recompute()

    def _load(self) -> tuple[list[WorkSchedule], Mapping[int, Timesheet]]:
        today = self._clock.now().date()
        # Yesterday too, so an overnight shift can still be checked out.
        rows = list(self._schedules.list_range(start=today - timedelta(days=1), end=today, user_id=self.user_id))
        timesheets = self._gateway.list_timesheets([s.schedule_id for s in rows])
        return rows, timesheets

    async def refresh(self) -> None:
        generation = self._generation
        try:
            rows, timesheets = await asyncio.to_thread(self._load)
        except StationInvalidError:
            self._mark_unregistered()
            return
        except DomainError:
            logger.exception("station_refresh_failed", extra={"user_id": self.user_id})
            return

        if generation != self._generation:
            logger.info("station_refresh_stale", extra={"user_id": self.user_id})
            return

        self._rows = sorted(rows, key=lambda s: (s.work_date, s.schedule_id))
        self._timesheets = dict(timesheets)
        self.recompute()

    def recompute(self) -> list[ShiftCard]:
        now = self._clock.now()
        self.cards = [
            ShiftCard(
                schedule=s,
                timesheet=self._timesheets.get(s.schedule_id),
                state=derive_state(self._timesheets.get(s.schedule_id)),
                window_open=is_check_in_open(now, s.expected_start, lead_minutes=self._lead_minutes),
                countdown=countdown_to_open(now, s.expected_start, lead_minutes=self._lead_minutes),
            )
            for s in self._rows
        ]
        return self.cards

    def card(self, schedule_id: int) -> Optional[ShiftCard]:
        for card in self.cards:
            if card.schedule.schedule_id == int(schedule_id):
                return card
        return None

    def _mark_unregistered(self) -> None:
        self.registration_required = True
        logger.warning("station_registration_required", extra={"user_id": self.user_id})
        if self._on_registration_required is not None:
            self._on_registration_required()

    async def check_in(self, schedule_id: int, verification: Mapping[str, Any]) -> Timesheet:
        return await self._act(CheckAction.CHECK_IN, schedule_id, verification)

    async def check_out(self, schedule_id: int, verification: Mapping[str, Any]) -> Timesheet:
        return await self._act(CheckAction.CHECK_OUT, schedule_id, verification)

    async def _act(self, action: CheckAction, schedule_id: int, verification: Mapping[str, Any]) -> Timesheet:
        if self._in_flight:
            raise ActionInProgressError("Another check-in/out is still being processed")

        schedule = next((s for s in self._rows if s.schedule_id == int(schedule_id)), None)
        if schedule is None:
            raise NotFoundError(f"Schedule {schedule_id} is not on this station's list")

        service_call = self._attendance.check_in if action == CheckAction.CHECK_IN else self._attendance.check_out
        self._in_flight = True
        try:
            timesheet = await asyncio.to_thread(
                service_call,
                schedule=schedule,
                timesheet=self._timesheets.get(schedule.schedule_id),
                verification=verification,
            )
        except StationInvalidError:
            self._mark_unregistered()
            raise
        finally:
            self._in_flight = False

        # Local state changes only once the round trip has completed.
        self._timesheets[schedule.schedule_id] = timesheet
        self._generation += 1
        self.recompute()
        return timesheet

    def schedules(self) -> Sequence[WorkSchedule]:
        return list(self._rows)
