from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import to_wall_clock
from ..core.enums import AttendanceState, TimesheetStatus
from ..core.exceptions import InvalidTransitionError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, is_duplicate_key
from .model import Timesheet, parse_status
from .repository import TimesheetRepository

_SELECT = """
    SELECT timesheet_id, schedule_id, check_in_at, check_out_at, status_code
    FROM timesheets
"""


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo = timezone.utc):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_timesheet(self, r: dict) -> Timesheet:
        check_in = r.get("check_in_at")
        check_out = r.get("check_out_at")
        return Timesheet(
            timesheet_id=int(r["timesheet_id"]),
            schedule_id=int(r["schedule_id"]),
            check_in_at=check_in.replace(tzinfo=self._tz) if check_in else None,
            check_out_at=check_out.replace(tzinfo=self._tz) if check_out else None,
            status_code=parse_status(r.get("status_code")),
        )

    def _get_by_id(self, timesheet_id: int) -> Optional[Timesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE timesheet_id=%s", (int(timesheet_id),))
            r = fetchone(cur)
            return self._to_timesheet(r) if r else None

    def get_for_schedule(self, schedule_id: int) -> Optional[Timesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return self._to_timesheet(r) if r else None

    def list_for_schedules(self, schedule_ids: Sequence[int]) -> Sequence[Timesheet]:
        ids = [int(i) for i in schedule_ids]
        if not ids:
            return []
        placeholders, params = in_clause(ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE schedule_id IN {placeholders}", params)
            return [self._to_timesheet(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        schedule_id: int,
        check_in_at: datetime,
        status: TimesheetStatus,
        station_id: Optional[int] = None,
    ) -> Timesheet:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO timesheets(schedule_id, check_in_at, status_code, station_id)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(schedule_id), to_wall_clock(check_in_at, tz=self._tz), status.value, station_id),
                )
                timesheet_id = int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise InvalidTransitionError(
                    "Already checked in for this shift", state=AttendanceState.CHECKED_IN
                ) from exc
            raise

        created = self._get_by_id(timesheet_id)
        if created is None:
            raise NotFoundError(f"Timesheet {timesheet_id} vanished after insert")
        return created

    def update_checkout(self, *, timesheet_id: int, check_out_at: datetime) -> Timesheet:
        with db_cursor(self._conn_factory) as (_, cur):
            # Guarded update: a concurrent check-out loses instead of overwriting.
            cur.execute(
                "UPDATE timesheets SET check_out_at=%s WHERE timesheet_id=%s AND check_out_at IS NULL",
                (to_wall_clock(check_out_at, tz=self._tz), int(timesheet_id)),
            )
            changed = cur.rowcount > 0

        if not changed:
            raise InvalidTransitionError("Already checked out for this shift", state=AttendanceState.COMPLETED)
        updated = self._get_by_id(timesheet_id)
        if updated is None:
            raise NotFoundError(f"Timesheet {timesheet_id} not found")
        return updated
