from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Sequence

from ..core.exceptions import NotFoundError, ValidationError
from ..common.datetime_utils import to_wall_clock
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..shifts.model import ShiftCode, parse_shift_code
from .model import BulkCreateResult, BulkFailure, WorkSchedule, WorkScheduleDraft
from .repository import ScheduleRepository

_SELECT = """
    SELECT
        sc.schedule_id,
        sc.user_id,
        sc.work_date,
        sc.shift_code,
        sc.expected_start,
        sc.expected_end,
        u.full_name,
        u.email
    FROM work_schedules sc
    LEFT JOIN users u ON u.user_id = sc.user_id
"""


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo = timezone.utc):
        self._conn_factory = conn_factory
        self._tz = tz

    def _attach(self, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return value.replace(tzinfo=self._tz)

    def _to_schedule(self, r: dict) -> WorkSchedule:
        return WorkSchedule(
            schedule_id=int(r["schedule_id"]),
            user_id=int(r["user_id"]),
            work_date=r["work_date"],
            shift_code=parse_shift_code(r["shift_code"]),
            expected_start=self._attach(r.get("expected_start")),
            expected_end=self._attach(r.get("expected_end")),
            employee_name=r.get("full_name"),
            employee_email=r.get("email"),
        )

    def _insert_params(self, draft: WorkScheduleDraft) -> tuple:
        return (
            int(draft.user_id),
            draft.work_date,
            draft.shift_code.value,
            to_wall_clock(draft.expected_start, tz=self._tz),
            to_wall_clock(draft.expected_end, tz=self._tz),
        )

    def list_range(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
        shift_code: Optional[ShiftCode] = None,
    ) -> Sequence[WorkSchedule]:
        clauses = ["sc.work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if user_id is not None:
            clauses.append("sc.user_id=%s")
            params.append(int(user_id))
        if shift_code is not None:
            clauses.append("sc.shift_code=%s")
            params.append(shift_code.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY sc.work_date ASC, sc.expected_start ASC, sc.user_id ASC",
                tuple(params),
            )
            return [self._to_schedule(r) for r in fetchall(cur)]

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE sc.schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return self._to_schedule(r) if r else None

    def create(self, draft: WorkScheduleDraft) -> WorkSchedule:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO work_schedules(user_id, work_date, shift_code, expected_start, expected_end)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    self._insert_params(draft),
                )
                schedule_id = int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise ValidationError("Employee already has this shift on that date") from exc
            raise

        created = self.get_by_id(schedule_id)
        if created is None:
            raise NotFoundError(f"Schedule {schedule_id} vanished after insert")
        return created

    def create_bulk(self, drafts: Sequence[WorkScheduleDraft]) -> BulkCreateResult:
        drafts = list(drafts)
        created_ids: list[int] = []
        failures: list[BulkFailure] = []

        with db_cursor(self._conn_factory) as (_, cur):
            for index, draft in enumerate(drafts):
                try:
                    cur.execute(
                        """
                        INSERT INTO work_schedules(user_id, work_date, shift_code, expected_start, expected_end)
                        VALUES(%s,%s,%s,%s,%s)
                        """,
                        self._insert_params(draft),
                    )
                except Exception as exc:
                    # A failed statement only undoes itself; earlier rows stay.
                    if not is_duplicate_key(exc):
                        raise
                    failures.append(BulkFailure(index=index, draft=draft, reason="duplicate"))
                    continue
                created_ids.append(int(cur.lastrowid))

        created = [s for s in (self.get_by_id(i) for i in created_ids) if s is not None]
        return BulkCreateResult(requested=len(drafts), created=tuple(created), failures=tuple(failures))

    def update(
        self,
        *,
        schedule_id: int,
        work_date: Optional[date] = None,
        shift_code: Optional[ShiftCode] = None,
        expected_start: Optional[datetime] = None,
        expected_end: Optional[datetime] = None,
    ) -> WorkSchedule:
        sets: list[str] = []
        params: list[object] = []
        if work_date is not None:
            sets.append("work_date=%s")
            params.append(work_date)
        if shift_code is not None:
            sets.append("shift_code=%s")
            params.append(shift_code.value)
        if expected_start is not None:
            sets.append("expected_start=%s")
            params.append(to_wall_clock(expected_start, tz=self._tz))
        if expected_end is not None:
            sets.append("expected_end=%s")
            params.append(to_wall_clock(expected_end, tz=self._tz))

        if sets:
            params.append(int(schedule_id))
            try:
                with db_cursor(self._conn_factory) as (_, cur):
                    cur.execute(f"UPDATE work_schedules SET {', '.join(sets)} WHERE schedule_id=%s", tuple(params))
            except Exception as exc:
                if is_duplicate_key(exc):
                    raise ValidationError("Employee already has this shift on that date") from exc
                raise

        updated = self.get_by_id(schedule_id)
        if updated is None:
            raise NotFoundError(f"Schedule {schedule_id} not found")
        return updated

    def delete(self, *, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0
