from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_non_empty
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Station
from .repository import StationRepository
from .tokens import issue_station_token, token_matches, token_prefix

logger = logging.getLogger(__name__)


class MySQLStationRepository(StationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def authenticate(self, token: str) -> Optional[Station]:
        if not token:
            return None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT station_id, station_name, token_hash, is_active
                FROM stations
                WHERE token_prefix=%s AND is_active=1
                """,
                (token_prefix(token),),
            )
            for r in fetchall(cur):
                if token_matches(token, r["token_hash"]):
                    return Station(station_id=int(r["station_id"]), station_name=r["station_name"], is_active=True)
        return None

    def register(self, station_name: str) -> tuple[Station, str]:
        name = require_non_empty(station_name, "station_name")
        issued = issue_station_token()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO stations(station_name, token_hash, token_prefix, is_active)
                VALUES (%s,%s,%s,1)
                """,
                (name, issued.token_hash, issued.prefix),
            )
            station_id = int(cur.lastrowid)
        logger.info("station_registered", extra={"station_id": station_id, "station_name": name})
        return Station(station_id=station_id, station_name=name, is_active=True), issued.token

    def revoke(self, station_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE stations SET is_active=0 WHERE station_id=%s", (int(station_id),))
            changed = cur.rowcount > 0
        if changed:
            logger.info("station_revoked", extra={"station_id": int(station_id)})
        return changed
