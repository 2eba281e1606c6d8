"""Register a check-in station and print its token (shown once).

Usage:
    python scripts/register_station.py "Front desk"
    python scripts/register_station.py --revoke 3
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import load_settings

from src.shift_attendance.shift_attendance.database.connection import DBConfig, DatabaseConnection
from src.shift_attendance.shift_attendance.stations.mysql_station_repository import MySQLStationRepository


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("name", nargs="?", help="Station name")
    parser.add_argument("--revoke", type=int, metavar="STATION_ID", help="Deactivate a station")
    args = parser.parse_args()

    load_dotenv(override=False)
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(load_settings().DB_CONFIG))
    stations = MySQLStationRepository(conn)

    if args.revoke is not None:
        ok = stations.revoke(args.revoke)
        print("revoked" if ok else "no such station")
        return
    if not args.name:
        parser.error("a station name is required")

    station, token = stations.register(args.name)
    print(f"station_id={station.station_id}")
    print(f"token={token}")


if __name__ == "__main__":
    main()
