from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "shift_attendance")),
            pool_size=int(db_config.get("pool_size", 5)),
        )


class DatabaseConnection:
    """Process-wide connection factory.

    Every repository call borrows a connection for one operation and returns
    it on close. With ``pool_size`` 0 a fresh connection is opened each time.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def _params(self) -> dict:
        return dict(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    def connect(self):
        if self._config.pool_size <= 0:
            return mysql.connector.connect(**self._params())
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=f"shift_attendance_{self._config.database}",
                pool_size=self._config.pool_size,
                **self._params(),
            )
        return self._pool.get_connection()
