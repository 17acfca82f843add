from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from mysql.connector import pooling
from mysql.connector.constants import ClientFlag

from ..core.constants import DEFAULT_POOL_SIZE

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = DEFAULT_POOL_SIZE


class DatabaseConnection:
    """Singleton-like factory handing out connections from a bounded pool.

    The pool is created on first use so building the app does not require a
    reachable server. FOUND_ROWS makes ``rowcount`` report matched rows for
    UPDATE statements, not only changed ones.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            logger.info(
                "Opening MySQL pool %s@%s:%s/%s (size=%s)",
                self._config.user,
                self._config.host,
                self._config.port,
                self._config.database,
                self._config.pool_size,
            )
            self._pool = pooling.MySQLConnectionPool(
                pool_name="class_attendance",
                pool_size=int(self._config.pool_size),
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                client_flags=[ClientFlag.FOUND_ROWS],
                autocommit=False,
            )
        return self._pool

    def connect(self):
        """Borrow a pooled connection; ``close()`` returns it to the pool.

        Raises ``mysql.connector.errors.PoolError`` when every connection is busy.
        """
        # no waiting: an exhausted pool fails this request with PoolError (answered as 500)
        return self._get_pool().get_connection()
