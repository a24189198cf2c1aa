"""
db/connection.py
----------------
Scoped SQL Server connection for one demo run.
The connection is opened on first use and released by `close()`, or on
leaving a `with` block, whatever way the block exits.
"""

from typing import Callable, Optional

import pymssql

from config import ConnectionSettings
from utils.logger import get_logger

logger = get_logger(__name__)


class DbSession:
    """Owns at most one pymssql connection."""

    def __init__(self, settings: ConnectionSettings, connect: Optional[Callable] = None):
        self.settings = settings
        self._connect = connect or pymssql.connect
        self._conn = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def get_connection(self):
        """
        Get the session's connection, opening it on first call.

        Returns:
            A DB-API connection object.

        Raises:
            pymssql.OperationalError: If the server is unreachable or the
                login is rejected.
        """
        if self._conn is not None:
            return self._conn
        target = f"{self.settings.server}/{self.settings.database or '(default)'}"
        try:
            self._conn = self._connect(**self.settings.connect_kwargs())
        except pymssql.Error as e:
            logger.error(f"Failed to connect to {target}: {e}")
            raise
        logger.info(f"Database connection to {target} opened.")
        return self._conn

    def close(self) -> None:
        """Release the connection if one was opened."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        conn.close()
        logger.info("Database connection closed.")

    def __enter__(self) -> "DbSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
