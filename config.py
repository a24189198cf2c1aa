"""
config.py
---------
Central configuration module. Loads the environment from the .env file
and exposes the SQL Server connection settings as typed values.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from utils.logger import get_logger

load_dotenv()

logger = get_logger(__name__)


# ── SQL Server ────────────────────────────────────────────
DEFAULT_CONNECTION_STRING = (
    "Server=localhost;Database=StackOverflow2010;"
    "Trusted_Connection=True;TrustServerCertificate=True;"
)

MSSQL_CONNECTION_STRING: str = os.getenv("MSSQL_CONNECTION_STRING", DEFAULT_CONNECTION_STRING)

# Client charset; narrow parameters are encoded with it before binding.
MSSQL_CHARSET = "UTF-8"

_TRUE_VALUES = {"true", "yes", "sspi", "1"}

_KEY_ALIASES = {
    "server": "server",
    "data source": "server",
    "address": "server",
    "addr": "server",
    "database": "database",
    "initial catalog": "database",
    "user id": "user",
    "uid": "user",
    "user": "user",
    "password": "password",
    "pwd": "password",
    "trusted_connection": "trusted",
    "integrated security": "trusted",
    "connect timeout": "login_timeout",
    "connection timeout": "login_timeout",
    "command timeout": "timeout",
    "application name": "appname",
}


@dataclass(frozen=True)
class ConnectionSettings:
    """
    Parsed SQL Server connection settings.

    Attributes:
        server: Host name, optionally with a ``\\instance`` suffix.
        database: Target database (catalog).
        port: TCP port when given as ``host,port``.
        user: SQL login; None for integrated authentication.
        password: SQL login password.
        trusted: True when integrated (Windows/Kerberos) auth is requested.
        login_timeout: Seconds to wait while connecting.
        timeout: Seconds to wait for a query; 0 means the driver default.
        appname: Application name reported to the server.
        ignored: Connection-string keys that have no pymssql counterpart.
    """
    server: str
    database: Optional[str] = None
    port: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    trusted: bool = False
    login_timeout: int = 60
    timeout: int = 0
    appname: Optional[str] = None
    ignored: tuple = field(default_factory=tuple)

    @classmethod
    def from_connection_string(cls, connection_string: str) -> "ConnectionSettings":
        """
        Parse an ADO-style ``key=value;`` connection string.

        Raises:
            ValueError: If the server is missing, no authentication mode is
                given, or a part is not of the form ``key=value``.
        """
        values: dict = {}
        ignored = []
        for part in connection_string.split(";"):
            part = part.strip()
            if not part:
                continue
            if "=" not in part:
                raise ValueError(f"Malformed connection string segment: '{part}'")
            key, value = part.split("=", 1)
            key = key.strip().lower()
            target = _KEY_ALIASES.get(key)
            if target is None:
                ignored.append(key)
                continue
            values[target] = value.strip()

        if ignored:
            logger.debug(f"Ignoring unsupported connection string keys: {', '.join(ignored)}")

        server = values.get("server")
        if not server:
            raise ValueError("Connection string does not name a server.")

        port = None
        if "," in server:
            server, port = (s.strip() for s in server.split(",", 1))
        if server.lower().startswith("tcp:"):
            server = server[4:]

        trusted = values.get("trusted", "").lower() in _TRUE_VALUES
        user = values.get("user") or None
        if not trusted and user is None:
            raise ValueError(
                "Connection string must use Trusted_Connection or supply a User Id."
            )

        return cls(
            server=server,
            database=values.get("database"),
            port=port,
            user=None if trusted else user,
            password=None if trusted else values.get("password"),
            trusted=trusted,
            login_timeout=int(values.get("login_timeout", 60)),
            timeout=int(values.get("timeout", 0)),
            appname=values.get("appname"),
            ignored=tuple(ignored),
        )

    def connect_kwargs(self) -> dict:
        """Keyword arguments for ``pymssql.connect``."""
        kwargs = {
            "server": self.server,
            "login_timeout": self.login_timeout,
            "timeout": self.timeout,
            "charset": MSSQL_CHARSET,
        }
        for name in ("database", "port", "user", "password", "appname"):
            value = getattr(self, name)
            if value is not None:
                kwargs[name] = value
        return kwargs


def load_connection_settings(connection_string: Optional[str] = None) -> ConnectionSettings:
    """Settings for the configured (or given) connection string."""
    return ConnectionSettings.from_connection_string(connection_string or MSSQL_CONNECTION_STRING)
