"""Tests for connection string parsing."""

import pytest

from config import DEFAULT_CONNECTION_STRING, MSSQL_CHARSET, ConnectionSettings


class TestConnectionSettings:

    def test_default_connection_string(self):
        settings = ConnectionSettings.from_connection_string(DEFAULT_CONNECTION_STRING)

        assert settings.server == "localhost"
        assert settings.database == "StackOverflow2010"
        assert settings.trusted is True
        assert settings.user is None
        assert "trustservercertificate" in settings.ignored

    def test_sql_login_with_port(self):
        settings = ConnectionSettings.from_connection_string(
            "Data Source=tcp:db.example.com,1433;Initial Catalog=Demo;"
            "User Id=sa;Password=Secret;Connect Timeout=5;Application Name=demo"
        )

        assert settings.server == "db.example.com"
        assert settings.port == "1433"
        assert settings.database == "Demo"
        assert settings.user == "sa"
        assert settings.password == "Secret"
        assert settings.login_timeout == 5
        assert settings.appname == "demo"

    def test_keys_are_case_insensitive(self):
        settings = ConnectionSettings.from_connection_string(
            "SERVER=host\\SQLEXPRESS;DATABASE=Demo;INTEGRATED SECURITY=SSPI"
        )

        assert settings.server == "host\\SQLEXPRESS"
        assert settings.trusted is True

    def test_password_may_contain_equals(self):
        settings = ConnectionSettings.from_connection_string("Server=h;UID=u;PWD=a=b")

        assert settings.password == "a=b"

    def test_missing_server_rejected(self):
        with pytest.raises(ValueError, match="server"):
            ConnectionSettings.from_connection_string("Database=Demo;Trusted_Connection=True")

    def test_missing_authentication_rejected(self):
        with pytest.raises(ValueError, match="Trusted_Connection"):
            ConnectionSettings.from_connection_string("Server=localhost;Database=Demo")

    def test_malformed_segment_rejected(self):
        with pytest.raises(ValueError, match="Malformed"):
            ConnectionSettings.from_connection_string("Server=localhost;oops")

    def test_connect_kwargs(self):
        settings = ConnectionSettings.from_connection_string(
            "Server=localhost,1444;Database=Demo;User Id=sa;Password=pw"
        )

        kwargs = settings.connect_kwargs()

        assert kwargs == {
            "server": "localhost",
            "port": "1444",
            "database": "Demo",
            "user": "sa",
            "password": "pw",
            "login_timeout": 60,
            "timeout": 0,
            "charset": MSSQL_CHARSET,
        }

    def test_trusted_connect_kwargs_have_no_credentials(self, settings):
        kwargs = settings.connect_kwargs()

        assert "user" not in kwargs
        assert "password" not in kwargs
