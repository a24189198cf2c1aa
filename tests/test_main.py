"""Tests for the entry point wiring."""

import pymssql

import main
from tests.conftest import FakeServer


def test_main_runs_demo_over_one_connection(monkeypatch, capsys):
    server = FakeServer()
    monkeypatch.setattr(pymssql, "connect", server)
    monkeypatch.setattr(main, "configure_logging", lambda: None)

    main.main()

    assert capsys.readouterr().out == "Executing GetBadType\nExecuting GetGoodType\n"
    assert len(server.connections) == 1
    assert server.connections[0].closed
    assert [params for _, params in server.connections[0].executed] == [
        ("Hello World",),
        (b"Hello World",),
    ]
