"""Tests for the scrapli transport adapter (driver replaced by a fake)."""

from __future__ import annotations

import pytest
from scrapli.exceptions import ScrapliAuthenticationFailed, ScrapliTimeout

import fleetcmd.services.transport as transport_mod
from fleetcmd.config import Settings
from fleetcmd.exceptions import ErrorKind, TransportError
from fleetcmd.services.template import render_command
from fleetcmd.services.transport import ScrapliTransport


class FakeResponse:
    def __init__(self, channel_input: str, result: str, failed: bool = False) -> None:
        self.channel_input = channel_input
        self.result = result
        self.failed = failed


class FakeMultiResponse(list):
    @property
    def failed(self) -> bool:
        return any(r.failed for r in self)


class FakeDriver:
    instances: list["FakeDriver"] = []
    open_error: Exception | None = None
    reject: set[str] = set()

    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs
        self.host = kwargs["host"]
        self.closed = False
        self.sent: list[str] = []
        FakeDriver.instances.append(self)

    def open(self) -> None:
        if FakeDriver.open_error is not None:
            raise FakeDriver.open_error

    def send_commands(self, commands, stop_on_failed=False):
        responses = FakeMultiResponse()
        for c in commands:
            self.sent.append(c)
            responses.append(FakeResponse(c, f"out:{c}", failed=c in FakeDriver.reject))
            if stop_on_failed and responses[-1].failed:
                break
        return responses

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_driver(monkeypatch):
    FakeDriver.instances = []
    FakeDriver.open_error = None
    FakeDriver.reject = set()
    monkeypatch.setattr(transport_mod, "JunosDriver", FakeDriver)
    return FakeDriver


def test_open_passes_settings(fake_driver, credential):
    cfg = Settings(ssh_port=2222, ssh_key_path="/keys/id_ed25519", timeout_ops=60)
    ScrapliTransport(cfg).open("fw1", credential)
    kwargs = fake_driver.instances[0].kwargs
    assert kwargs["host"] == "fw1"
    assert kwargs["port"] == 2222
    assert kwargs["auth_username"] == "netops"
    assert kwargs["auth_password"] == "s3cret"
    assert kwargs["auth_private_key"] == "/keys/id_ed25519"
    assert kwargs["timeout_ops"] == 60
    assert kwargs["transport"] == "paramiko"


def test_auth_failure_translated(fake_driver, credential):
    fake_driver.open_error = ScrapliAuthenticationFailed("bad password")
    with pytest.raises(TransportError) as excinfo:
        ScrapliTransport(Settings()).open("fw1", credential)
    assert excinfo.value.kind is ErrorKind.auth


@pytest.mark.parametrize("error", [ScrapliTimeout("timed out"), OSError("no route to host")])
def test_connect_failure_translated(fake_driver, credential, error):
    fake_driver.open_error = error
    with pytest.raises(TransportError) as excinfo:
        ScrapliTransport(Settings()).open("fw1", credential)
    assert excinfo.value.kind is ErrorKind.connect


def test_execute_replays_statements(fake_driver, credential):
    t = ScrapliTransport(Settings())
    session = t.open("fw1", credential)
    assert t.execute(session, "show version;show chassis alarms") == (
        "out:show version\nout:show chassis alarms"
    )


def test_execute_rejected_statement(fake_driver, credential):
    fake_driver.reject = {"commit"}
    t = ScrapliTransport(Settings())
    session = t.open("fw1", credential)
    with pytest.raises(TransportError, match="commit") as excinfo:
        t.execute(session, "configure;commit")
    assert excinfo.value.kind is ErrorKind.execute


def test_nothing_sent_after_rejected_statement(fake_driver, credential):
    fake_driver.reject = {"set bogus thing"}
    t = ScrapliTransport(Settings())
    session = t.open("fw1", credential)
    with pytest.raises(TransportError, match="set bogus thing"):
        t.execute(session, "configure;set bogus thing;commit and-quit")
    assert session.sent == ["configure", "set bogus thing"]


def test_separator_inside_parameter_kept(fake_driver, credential):
    command = render_command(
        ["configure", "set interfaces {0} description \"{1}\"", "commit and-quit"],
        ["ge-0/0/1", "uplink; core"],
    )
    t = ScrapliTransport(Settings())
    session = t.open("fw1", credential)
    t.execute(session, command)
    assert session.sent == [
        "configure",
        "set interfaces ge-0/0/1 description \"uplink; core\"",
        "commit and-quit",
    ]


def test_typed_command_split_on_separator(fake_driver, credential):
    t = ScrapliTransport(Settings())
    session = t.open("fw1", credential)
    t.execute(session, "show version; show chassis alarms")
    assert session.sent == ["show version", "show chassis alarms"]


def test_close(fake_driver, credential):
    t = ScrapliTransport(Settings())
    session = t.open("fw1", credential)
    t.close(session)
    assert session.closed
