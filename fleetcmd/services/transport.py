"""Remote command transport backed by scrapli's ``JunosDriver``.

The rest of the package only talks to the three-call surface
``open`` / ``execute`` / ``close``; scrapli and socket errors are translated
into :class:`~fleetcmd.exceptions.TransportError` here so callers never need
to know about scrapli's exception tree.
"""

from __future__ import annotations

from typing import Any, Protocol

from scrapli.driver.core import JunosDriver
from scrapli.exceptions import ScrapliAuthenticationFailed, ScrapliException

from fleetcmd.config import Settings, settings
from fleetcmd.exceptions import ErrorKind, TransportError
from fleetcmd.models.credential import Credential
from fleetcmd.services.template import split_command
from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)


class Transport(Protocol):
    def open(self, address: str, credential: Credential) -> Any: ...

    def execute(self, session: Any, command: str) -> str: ...

    def close(self, session: Any) -> None: ...


class ScrapliTransport:
    """Opens one ``JunosDriver`` per session (paramiko transport by default)."""

    def __init__(self, cfg: Settings | None = None) -> None:
        self._cfg = cfg or settings

    def _build_driver(self, address: str, credential: Credential) -> JunosDriver:
        auth_kwargs: dict = dict(
            host=address,
            port=self._cfg.ssh_port,
            auth_username=credential.identity,
            auth_password=credential.reveal(),
            auth_strict_key=self._cfg.auth_strict_key,
            transport=self._cfg.ssh_transport,
            timeout_socket=self._cfg.timeout_socket,
            timeout_transport=self._cfg.timeout_transport,
            timeout_ops=self._cfg.timeout_ops,
        )
        if self._cfg.ssh_key_path:
            auth_kwargs["auth_private_key"] = self._cfg.ssh_key_path
        return JunosDriver(**auth_kwargs)

    def open(self, address: str, credential: Credential) -> JunosDriver:
        log.info("ssh.connecting", host=address, user=credential.identity)
        driver = self._build_driver(address, credential)
        try:
            driver.open()
        except ScrapliAuthenticationFailed as exc:
            raise TransportError(
                f"Authentication failed for {address}: {exc}",
                kind=ErrorKind.auth,
            ) from exc
        except (ScrapliException, OSError) as exc:
            raise TransportError(
                f"Unable to connect to {address}: {exc}",
                kind=ErrorKind.connect,
            ) from exc
        log.info("ssh.connected", host=address)
        return driver

    def execute(self, session: JunosDriver, command: str) -> str:
        """Run *command* and return its combined output.

        The Junos CLI has no statement separator, so a joined command string
        is replayed statement by statement on the open channel. Nothing is
        sent after the first rejected statement, so a trailing commit never
        runs on a partially applied template.
        """
        statements = split_command(command, self._cfg.command_separator)
        try:
            multi = session.send_commands(statements, stop_on_failed=True)
        except (ScrapliException, OSError) as exc:
            raise TransportError(
                f"Command execution failed on {session.host}: {exc}",
                kind=ErrorKind.execute,
            ) from exc
        if multi.failed:
            failed = [r.channel_input for r in multi if r.failed]
            raise TransportError(
                f"Device {session.host} rejected: {', '.join(failed)}",
                kind=ErrorKind.execute,
            )
        return "\n".join(r.result for r in multi)

    def close(self, session: JunosDriver) -> None:
        try:
            session.close()
        except (ScrapliException, OSError) as exc:
            log.warning("ssh.close_failed", host=session.host, error=str(exc))
            return
        log.info("ssh.closed", host=session.host)


# Singleton instance
transport = ScrapliTransport()
