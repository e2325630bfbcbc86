"""Per-device execution pipeline.

open session -> execute -> close, with the close guaranteed on every path.
Device-level failures come back as :class:`ExecutionResult` values; only
programming faults propagate (after the session has been released).
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Sequence

from fleetcmd.exceptions import DeviceError, TemplateError
from fleetcmd.models.credential import Credential
from fleetcmd.models.results import ExecutionResult
from fleetcmd.services.inventory import read_targets
from fleetcmd.services.reporter import Reporter
from fleetcmd.services.template import join_commands, read_lines
from fleetcmd.services.transport import Transport
from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)


@contextmanager
def device_session(
    transport: Transport,
    address: str,
    credential: Credential,
) -> Iterator[Any]:
    """Scoped session: released exactly once however the body exits."""
    session = transport.open(address, credential)
    try:
        yield session
    finally:
        transport.close(session)


def run_command(
    transport: Transport,
    device: str,
    credential: Credential,
    command: str,
) -> ExecutionResult:
    """Execute a single command string on *device*."""
    log.debug("pipeline.start", device=device)
    try:
        with device_session(transport, device, credential) as session:
            output = transport.execute(session, command)
    except DeviceError as exc:
        log.warning("pipeline.failed", device=device, kind=exc.kind.value, error=str(exc))
        return ExecutionResult(
            device=device,
            succeeded=False,
            error=exc.kind,
            message=str(exc),
        )
    log.info("pipeline.done", device=device)
    return ExecutionResult(device=device, raw_output=output.rstrip(), succeeded=True)


def load_command_source(path: str | Path) -> str:
    """Read a command list file and join it into one command string."""
    lines = read_lines(path)
    if not lines:
        raise TemplateError(f"Command file {path} is empty")
    return join_commands(lines)


def run_command_source(
    transport: Transport,
    device: str,
    credential: Credential,
    source: str | Path,
) -> ExecutionResult:
    return run_command(transport, device, credential, load_command_source(source))


def resolve_command(
    command: str | None = None,
    command_file: str | Path | None = None,
) -> str:
    """Pick the command string for an ad-hoc run (file takes precedence)."""
    if command_file:
        return load_command_source(command_file)
    if command:
        return command
    raise TemplateError("Either a command or a command file is required")


# ── ad-hoc entry point ────────────────────────────────────────────────────


def invoke(
    transport: Transport,
    targets: Sequence[str],
    credential: Credential,
    command: str,
    reporter: Reporter,
) -> list[ExecutionResult]:
    """Run *command* on each target in order, isolating failures per target.

    One credential is reused for the whole list.
    """
    reporter.open()
    results: list[ExecutionResult] = []
    for device in targets:
        reporter.status(f"Running command on {device}")
        result = run_command(transport, device, credential, command)
        if result.succeeded:
            reporter.content(result.raw_output)
        else:
            reporter.failure(device)
        results.append(result)

    errors = sum(1 for r in results if not r.succeeded)
    report_summary(reporter, errors)
    return results


def invoke_targets_file(
    transport: Transport,
    targets_path: str | Path,
    credential: Credential,
    command: str,
    reporter: Reporter,
) -> list[ExecutionResult]:
    return invoke(transport, read_targets(targets_path), credential, command, reporter)


def report_summary(reporter: Reporter, errors: int) -> None:
    message = f"Completed with {errors} error(s)."
    if errors and reporter.log_path is not None:
        message += f" See {reporter.log_path} for details."
    reporter.status(message)
