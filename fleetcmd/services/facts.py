"""Fact gathering: retrieve status documents over one session and normalize them."""

from __future__ import annotations

from fleetcmd.exceptions import DeviceError
from fleetcmd.models.credential import Credential
from fleetcmd.models.facts import DeviceFacts, FactRecord
from fleetcmd.services.pipeline import device_session
from fleetcmd.services.reporter import Reporter
from fleetcmd.services.transport import Transport
from fleetcmd.utils.junos_xml import normalize_facts
from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)

VERSION_COMMAND = "show version | display xml"
UPTIME_COMMAND = "show system uptime | display xml"
HARDWARE_COMMAND = "show chassis hardware | display xml"

FIELD_LABELS: dict[str, str] = {
    "host_name": "Host Name",
    "model": "Model",
    "software_type": "Software Type",
    "software_version": "Software Version",
    "last_boot": "Last Boot",
    "last_configured": "Last Configured",
    "uptime": "Uptime",
    "serial": "Serial Number",
}


def query_facts(
    transport: Transport,
    device: str,
    credential: Credential,
    *,
    full: bool = True,
) -> DeviceFacts:
    """Fetch and normalize facts, raising :class:`DeviceError` on any failure.

    With ``full=False`` only the version document is queried, so boot,
    configuration, uptime and serial fields stay empty.
    """
    uptime = hardware = None
    with device_session(transport, device, credential) as session:
        version = transport.execute(session, VERSION_COMMAND)
        if full:
            uptime = transport.execute(session, UPTIME_COMMAND)
            hardware = transport.execute(session, HARDWARE_COMMAND)
    facts = normalize_facts(version, uptime, hardware)
    log.info("facts.collected", device=device, kind=facts.kind)
    return facts


def gather_facts(
    transport: Transport,
    device: str,
    credential: Credential,
    reporter: Reporter,
    *,
    full: bool = True,
) -> DeviceFacts | None:
    """Return the device's facts, or None after reporting the failure."""
    try:
        return query_facts(transport, device, credential, full=full)
    except DeviceError as exc:
        log.warning("facts.failed", device=device, kind=exc.kind.value, error=str(exc))
        reporter.failure(device)
        return None


def format_record(record: FactRecord, indent: str = "") -> list[str]:
    width = max(len(label) for label in FIELD_LABELS.values())
    values = record.model_dump()
    return [
        f"{indent}{label:<{width}} : {values[field]}"
        for field, label in FIELD_LABELS.items()
    ]


def format_facts(facts: DeviceFacts) -> list[str]:
    if facts.kind == "single":
        return format_record(facts.record)
    lines: list[str] = []
    for node, record in facts.records.items():
        lines.append(f"{node}:")
        lines.extend(format_record(record, indent="  "))
    return lines


def show_facts(
    transport: Transport,
    device: str,
    credential: Credential,
    reporter: Reporter,
    *,
    full: bool = True,
) -> bool:
    """Display-only mode: print the facts, or no facts at all on failure."""
    facts = gather_facts(transport, device, credential, reporter, full=full)
    if facts is None:
        return False
    for line in format_facts(facts):
        reporter.content(line)
    return True
