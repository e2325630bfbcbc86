"""Utilities for parsing Junos ``| display xml`` output into fact records.

Two independent variants are selected once per document:

* topology: a single routing engine, or several wrapped in
  ``multi-routing-engine-results`` (dual-RE chassis, SRX clusters);
* packaging: SRX devices report one ``package-information`` element, every
  other family reports an ordered list whose first entry is authoritative.

Every reader below is a pure function from an element to plain values.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Optional

from lxml import etree

from fleetcmd.exceptions import FactsParseError
from fleetcmd.models.facts import DeviceFacts, FactRecord, MultiNodeFacts, SingleNodeFacts
from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)

MULTI_RESULTS = "multi-routing-engine-results"
MULTI_ITEM = "multi-routing-engine-item"

SOFTWARE_INFO = "software-information"
UPTIME_INFO = "system-uptime-information"
CHASSIS_INVENTORY = "chassis-inventory"

# "anything [capture] anything"
VERSION_IN_COMMENT = re.compile(r".*\[(.*)\].*")
ROUTING_ENGINE_MODULE = re.compile(r"routing engine", re.IGNORECASE)


class Topology(str, Enum):
    single = "single"
    multi = "multi"


class Packaging(str, Enum):
    single_package = "single_package"
    package_list = "package_list"


# ---------------------------------------------------------------------------
# Document handling
# ---------------------------------------------------------------------------

def parse_document(text: str) -> etree._Element:
    """Parse device output into an element tree with namespaces removed.

    Anything before the first ``<`` (``{master:0}`` banners and the like) and
    after the closing tag is discarded.
    """
    start = text.find("<")
    closing = text.rfind("</rpc-reply>")
    end = closing + len("</rpc-reply>") if closing != -1 else text.rfind(">") + 1
    if start == -1 or end <= start:
        raise FactsParseError("Device output does not contain an XML document")

    parser = etree.XMLParser(remove_blank_text=True, resolve_entities=False)
    try:
        root = etree.fromstring(text[start:end].encode("utf-8"), parser)
    except etree.XMLSyntaxError as exc:
        raise FactsParseError(f"Malformed XML from device: {exc}") from exc

    for el in root.iter():
        if isinstance(el.tag, str):
            el.tag = etree.QName(el).localname
    etree.cleanup_namespaces(root)
    return root


def _self_or_descendant(root: etree._Element, tag: str) -> Optional[etree._Element]:
    if root.tag == tag:
        return root
    return root.find(f".//{tag}")


def _text(el: Optional[etree._Element], path: str) -> str:
    if el is None:
        return ""
    return (el.findtext(path) or "").strip()


def detect_topology(root: etree._Element) -> Topology:
    if _self_or_descendant(root, MULTI_RESULTS) is not None:
        return Topology.multi
    return Topology.single


def node_sections(
    root: etree._Element,
    tag: str,
    topology: Topology,
) -> dict[str, etree._Element]:
    """Map node name to its *tag* element ("" is the implicit single node)."""
    if topology is Topology.single:
        if _self_or_descendant(root, MULTI_RESULTS) is not None:
            raise FactsParseError(f"Unexpected <{MULTI_RESULTS}> for <{tag}>")
        section = _self_or_descendant(root, tag)
        if section is None:
            raise FactsParseError(f"<{tag}> not found in device output")
        return {"": section}

    results = _self_or_descendant(root, MULTI_RESULTS)
    if results is None:
        raise FactsParseError(f"Expected <{MULTI_RESULTS}> in device output")
    sections: dict[str, etree._Element] = {}
    for item in results.findall(MULTI_ITEM):
        name = _text(item, "re-name")
        section = _self_or_descendant(item, tag)
        if not name or section is None:
            raise FactsParseError(f"Incomplete <{MULTI_ITEM}> for <{tag}>")
        sections[name] = section
    if not sections:
        raise FactsParseError(f"<{MULTI_RESULTS}> contains no nodes")
    return sections


# ---------------------------------------------------------------------------
# show version
# ---------------------------------------------------------------------------

def packaging_for(model: str) -> Packaging:
    if model.lower().startswith("srx"):
        return Packaging.single_package
    return Packaging.package_list


def _single_package(software: etree._Element) -> etree._Element:
    package = software.find("package-information")
    if package is None:
        raise FactsParseError("<package-information> not found")
    return package


def _package_list(software: etree._Element) -> etree._Element:
    packages = software.findall("package-information")
    if not packages:
        raise FactsParseError("No <package-information> entries found")
    return packages[0]


_PACKAGE_READERS: dict[Packaging, Callable[[etree._Element], etree._Element]] = {
    Packaging.single_package: _single_package,
    Packaging.package_list: _package_list,
}


def extract_version(comment: str) -> str:
    """``"JUNOS Software Release [20.4R3]"`` -> ``"20.4R3"``; no brackets -> ``""``."""
    match = VERSION_IN_COMMENT.match(comment or "")
    return match.group(1) if match else ""


def parse_software(software: etree._Element) -> dict[str, str]:
    model = _text(software, "product-model")
    package = _PACKAGE_READERS[packaging_for(model)](software)
    return {
        "host_name": _text(software, "host-name"),
        "model": model,
        "software_type": _text(package, "name"),
        "software_version": extract_version(_text(package, "comment")),
    }


# ---------------------------------------------------------------------------
# show system uptime
# ---------------------------------------------------------------------------

def parse_uptime(uptime: etree._Element) -> dict[str, str]:
    return {
        "last_boot": _text(uptime, "system-booted-time/date-time"),
        "last_configured": _text(uptime, "last-configured-time/date-time"),
        "uptime": _text(uptime, "uptime-information/up-time"),
    }


# ---------------------------------------------------------------------------
# show chassis hardware
# ---------------------------------------------------------------------------

def serial_from_node_inventory(inventory: etree._Element) -> str:
    """Multi-node chassis: the node's own chassis serial number."""
    return _text(inventory, "chassis/serial-number")


def serial_from_modules(inventory: etree._Element) -> str:
    """Single-node chassis: first serialized module that is not a routing engine."""
    chassis = inventory.find("chassis")
    if chassis is None:
        raise FactsParseError("<chassis> not found in hardware inventory")
    for module in chassis.findall("chassis-module"):
        name = _text(module, "name")
        serial = _text(module, "serial-number")
        if serial and not ROUTING_ENGINE_MODULE.search(name):
            return serial
    return _text(chassis, "serial-number")


_SERIAL_READERS: dict[Topology, Callable[[etree._Element], str]] = {
    Topology.single: serial_from_modules,
    Topology.multi: serial_from_node_inventory,
}


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def _merge(
    records: dict[str, FactRecord],
    fields: dict[str, dict[str, str]],
    tag: str,
) -> None:
    """Fold *fields* into *records*; both must name exactly the same nodes."""
    if set(fields) != set(records):
        raise FactsParseError(
            f"<{tag}> nodes {sorted(fields)} do not match version nodes {sorted(records)}",
        )
    for node, values in fields.items():
        records[node] = records[node].model_copy(update=values)


def normalize_facts(
    version_xml: str,
    uptime_xml: str | None = None,
    hardware_xml: str | None = None,
) -> DeviceFacts:
    """Turn raw status documents into one canonical fact record.

    The shape (flat vs. keyed by node) is decided by the version document
    alone; uptime and hardware fields are merged into it by node name.
    """
    version_root = parse_document(version_xml)
    topology = detect_topology(version_root)

    records = {
        node: FactRecord(**parse_software(section))
        for node, section in node_sections(version_root, SOFTWARE_INFO, topology).items()
    }

    if uptime_xml is not None:
        sections = node_sections(parse_document(uptime_xml), UPTIME_INFO, topology)
        _merge(records, {node: parse_uptime(s) for node, s in sections.items()}, UPTIME_INFO)

    if hardware_xml is not None:
        read_serial = _SERIAL_READERS[topology]
        sections = node_sections(parse_document(hardware_xml), CHASSIS_INVENTORY, topology)
        _merge(
            records,
            {node: {"serial": read_serial(s)} for node, s in sections.items()},
            CHASSIS_INVENTORY,
        )

    log.debug("facts.normalized", topology=topology.value, nodes=sorted(records))
    if topology is Topology.multi:
        return MultiNodeFacts(records=records)
    return SingleNodeFacts(record=records[""])
