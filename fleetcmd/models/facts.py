"""Canonical device fact records.

A query yields exactly one of two shapes: a flat :class:`SingleNodeFacts`
for devices with one routing engine, or :class:`MultiNodeFacts` keyed by
routing-engine (or cluster node) name.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class FactRecord(BaseModel):
    host_name: str = ""
    model: str = ""
    software_type: str = ""
    software_version: str = ""
    last_boot: str = ""
    last_configured: str = ""
    uptime: str = ""
    serial: str = ""


class SingleNodeFacts(BaseModel):
    kind: Literal["single"] = "single"
    record: FactRecord

    def nodes(self) -> dict[str, FactRecord]:
        return {"": self.record}


class MultiNodeFacts(BaseModel):
    kind: Literal["multi"] = "multi"
    records: dict[str, FactRecord]

    def nodes(self) -> dict[str, FactRecord]:
        return dict(self.records)


DeviceFacts = Annotated[
    Union[SingleNodeFacts, MultiNodeFacts],
    Field(discriminator="kind"),
]
