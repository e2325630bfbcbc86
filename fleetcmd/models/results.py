"""Execution results, run summaries and API request/response bodies."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fleetcmd.exceptions import ErrorKind
from fleetcmd.models.facts import DeviceFacts


class ExecutionResult(BaseModel):
    """Outcome of one pipeline invocation against one device."""

    model_config = ConfigDict(frozen=True)

    device: str
    raw_output: str = ""
    succeeded: bool
    error: Optional[ErrorKind] = None
    message: str = ""


class RunSummary(BaseModel):
    """Counters and results of one orchestrated fleet run."""

    total: int = 0
    attempted: int = 0
    skipped: int = 0
    errors: int = 0
    log_path: Optional[str] = None
    results: list[ExecutionResult] = Field(default_factory=list)


# ── HTTP bodies ───────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str
    version: str


class InvokeRequest(BaseModel):
    devices: list[str] = Field(min_length=1)
    commands: list[str] = Field(min_length=1)
    username: str
    password: str = Field(repr=False)


class InvokeResponse(BaseModel):
    results: list[ExecutionResult]
    errors: int = 0
    transcript: str = ""


class FactsRequest(BaseModel):
    device: str
    username: str
    password: str = Field(repr=False)
    full: bool = True


class FactsResponse(BaseModel):
    device: str
    success: bool
    facts: Optional[DeviceFacts] = None
    error: Optional[str] = None


class PushRequest(BaseModel):
    template_path: str
    inventory_path: str
    log_path: Optional[str] = None
    overwrite_log: bool = False


class PushResponse(BaseModel):
    summary: RunSummary
    transcript: str = ""
