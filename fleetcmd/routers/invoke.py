"""Ad-hoc command execution endpoint."""

from __future__ import annotations

import io

from fastapi import APIRouter, Depends, HTTPException

from fleetcmd.auth import require_api_key
from fleetcmd.exceptions import CredentialError
from fleetcmd.models.credential import build_credential
from fleetcmd.models.results import InvokeRequest, InvokeResponse
from fleetcmd.services.executor import run_sync
from fleetcmd.services.pipeline import invoke
from fleetcmd.services.reporter import Reporter
from fleetcmd.services.template import join_commands
from fleetcmd.services.transport import transport

router = APIRouter(tags=["invoke"], dependencies=[Depends(require_api_key)])


@router.post("/invoke", response_model=InvokeResponse)
async def run_invoke(req: InvokeRequest) -> InvokeResponse:
    """Run the same commands on every listed device, one device at a time."""
    try:
        credential = build_credential(req.username, req.password)
    except CredentialError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    buf = io.StringIO()
    results = await run_sync(
        invoke,
        transport,
        req.devices,
        credential,
        join_commands(req.commands),
        Reporter(stream=buf),
    )
    return InvokeResponse(
        results=results,
        errors=sum(1 for r in results if not r.succeeded),
        transcript=buf.getvalue(),
    )
