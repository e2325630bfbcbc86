"""Device fact endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from fleetcmd.auth import require_api_key
from fleetcmd.exceptions import CredentialError, DeviceError
from fleetcmd.models.credential import build_credential
from fleetcmd.models.results import FactsRequest, FactsResponse
from fleetcmd.services.executor import run_sync
from fleetcmd.services.facts import query_facts
from fleetcmd.services.transport import transport

router = APIRouter(tags=["facts"], dependencies=[Depends(require_api_key)])


@router.post("/facts", response_model=FactsResponse)
async def get_facts(req: FactsRequest) -> FactsResponse:
    """Return normalized facts; ``facts`` is null when the query fails."""
    try:
        credential = build_credential(req.username, req.password)
    except CredentialError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    try:
        facts = await run_sync(
            query_facts, transport, req.device, credential, full=req.full,
        )
    except DeviceError as exc:
        return FactsResponse(device=req.device, success=False, error=str(exc))
    return FactsResponse(device=req.device, success=True, facts=facts)
