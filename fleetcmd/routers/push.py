"""Templated configuration push endpoint."""

from __future__ import annotations

import io
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from fleetcmd.auth import require_api_key
from fleetcmd.config import settings
from fleetcmd.exceptions import FleetError
from fleetcmd.models.results import PushRequest, PushResponse
from fleetcmd.services.executor import run_sync
from fleetcmd.services.orchestrator import FleetOrchestrator
from fleetcmd.services.reporter import Reporter
from fleetcmd.services.transport import transport
from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["push"], dependencies=[Depends(require_api_key)])


def confine(path: str) -> Path:
    """Resolve *path* under ``files_root``; anything outside it is rejected."""
    root = Path(settings.files_root).resolve()
    resolved = (root / path).resolve()
    if not resolved.is_relative_to(root):
        log.warning("push.path_rejected", path=path, root=str(root))
        raise HTTPException(status_code=422, detail=f"Path {path} is outside {root}")
    return resolved


@router.post("/push", response_model=PushResponse)
async def run_push(req: PushRequest) -> PushResponse:
    """Render the template for every inventory row and push it.

    All three paths are resolved under the configured ``files_root``.

    ``overwrite_log`` answers the overwrite question when ``log_path``
    already exists. Device failures are reported in the summary; only
    template or inventory problems fail the request.
    """
    template_path = confine(req.template_path)
    inventory_path = confine(req.inventory_path)
    log_path = confine(req.log_path) if req.log_path else None

    buf = io.StringIO()
    reporter = Reporter(
        log_path,
        stream=buf,
        confirm=lambda _question: req.overwrite_log,
    )
    orchestrator = FleetOrchestrator(transport, reporter)
    try:
        summary = await run_sync(orchestrator.run, template_path, inventory_path)
    except FleetError as exc:
        log.error("push.aborted", error=str(exc))
        raise HTTPException(status_code=422, detail=str(exc))
    except OSError as exc:
        log.error("push.log_unavailable", error=str(exc))
        raise HTTPException(status_code=422, detail=f"Cannot write log: {exc}")
    return PushResponse(summary=summary, transcript=buf.getvalue())
