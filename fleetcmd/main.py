"""FastAPI application entry-point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from fleetcmd import __version__
from fleetcmd.routers import facts, health, invoke, push
from fleetcmd.services import executor
from fleetcmd.utils.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hooks."""
    setup_logging()
    yield
    # Let any in-flight device job finish its teardown
    executor.shutdown()


app = FastAPI(
    title="fleetcmd",
    description="Bulk command execution and fact gathering for Junos fleets",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(invoke.router)
app.include_router(facts.router)
app.include_router(push.router)
