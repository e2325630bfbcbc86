"""Shared pytest fixtures."""

from __future__ import annotations

import io
import logging
import os
import sys

# Force settings to use test-safe defaults before any import
os.environ.setdefault("FLEETCMD_API_KEY", "")
os.environ.setdefault("FLEETCMD_COMMAND_SEPARATOR", ";")

import pytest
import structlog
from httpx import ASGITransport, AsyncClient

from fleetcmd.models.credential import build_credential
from fleetcmd.services.reporter import Reporter
from tests.mock_transport import FIXED_CLOCK, MockTransport

# Keep diagnostic events out of captured stdout (CLI output, JSON)
structlog.configure(
    processors=[structlog.processors.KeyValueRenderer()],
    wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
    logger_factory=structlog.PrintLoggerFactory(file=sys.__stderr__),
)


@pytest.fixture
def mock_transport():
    """Provide a fresh MockTransport."""
    return MockTransport()


@pytest.fixture
def credential():
    return build_credential("netops", "s3cret")


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def reporter(out):
    """Interactive-stream reporter with a fixed timestamp."""
    return Reporter(stream=out, timestamp=lambda: FIXED_CLOCK)


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, text: str):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
async def client(mock_transport):
    """Async test client with the mock transport injected."""
    import fleetcmd.routers.facts as rf
    import fleetcmd.routers.invoke as ri
    import fleetcmd.routers.push as rp

    originals = (ri.transport, rf.transport, rp.transport)
    ri.transport = mock_transport
    rf.transport = mock_transport
    rp.transport = mock_transport

    from fleetcmd.main import app as fastapi_app

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Restore
    ri.transport, rf.transport, rp.transport = originals
