"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import structlog

from filestore.config import Settings
from filestore.logs import configure_logging
from filestore.main import create_app

ALICE_TOKEN = "tok-alice"
BOB_TOKEN = "tok-bob"
AUTH_HEADERS = {"Authorization": f"Bearer {ALICE_TOKEN}"}


@pytest.fixture
def file_root(tmp_path: Path) -> Path:
    root = tmp_path / "files"
    root.mkdir()
    return root


@pytest.fixture
def test_settings(file_root: Path) -> Settings:
    """Two users, strict path policy, files under a temp directory."""
    return Settings(
        filedir=str(file_root),
        users=[
            {"username": "alice", "token": ALICE_TOKEN},
            {"username": "bob", "token": BOB_TOKEN},
        ],
        logging={"enabled": False},
    )


@pytest.fixture
def app(test_settings: Settings):
    configure_logging(test_settings.logging)
    yield create_app(test_settings)
    structlog.reset_defaults()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
