"""
Utilbox Backend: Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables and a temporary credential table are prepared
       BEFORE any utilbox import, so the settings singleton picks them up.

Fixtures:
    ├── credentials_file: Path of the CSV loaded by the app under test
    ├── credential_store: In-memory CredentialStore for service tests
    └── test_client:      HTTPX AsyncClient against a fresh app whose
                          lifespan has run (store loaded as in production)
"""

import os
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

_CREDENTIALS_DIR = Path(tempfile.mkdtemp(prefix="utilbox_test_"))
CREDENTIALS_FILE = _CREDENTIALS_DIR / "users.csv"
CREDENTIALS_FILE.write_text(
    "username,password\n"
    "admin,admin123\n"
    "alice,wonderland\n"
    "bob,builder42\n",
    encoding="utf-8",
)

os.environ["CREDENTIALS_PATH"] = str(CREDENTIALS_FILE)
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def credentials_file() -> Path:
    return CREDENTIALS_FILE


@pytest.fixture
def credential_store():
    """Same users as CREDENTIALS_FILE, built without touching the disk."""
    from utilbox.services.credential_store import CredentialEntry, CredentialStore
    return CredentialStore([
        CredentialEntry(username="admin", password="admin123"),
        CredentialEntry(username="alice", password="wonderland"),
        CredentialEntry(username="bob", password="builder42"),
    ])


@pytest_asyncio.fixture
async def test_client():
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport does not send lifespan events, so the fixture enters the
    app's lifespan context itself before issuing requests.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from utilbox.main import create_app
    app = create_app()
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
