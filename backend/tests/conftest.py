from __future__ import annotations

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Settings are read once at import time, so these must be in place first
os.environ.setdefault("ADMIN_DASHBOARD_PASSWORD", "test-admin-password")
os.environ.setdefault("ADMIN_SESSION_SECRET", "test_session_secret_for_development_only")
os.environ.setdefault("DISPLAY_LOCALE", "en")


@pytest.fixture
def sample_markdown():
    """A document mixing plain Markdown with every container type."""
    return (
        "# Release notes\n"
        "\n"
        "Some **bold** text.\n"
        "\n"
        "::: tip Heads up\n"
        "Run the migrations first.\n"
        ":::\n"
        "\n"
        "::: warning\n"
        "Back up the database.\n"
        ":::\n"
        "\n"
        "::: details Show config\n"
        "```python\n"
        "DEBUG = True\n"
        "```\n"
        ":::\n"
    )


@pytest.fixture
def fixed_words():
    """A tiny deterministic wordlist."""
    return ("alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "golf", "hotel")


@pytest.fixture
def counting_source():
    """A fake 32-bit random source returning 0, 1, 2, ... in turn."""
    state = {"next": 0}

    def source() -> int:
        value = state["next"]
        state["next"] += 1
        return value

    return source


@pytest.fixture
def mock_db() -> AsyncMock:
    """Stand-in for an AsyncSession; repositories are patched in tests."""
    db = AsyncMock()
    db.add_all = MagicMock()
    return db


@pytest.fixture
def client(mock_db: AsyncMock):
    """TestClient with the database and login limiter swapped out.

    Used without a ``with`` block so the lifespan (and init_db) never runs.
    """
    from fastapi.testclient import TestClient

    from api.dependencies import get_rate_limit_store
    from db.database import get_db
    from limits.storage import MemoryStorage
    from main import app

    store = MemoryStorage()

    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_limit_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
