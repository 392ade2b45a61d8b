from __future__ import annotations

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("LOG_LEVEL", "WARNING")

from core import db  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture
def fake_db() -> MagicMock:
    """
    Stand-in for `core.db.Database`; tests set return values per call.
    """
    database = MagicMock(spec=db.Database)
    database.fetch_one = AsyncMock(return_value=None)
    database.fetch_all = AsyncMock(return_value=[])
    database.execute = AsyncMock(return_value="DELETE 0")
    return database


@pytest.fixture
def client(fake_db: MagicMock):
    # No `with` block: the lifespan (real pool) never starts.
    app.dependency_overrides[db.get_db] = lambda: fake_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
