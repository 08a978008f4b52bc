"""Test fixtures — temporary content root and FastAPI test client."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from localsource.config import settings
from localsource.main import create_app


@pytest.fixture
def content_root(tmp_path, monkeypatch):
    """Point the app at an empty temporary content root."""
    root = tmp_path / "root"
    root.mkdir()
    monkeypatch.setattr(settings, "root_dir", str(root))
    return root


@pytest_asyncio.fixture
async def client(content_root):
    """Provide an async test client bound to the temporary content root."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
