from typing import AsyncGenerator, Dict
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, payments_client, messaging_client
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from bornfidis_provisions.core.database import get_session
    from bornfidis_provisions.server.core.rate_limit import limiter
    from bornfidis_provisions.server.main import app
    from bornfidis_provisions.server.services.deps import get_messaging_client, get_payments_client

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_payments_client] = lambda: payments_client
    app.dependency_overrides[get_messaging_client] = lambda: messaging_client
    limiter.reset()

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("bornfidis_provisions.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()
    limiter.reset()


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    from bornfidis_provisions.server.core.security import create_access_token

    token = create_access_token("admin-1", email="admin@bornfidis.com", role="ADMIN")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers() -> Dict[str, str]:
    from bornfidis_provisions.server.core.security import create_access_token

    token = create_access_token("user-1", email="grower@example.com", role="USER")
    return {"Authorization": f"Bearer {token}"}
