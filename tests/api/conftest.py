"""HTTP client fixtures: the FastAPI app bound to the per-test database and a fixed clock."""

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.deps import get_db, get_now
from app.core.security import create_access_token
from app.main import app

API_NOW = datetime(2024, 3, 14, 10, 30)


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: API_NOW
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(str(user.id), user.role)}"}


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return _auth_headers(admin_user)


@pytest.fixture
def teacher_headers(teacher_user) -> dict:
    return _auth_headers(teacher_user)


@pytest.fixture
def reminder_backend(monkeypatch, session_maker, sms_transport):
    """Point the immediate reminder run at the test database and the fake SMS transport."""
    monkeypatch.setattr(
        "app.cron.payment_reminders.get_async_session_maker_instance", lambda: session_maker
    )
    monkeypatch.setattr("app.core.notification_service.get_sms_client", lambda: sms_transport)
    return sms_transport
