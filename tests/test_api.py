import asyncio
from datetime import date

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient
from jose import jwt

from backoffice.api import deps
from backoffice.config import settings
from backoffice.core.logging import RequestContextProcessor
from backoffice.main import create_app


def _token(user_id: str) -> str:
    return jwt.encode({"sub": user_id}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def _auth(user_id: str):
    return {"Authorization": f"Bearer {_token(user_id)}"}


@pytest.fixture
def client(data_source):
    app = create_app()
    app.dependency_overrides[deps.get_data_source] = lambda: data_source
    return TestClient(app)


@pytest.fixture
def business(seed):
    business = seed.business()
    seed.entry(business.id, date(2026, 3, 2), total_register="11800", labor_cost="2000")
    return business


def _refresh(client, business_id, headers=None, month=3):
    return client.post(
        "/api/v1/metrics/refresh",
        json={"business_id": business_id, "year": 2026, "month": month},
        headers=headers or {},
    )


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_refresh_requires_token(client, business):
    response = _refresh(client, business.id)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_FAILED"


def test_refresh_rejects_bad_token(client, business):
    response = _refresh(client, business.id, {"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_INVALID"


def test_refresh_rejects_non_member(client, seed, business):
    outsider = seed.profile()
    response = _refresh(client, business.id, _auth(outsider.id))
    assert response.status_code == 403


def test_refresh_rejects_removed_member(client, seed, business):
    former = seed.profile()
    seed.member(business.id, former.id, deleted=True)
    response = _refresh(client, business.id, _auth(former.id))
    assert response.status_code == 403


def test_member_can_refresh(client, seed, business):
    member = seed.profile()
    seed.member(business.id, member.id)

    response = _refresh(client, business.id, _auth(member.id))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["metrics"]["income_before_vat"] == 10000.0
    assert body["metrics"]["labor_cost_pct"] == 22.0
    assert body["metrics"]["food_diff_pct"] is None


def test_admin_can_refresh_any_business(client, seed, business):
    admin = seed.profile(is_admin=True)
    response = _refresh(client, business.id, _auth(admin.id))
    assert response.status_code == 200


def test_invalid_month_is_unprocessable(client, seed, business):
    admin = seed.profile(is_admin=True)
    response = _refresh(client, business.id, _auth(admin.id), month=13)
    assert response.status_code == 422


def test_unknown_business_is_not_found(client, seed):
    admin = seed.profile(is_admin=True)
    response = _refresh(client, "missing-business", _auth(admin.id))
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "MISSING_CONFIGURATION"
    assert error["type"] == "ServiceFailureError"
    assert error["details"]["business_id"] == "missing-business"


def test_read_back_stored_row(client, seed, business):
    member = seed.profile()
    seed.member(business.id, member.id)
    headers = _auth(member.id)

    missing = client.get(f"/api/v1/metrics/{business.id}/2026/3", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "NOT_FOUND"

    _refresh(client, business.id, headers)
    response = client.get(f"/api/v1/metrics/{business.id}/2026/3", headers=headers)

    assert response.status_code == 200
    assert response.json()["labor_cost_amount"] == 2200.0


def test_current_user_is_bound_to_log_context():
    credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=_token("user-42"))

    async def resolve():
        user = await deps.get_current_user(credentials)
        return user, RequestContextProcessor()(None, "info", {})

    user, event = asyncio.run(resolve())

    assert user.user_id == "user-42"
    assert event["user_id"] == "user-42"
