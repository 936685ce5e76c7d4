import pytest

from tests.integration.flows import (
    PASSWORD,
    bearer,
    last_code,
    login,
    register,
    register_and_login,
)


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_health_is_public_even_with_a_bad_token(client):
    response = await client.get("/health", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_register_creates_pending_user_and_sends_phone_code(client, notifier):
    body = await register(client, "Alice@Example.com", "+15550000001", first_name="Alice")

    assert body["verification_sent"] is True
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["status"] == "pending_verification"
    assert body["user"]["phone_verified"] is False
    assert "password_hash" not in body["user"]
    assert last_code(notifier, "+15550000001")


@pytest.mark.asyncio
async def test_register_duplicate_email_conflicts(client):
    await register(client, "bob@example.com", "+15550000002")

    response = await client.post(
        "/auth/register",
        json={"email": "bob@example.com", "phone": "+15550000003", "password": PASSWORD},
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_register_weak_password_rejected(client):
    response = await client.post(
        "/auth/register",
        json={"email": "weak@example.com", "phone": "+15550000004", "password": "password"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "WEAK_PASSWORD"


@pytest.mark.asyncio
async def test_verify_phone_activates_account(client, notifier):
    await register(client, "carol@example.com", "+15550000005")
    code = last_code(notifier, "+15550000005")

    response = await client.post(
        "/auth/verify-phone", json={"phone": "+15550000005", "code": code}
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["status"] == "active"
    assert user["phone_verified"] is True


@pytest.mark.asyncio
async def test_verify_phone_wrong_code(client):
    await register(client, "dave@example.com", "+15550000006")

    response = await client.post(
        "/auth/verify-phone", json={"phone": "+15550000006", "code": "not-it"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "OTP_INVALID"


@pytest.mark.asyncio
async def test_login_and_profile(client):
    tokens = await register_and_login(
        client, "erin@example.com", "+15550000007", device_id="laptop-1"
    )

    assert tokens["token_type"] == "Bearer"
    assert tokens["expires_in"] == 900
    assert tokens["session_id"]

    response = await client.get("/users/me", headers=bearer(tokens))

    assert response.status_code == 200
    assert response.json()["email"] == "erin@example.com"
    assert response.json()["last_login_at"] is not None


@pytest.mark.asyncio
async def test_login_by_phone(client):
    await register(client, "phone@example.com", "+15550000017")

    response = await client.post(
        "/auth/login", json={"phone": "+15550000017", "password": PASSWORD}
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_user_look_alike(client):
    await register(client, "frank@example.com", "+15550000008")

    wrong = await client.post(
        "/auth/login", json={"email": "frank@example.com", "password": "Wrong1234!"}
    )
    unknown = await client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": PASSWORD}
    )

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()


@pytest.mark.asyncio
async def test_login_requires_an_identifier(client):
    response = await client.post("/auth/login", json={"password": PASSWORD})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "IDENTIFIER_REQUIRED"


@pytest.mark.asyncio
async def test_protected_route_without_token(client):
    response = await client.get("/users/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_protected_route_with_garbage_token(client):
    response = await client.get("/users/me", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rotates_and_old_token_is_rejected(client):
    tokens = await register_and_login(client, "gina@example.com", "+15550000009")

    first = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert first.status_code == 200
    rotated = first.json()
    assert rotated["refresh_token"] != tokens["refresh_token"]
    assert rotated["session_id"] == tokens["session_id"]

    replay = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert replay.status_code == 401
    assert replay.json()["error"]["code"] == "INVALID_TOKEN"

    again = await client.post("/auth/refresh", json={"refresh_token": rotated["refresh_token"]})
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_logout_revokes_refresh_token_and_ends_session(client):
    tokens = await register_and_login(client, "hank@example.com", "+15550000010")

    response = await client.post(
        "/auth/logout",
        json={"refresh_token": tokens["refresh_token"]},
        headers=bearer(tokens),
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    refresh = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refresh.status_code == 401

    sessions = await client.get("/auth/sessions", headers=bearer(tokens))
    assert sessions.json()["total"] == 0


@pytest.mark.asyncio
async def test_logout_all_keeps_the_current_device(client):
    await register(client, "ivy@example.com", "+15550000011")
    phone = await login(client, "ivy@example.com", device_id="phone")
    laptop = await login(client, "ivy@example.com", device_id="laptop")
    tablet = await login(client, "ivy@example.com", device_id="tablet")

    response = await client.post(
        "/auth/logout-all",
        json={"refresh_token": laptop["refresh_token"]},
        headers=bearer(laptop),
    )

    assert response.status_code == 200
    assert response.json()["sessions_terminated"] == 2
    assert response.json()["tokens_revoked"] == 2

    for other in (phone, tablet):
        refresh = await client.post(
            "/auth/refresh", json={"refresh_token": other["refresh_token"]}
        )
        assert refresh.status_code == 401

    sessions = (await client.get("/auth/sessions", headers=bearer(laptop))).json()
    assert [s["id"] for s in sessions["sessions"]] == [laptop["session_id"]]
    assert sessions["sessions"][0]["is_current"] is True
