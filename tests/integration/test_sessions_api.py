from uuid import uuid4

import pytest

from src.app.services.token_service import TokenService
from tests.integration.flows import bearer, login, register, register_and_login


@pytest.mark.asyncio
async def test_list_sessions_flags_the_current_one(client):
    await register(client, "multi@example.com", "+15550002001")
    desktop = await login(client, "multi@example.com", device_id="desktop", device_name="Work PC")
    mobile = await login(client, "multi@example.com", device_id="mobile")

    response = await client.get("/sessions", headers=bearer(desktop))

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    current = {s["id"]: s["is_current"] for s in body["sessions"]}
    assert current == {desktop["session_id"]: True, mobile["session_id"]: False}
    assert all("token" not in s for s in body["sessions"])


@pytest.mark.asyncio
async def test_get_own_session(client):
    tokens = await register_and_login(client, "own@example.com", "+15550002002", device_type="web")

    response = await client.get(f"/sessions/{tokens['session_id']}", headers=bearer(tokens))

    assert response.status_code == 200
    assert response.json()["device_type"] == "web"
    assert response.json()["is_current"] is True


@pytest.mark.asyncio
async def test_other_users_session_is_forbidden(client):
    owner = await register_and_login(client, "owner@example.com", "+15550002003")
    intruder = await register_and_login(client, "intruder@example.com", "+15550002004")

    read = await client.get(f"/sessions/{owner['session_id']}", headers=bearer(intruder))
    delete = await client.delete(f"/sessions/{owner['session_id']}", headers=bearer(intruder))

    assert read.status_code == 403
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_unknown_session_not_found(client):
    tokens = await register_and_login(client, "lost@example.com", "+15550002005")

    response = await client.delete(f"/sessions/{uuid4()}", headers=bearer(tokens))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"


@pytest.mark.asyncio
async def test_terminate_session_leaves_its_refresh_token_usable(client):
    await register(client, "keep@example.com", "+15550002006")
    main = await login(client, "keep@example.com", device_id="main")
    spare = await login(client, "keep@example.com", device_id="spare")

    response = await client.delete(f"/sessions/{spare['session_id']}", headers=bearer(main))
    assert response.status_code == 200
    assert response.json()["terminated"] == 1

    listed = (await client.get("/sessions", headers=bearer(main))).json()
    assert [s["id"] for s in listed["sessions"]] == [main["session_id"]]

    refresh = await client.post("/auth/refresh", json={"refresh_token": spare["refresh_token"]})
    assert refresh.status_code == 200


@pytest.mark.asyncio
async def test_terminate_other_sessions(client):
    await register(client, "others@example.com", "+15550002007")
    keep = await login(client, "others@example.com", device_id="a")
    await login(client, "others@example.com", device_id="b")
    await login(client, "others@example.com", device_id="c")

    response = await client.delete("/sessions", headers=bearer(keep))

    assert response.status_code == 200
    assert response.json()["terminated"] == 2
    listed = (await client.get("/sessions", headers=bearer(keep))).json()
    assert listed["total"] == 1


@pytest.mark.asyncio
async def test_terminate_others_refuses_token_without_session(client, uow, config, clock):
    tokens = await register_and_login(client, "nosid@example.com", "+15550002099")
    async with uow:
        user = await uow.users.get_by_email("nosid@example.com")
        sessionless = TokenService(uow, config, clock).create_access_token(user)

    response = await client.delete("/sessions", headers={"Authorization": f"Bearer {sessionless}"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    remaining = await client.get("/sessions", headers=bearer(tokens))
    assert remaining.json()["total"] == 1
