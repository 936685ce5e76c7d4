from uuid import uuid4

import pytest
import pytest_asyncio

from src.app.services.role_service import DEFAULT_PERMISSIONS
from tests.integration.flows import bearer, grant_role, register_and_login


async def role_id_of(uow, role_name: str) -> str:
    async with uow:
        role = await uow.roles.get_by_name(role_name)
        return str(role.id)


@pytest_asyncio.fixture
async def admin(client, uow):
    tokens = await register_and_login(client, "admin@example.com", "+15550003001")
    await grant_role(uow, tokens["user"]["id"], "ADMIN")
    return tokens


@pytest.mark.asyncio
async def test_regular_user_cannot_list_roles(client):
    tokens = await register_and_login(client, "plain@example.com", "+15550003002")

    response = await client.get("/roles", headers=bearer(tokens))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_roles_require_authentication(client):
    response = await client.get("/roles")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_lists_seeded_roles(client, admin):
    response = await client.get("/roles", headers=bearer(admin))

    assert response.status_code == 200
    roles = {role["name"]: role for role in response.json()}
    assert set(roles) == {"ADMIN", "USER"}
    assert roles["USER"]["is_default"] is True
    assert len(roles["ADMIN"]["permissions"]) == len(DEFAULT_PERMISSIONS)
    assert {p["name"] for p in roles["USER"]["permissions"]} == {
        "profile:read",
        "profile:update",
        "session:read",
        "session:delete",
    }


@pytest.mark.asyncio
async def test_get_unknown_role(client, admin):
    response = await client.get(f"/roles/{uuid4()}", headers=bearer(admin))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ROLE_NOT_FOUND"


@pytest.mark.asyncio
async def test_assign_role_twice_keeps_a_single_assignment(client, admin, uow):
    member = await register_and_login(client, "member@example.com", "+15550003003")
    admin_role_id = await role_id_of(uow, "ADMIN")
    payload = {"user_id": member["user"]["id"], "role_id": admin_role_id}

    first = await client.post("/roles/assign", json=payload, headers=bearer(admin))
    second = await client.post("/roles/assign", json=payload, headers=bearer(admin))

    assert first.status_code == second.status_code == 200
    roles = await client.get(f"/roles/user/{member['user']['id']}", headers=bearer(admin))
    names = sorted(role["name"] for role in roles.json())
    assert names == ["ADMIN", "USER"]


@pytest.mark.asyncio
async def test_assign_role_to_unknown_user(client, admin, uow):
    payload = {"user_id": str(uuid4()), "role_id": await role_id_of(uow, "USER")}

    response = await client.post("/roles/assign", json=payload, headers=bearer(admin))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_regular_user_cannot_assign_roles(client, uow):
    tokens = await register_and_login(client, "climber@example.com", "+15550003004")
    payload = {"user_id": tokens["user"]["id"], "role_id": await role_id_of(uow, "ADMIN")}

    response = await client.post("/roles/assign", json=payload, headers=bearer(tokens))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_effective_permissions_are_deduplicated(client, admin):
    response = await client.get(
        f"/roles/user/{admin['user']['id']}/permissions", headers=bearer(admin)
    )

    assert response.status_code == 200
    names = [p["name"] for p in response.json()]
    assert len(names) == len(set(names)) == len(DEFAULT_PERMISSIONS)
