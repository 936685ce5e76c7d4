"""
Multi-step HTTP flows reused across API tests.
"""

import re
from uuid import UUID

from httpx import AsyncClient

from src.app.services.role_service import RoleService
from tests.fakes import RecordingNotifier

PASSWORD = "Abcd1234!"

_CODE = re.compile(r"\b(\d{6})\b")


def last_code(notifier: RecordingNotifier, destination: str) -> str:
    return _CODE.search(notifier.last_to(destination)["body"]).group(1)


async def register(client: AsyncClient, email: str, phone: str, **extra) -> dict:
    response = await client.post(
        "/auth/register", json={"email": email, "phone": phone, "password": PASSWORD, **extra}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def login(client: AsyncClient, email: str, password: str = PASSWORD, **device) -> dict:
    response = await client.post("/auth/login", json={"email": email, "password": password, **device})
    assert response.status_code == 200, response.text
    return response.json()


async def register_and_login(client: AsyncClient, email: str, phone: str, **device) -> dict:
    await register(client, email, phone)
    return await login(client, email, **device)


def bearer(tokens: dict) -> dict:
    return {"Authorization": f"Bearer {tokens['access_token']}"}


async def grant_role(uow, user_id: str, role_name: str) -> str:
    async with uow:
        role = await uow.roles.get_by_name(role_name)
        role_id = role.id
        await RoleService(uow).assign_role_to_user(UUID(user_id), role_id)
    return str(role_id)
