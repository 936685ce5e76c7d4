import pytest
import pytest_asyncio

from tests.integration.flows import PASSWORD, bearer, grant_role, login, register_and_login


@pytest_asyncio.fixture
async def admin(client, uow):
    tokens = await register_and_login(client, "root@example.com", "+15550004001")
    await grant_role(uow, tokens["user"]["id"], "ADMIN")
    return tokens


@pytest.mark.asyncio
async def test_user_updates_own_profile(client):
    tokens = await register_and_login(client, "self@example.com", "+15550004002")

    response = await client.patch(
        "/users/me", json={"username": "selfie", "first_name": "Sam"}, headers=bearer(tokens)
    )

    assert response.status_code == 200
    assert response.json()["username"] == "selfie"
    profile = await client.get("/users/me", headers=bearer(tokens))
    assert profile.json()["first_name"] == "Sam"


@pytest.mark.asyncio
async def test_profile_update_cannot_change_email(client):
    tokens = await register_and_login(client, "fixed@example.com", "+15550004003")

    response = await client.patch(
        "/users/me", json={"email": "elsewhere@example.com"}, headers=bearer(tokens)
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_profile_update_reports_taken_username(client):
    first = await register_and_login(client, "one@example.com", "+15550004004")
    second = await register_and_login(client, "two@example.com", "+15550004005")
    await client.patch("/users/me", json={"username": "shared"}, headers=bearer(first))

    response = await client.patch("/users/me", json={"username": "shared"}, headers=bearer(second))

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USERNAME_TAKEN"


@pytest.mark.asyncio
async def test_regular_user_cannot_administer_users(client):
    tokens = await register_and_login(client, "plain@example.com", "+15550004006")

    listing = await client.get("/users", headers=bearer(tokens))
    creation = await client.post(
        "/users", json={"email": "x@example.com", "password": PASSWORD}, headers=bearer(tokens)
    )

    assert listing.status_code == 403
    assert creation.status_code == 403


@pytest.mark.asyncio
async def test_admin_creates_user_who_can_sign_in(client, admin):
    response = await client.post(
        "/users",
        json={"email": "Made@Example.com", "password": PASSWORD, "phone": "+15550004007"},
        headers=bearer(admin),
    )

    assert response.status_code == 201
    assert response.json()["status"] == "active"
    tokens = await login(client, "made@example.com")
    assert tokens["user"]["email"] == "made@example.com"


@pytest.mark.asyncio
async def test_admin_create_conflicts_with_existing_email(client, admin):
    response = await client.post(
        "/users", json={"email": "root@example.com", "password": PASSWORD}, headers=bearer(admin)
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_admin_lists_and_searches_users(client, admin):
    await register_and_login(client, "alice@example.com", "+15550004008")
    await register_and_login(client, "bob@example.com", "+15550004009")

    everyone = await client.get("/users", params={"take": 2}, headers=bearer(admin))
    found = await client.get("/users", params={"search": "ALICE"}, headers=bearer(admin))

    assert everyone.status_code == 200
    assert everyone.json()["total"] == 3
    assert len(everyone.json()["users"]) == 2
    assert [u["email"] for u in found.json()["users"]] == ["alice@example.com"]


@pytest.mark.asyncio
async def test_list_rejects_oversized_page(client, admin):
    response = await client.get("/users", params={"take": 500}, headers=bearer(admin))

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_user_reads_self_but_not_others(client, admin):
    tokens = await register_and_login(client, "nosy@example.com", "+15550004010")

    own = await client.get(f"/users/{tokens['user']['id']}", headers=bearer(tokens))
    other = await client.get(f"/users/{admin['user']['id']}", headers=bearer(tokens))

    assert own.status_code == 200
    assert own.json()["roles"] == ["USER"]
    assert "profile:update" in own.json()["permissions"]
    assert other.status_code == 403


@pytest.mark.asyncio
async def test_suspending_user_revokes_refresh_and_blocks_login(client, admin):
    tokens = await register_and_login(client, "bad@example.com", "+15550004011")

    response = await client.patch(
        f"/users/{tokens['user']['id']}", json={"status": "suspended"}, headers=bearer(admin)
    )

    assert response.status_code == 200
    assert response.json()["status"] == "suspended"
    refreshed = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 401
    relogin = await client.post("/auth/login", json={"email": "bad@example.com", "password": PASSWORD})
    assert relogin.status_code == 403


@pytest.mark.asyncio
async def test_admin_deletes_user(client, admin):
    tokens = await register_and_login(client, "gone@example.com", "+15550004012")
    user_id = tokens["user"]["id"]

    deleted = await client.delete(f"/users/{user_id}", headers=bearer(admin))
    again = await client.delete(f"/users/{user_id}", headers=bearer(admin))

    assert deleted.status_code == 204
    assert again.status_code == 404
    lookup = await client.get(f"/users/{user_id}", headers=bearer(admin))
    assert lookup.status_code == 404
