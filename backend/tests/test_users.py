import pytest
from bson import ObjectId

from conftest import ADMIN_EMAIL, USER_EMAIL, auth


@pytest.mark.asyncio
async def test_register_user_forces_user_role(client, store):
    resp = await client.post("/users", json={
        "email": "new@zapshift.test",
        "displayName": "New",
        "photoURL": "https://img.test/a.png",
        "role": "admin",
    })
    assert resp.status_code == 201
    assert "insertedId" in resp.json()

    user = await store.users.find_one({"email": "new@zapshift.test"})
    assert user["role"] == "user"
    assert user["displayName"] == "New"
    assert user["photoURL"] == "https://img.test/a.png"
    assert "createdAt" in user


@pytest.mark.asyncio
async def test_register_existing_user(client, store, seeded_users):
    resp = await client.post("/users", json={"email": USER_EMAIL})
    assert resp.status_code == 200
    assert resp.json() == {"message": "user exists"}
    assert await store.users.count_documents({"email": USER_EMAIL}) == 1


@pytest.mark.asyncio
async def test_register_without_email_is_bad_request(client):
    resp = await client.post("/users", json={"displayName": "Nobody"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "invalid request"


@pytest.mark.asyncio
async def test_get_role(client, seeded_users):
    resp = await client.get(f"/users/{ADMIN_EMAIL}/role")
    assert resp.json() == {"role": "admin"}

    resp = await client.get("/users/ghost@zapshift.test/role")
    assert resp.json() == {"role": "user"}


@pytest.mark.asyncio
async def test_get_user_by_id(client, seeded_users):
    resp = await client.get(f"/users/{seeded_users['user']}")
    assert resp.status_code == 200
    assert resp.json()["email"] == USER_EMAIL

    resp = await client.get("/users/not-an-id")
    assert resp.status_code == 400

    resp = await client.get(f"/users/{ObjectId()}")
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


@pytest.mark.asyncio
async def test_search_users_requires_token(client, seeded_users):
    resp = await client.get("/users")
    assert resp.status_code == 401
    assert resp.json() == {"message": "unauthorized access"}

    resp = await client.get("/users", headers=auth("forged-token"))
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_search_users(client, seeded_users):
    resp = await client.get("/users", params={"searchText": "ADMIN"}, headers=auth("user-token"))
    assert resp.status_code == 200
    assert [u["email"] for u in resp.json()] == [ADMIN_EMAIL]

    resp = await client.get("/users", params={"limit": 2}, headers=auth("user-token"))
    assert len(resp.json()) == 2


@pytest.mark.asyncio
async def test_search_users_limit_bounds(client, seeded_users):
    for limit in (0, -1, 51):
        resp = await client.get("/users", params={"limit": limit}, headers=auth("user-token"))
        assert resp.status_code == 400

    resp = await client.get("/users", params={"limit": 50}, headers=auth("user-token"))
    assert len(resp.json()) == 3


@pytest.mark.asyncio
async def test_change_role_forbidden_for_non_admin(client, store, seeded_users):
    resp = await client.patch(
        f"/users/{seeded_users['user']}/role",
        json={"role": "admin"},
        headers=auth("user-token"),
    )
    assert resp.status_code == 403
    assert resp.json() == {"message": "forbidden access"}
    user = await store.users.find_one({"email": USER_EMAIL})
    assert user["role"] == "user"


@pytest.mark.asyncio
async def test_change_role_as_admin(client, store, seeded_users):
    resp = await client.patch(
        f"/users/{seeded_users['user']}/role",
        json={"role": "rider"},
        headers=auth("admin-token"),
    )
    assert resp.status_code == 200
    assert resp.json()["modifiedCount"] == 1
    user = await store.users.find_one({"email": USER_EMAIL})
    assert user["role"] == "rider"


@pytest.mark.asyncio
async def test_change_role_validation(client, seeded_users):
    resp = await client.patch("/users/bad-id/role", json={"role": "rider"}, headers=auth("admin-token"))
    assert resp.status_code == 400

    resp = await client.patch(
        f"/users/{seeded_users['user']}/role", json={"role": "superhero"}, headers=auth("admin-token"),
    )
    assert resp.status_code == 400

    resp = await client.patch(f"/users/{ObjectId()}/role", json={"role": "rider"}, headers=auth("admin-token"))
    assert resp.status_code == 404
