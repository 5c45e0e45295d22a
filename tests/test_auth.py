"""Registration, login, token refresh and profile endpoints."""

from teamup.utils.auth import create_refresh_token


REGISTER_PAYLOAD = {
    "username": "dana",
    "name": "Dana",
    "surname": "Scully",
    "email": "dana@example.com",
    "password": "trustno1",
}


async def _register(client, **overrides):
    return await client.post("/auth/register", json={**REGISTER_PAYLOAD, **overrides})


async def test_register_returns_user_and_tokens(client, db):
    resp = await _register(client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["username"] == "dana"
    assert body["user"]["role"] == "user"
    assert body["user"]["profile"]["name"] == "Dana"
    assert body["token_type"] == "bearer"
    assert "password" not in body["user"]

    stored = await db.users.find_one({"email": "dana@example.com"})
    assert stored["password"] != "trustno1"
    assert await db.tokens.count_documents({"user_id": str(stored["_id"])}) == 1


async def test_register_duplicate_email_or_username_is_409(client):
    await _register(client)

    assert (await _register(client, username="other")).status_code == 409
    assert (await _register(client, email="other@example.com")).status_code == 409


async def test_register_validates_input(client):
    assert (await _register(client, password="123")).status_code == 422
    assert (await _register(client, email="not-an-email")).status_code == 422


async def test_login(client):
    await _register(client)

    resp = await client.post("/auth/login", json={"email": "dana@example.com", "password": "trustno1"})

    assert resp.status_code == 200
    assert resp.json()["message"] == "Login successful"
    assert resp.json()["access_token"]


async def test_login_wrong_password_is_401(client):
    await _register(client)

    resp = await client.post("/auth/login", json={"email": "dana@example.com", "password": "wrong"})

    assert resp.status_code == 401


async def test_login_unknown_email_is_401(client):
    resp = await client.post("/auth/login", json={"email": "ghost@example.com", "password": "x"})

    assert resp.status_code == 401


async def test_login_disabled_account_is_403(client, db):
    await _register(client)
    await db.users.update_one({"username": "dana"}, {"$set": {"is_active": False}})

    resp = await client.post("/auth/login", json={"email": "dana@example.com", "password": "trustno1"})

    assert resp.status_code == 403


async def test_access_token_reaches_profile(client):
    tokens = (await _register(client)).json()

    resp = await client.get("/users/profile", headers={"Authorization": f"Bearer {tokens['access_token']}"})

    assert resp.status_code == 200
    assert resp.json()["email"] == "dana@example.com"


async def test_refresh_token_is_not_an_access_token(client):
    tokens = (await _register(client)).json()

    resp = await client.get("/users/profile", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})

    assert resp.status_code == 401


async def test_garbage_token_is_401(client):
    resp = await client.get("/users/profile", headers={"Authorization": "Bearer garbage"})

    assert resp.status_code == 401


async def test_disabled_user_token_is_403(client, headers, make_user):
    ghost = await make_user("ghost", is_active=False)

    resp = await client.get("/users/profile", headers=headers(ghost))

    assert resp.status_code == 403


async def test_token_refresh(client):
    tokens = (await _register(client)).json()

    resp = await client.post("/auth/token-refresh", json={"refreshToken": tokens["refresh_token"]})

    assert resp.status_code == 200
    assert set(resp.json()) == {"access_token", "refresh_token", "token_type"}


async def test_token_refresh_unknown_token_is_403(client, alice):
    # Valid signature but never issued
    resp = await client.post("/auth/token-refresh", json={"refreshToken": create_refresh_token(str(alice["_id"]))})

    assert resp.status_code == 403


async def test_logout_revokes_refresh_token(client):
    tokens = (await _register(client)).json()

    resp = await client.post("/auth/logout", json={"refreshToken": tokens["refresh_token"]})
    assert resp.status_code == 200

    resp = await client.post("/auth/token-refresh", json={"refreshToken": tokens["refresh_token"]})
    assert resp.status_code == 403

    resp = await client.post("/auth/logout", json={"refreshToken": tokens["refresh_token"]})
    assert resp.status_code == 403


async def test_update_profile_changes_only_sent_fields(client, headers, alice):
    resp = await client.put(
        "/users/profile",
        json={"profile": {"bio": "Rustacean"}, "skills": ["rust", "python"]},
        headers=headers(alice),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["profile"]["bio"] == "Rustacean"
    assert body["profile"]["name"] == "Alice"
    assert body["skills"] == ["rust", "python"]
