import bcrypt


def test_create_user_hashes_password(client, store, make_user):
    user = make_user(profileIcon="https://img.test/a.png")

    assert "password" not in user
    assert user["profileIcon"] == "https://img.test/a.png"
    assert user["bookmarks"] == []
    assert user["following"] == []

    stored = store.get("users", user["id"])
    assert stored["password"] != "secret"
    assert bcrypt.checkpw(b"secret", stored["password"].encode("utf-8"))


def test_create_user_missing_fields(client, store):
    response = client.post("/api/user", json={"username": "alice"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request."
    assert store.collections["users"] == {}


def test_create_user_invalid_email(client):
    response = client.post("/api/user", json={"username": "a", "email": "not-an-email", "password": "x"})

    assert response.status_code == 400


def test_list_users_strips_password(client, make_user):
    make_user("alice")
    make_user("bob")

    response = client.get("/api/user")

    assert response.status_code == 200
    users = response.json()
    assert {user["username"] for user in users} == {"alice", "bob"}
    assert all("password" not in user for user in users)


def test_list_users_when_empty(client):
    response = client.get("/api/user")

    assert response.status_code == 404
    assert response.json() == {"error": "Failed to find users."}


def test_get_user(client, make_user):
    user = make_user()

    response = client.get(f"/api/user/{user['id']}")

    assert response.status_code == 200
    assert response.json()["email"] == "alice@example.com"
    assert client.get("/api/user/missing").status_code == 404


def test_update_user(client, store, make_user):
    user = make_user()

    response = client.post(f"/api/user/update/{user['id']}", json={"bio": "hello", "password": "changed"})

    assert response.status_code == 200
    assert response.json()["bio"] == "hello"
    assert response.json()["username"] == "alice"
    assert "password" not in response.json()
    assert bcrypt.checkpw(b"changed", store.get("users", user["id"])["password"].encode("utf-8"))


def test_update_missing_user(client):
    response = client.post("/api/user/update/missing", json={"bio": "hello"})

    assert response.status_code == 404
    assert response.json() == {"error": "User not found."}


def test_create_user_with_password_over_72_bytes(client, store):
    response = client.post(
        "/api/user",
        json={"username": "alice", "email": "alice@example.com", "password": "é" * 37},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request."
    assert store.collections["users"] == {}


def test_password_of_exactly_72_bytes_is_accepted(client):
    response = client.post(
        "/api/user",
        json={"username": "alice", "email": "alice@example.com", "password": "x" * 72},
    )

    assert response.status_code == 201


def test_update_user_with_password_over_72_bytes(client, store, make_user):
    user = make_user()
    stored_hash = store.get("users", user["id"])["password"]

    response = client.post(f"/api/user/update/{user['id']}", json={"password": "x" * 80})

    assert response.status_code == 400
    assert store.get("users", user["id"])["password"] == stored_hash
