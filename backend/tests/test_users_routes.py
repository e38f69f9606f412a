from conftest import ADMIN_PASSWORD, ADMIN_USERNAME, login, register


def _login_admin(client):
    client.cookies.clear()
    response = login(client, ADMIN_USERNAME, ADMIN_PASSWORD, path="/api/admin/login")
    assert response.status_code == 200
    return response.json()


def test_user_routes_require_admin(client):
    assert client.get("/api/users").status_code == 401

    register(client)
    assert client.get("/api/users").status_code == 403
    assert client.get("/api/users/1").status_code == 403
    assert client.put("/api/users/1", json={"isAdmin": True}).status_code == 403
    assert client.delete("/api/users/1").status_code == 403


def test_list_users_is_sanitized(client):
    register(client)
    _login_admin(client)

    response = client.get("/api/users")
    assert response.status_code == 200
    users = response.json()
    assert sorted(user["username"] for user in users) == ["admin", "alice"]
    for user in users:
        assert "password" not in user
        assert "passwordHash" not in user


def test_get_user(client):
    alice = register(client).json()
    _login_admin(client)

    assert client.get(f"/api/users/{alice['id']}").json()["email"] == "alice@x.com"
    response = client.get("/api/users/9999")
    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_update_user_profile_and_role(client):
    alice = register(client).json()
    _login_admin(client)

    response = client.put(
        f"/api/users/{alice['id']}",
        json={"firstName": "Alice", "isAdmin": True, "username": "mallory", "email": "Alice@Example.com"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["firstName"] == "Alice"
    assert body["isAdmin"] is True
    assert body["username"] == "alice"
    assert body["email"] == "alice@example.com"


def test_update_user_password_is_hashed_and_usable(client):
    alice = register(client).json()
    _login_admin(client)

    response = client.put(f"/api/users/{alice['id']}", json={"password": "newsecret123"})
    assert response.status_code == 200
    assert "password" not in response.json()

    client.cookies.clear()
    assert login(client, "alice", "secret123").status_code == 401
    assert login(client, "alice", "newsecret123").status_code == 200


def test_update_user_conflicting_email(client):
    register(client)
    bob = register(client, username="bob", email="bob@x.com").json()
    _login_admin(client)

    response = client.put(f"/api/users/{bob['id']}", json={"email": "alice@x.com"})
    assert response.status_code == 400
    assert response.json() == {"message": "Email already exists"}


def test_update_missing_user_is_404(client):
    _login_admin(client)
    assert client.put("/api/users/9999", json={"firstName": "x"}).status_code == 404


def test_delete_user_ends_their_sessions(client):
    register(client)
    alice_cookie = client.cookies.get("mediahub_session")
    alice_id = client.get("/api/auth/user").json()["id"]
    admin_cookie_owner = _login_admin(client)
    assert admin_cookie_owner["isAdmin"] is True

    response = client.delete(f"/api/users/{alice_id}")
    assert response.status_code == 204
    assert client.delete(f"/api/users/{alice_id}").status_code == 404

    client.cookies.clear()
    client.cookies.set("mediahub_session", alice_cookie)
    assert client.get("/api/auth/user").status_code == 401


def test_admin_cannot_delete_self(client):
    admin = _login_admin(client)
    response = client.delete(f"/api/users/{admin['id']}")
    assert response.status_code == 400
    assert response.json() == {"message": "Cannot delete yourself"}
