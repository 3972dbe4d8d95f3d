def signup(client, username="alice", password="s3cret!"):
    return client.post("/auth/signup", json={"username": username, "password": password, "email": "Alice@Example.com"})


def test_signup_and_fetch_profile(client):
    r = signup(client)
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["user"]["username"] == "alice"
    assert data["user"]["email"] == "alice@example.com"

    token = data["token"]["accessToken"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["user"]["id"] == data["user"]["id"]

    by_id = client.get(f"/auth/{data['user']['id']}")
    assert by_id.json()["data"]["user"]["username"] == "alice"


def test_duplicate_username_conflicts(client):
    assert signup(client).status_code == 201
    r = signup(client)
    assert r.status_code == 409
    assert r.json() == {"success": False, "error": "Username already used", "isFormError": True}


def test_login_errors_are_form_errors(client):
    signup(client)
    r = client.post("/auth/login", json={"username": "alice", "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["isFormError"] is True
    assert client.post("/auth/login", json={"username": "bob", "password": "x"}).status_code == 401

    r = client.post("/auth/login", json={"username": "alice", "password": "s3cret!"})
    assert r.status_code == 200
    assert r.json()["message"] == "Logged in"


def test_refresh_rotates_and_logout_revokes(client):
    refresh_token = signup(client).json()["data"]["token"]["refreshToken"]

    r = client.post("/auth/refresh", json={"refreshToken": refresh_token})
    assert r.status_code == 200
    rotated = r.json()["data"]["token"]["refreshToken"]
    assert client.post("/auth/refresh", json={"refreshToken": refresh_token}).status_code == 401

    assert client.post("/auth/logout", json={"refreshToken": rotated}).json()["success"] is True
    assert client.post("/auth/refresh", json={"refreshToken": rotated}).status_code == 401


def test_me_requires_token(client):
    r = client.get("/auth/me")
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_health(client):
    assert client.get("/health").json()["success"] is True
