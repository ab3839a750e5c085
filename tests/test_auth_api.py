def test_signup_signin_and_me(client):
    resp = client.post("/auth/signup", json={"email": "Mestre@Obra.com.br", "password": "pw12345"})
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "mestre@obra.com.br"
    assert me.json()["full_name"] == "mestre"

    resp = client.post("/auth/signin", json={"email": "mestre@obra.com.br", "password": "pw12345"})
    assert resp.status_code == 200
    assert resp.json()["token_type"] == "bearer"


def test_signup_rejects_duplicate_email(client):
    payload = {"email": "dup@obra.com.br", "password": "pw12345"}
    assert client.post("/auth/signup", json=payload).status_code == 200

    resp = client.post("/auth/signup", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


def test_signin_wrong_password(client, owner):
    resp = client.post("/auth/signin", json={"email": owner.email, "password": "wrong"})
    assert resp.status_code == 401


def test_me_requires_token(client, db):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_update_profile_and_avatar(client, owner_headers, media_dir):
    resp = client.put("/auth/me", json={"full_name": "Eng. Carla Souza"}, headers=owner_headers)
    assert resp.json()["full_name"] == "Eng. Carla Souza"

    first = client.post(
        "/auth/me/avatar",
        files={"file": ("eu.png", b"png-1", "image/png")},
        headers=owner_headers,
    ).json()["avatar_url"]
    second = client.post(
        "/auth/me/avatar",
        files={"file": ("eu.png", b"png-2", "image/png")},
        headers=owner_headers,
    ).json()["avatar_url"]

    assert first.startswith("/media/avatars/") and first.endswith(".png")
    stored = list((media_dir / "avatars").rglob("*.png"))
    # The previous avatar is removed once the new one is saved
    assert [path.read_bytes() for path in stored] == [b"png-2"]
    assert second.endswith(stored[0].name)


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
