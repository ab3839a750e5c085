from sitetrack.models import UnitPermission
from sitetrack.utils.permissions import parse_invite_emails

from tests.factories import auth_headers, make_user


def test_parse_invite_emails():
    raw = "Ana@Obra.com.br, bruno@obra.com.br;\n\nsem-arroba\nana@obra.com.br ;carla@obra.com.br"

    assert parse_invite_emails(raw) == ["ana@obra.com.br", "bruno@obra.com.br", "carla@obra.com.br"]
    assert parse_invite_emails("") == []


def test_bulk_invite_creates_one_row_per_email(client, project, owner_headers):
    resp = client.post(
        f"/projects/{project.id}/permissions/invite",
        json={"emails": "ana@obra.com.br\nbruno@obra.com.br; ana@obra.com.br", "unit_id": "apt-201",
              "role": "architect", "common_areas": ["common"]},
        headers=owner_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"processed": 2, "emails": ["ana@obra.com.br", "bruno@obra.com.br"]}

    rows = client.get(f"/projects/{project.id}/permissions", headers=owner_headers).json()
    assert sorted(row["email"] for row in rows) == ["ana@obra.com.br", "bruno@obra.com.br"]
    assert {row["unit_name"] for row in rows} == {"Apto 201"}
    assert {row["role"] for row in rows} == {"architect"}


def test_reinvite_reactivates_and_keeps_claim(client, db, project, owner_headers, guest_user, guest_invite):
    guest_invite.user_id = guest_user.id
    guest_invite.is_active = False
    db.commit()

    resp = client.post(
        f"/projects/{project.id}/permissions/invite",
        json={"emails": "cliente@obra.com.br", "unit_id": "apt-101", "job_title": "Proprietária"},
        headers=owner_headers,
    )
    assert resp.json()["processed"] == 1

    db.expire_all()
    rows = db.query(UnitPermission).all()
    assert len(rows) == 1
    assert rows[0].is_active is True
    assert rows[0].user_id == guest_user.id
    assert rows[0].job_title == "Proprietária"


def test_invite_validation(client, project, owner_headers):
    resp = client.post(
        f"/projects/{project.id}/permissions/invite",
        json={"emails": "nobody", "unit_id": "apt-101"},
        headers=owner_headers,
    )
    assert resp.status_code == 400

    resp = client.post(
        f"/projects/{project.id}/permissions/invite",
        json={"emails": "ana@obra.com.br", "unit_id": "apt-999"},
        headers=owner_headers,
    )
    assert resp.status_code == 400


def test_pause_then_revoke(client, db, project, owner_headers, guest_invite):
    guest = make_user(db, "cliente@obra.com.br")
    headers = auth_headers(guest)
    assert client.get(f"/projects/{project.id}", headers=headers).status_code == 200

    resp = client.post(f"/projects/{project.id}/permissions/{guest_invite.id}/toggle", headers=owner_headers)
    assert resp.json()["is_active"] is False
    assert client.get(f"/projects/{project.id}", headers=headers).status_code == 404

    resp = client.post(f"/projects/{project.id}/permissions/{guest_invite.id}/toggle", headers=owner_headers)
    assert resp.json()["is_active"] is True
    assert client.get(f"/projects/{project.id}", headers=headers).status_code == 200

    resp = client.delete(f"/projects/{project.id}/permissions/{guest_invite.id}", headers=owner_headers)
    assert resp.status_code == 200
    assert client.get(f"/projects/{project.id}", headers=headers).status_code == 404
    db.expire_all()
    rows = db.query(UnitPermission).all()
    assert len(rows) == 1
    assert rows[0].is_active is False
    assert rows[0].user_id == guest.id

    # Revoking twice keeps it revoked
    client.delete(f"/projects/{project.id}/permissions/{guest_invite.id}", headers=owner_headers)
    db.expire_all()
    assert db.query(UnitPermission).one().is_active is False


def test_guest_cannot_manage_permissions(client, project, guest_headers):
    assert client.get(f"/projects/{project.id}/permissions", headers=guest_headers).status_code == 403
