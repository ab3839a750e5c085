from sitetrack.core.constants import DEFAULT_PHASES
from sitetrack.models import Task, UnitPermission

from tests.factories import auth_headers


def test_create_project_fills_defaults(client, owner_headers):
    resp = client.post(
        "/projects/",
        json={
            "name": "Edifício Horizonte",
            "address": "Av. Brasil, 500",
            "structure": {
                "units_per_floor": 1,
                "levels": [
                    {"id": "l2", "label": "2º", "type": "apartments", "order": 3,
                     "units": [{"id": "u2", "name": "Apto 2"}]},
                    {"id": "b1", "label": "Subsolo", "type": "basement", "order": 1},
                    {"id": "f", "label": "Fundação", "type": "foundation", "order": 0},
                    {"id": "l1", "label": "1º", "type": "apartments", "order": 2,
                     "units": [{"id": "u1", "name": "Apto 1"}]},
                ],
            },
        },
        headers=owner_headers,
    )
    assert resp.status_code == 200
    body = resp.json()

    assert body["resident_engineer"] == "Eng. Carla"
    assert body["progress"] == 0
    assert [phase["id"] for phase in body["phases"]] == [phase["id"] for phase in DEFAULT_PHASES]
    structure = body["structure"]
    assert [level["id"] for level in structure["levels"]] == ["f", "b1", "l1", "l2"]
    assert structure["floors"] == 2
    assert structure["basements"] == 1
    assert structure["has_foundation"] is True


def test_create_project_rejects_blank_name(client, owner_headers):
    resp = client.post("/projects/", json={"name": "  ", "address": "x"}, headers=owner_headers)
    assert resp.status_code == 400


def test_list_projects_by_visibility(client, project, owner_headers, guest_headers, outsider_headers):
    assert [p["id"] for p in client.get("/projects/", headers=owner_headers).json()] == [project.id]
    assert [p["id"] for p in client.get("/projects/", headers=guest_headers).json()] == [project.id]
    assert client.get("/projects/", headers=outsider_headers).json() == []


def test_outsider_gets_404(client, project, outsider_headers):
    assert client.get(f"/projects/{project.id}", headers=outsider_headers).status_code == 404
    assert client.get("/projects/9999", headers=outsider_headers).status_code == 404


def test_access_endpoint_claims_guest_invite(client, db, project, guest_headers, guest_user, guest_invite):
    resp = client.get(f"/projects/{project.id}/access", headers=guest_headers)
    assert resp.status_code == 200
    body = resp.json()

    assert body["role"] == "client"
    assert body["is_guest"] is True
    assert body["is_staff"] is False
    assert body["unit_id"] == "apt-101"
    assert body["common_areas"] == ["garage"]
    assert body["claimed"] is True

    db.expire_all()
    assert db.get(UnitPermission, guest_invite.id).user_id == guest_user.id

    again = client.post(f"/projects/{project.id}/claim-invite", headers=guest_headers).json()
    assert again == {"ok": True, "claimed": False, "permission_id": guest_invite.id, "reason": None}


def test_guest_cannot_update(client, project, guest_headers):
    resp = client.put(f"/projects/{project.id}", json={"name": "Hack"}, headers=guest_headers)
    assert resp.status_code == 403


def test_update_project(client, project, owner_headers):
    resp = client.put(
        f"/projects/{project.id}",
        json={"status": "yellow", "latitude": -27.1, "longitude": -52.3},
        headers=owner_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "yellow"
    assert resp.json()["latitude"] == -27.1
    # Untouched fields keep their values
    assert resp.json()["name"] == "Residencial Aurora"


def test_only_owner_deletes_and_children_go_with_it(client, db, project, owner_headers, outsider):
    db.add(UnitPermission(project_id=project.id, unit_id="apt-201", email=outsider.email, role="admin"))
    db.add(Task(project_id=project.id, name="Laje", start=project.created_at.date(),
                end=project.created_at.date(), progress=0, status="not_started"))
    db.commit()

    resp = client.delete(f"/projects/{project.id}", headers=auth_headers(outsider))
    assert resp.status_code == 403

    resp = client.delete(f"/projects/{project.id}", headers=owner_headers)
    assert resp.status_code == 200

    db.expire_all()
    assert db.query(Task).count() == 0
    assert db.query(UnitPermission).count() == 0
