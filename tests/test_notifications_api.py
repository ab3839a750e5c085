import pytest

from sitetrack.models import Notification, UnitPermission
from sitetrack.utils.notifications import preview

from tests.factories import auth_headers


@pytest.fixture()
def site_admin(db, project, outsider):
    """Outsider promoted to project staff through an admin-role permission."""
    db.add(UnitPermission(project_id=project.id, unit_id="apt-201", email=outsider.email,
                          user_id=outsider.id, role="admin"))
    db.commit()
    return outsider


def feed(client, headers, **params):
    resp = client.get("/notifications", params=params, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_board_note_reaches_other_staff_only(client, project, owner_headers, guest_headers, site_admin):
    client.post(f"/projects/{project.id}/notes", json={"title": "Concretagem", "content": "Sexta às 7h"},
                headers=owner_headers)

    items = feed(client, auth_headers(site_admin))
    assert [item["content"] for item in items] == ["Nova nota no mural: Concretagem"]
    assert items[0]["is_read"] is False

    assert feed(client, owner_headers) == []
    assert feed(client, guest_headers) == []


def test_unit_mural_activity_is_scoped_to_the_unit(client, project, owner_headers, guest_headers):
    note = client.post(f"/projects/{project.id}/units/apt-101/notes", json={"content": "Quando entregam?"},
                       headers=guest_headers).json()
    client.post(f"/projects/{project.id}/units/apt-102/notes", json={"content": "Aviso do 102"},
                headers=owner_headers)
    client.post(f"/projects/{project.id}/units/apt-101/notes/{note['id']}/replies",
                json={"content": "Em março"}, headers=owner_headers)

    staff_items = feed(client, owner_headers)
    assert [item["content"] for item in staff_items] == ["Nova mensagem no mural da unidade: Quando entregam?"]

    guest_items = feed(client, guest_headers)
    assert [(item["unit_id"], item["content"]) for item in guest_items] == [
        ("apt-101", 'Nova resposta em "Quando entregam?": Em março'),
    ]


def test_read_and_delete(client, db, project, owner, owner_headers, site_admin):
    admin_headers = auth_headers(site_admin)
    for title in ("A", "B", "C"):
        client.post(f"/projects/{project.id}/notes", json={"title": title, "content": title}, headers=owner_headers)
    items = feed(client, admin_headers)
    assert [item["content"][-1] for item in items] == ["C", "B", "A"]
    assert len(feed(client, admin_headers, limit=2)) == 2

    resp = client.post(f"/notifications/{items[0]['id']}/read", headers=admin_headers)
    assert resp.json()["is_read"] is True

    resp = client.post("/notifications/read-all", headers=admin_headers)
    assert resp.json() == {"count": 2}
    assert all(item["is_read"] for item in feed(client, admin_headers))

    assert client.delete(f"/notifications/{items[0]['id']}", headers=admin_headers).status_code == 200
    assert client.delete("/notifications", headers=admin_headers).json() == {"count": 2}
    assert feed(client, admin_headers) == []


def test_items_of_unseen_projects_are_not_reachable(client, db, project, owner, outsider_headers):
    item = Notification(project_id=project.id, content="Interno", created_by=owner.email)
    db.add(item)
    db.commit()

    assert feed(client, outsider_headers) == []
    assert client.post(f"/notifications/{item.id}/read", headers=outsider_headers).status_code == 404
    assert client.delete(f"/notifications/{item.id}", headers=outsider_headers).status_code == 404
    assert client.delete("/notifications", headers=outsider_headers).json() == {"count": 0}


def test_supply_status_change_notifies(client, project, owner_headers, site_admin):
    order = client.post(
        f"/projects/{project.id}/supplies",
        json={"title": "Cimento", "items": [{"id": "i1", "name": "Cimento", "quantity": 10, "unit": "sc"}]},
        headers=owner_headers,
    ).json()
    client.post(f"/projects/{project.id}/supplies/{order['id']}/status", json={"status": "delivered"},
                headers=owner_headers)

    assert [item["content"] for item in feed(client, auth_headers(site_admin))] == [
        "Pedido Cimento: Entregue",
        "Novo pedido de suprimentos: Cimento",
    ]


def test_feed_requires_login(client):
    assert client.get("/notifications").status_code == 401


def test_preview_shortens_long_text():
    assert preview("  Laje   do 2º  pav ") == "Laje do 2º pav"
    long_text = "x" * 200
    assert len(preview(long_text)) == 80
    assert preview(long_text).endswith("…")
