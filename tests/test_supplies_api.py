import csv
import io

from sitetrack.utils import ai

ITEMS = [
    {"id": "i1", "name": "Cimento CP-II", "quantity": 30, "unit": "sc"},
    {"id": "i2", "name": "Areia média", "quantity": 4, "unit": "m³"},
]


def create_order(client, project, headers, **fields):
    payload = {"title": "Material 2º pav", "priority": "high", "items": ITEMS}
    payload.update(fields)
    resp = client.post(f"/projects/{project.id}/supplies", json=payload, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_order_defaults(client, project, owner, owner_headers):
    order = create_order(client, project, owner_headers)

    assert order["status"] == "requested"
    assert order["created_by"] == owner.email
    assert [item["checked"] for item in order["items"]] == [False, False]


def test_order_needs_items(client, project, owner_headers):
    resp = client.post(f"/projects/{project.id}/supplies", json={"title": "Vazio", "items": []},
                       headers=owner_headers)
    assert resp.status_code == 400


def test_status_change_posts_system_comment(client, project, owner_headers):
    order = create_order(client, project, owner_headers)
    url = f"/projects/{project.id}/supplies/{order['id']}/status"

    resp = client.post(url, json={"status": "approved"}, headers=owner_headers)
    assert resp.json()["status"] == "approved"
    assert [(c["created_by"], c["content"]) for c in resp.json()["comments"]] == [
        ("Sistema", "Pedido aprovado. Iniciando separação."),
    ]

    # Same status again and a status without a message add nothing
    client.post(url, json={"status": "approved"}, headers=owner_headers)
    resp = client.post(url, json={"status": "cancelled"}, headers=owner_headers)
    assert len(resp.json()["comments"]) == 1

    assert client.post(url, json={"status": "lost"}, headers=owner_headers).status_code == 422


def test_toggle_item(client, project, owner_headers):
    order = create_order(client, project, owner_headers)
    url = f"/projects/{project.id}/supplies/{order['id']}/items"

    resp = client.post(f"{url}/i2/toggle", headers=owner_headers)
    assert [item["checked"] for item in resp.json()["items"]] == [False, True]

    resp = client.post(f"{url}/i2/toggle", headers=owner_headers)
    assert [item["checked"] for item in resp.json()["items"]] == [False, False]

    assert client.post(f"{url}/nope/toggle", headers=owner_headers).status_code == 404


def test_comments_and_delete(client, project, owner_headers):
    order = create_order(client, project, owner_headers)
    base = f"/projects/{project.id}/supplies/{order['id']}"

    resp = client.post(f"{base}/comments", json={"content": "Entregar pela manhã"}, headers=owner_headers)
    assert resp.json()["content"] == "Entregar pela manhã"

    assert client.delete(base, headers=owner_headers).status_code == 200
    assert client.get(f"/projects/{project.id}/supplies", headers=owner_headers).json() == []


def test_export_csv(client, project, owner_headers):
    order = create_order(client, project, owner_headers)
    client.post(f"/projects/{project.id}/supplies/{order['id']}/items/i1/toggle", headers=owner_headers)

    resp = client.get(f"/projects/{project.id}/supplies/export", headers=owner_headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "suprimentos_detalhado_residencial_aurora_" in resp.headers["content-disposition"]

    text = resp.content.decode("utf-8")
    assert text.startswith("\ufeff")
    rows = list(csv.reader(io.StringIO(text.lstrip("\ufeff"))))
    assert rows[0][0] == "ID Pedido"
    assert [(row[2], row[6], row[9]) for row in rows[1:]] == [
        ("Solicitado", "Cimento CP-II", "Sim"),
        ("Solicitado", "Areia média", "Não"),
    ]


def test_import_preview(client, project, owner_headers, monkeypatch):
    captured = {}

    def fake_parse(csv_content):
        captured["csv"] = csv_content
        return [{"id": "preview-0", "name": "Tubo 25mm", "quantity": 6, "unit": "br", "checked": False}]

    monkeypatch.setattr(ai, "parse_supply_list", fake_parse)

    resp = client.post(f"/projects/{project.id}/supplies/import-preview",
                       json={"csv_content": "Tubo;6;br"}, headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()[0]["name"] == "Tubo 25mm"
    assert captured["csv"] == "Tubo;6;br"


def test_supplies_are_staff_only(client, project, guest_headers):
    assert client.get(f"/projects/{project.id}/supplies", headers=guest_headers).status_code == 403
