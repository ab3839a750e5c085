from datetime import datetime

from sitetrack.models import LogEntry
from sitetrack.utils.calendar_view import build_calendar, fetch_window


def test_note_workflow(client, project, owner, owner_headers, media_dir):
    resp = client.post(
        f"/projects/{project.id}/notes",
        json={"title": "Prumo", "content": "Conferir prumo da parede norte", "assigned_to": "Mestre@Obra.com.br"},
        headers=owner_headers,
    )
    assert resp.status_code == 200
    note = resp.json()
    assert note["assigned_to"] == "mestre@obra.com.br"
    assert note["created_by"] == owner.email
    assert note["is_completed"] is False

    base = f"/projects/{project.id}/notes/{note['id']}"
    reply = client.post(f"{base}/replies", json={"content": "Verificado"}, headers=owner_headers).json()
    assert reply["note_id"] == note["id"]

    resp = client.post(f"{base}/status", json={"status": "completed"}, headers=owner_headers)
    assert resp.json()["is_completed"] is True
    assert [r["content"] for r in resp.json()["replies"]] == ["Verificado"]

    open_notes = client.get(f"/projects/{project.id}/notes", params={"include_completed": False},
                            headers=owner_headers).json()
    assert open_notes == []

    resp = client.post(f"{base}/attachments", files={"file": ("croqui.png", b"png", "image/png")},
                       headers=owner_headers)
    assert len(resp.json()["attachments"]) == 1
    assert len(list(media_dir.rglob("*.png"))) == 1

    assert client.delete(base, headers=owner_headers).status_code == 200
    assert list(media_dir.rglob("*.png")) == []


def test_note_update_reopens(client, project, owner_headers):
    note = client.post(f"/projects/{project.id}/notes", json={"content": "Limpar", "status": "completed"},
                       headers=owner_headers).json()
    assert note["is_completed"] is True

    resp = client.put(f"/projects/{project.id}/notes/{note['id']}", json={"status": "blocked"},
                      headers=owner_headers)
    assert resp.json()["is_completed"] is False

    resp = client.put(f"/projects/{project.id}/notes/{note['id']}", json={"content": "  "},
                      headers=owner_headers)
    assert resp.status_code == 400


def test_logs_feed(client, project, owner_headers):
    resp = client.post(f"/projects/{project.id}/logs",
                       json={"title": "Laje concretada", "previous_value": 50, "new_value": 100},
                       headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()["user_name"] == "Eng. Carla"
    assert resp.json()["category"] == "unit"

    client.post(f"/projects/{project.id}/logs", json={"title": "Revisão", "category": "macro"},
                headers=owner_headers)

    feed = client.get(f"/projects/{project.id}/logs", params={"category": "macro"}, headers=owner_headers).json()
    assert [log["title"] for log in feed] == ["Revisão"]


def test_fetch_window_spans_three_months():
    assert fetch_window(2025, 1) == (datetime(2024, 12, 1), datetime(2025, 2, 28, 23, 59, 59, 999999))
    assert fetch_window(2025, 12)[1].date().isoformat() == "2026-01-31"


def test_build_calendar_grid():
    grid = build_calendar([], 2025, 6)

    # 1 June 2025 is a Sunday
    assert grid["first_weekday"] == 0
    assert grid["days_in_month"] == 30


def test_logs_calendar(client, db, project, owner_headers):
    db.add_all([
        LogEntry(project_id=project.id, title="Fim de fevereiro", date=datetime(2025, 2, 28, 18, 0)),
        LogEntry(project_id=project.id, title="Março A", date=datetime(2025, 3, 5, 8, 0)),
        LogEntry(project_id=project.id, title="Março B", date=datetime(2025, 3, 5, 16, 0)),
        LogEntry(project_id=project.id, title="Maio", date=datetime(2025, 5, 2, 8, 0)),
    ])
    db.commit()

    resp = client.get(f"/projects/{project.id}/logs/calendar", params={"month": 3, "year": 2025},
                      headers=owner_headers)
    assert resp.status_code == 200
    grid = resp.json()

    assert grid["first_weekday"] == 6
    assert sorted(grid["logs_by_date"]) == ["2025-02-28", "2025-03-05"]
    assert [log["title"] for log in grid["logs_by_date"]["2025-03-05"]] == ["Março A", "Março B"]
