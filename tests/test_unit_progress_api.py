from datetime import date

from sitetrack.models import Project, Task, UnitProgress


def test_save_derives_percentage_and_syncs_tasks(client, db, project, owner_headers):
    db.add(Task(project_id=project.id, name="Estrutura 101", start=date(2025, 4, 1), end=date(2025, 4, 9),
                progress=0, status="not_started", linked_unit_id="apt-101", linked_phase_id="structure"))
    db.commit()

    resp = client.put(
        f"/projects/{project.id}/progress/apt-101/structure",
        json={"subtasks": {"Laje": {"progress": 100}, "Pilares": {"progress": 50}}},
        headers=owner_headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["percentage"] == 75

    db.expire_all()
    task = db.query(Task).one()
    assert (task.progress, task.status) == (75, "in_progress")
    # 75 over the 16 (unit, applicable phase) pairs of the building
    assert db.get(Project, project.id).progress == 5


def test_phase_without_template_keeps_sent_percentage(client, project, owner_headers):
    resp = client.put(
        f"/projects/{project.id}/progress/apt-201/painting",
        json={"subtasks": {}, "percentage": 30},
        headers=owner_headers,
    )
    assert resp.json()["percentage"] == 30


def test_save_rejects_unknown_unit_or_phase(client, project, owner_headers):
    resp = client.put(f"/projects/{project.id}/progress/apt-999/structure", json={}, headers=owner_headers)
    assert resp.status_code == 400
    resp = client.put(f"/projects/{project.id}/progress/apt-101/roofing", json={}, headers=owner_headers)
    assert resp.status_code == 400


def test_save_overwrites_existing_row(client, db, project, owner_headers):
    url = f"/projects/{project.id}/progress/apt-101/masonry"
    client.put(url, json={"subtasks": {"Paredes": {"progress": 20}}}, headers=owner_headers)
    client.put(url, json={"subtasks": {"Paredes": {"progress": 80}}}, headers=owner_headers)

    rows = db.query(UnitProgress).filter_by(unit_id="apt-101", phase_id="masonry").all()
    assert [row.percentage for row in rows] == [80]


def test_mass_update(client, db, project, owner_headers):
    resp = client.post(
        f"/projects/{project.id}/progress/mass-update",
        json={"phase_id": "structure", "unit_ids": ["apt-101", "apt-102", "apt-201"],
              "progress": 100, "subtasks": ["Laje", "Pilares"]},
        headers=owner_headers,
    )
    assert resp.status_code == 200
    assert [row["unit_id"] for row in resp.json()] == ["apt-101", "apt-102", "apt-201"]
    assert resp.json()[0]["subtasks"] == {"Laje": {"progress": 100}, "Pilares": {"progress": 100}}

    db.expire_all()
    assert db.get(Project, project.id).progress == 19


def test_mass_update_needs_units(client, project, owner_headers):
    resp = client.post(
        f"/projects/{project.id}/progress/mass-update",
        json={"phase_id": "structure", "unit_ids": [], "progress": 50},
        headers=owner_headers,
    )
    assert resp.status_code == 400


def test_matrix_lists_applicable_phases(client, project, owner_headers):
    client.put(
        f"/projects/{project.id}/progress/garage-1/structure",
        json={"subtasks": {"Laje": {"progress": 100}, "Pilares": {"progress": 100}}},
        headers=owner_headers,
    )

    matrix = client.get(f"/projects/{project.id}/progress", headers=owner_headers).json()
    levels = {level["id"]: level for level in matrix["levels"]}

    garage = levels["lvl-garage"]["units"][0]
    assert list(garage["phases"]) == ["structure"]
    assert garage["phases"]["structure"]["percentage"] == 100
    assert list(levels["lvl-1"]["units"][0]["phases"]) == ["structure", "masonry", "painting"]
    assert levels["lvl-1"]["units"][0]["phases"]["masonry"]["percentage"] == 0
    assert matrix["global_progress"] == 6


def test_guest_cannot_edit_progress(client, project, guest_headers):
    resp = client.put(f"/projects/{project.id}/progress/apt-101/structure", json={}, headers=guest_headers)
    assert resp.status_code == 403
    assert client.get(f"/projects/{project.id}/progress", headers=guest_headers).status_code == 403
