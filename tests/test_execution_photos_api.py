from sitetrack.models import ProjectPhoto, UnitProgress


def upload_subtask_photo(client, project, headers, unit_id="apt-101", phase_id="structure", subtask="Laje",
                         description=""):
    return client.post(
        f"/projects/{project.id}/progress/{unit_id}/{phase_id}/photos",
        data={"subtask": subtask, "description": description},
        files={"file": ("laje.jpg", b"jpeg-bytes", "image/jpeg")},
        headers=headers,
    )


def subtask_photos(db, unit_id="apt-101", phase_id="structure", subtask="Laje"):
    db.expire_all()
    row = db.query(UnitProgress).filter_by(unit_id=unit_id, phase_id=phase_id).one()
    return row.subtasks[subtask].get("photos", [])


def test_upload_mirrors_into_gallery(client, db, project, owner, owner_headers, media_dir):
    resp = upload_subtask_photo(client, project, owner_headers)
    assert resp.status_code == 200, resp.text
    photo = resp.json()

    assert photo["description"] == "Laje"
    assert photo["category"] == "inspection"
    assert photo["location_label"] == "1º Pavimento • Apto 101"
    assert photo["phase_id"] == "structure"
    assert photo["created_by"] == owner.email
    assert photo["url"].startswith(f"/media/execution/{project.id}/apt-101/")

    stored = subtask_photos(db)
    assert [(p["id"], p["url"]) for p in stored] == [(photo["id"], photo["url"])]
    # A phase that was never saved starts at 0%
    assert db.query(UnitProgress).one().percentage == 0
    assert len(list(media_dir.rglob("*.jpg"))) == 1


def test_checklist_save_keeps_photos(client, db, project, owner_headers):
    photo = upload_subtask_photo(client, project, owner_headers, description="Concretagem").json()

    client.put(
        f"/projects/{project.id}/progress/apt-101/structure",
        json={"subtasks": {"Laje": {"progress": 100}, "Pilares": {"progress": 100}}},
        headers=owner_headers,
    )

    stored = subtask_photos(db)
    assert [p["url"] for p in stored] == [photo["url"]]
    assert db.query(UnitProgress).one().percentage == 100


def test_upload_validation(client, project, owner_headers, guest_headers, media_dir):
    assert upload_subtask_photo(client, project, owner_headers, subtask="Telhado").status_code == 400
    assert upload_subtask_photo(client, project, owner_headers, unit_id="apt-999").status_code == 400
    assert list(media_dir.rglob("*.jpg")) == []

    assert upload_subtask_photo(client, project, guest_headers).status_code == 403


def test_edit_description_updates_both_copies(client, db, project, owner_headers):
    photo = upload_subtask_photo(client, project, owner_headers).json()
    url = f"/projects/{project.id}/progress/apt-101/structure/photos/{photo['id']}"

    resp = client.put(url, json={"description": "Laje do 1º pav"}, headers=owner_headers)
    assert resp.json()["description"] == "Laje do 1º pav"
    assert subtask_photos(db)[0]["description"] == "Laje do 1º pav"

    assert client.put(url, json={"description": "  "}, headers=owner_headers).status_code == 400
    missing = f"/projects/{project.id}/progress/apt-101/masonry/photos/{photo['id']}"
    assert client.put(missing, json={"description": "x"}, headers=owner_headers).status_code == 404


def test_delete_removes_row_entry_and_file(client, db, project, owner_headers, media_dir):
    photo = upload_subtask_photo(client, project, owner_headers).json()

    resp = client.delete(f"/projects/{project.id}/progress/apt-101/structure/photos/{photo['id']}",
                         headers=owner_headers)
    assert resp.status_code == 200

    assert subtask_photos(db) == []
    assert db.query(ProjectPhoto).count() == 0
    assert list(media_dir.rglob("*.jpg")) == []


def test_gallery_delete_detaches_subtask_copy(client, db, project, owner_headers):
    photo = upload_subtask_photo(client, project, owner_headers).json()

    client.delete(f"/projects/{project.id}/photos/{photo['id']}", headers=owner_headers)

    assert subtask_photos(db) == []


def test_guest_gallery_merges_execution_photos_by_url(client, project, owner_headers, guest_headers):
    own = upload_subtask_photo(client, project, owner_headers).json()
    moved = upload_subtask_photo(client, project, owner_headers, subtask="Pilares").json()
    upload_subtask_photo(client, project, owner_headers, unit_id="apt-102")

    # Relabelled in the gallery, so only the subtask copy still points at the unit
    client.put(f"/projects/{project.id}/photos/{moved['id']}", json={"location_label": "Depósito"},
               headers=owner_headers)

    photos = client.get(f"/projects/{project.id}/photos", headers=guest_headers).json()

    assert sorted(p["url"] for p in photos) == sorted([own["url"], moved["url"]])
    merged = next(p for p in photos if p["url"] == moved["url"])
    assert merged["created_by"] == "Execução"
    assert merged["location_label"] == "Apto 101"
    assert merged["phase_id"] == "structure"

    staff = client.get(f"/projects/{project.id}/photos", headers=owner_headers).json()
    assert len(staff) == 3
