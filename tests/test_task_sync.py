from datetime import date

from sitetrack.models import Task, UnitProgress
from sitetrack.utils.tasks import (
    cascade_shift,
    normalize_status,
    sync_tasks_from_unit_progress,
    sync_unit_progress_from_task,
)


def test_normalize_status():
    assert normalize_status(0) == "not_started"
    assert normalize_status(1) == "in_progress"
    assert normalize_status(99) == "in_progress"
    assert normalize_status(100) == "completed"


def test_unlinked_task_is_not_synced(db, project):
    task = Task(project_id=project.id, name="Solta", start=date(2025, 1, 1), end=date(2025, 1, 2), progress=50)
    db.add(task)
    db.commit()

    assert sync_unit_progress_from_task(db, task) is None
    assert db.query(UnitProgress).count() == 0


def test_sync_both_ways(db, project):
    task = Task(project_id=project.id, name="Alvenaria", start=date(2025, 1, 1), end=date(2025, 1, 9),
                progress=40, status="in_progress", linked_unit_id="apt-102", linked_phase_id="masonry",
                linked_subtasks=["Paredes"])
    db.add(task)
    db.commit()

    row = sync_unit_progress_from_task(db, task)
    assert (row.unit_id, row.phase_id, row.percentage) == ("apt-102", "masonry", 40)
    assert row.subtasks == {"Paredes": {"progress": 40}}

    updated = sync_tasks_from_unit_progress(db, project.id, "apt-102", "masonry", 100)
    db.commit()
    assert updated == [task]
    assert (task.progress, task.status) == (100, "completed")


def test_cascade_shift_moves_chain_backwards(db, project):
    a = Task(project_id=project.id, name="A", start=date(2025, 1, 1), end=date(2025, 1, 5))
    db.add(a)
    db.flush()
    b = Task(project_id=project.id, name="B", start=date(2025, 1, 6), end=date(2025, 1, 8), dependencies=[a.id])
    db.add(b)
    db.flush()
    c = Task(project_id=project.id, name="C", start=date(2025, 1, 9), end=date(2025, 1, 9), dependencies=[b.id])
    db.add(c)
    db.commit()

    shifted = cascade_shift(db, [a, b, c], a.id, -2)

    assert shifted == [b, c]
    assert (b.start, b.end) == (date(2025, 1, 4), date(2025, 1, 6))
    assert c.start == date(2025, 1, 7)
    assert cascade_shift(db, [a, b, c], a.id, 0) == []
