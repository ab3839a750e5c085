"""
Seed a demo construction site: an owner account, one project with a
small building structure, a few schedule tasks, unit progress and a
client invite.

Usage:
    python -m sitetrack.seed.seed_demo
"""
import sys
from datetime import date, datetime, timedelta

from sitetrack.core.config import settings
from sitetrack.core.security import hash_password
from sitetrack.database import Base, SessionLocal, engine
from sitetrack.models import DailyReport, Profile, Project, Task, UnitPermission
from sitetrack.core.constants import DEFAULT_PHASES
from sitetrack.utils.project import normalize_structure
from sitetrack.utils.unit_progress import refresh_project_progress, upsert_unit_progress

DEMO_EMAIL = "engenharia@demo.sitetrack"
DEMO_PASSWORD = "demo1234"


def demo_structure():
    levels = [
        {"id": "lvl-foundation", "label": "Fundação", "type": "foundation", "order": 0, "units": [],
         "active_phases": ["structure", "waterproofing"]},
        {"id": "lvl-garage", "label": "Garagem", "type": "garage", "order": 1,
         "units": [{"id": "garage-1", "name": "Garagem", "type": "garage"}]},
    ]
    for floor in range(1, 4):
        levels.append({
            "id": f"lvl-{floor}",
            "label": f"{floor}º Pavimento",
            "type": "apartments",
            "order": floor + 1,
            "units": [
                {"id": f"apt-{floor}0{n}", "name": f"Apto {floor}0{n}", "type": "unit"}
                for n in range(1, 5)
            ],
        })
    levels.append({
        "id": "lvl-roof", "label": "Cobertura", "type": "common", "order": 10,
        "units": [{"id": "roof-area", "name": "Área de Lazer", "type": "common"}],
    })
    return normalize_structure({"units_per_floor": 4, "levels": levels})


def seed_demo(db) -> Project:
    owner = db.query(Profile).filter(Profile.email == DEMO_EMAIL).first()
    if not owner:
        owner = Profile(
            email=DEMO_EMAIL,
            full_name="Eng. Demo",
            hashed_password=hash_password(DEMO_PASSWORD),
        )
        db.add(owner)
        db.flush()

    project = db.query(Project).filter(Project.user_id == owner.id, Project.name == "Residencial Demo").first()
    if project:
        return project

    today = date.today()
    project = Project(
        user_id=owner.id,
        name="Residencial Demo",
        address="Rua das Obras, 100 - Caçador/SC",
        resident_engineer=owner.full_name,
        structure=demo_structure(),
        phases=list(DEFAULT_PHASES),
        start_date=today - timedelta(days=90),
        end_date=today + timedelta(days=270),
    )
    db.add(project)
    db.flush()

    for n in range(1, 5):
        upsert_unit_progress(db, project.id, f"apt-10{n}", "structure", 100)
        upsert_unit_progress(db, project.id, f"apt-20{n}", "structure", 100 if n < 3 else 60)
        upsert_unit_progress(db, project.id, f"apt-10{n}", "masonry", 40)

    structure_task = Task(
        project_id=project.id, name="Estrutura 3º Pavimento", custom_id="EST-03",
        start=today - timedelta(days=10), end=today + timedelta(days=5), progress=30, status="in_progress",
        linked_unit_id="apt-301", linked_phase_id="structure",
    )
    db.add(structure_task)
    db.flush()
    db.add(Task(
        project_id=project.id, name="Alvenaria 3º Pavimento", custom_id="ALV-03",
        start=today + timedelta(days=6), end=today + timedelta(days=20), progress=0, status="not_started",
        dependencies=[structure_task.id], linked_unit_id="apt-301", linked_phase_id="masonry",
    ))

    for offset in range(1, 6):
        db.add(DailyReport(
            project_id=project.id, date=today - timedelta(days=offset),
            weather="rainy" if offset == 3 else "sunny", workforce_count=18 + offset,
            observations="Concretagem da laje concluído no 2º pavimento." if offset == 2 else None,
            updated_at=datetime.utcnow(),
        ))

    db.add(UnitPermission(
        project_id=project.id, unit_id="apt-101", email="cliente@demo.sitetrack",
        role="client", common_areas=["garage", "common"],
    ))

    refresh_project_progress(db, project)
    return project


def main():
    print("WARNING: This script will seed the database with demo data.")
    print(f"Target Environment: {settings.environment}")
    print(f"Database: {settings.database_url.split('@')[-1] if settings.database_url else 'Unknown'}")

    confirm = input("Are you sure you want to proceed? (yes/no): ")
    if confirm.lower() != "yes":
        print("Aborted.")
        return

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        project = seed_demo(db)
        db.commit()
        print(f"✅ Demo project #{project.id} ready. Sign in as {DEMO_EMAIL} / {DEMO_PASSWORD}")
    except Exception as e:
        db.rollback()
        print(f"❌ Seeding failed: {str(e)}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
