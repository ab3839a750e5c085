"""Pytest fixtures: in-memory database, API client, users and a demo building."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sitetrack.core.config import settings
from sitetrack.database import Base, get_db
from sitetrack.main import app
from sitetrack.models import Project, UnitPermission
from sitetrack.utils.load_state import load_tracker

from tests.factories import TEST_PHASES, auth_headers, building_structure, make_user

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def media_dir(tmp_path, monkeypatch):
    media = tmp_path / "media"
    monkeypatch.setattr(settings, "storage_dir", str(media))
    return media


@pytest.fixture(autouse=True)
def fresh_load_state():
    load_tracker.reset()
    yield
    load_tracker.reset()


@pytest.fixture()
def no_weather(monkeypatch):
    from sitetrack.utils import weather
    monkeypatch.setattr(weather, "fetch_weather_forecast", lambda lat=None, lng=None: None)


@pytest.fixture()
def owner(db):
    return make_user(db, "engenheiro@obra.com.br", "Eng. Carla")


@pytest.fixture()
def guest_user(db):
    return make_user(db, "cliente@obra.com.br", "Cliente 101")


@pytest.fixture()
def outsider(db):
    return make_user(db, "vizinho@obra.com.br", "Vizinho")


@pytest.fixture()
def project(db, owner):
    project = Project(
        user_id=owner.id,
        name="Residencial Aurora",
        address="Rua A, 10",
        resident_engineer=owner.full_name,
        structure=building_structure(),
        phases=[dict(phase) for phase in TEST_PHASES],
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@pytest.fixture()
def guest_invite(db, project):
    """Unclaimed client invite for Apto 101 with the garage opened up."""
    permission = UnitPermission(
        project_id=project.id,
        unit_id="apt-101",
        email="cliente@obra.com.br",
        role="client",
        common_areas=["garage"],
    )
    db.add(permission)
    db.commit()
    db.refresh(permission)
    return permission


@pytest.fixture()
def owner_headers(owner):
    return auth_headers(owner)


@pytest.fixture()
def guest_headers(guest_user, guest_invite):
    return auth_headers(guest_user)


@pytest.fixture()
def outsider_headers(outsider):
    return auth_headers(outsider)
