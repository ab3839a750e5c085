"""Shared builders for test data."""
from sitetrack.core.security import create_access_token, hash_password
from sitetrack.models import Profile
from sitetrack.utils.project import normalize_structure

TEST_PHASES = [
    {"id": "structure", "label": "ESTRUTURA", "code": "#STR", "color": "stone", "icon": "Box",
     "subtasks": ["Laje", "Pilares"]},
    {"id": "masonry", "label": "ALVENARIA", "code": "#MAS", "color": "orange", "icon": "Grip",
     "subtasks": ["Paredes"]},
    {"id": "painting", "label": "PINTURA", "code": "#PAI", "color": "pink", "icon": "Brush",
     "subtasks": []},
]


def building_structure():
    """Foundation, garage (structure only), two apartment floors and a common roof."""
    return normalize_structure({
        "units_per_floor": 2,
        "levels": [
            {"id": "lvl-2", "label": "2º Pavimento", "type": "apartments", "order": 3,
             "units": [{"id": "apt-201", "name": "Apto 201", "type": "unit"},
                       {"id": "apt-202", "name": "Apto 202", "type": "unit"}]},
            {"id": "lvl-foundation", "label": "Fundação", "type": "foundation", "order": 0, "units": []},
            {"id": "lvl-garage", "label": "Garagem", "type": "garage", "order": 1,
             "active_phases": ["structure"],
             "units": [{"id": "garage-1", "name": "Garagem G1", "type": "garage"}]},
            {"id": "lvl-1", "label": "1º Pavimento", "type": "apartments", "order": 2,
             "units": [{"id": "apt-101", "name": "Apto 101", "type": "unit"},
                       {"id": "apt-102", "name": "Apto 102", "type": "unit"}]},
            {"id": "lvl-roof", "label": "Cobertura", "type": "common", "order": 4,
             "units": [{"id": "party-room", "name": "Salão de Festas", "type": "common"}]},
        ],
    })


def make_user(db, email, full_name=None, password="secret123"):
    user = Profile(email=email, full_name=full_name, hashed_password=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}
