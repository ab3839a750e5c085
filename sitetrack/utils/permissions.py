"""
Bulk unit invites.

The invite form takes a free-text list of emails; every address becomes
(or refreshes) one unit_permissions row keyed by (project, unit, email).
"""
import re
from typing import List

from sqlalchemy.orm import Session

from sitetrack.models import Project, UnitPermission
from sitetrack.schemas.unit import PermissionInvite
from sitetrack.utils.progress import find_unit, project_levels

EMAIL_SEPARATORS = re.compile(r"[\n,;]")


def parse_invite_emails(raw: str) -> List[str]:
    """
    Split on newlines, commas and semicolons; lower-case, drop entries
    without an '@' and de-duplicate keeping first-seen order.
    """
    seen = []
    for part in EMAIL_SEPARATORS.split(raw or ""):
        email = part.strip().lower()
        if email and "@" in email and email not in seen:
            seen.append(email)
    return seen


def bulk_invite(db: Session, project: Project, data: PermissionInvite) -> List[UnitPermission]:
    """
    Upsert one active permission per email for the selected unit.

    Existing rows for the same (project, unit, email) are re-activated and
    take the new role and contact details; their claimed user id is kept.
    Nothing is committed here.

    Raises:
        ValueError: no valid email, or the unit is not part of the project
    """
    emails = parse_invite_emails(data.emails)
    if not emails:
        raise ValueError("No valid email found")
    if find_unit(project_levels(project.structure), data.unit_id) is None:
        raise ValueError(f"Unknown unit '{data.unit_id}' for this project")

    rows = []
    for email in emails:
        row = db.query(UnitPermission).filter(
            UnitPermission.project_id == project.id,
            UnitPermission.unit_id == data.unit_id,
            UnitPermission.email == email,
        ).first()
        if not row:
            row = UnitPermission(project_id=project.id, unit_id=data.unit_id, email=email)
            db.add(row)
        row.role = data.role
        row.job_title = data.job_title
        row.phone = data.phone
        row.notes = data.notes
        row.common_areas = list(data.common_areas)
        row.is_active = True
        rows.append(row)
    return rows
