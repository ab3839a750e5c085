"""
Permission / visibility resolution for projects.

A user sees a project as *staff* when they own it, belong to the owning
organization, or hold an admin-role unit permission on it. Users whose only
link to the project is a client/architect unit permission are *guests*:
read-only, scoped to one unit plus the common areas the invite opened up.

Invites are created by email before the invitee has an account; the first
time the invitee touches the project the row is claimed by writing their
user id onto it (see claim_invite).
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from sitetrack.core.constants import GUEST_ROLES, STAFF_ROLES
from sitetrack.core.security import get_current_user
from sitetrack.database import get_db
from sitetrack.models import OrganizationMember, Profile, Project, UnitPermission

logger = logging.getLogger(__name__)


@dataclass
class AccessContext:
    project_id: int
    is_owner: bool = False
    is_org_member: bool = False
    has_admin_permission: bool = False
    permission: Optional[UnitPermission] = None
    claimed: bool = False

    @property
    def role(self) -> str:
        if self.is_owner:
            return "owner"
        if self.is_org_member:
            return "staff"
        if self.has_admin_permission:
            return "admin"
        if self.permission is not None:
            return self.permission.role
        return "none"

    @property
    def is_staff(self) -> bool:
        return self.is_owner or self.is_org_member or self.has_admin_permission

    @property
    def is_guest(self) -> bool:
        if self.is_staff or self.permission is None:
            return False
        return self.permission.role in GUEST_ROLES

    @property
    def has_access(self) -> bool:
        return self.is_staff or self.is_guest

    @property
    def unit_id(self) -> Optional[str]:
        return self.permission.unit_id if self.permission is not None else None

    @property
    def common_areas(self) -> List[str]:
        if self.permission is None:
            return []
        return list(self.permission.common_areas or [])


@dataclass
class ClaimResult:
    ok: bool
    claimed: bool = False
    permission_id: Optional[int] = None
    reason: Optional[str] = None


def _find_permission(db: Session, project_id: int, user_id: int, email: str) -> Optional[UnitPermission]:
    """Active permission linked to the user, or an unclaimed invite for their email."""
    return (
        db.query(UnitPermission)
        .filter(
            UnitPermission.project_id == project_id,
            UnitPermission.is_active == True,
            or_(
                UnitPermission.user_id == user_id,
                and_(
                    UnitPermission.user_id.is_(None),
                    func.lower(UnitPermission.email) == (email or "").lower(),
                ),
            ),
        )
        .order_by(UnitPermission.user_id.is_(None), UnitPermission.created_at.desc())
        .first()
    )


def is_org_member(db: Session, organization_id: Optional[int], user_id: int) -> bool:
    if not organization_id:
        return False
    member = db.query(OrganizationMember).filter(
        OrganizationMember.organization_id == organization_id,
        OrganizationMember.user_id == user_id,
    ).first()
    return member is not None


def claim_invite(db: Session, project_id: int, user_id: int, email: str) -> ClaimResult:
    """
    Link the email invites on the project to a user id.

    Idempotent: when every matching row is already linked to the same user
    it reports ok without writing. Rows linked to someone else are never
    re-assigned.
    """
    rows = (
        db.query(UnitPermission)
        .filter(
            UnitPermission.project_id == project_id,
            UnitPermission.is_active == True,
            func.lower(UnitPermission.email) == (email or "").lower(),
        )
        .all()
    )
    unclaimed = [row for row in rows if row.user_id is None]
    own = [row for row in rows if row.user_id == user_id]

    if unclaimed:
        for row in unclaimed:
            row.user_id = user_id
        db.commit()
        logger.info(
            "User %s claimed %d unit permission(s) on project %s",
            user_id, len(unclaimed), project_id,
        )
        return ClaimResult(ok=True, claimed=True, permission_id=unclaimed[0].id)

    if own:
        return ClaimResult(ok=True, claimed=False, permission_id=own[0].id)

    if rows:
        return ClaimResult(
            ok=False,
            permission_id=rows[0].id,
            reason="Invite already claimed by another user",
        )
    return ClaimResult(ok=False, reason="No active invite for this user on the project")


def _has_unclaimed_invite(db: Session, project_id: int, email: str) -> bool:
    return (
        db.query(UnitPermission.id)
        .filter(
            UnitPermission.project_id == project_id,
            UnitPermission.is_active == True,
            UnitPermission.user_id.is_(None),
            func.lower(UnitPermission.email) == (email or "").lower(),
        )
        .first()
        is not None
    )


def resolve_access(db: Session, project: Project, user: Profile) -> AccessContext:
    """
    Decide how the user sees the project.

    Every unclaimed invite for the user's email is claimed first, even when
    the user already holds a linked permission, so a later admin-role invite
    takes effect. The outcome is reported on the returned context.
    """
    context = AccessContext(
        project_id=project.id,
        is_owner=project.user_id == user.id,
        is_org_member=is_org_member(db, project.organization_id, user.id),
    )

    if _has_unclaimed_invite(db, project.id, user.email):
        result = claim_invite(db, project.id, user.id, user.email)
        context.claimed = result.claimed
        if not result.ok:
            logger.warning("Could not claim invite on project %s: %s", project.id, result.reason)

    context.permission = _find_permission(db, project.id, user.id, user.email)
    context.has_admin_permission = (
        db.query(UnitPermission)
        .filter(
            UnitPermission.project_id == project.id,
            UnitPermission.user_id == user.id,
            UnitPermission.is_active == True,
            UnitPermission.role.in_(STAFF_ROLES),
        )
        .first()
        is not None
    )
    return context


def list_visible_projects(db: Session, user: Profile) -> List[Project]:
    """
    Owned projects, projects of the user's organizations and projects the
    user holds an active unit permission on. Empty when there is none.
    """
    org_ids = [
        row.organization_id
        for row in db.query(OrganizationMember.organization_id)
        .filter(OrganizationMember.user_id == user.id)
        .all()
    ]
    permission_project_ids = [
        row.project_id
        for row in db.query(UnitPermission.project_id)
        .filter(
            UnitPermission.is_active == True,
            or_(
                UnitPermission.user_id == user.id,
                func.lower(UnitPermission.email) == user.email.lower(),
            ),
        )
        .all()
    ]

    conditions = [Project.user_id == user.id]
    if org_ids:
        conditions.append(Project.organization_id.in_(org_ids))
    if permission_project_ids:
        conditions.append(Project.id.in_(permission_project_ids))

    return (
        db.query(Project)
        .filter(or_(*conditions))
        .order_by(Project.updated_at.desc())
        .all()
    )


def get_project_or_404(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@dataclass
class ProjectAccess:
    """What route handlers receive: the project, the user and their resolved access."""
    project: Project
    user: Profile
    access: AccessContext


def require_project_access(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
) -> ProjectAccess:
    """Any staff or guest access; projects the user cannot see answer 404."""
    project = get_project_or_404(db, project_id)
    access = resolve_access(db, project, current_user)
    if not access.has_access:
        raise HTTPException(status_code=404, detail="Project not found")
    return ProjectAccess(project=project, user=current_user, access=access)


def require_staff(ctx: ProjectAccess = Depends(require_project_access)) -> ProjectAccess:
    if not ctx.access.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only project staff can perform this action",
        )
    return ctx


def guest_can_see_photo(location_label: Optional[str], unit_name: str) -> bool:
    """Guests see photos of their own unit plus untagged/general ones."""
    label = (location_label or "").strip().lower()
    if label in ("", "geral"):
        return True
    return bool(unit_name) and unit_name.lower() in label


def guest_can_see_document(context: Optional[str], unit_name: str) -> bool:
    context = (context or "").strip().lower()
    if context == "" or "geral" in context:
        return True
    return bool(unit_name) and unit_name.lower() in context


def guest_unit_name(project: Project, access: AccessContext) -> str:
    """Display name of the guest's unit, '' when it is not in the structure."""
    if not access.unit_id:
        return ""
    for level in (project.structure or {}).get("levels") or []:
        for unit in level.get("units") or []:
            if unit["id"] == access.unit_id:
                return unit.get("name") or ""
    return ""
