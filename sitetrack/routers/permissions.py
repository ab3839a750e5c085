"""
Unit permissions router (client/architect access management).

Staff invite people by email to one unit of the project. Invites can be
paused and resumed (is_active toggled) or revoked (is_active cleared; the
row and its claim are kept so a re-invite restores it).
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from sitetrack.database import commit_or_500, get_db
from sitetrack.models import UnitPermission
from sitetrack.schemas.unit import (
    PermissionInvite,
    PermissionInviteResult,
    UnitPermission as UnitPermissionSchema,
)
from sitetrack.utils.access import ProjectAccess, require_staff
from sitetrack.utils.permissions import bulk_invite
from sitetrack.utils.project import unit_name_lookup

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Permissions"])


def _with_unit_name(row: UnitPermission, names) -> UnitPermissionSchema:
    result = UnitPermissionSchema.model_validate(row)
    result.unit_name = names.get(row.unit_id)
    return result


def _get_permission(db: Session, project_id: int, permission_id: int) -> UnitPermission:
    row = db.query(UnitPermission).filter(
        UnitPermission.id == permission_id,
        UnitPermission.project_id == project_id,
    ).first()
    if not row:
        raise HTTPException(status_code=404, detail="Permission not found")
    return row


@router.get("/projects/{project_id}/permissions", response_model=List[UnitPermissionSchema])
def list_permissions(
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    rows = (
        db.query(UnitPermission)
        .filter(UnitPermission.project_id == ctx.project.id)
        .order_by(UnitPermission.created_at.desc())
        .all()
    )
    names = unit_name_lookup(ctx.project)
    return [_with_unit_name(row, names) for row in rows]


@router.post("/projects/{project_id}/permissions/invite", response_model=PermissionInviteResult)
def invite(
    data: PermissionInvite,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    Invite one or many emails to a unit.

    Emails may be separated by newlines, commas or semicolons. Re-inviting
    an existing (unit, email) pair refreshes that row.
    """
    try:
        rows = bulk_invite(db, ctx.project, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    commit_or_500(db, "invite to unit")
    logger.info("Processed %d invite(s) for unit %s on project %s", len(rows), data.unit_id, ctx.project.id)
    return PermissionInviteResult(processed=len(rows), emails=[row.email for row in rows])


@router.post("/projects/{project_id}/permissions/{permission_id}/toggle", response_model=UnitPermissionSchema)
def toggle_permission(
    permission_id: int,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    row = _get_permission(db, ctx.project.id, permission_id)
    row.is_active = not row.is_active
    commit_or_500(db, "toggle unit permission")
    db.refresh(row)
    return _with_unit_name(row, unit_name_lookup(ctx.project))


@router.delete("/projects/{project_id}/permissions/{permission_id}")
def revoke_permission(
    permission_id: int,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    row = _get_permission(db, ctx.project.id, permission_id)
    row.is_active = False
    commit_or_500(db, "revoke unit permission")
    logger.info("Revoked unit permission %s on project %s", row.id, ctx.project.id)
    return {"message": "Permission revoked"}
