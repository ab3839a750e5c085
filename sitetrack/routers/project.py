"""
Project management router.

Projects are the root of every other resource. Listing only returns the
projects the current user can see (owned, through an organization, or
through a unit permission); reading a project resolves and reports how the
user sees it.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from sitetrack.core.security import get_current_user
from sitetrack.database import commit_or_500, get_db
from sitetrack.models import Profile
from sitetrack.schemas.project import (
    AccessResponse,
    ClaimInviteResponse,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from sitetrack.utils.access import (
    ProjectAccess,
    claim_invite,
    get_project_or_404,
    is_org_member,
    list_visible_projects,
    require_project_access,
    require_staff,
)
from sitetrack.utils.project import apply_project_update, create_project as build_project

router = APIRouter(tags=["Projects"])


@router.post("/projects/", response_model=ProjectResponse)
def create_project(
    project: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """
    Create a new project owned by the current user.

    When no phases are sent the default construction phase catalogue is
    used. Projects can only be attached to organizations the user belongs to.
    """
    if project.organization_id and not is_org_member(db, project.organization_id, current_user.id):
        raise HTTPException(status_code=403, detail="You are not a member of this organization")

    try:
        new_project = build_project(db, project, current_user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    commit_or_500(db, "create project")
    db.refresh(new_project)
    return new_project


@router.get("/projects/", response_model=List[ProjectListResponse])
def list_projects(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """
    List the projects visible to the current user.

    Returns projects ordered by most recently updated first; an empty list
    when the user has no project yet.
    """
    return list_visible_projects(db, current_user)


@router.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project(ctx: ProjectAccess = Depends(require_project_access)):
    return ctx.project


@router.get("/projects/{project_id}/access", response_model=AccessResponse)
def get_project_access(ctx: ProjectAccess = Depends(require_project_access)):
    """How the current user sees this project (staff, client, architect...)."""
    access = ctx.access
    return AccessResponse(
        project_id=ctx.project.id,
        role=access.role,
        is_owner=access.is_owner,
        is_org_member=access.is_org_member,
        is_staff=access.is_staff,
        is_guest=access.is_guest,
        unit_id=access.unit_id,
        common_areas=access.common_areas,
        claimed=access.claimed,
    )


@router.post("/projects/{project_id}/claim-invite", response_model=ClaimInviteResponse)
def claim_project_invite(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """
    Link the email invites on this project to the current account.

    Safe to call repeatedly; a failure reason is returned rather than raised.
    """
    project = get_project_or_404(db, project_id)
    result = claim_invite(db, project.id, current_user.id, current_user.email)
    return ClaimInviteResponse(
        ok=result.ok,
        claimed=result.claimed,
        permission_id=result.permission_id,
        reason=result.reason,
    )


@router.put("/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    project_update: ProjectUpdate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    Update a project's metadata, structure or phases.

    Saving the structure recomputes its floor/basement counters from the levels.
    """
    project = ctx.project
    if project_update.organization_id and not is_org_member(db, project_update.organization_id, ctx.user.id):
        raise HTTPException(status_code=403, detail="You are not a member of this organization")

    try:
        apply_project_update(project, project_update)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    commit_or_500(db, "update project")
    db.refresh(project)
    return project


@router.delete("/projects/{project_id}")
def delete_project(
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    Delete a project and all associated data.

    Only the owner can do this. Tasks, reports, progress, permissions,
    notes, supplies, documents and photos go with it.
    """
    if not ctx.access.is_owner:
        raise HTTPException(status_code=403, detail="Only the project owner can delete it")

    db.delete(ctx.project)
    commit_or_500(db, "delete project")
    return {"message": "Project deleted successfully"}
