"""
Organization router.

An organization groups the staff of a construction company. Its members
see every project the organization owns; the creator becomes an admin
member. New members join through email invites that they accept or
decline from their own account.
"""
import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session
from typing import List

from sitetrack.core.security import get_current_user
from sitetrack.database import commit_or_500, get_db
from sitetrack.models import Organization, OrganizationInvite, OrganizationMember, Profile
from sitetrack.schemas.organization import (
    Organization as OrganizationSchema,
    OrganizationCreate,
    OrganizationInvite as OrganizationInviteSchema,
    OrganizationInviteCreate,
    OrganizationMember as OrganizationMemberSchema,
    OrganizationUpdate,
)
from sitetrack.utils import storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Organizations"])


def _get_membership(db: Session, organization_id: int, user_id: int):
    return db.query(OrganizationMember).filter(
        OrganizationMember.organization_id == organization_id,
        OrganizationMember.user_id == user_id,
    ).first()


def _require_member(db: Session, organization_id: int, user: Profile) -> Organization:
    organization = db.query(Organization).filter(Organization.id == organization_id).first()
    if not organization or not _get_membership(db, organization_id, user.id):
        raise HTTPException(status_code=404, detail="Organization not found")
    return organization


def _require_admin(db: Session, organization_id: int, user: Profile) -> Organization:
    organization = _require_member(db, organization_id, user)
    membership = _get_membership(db, organization_id, user.id)
    if organization.owner_id != user.id and membership.role != "admin":
        raise HTTPException(status_code=403, detail="Only organization admins can do this")
    return organization


@router.post("/", response_model=OrganizationSchema)
def create_organization(
    data: OrganizationCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """Create an organization; the creator becomes its owner and an admin member."""
    if not data.name.strip():
        raise HTTPException(status_code=400, detail="Organization name cannot be empty")

    organization = Organization(
        name=data.name.strip(),
        cnpj=data.cnpj,
        logo_url=data.logo_url,
        owner_id=current_user.id,
    )
    db.add(organization)
    db.flush()
    db.add(OrganizationMember(organization_id=organization.id, user_id=current_user.id, role="admin"))
    commit_or_500(db, "create organization")
    db.refresh(organization)
    logger.info("Organization %s created by user %s", organization.id, current_user.id)
    return organization


@router.get("/", response_model=List[OrganizationSchema])
def list_my_organizations(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    return (
        db.query(Organization)
        .join(OrganizationMember, OrganizationMember.organization_id == Organization.id)
        .filter(OrganizationMember.user_id == current_user.id)
        .order_by(Organization.name)
        .all()
    )


@router.put("/{organization_id}", response_model=OrganizationSchema)
def update_organization(
    organization_id: int,
    data: OrganizationUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    organization = _require_admin(db, organization_id, current_user)
    if data.name is not None:
        if not data.name.strip():
            raise HTTPException(status_code=400, detail="Organization name cannot be empty")
        organization.name = data.name.strip()
    if data.cnpj is not None:
        organization.cnpj = data.cnpj
    if data.logo_url is not None:
        organization.logo_url = data.logo_url

    commit_or_500(db, "update organization")
    db.refresh(organization)
    return organization


@router.post("/{organization_id}/logo", response_model=OrganizationSchema)
def upload_logo(
    organization_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    organization = _require_admin(db, organization_id, current_user)
    previous = organization.logo_url
    url = storage.upload(file, f"organizations/{organization_id}")
    organization.logo_url = url
    try:
        commit_or_500(db, "update organization logo")
    except HTTPException:
        storage.delete(url)
        raise
    storage.delete(previous)
    db.refresh(organization)
    return organization


@router.get("/{organization_id}/members", response_model=List[OrganizationMemberSchema])
def list_members(
    organization_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    _require_member(db, organization_id, current_user)
    return (
        db.query(OrganizationMember)
        .filter(OrganizationMember.organization_id == organization_id)
        .order_by(OrganizationMember.created_at)
        .all()
    )


@router.post("/{organization_id}/invites", response_model=OrganizationInviteSchema)
def invite_member(
    organization_id: int,
    data: OrganizationInviteCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """
    Invite someone by email.

    A pending invite for the same email is returned as-is instead of being
    duplicated; people who are already members cannot be invited again.
    """
    _require_admin(db, organization_id, current_user)
    email = data.email.lower()

    existing_member = (
        db.query(OrganizationMember)
        .join(Profile, Profile.id == OrganizationMember.user_id)
        .filter(OrganizationMember.organization_id == organization_id, Profile.email == email)
        .first()
    )
    if existing_member:
        raise HTTPException(status_code=400, detail="User is already a member of this organization")

    invite = db.query(OrganizationInvite).filter(
        OrganizationInvite.organization_id == organization_id,
        OrganizationInvite.email == email,
        OrganizationInvite.status == "pending",
    ).first()
    if invite:
        return invite

    invite = OrganizationInvite(
        organization_id=organization_id,
        email=email,
        role=data.role,
        invited_by=current_user.email,
    )
    db.add(invite)
    commit_or_500(db, "create organization invite")
    db.refresh(invite)
    return invite


@router.get("/invites/pending", response_model=List[OrganizationInviteSchema])
def list_pending_invites(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    return (
        db.query(OrganizationInvite)
        .filter(
            OrganizationInvite.email == current_user.email.lower(),
            OrganizationInvite.status == "pending",
        )
        .order_by(OrganizationInvite.created_at.desc())
        .all()
    )


def _get_own_pending_invite(db: Session, invite_id: int, user: Profile) -> OrganizationInvite:
    invite = db.query(OrganizationInvite).filter(OrganizationInvite.id == invite_id).first()
    if not invite or invite.email != user.email.lower():
        raise HTTPException(status_code=404, detail="Invite not found")
    if invite.status != "pending":
        raise HTTPException(status_code=400, detail=f"Invite already {invite.status}")
    return invite


@router.post("/invites/{invite_id}/accept", response_model=OrganizationMemberSchema)
def accept_invite(
    invite_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    invite = _get_own_pending_invite(db, invite_id, current_user)

    member = _get_membership(db, invite.organization_id, current_user.id)
    if not member:
        member = OrganizationMember(
            organization_id=invite.organization_id,
            user_id=current_user.id,
            role=invite.role,
        )
        db.add(member)
    invite.status = "accepted"

    commit_or_500(db, "accept organization invite")
    db.refresh(member)
    return member


@router.post("/invites/{invite_id}/decline", response_model=OrganizationInviteSchema)
def decline_invite(
    invite_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    invite = _get_own_pending_invite(db, invite_id, current_user)
    invite.status = "declined"
    commit_or_500(db, "decline organization invite")
    db.refresh(invite)
    return invite
