from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

from sitetrack.schemas.auth import Profile


class OrganizationCreate(BaseModel):
    name: str
    cnpj: Optional[str] = None
    logo_url: Optional[str] = None


class OrganizationUpdate(BaseModel):
    name: Optional[str] = None
    cnpj: Optional[str] = None
    logo_url: Optional[str] = None


class Organization(BaseModel):
    id: int
    name: str
    cnpj: Optional[str] = None
    logo_url: Optional[str] = None
    owner_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class OrganizationMember(BaseModel):
    id: int
    organization_id: int
    user_id: int
    role: str
    created_at: datetime
    profile: Optional[Profile] = None

    class Config:
        from_attributes = True


class OrganizationInviteCreate(BaseModel):
    email: EmailStr
    role: str = "member"


class OrganizationInvite(BaseModel):
    id: int
    organization_id: int
    email: str
    role: str
    status: str
    invited_by: Optional[str] = None
    created_at: datetime
    organization: Optional[Organization] = None

    class Config:
        from_attributes = True
