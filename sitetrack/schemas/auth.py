from pydantic import BaseModel, EmailStr
from typing import Optional


class ProfileCreate(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None


class ProfileLogin(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class Profile(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
