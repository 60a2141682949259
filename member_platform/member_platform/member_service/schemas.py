from pydantic import BaseModel, Field

from datetime import datetime
from typing import Optional


class UserCreate(BaseModel):
    name: str
    email: str
    password: str


class UserLogin(BaseModel):
    email: str
    password: str


class UserSummary(BaseModel):
    id: str
    name: str
    email: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserSummary


# Profile
class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class Profile(BaseModel):
    id: str
    name: str
    email: str
    role: str
    created_at: datetime = Field(alias="createdAt")
    last_login: datetime = Field(alias="lastLogin")

    class Config:
        populate_by_name = True


class ProfileResponse(BaseModel):
    message: str
    profile: Profile


class UpdatedProfile(BaseModel):
    id: str
    name: str
    email: str
    role: str
    updated_at: datetime = Field(alias="updatedAt")

    class Config:
        populate_by_name = True


class ProfileUpdateResponse(BaseModel):
    message: str
    profile: UpdatedProfile
