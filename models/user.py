from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# bcrypt refuses passwords longer than 72 bytes
MAX_PASSWORD_BYTES = 72


def check_password_length(password: Optional[str]) -> Optional[str]:
    if password is not None and len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return password


class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    name: Optional[str] = None
    bio: Optional[str] = None
    profile_icon: Optional[str] = Field(None, alias="profileIcon")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, password):
        return check_password_length(password)


class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = None
    bio: Optional[str] = None
    profile_icon: Optional[str] = Field(None, alias="profileIcon")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, password):
        return check_password_length(password)


class User(BaseModel):
    """A user as returned by the API; the password hash is never part of it"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    email: str
    name: Optional[str] = None
    bio: Optional[str] = None
    profile_icon: Optional[str] = Field(None, alias="profileIcon")
    bookmarks: List[str] = []
    following: List[str] = []
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @classmethod
    def from_document(cls, data: dict) -> "User":
        fields = {key: value for key, value in data.items() if key != "password"}
        return cls.model_validate(fields)


class UserRef(BaseModel):
    """Body of the like/bookmark/follow routes"""
    user_id: str = Field(..., alias="userId", min_length=1)


class UserResponse(BaseModel):
    message: str
    user: User
