# apps/api/src/domains/users/models.py
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.shared.permissions.models import UserRole

# Profile columns an administrator may set directly
PROFILE_FIELDS = (
    "name",
    "email",
    "department",
    "avatar",
    "group_id",
    "squad_id",
    "category_id",
    "is_coringa",
)


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str
    role: UserRole
    avatar: Optional[str] = None
    group_id: Optional[str] = None
    squad_id: Optional[str] = None
    category_id: Optional[str] = None
    is_coringa: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v

    def profile_record(self, user_id: str) -> dict[str, Any]:
        return {
            "user_id": user_id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar or None,
            "group_id": self.group_id or None,
            "squad_id": self.squad_id or None,
            "category_id": self.category_id or None,
            "is_coringa": self.is_coringa,
        }


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    name: Optional[str] = None
    role: Optional[UserRole] = None
    department: Optional[str] = None
    avatar: Optional[str] = None
    group_id: Optional[str] = None
    squad_id: Optional[str] = None
    category_id: Optional[str] = None
    is_coringa: Optional[bool] = None

    def auth_attributes(self) -> dict[str, Any]:
        attributes: dict[str, Any] = {}
        if self.email:
            attributes["email"] = self.email
        if self.password:
            attributes["password"] = self.password
        return attributes

    def profile_fields(self) -> dict[str, Any]:
        """Explicitly sent profile fields; null clears placement columns."""
        sent = self.model_dump(exclude_unset=True)
        fields = {key: sent[key] for key in PROFILE_FIELDS if key in sent}
        # Name and email are never cleared
        for key in ("name", "email"):
            if not fields.get(key):
                fields.pop(key, None)
        return fields


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole
    avatar: Optional[str] = None
    group_id: Optional[str] = None
    squad_id: Optional[str] = None
    category_id: Optional[str] = None
    is_coringa: bool = False


class UserMutationResponse(BaseModel):
    message: str
    user: Optional[UserResponse] = None


class DeleteGroupResponse(BaseModel):
    message: str
    deleted_users: int
