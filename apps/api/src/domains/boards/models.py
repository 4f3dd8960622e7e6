# apps/api/src/domains/boards/models.py
import re
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator, model_validator

from src.domains.boards.navigation import board_label, board_path

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    return _SLUG_INVALID.sub("-", value.lower()).strip("-")


class BoardCreate(BaseModel):
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    group_id: Optional[str] = None
    squad_id: Optional[str] = None
    category_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Board name must not be empty")
        return v

    @model_validator(mode="after")
    def default_slug(self) -> "BoardCreate":
        self.slug = slugify(self.slug or self.name)
        if not self.slug:
            raise ValueError("Board slug must contain letters or digits")
        return self


class BoardResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    group_id: Optional[str] = None
    squad_id: Optional[str] = None
    category_id: Optional[str] = None
    path: str
    label: str

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "BoardResponse":
        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            slug=record.get("slug") or "",
            description=record.get("description"),
            group_id=record.get("group_id"),
            squad_id=record.get("squad_id"),
            category_id=record.get("category_id"),
            path=board_path(record),
            label=board_label(record),
        )


class SpecialRouteResponse(BaseModel):
    path: str
    label: str


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    icon: Optional[str] = None
    boards: List[BoardResponse]


class NavigationResponse(BaseModel):
    """Everything the sidebar needs for the current principal."""

    special_route: Optional[SpecialRouteResponse] = None
    kanban_path: str
    boards: List[BoardResponse]
    categories: List[CategoryResponse]
    admin_view: bool


class BoardMutationResponse(BaseModel):
    message: str
    board: BoardResponse
