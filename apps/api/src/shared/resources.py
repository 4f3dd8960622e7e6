# apps/api/src/shared/resources.py
import logging
from datetime import datetime, timezone
from typing import Any, ClassVar, Mapping, Optional

from fastapi import HTTPException

from src.core.database import Database, Record, StoreError, is_unique_violation
from src.shared.exceptions import (
    DuplicateRecordError,
    InvalidDataError,
    ResourceNotFoundError,
    TransientStoreError,
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResourceService:
    """
    Uniform list / create / update / archive contract over one table.

    Reads always hit the store, so every view sees the latest committed
    rows. Mutations are last-write-wins at the row level.
    """

    table: ClassVar[str]
    resource_name: ClassVar[str] = "Record"
    soft_delete_column: ClassVar[Optional[str]] = "archived"
    allow_hard_delete: ClassVar[bool] = False
    duplicate_message: ClassVar[str] = "Record already exists"

    def __init__(self, db: Database):
        self.db = db

    def translate_error(self, error: StoreError) -> HTTPException:
        """Map a store failure to the user-facing exception."""
        if is_unique_violation(error):
            return DuplicateRecordError(self.duplicate_message)
        if error.code == "23503":
            return InvalidDataError(f"{self.resource_name} references a missing record")
        return TransientStoreError()

    async def list(
        self,
        where: Optional[Mapping[str, Any]] = None,
        *,
        order_by: Optional[str] = "created_at",
        descending: bool = True,
        include_archived: bool = False,
    ) -> list[Record]:
        try:
            rows = await self.db.find_many(
                self.table, where, order_by=order_by, descending=descending
            )
        except StoreError as e:
            # Read failures leave the view empty instead of failing the page
            logger.error(f"Failed to list {self.table}: {e.message}")
            return []

        column = self.soft_delete_column
        if column and not include_archived:
            rows = [row for row in rows if not row.get(column)]
        return rows

    async def get(self, record_id: str) -> Record:
        try:
            record = await self.db.find_first(self.table, {"id": record_id})
        except StoreError as e:
            logger.error(f"Failed to fetch {self.table} {record_id}: {e.message}")
            raise TransientStoreError()
        if not record:
            raise ResourceNotFoundError(self.resource_name)
        return record

    async def create(self, data: Mapping[str, Any]) -> Record:
        try:
            return await self.db.create(self.table, data)
        except StoreError as e:
            logger.error(f"Failed to create {self.table}: {e.code} {e.message}")
            raise self.translate_error(e)

    async def update(self, record_id: str, fields: Mapping[str, Any]) -> Record:
        if not fields:
            raise InvalidDataError("At least one field must be provided for update")
        try:
            rows = await self.db.update(self.table, {"id": record_id}, fields)
        except StoreError as e:
            logger.error(f"Failed to update {self.table} {record_id}: {e.message}")
            raise self.translate_error(e)
        if not rows:
            raise ResourceNotFoundError(self.resource_name)
        return rows[0]

    async def archive(self, record_id: str, archive: bool = True) -> Record:
        column = self.soft_delete_column
        if not column:
            raise InvalidDataError(f"{self.resource_name} cannot be archived")
        fields: dict[str, Any] = {column: archive}
        return await self.update(record_id, fields)

    async def delete(self, record_id: str) -> None:
        if not self.allow_hard_delete:
            raise InvalidDataError(
                f"{self.resource_name} can only be archived, not deleted"
            )
        await self.get(record_id)
        try:
            await self.db.delete(self.table, {"id": record_id})
        except StoreError as e:
            logger.error(f"Failed to delete {self.table} {record_id}: {e.message}")
            raise self.translate_error(e)
