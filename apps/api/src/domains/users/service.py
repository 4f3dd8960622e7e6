# apps/api/src/domains/users/service.py
import logging
from typing import Awaitable, Callable

from src.core.database import Database, StoreError
from src.core.identity import IdentityError, IdentityProvider
from src.domains.users.exceptions import (
    CeoProtectedError,
    IdentityRejectedError,
    UserProvisioningError,
)
from src.domains.users.models import UserCreate, UserResponse, UserUpdate
from src.shared.exceptions import ResourceNotFoundError, TransientStoreError

logger = logging.getLogger(__name__)

Compensation = tuple[str, Callable[[], Awaitable[None]]]


class UserAdminService:
    """
    Account provisioning across the auth service and the profile tables.

    The auth user and its rows cannot share a transaction, so account
    creation records an undo step after each completed write and replays
    them in reverse when a later step fails.
    """

    def __init__(self, db: Database, identity: IdentityProvider):
        self.db = db
        self.identity = identity

    async def is_ceo(self, user_id: str) -> bool:
        try:
            return bool(await self.db.rpc("is_ceo", {"_user_id": user_id}))
        except StoreError as e:
            logger.error(f"is_ceo check failed for {user_id}: {e.message}")
            raise TransientStoreError()

    async def _rollback(self, compensations: list[Compensation]) -> None:
        for description, undo in reversed(compensations):
            try:
                await undo()
                logger.info(f"Rolled back: {description}")
            except (StoreError, IdentityError) as e:
                logger.error(f"Rollback step failed ({description}): {e.message}")

    async def create_user(self, data: UserCreate) -> UserResponse:
        compensations: list[Compensation] = []

        try:
            user_id = await self.identity.create_user(
                data.email,
                data.password,
                {"name": data.name, "role": data.role.value},
            )
        except IdentityError as e:
            logger.error(f"Error creating auth user {data.email}: {e.message}")
            raise IdentityRejectedError(e.message)

        compensations.append(
            (f"auth user {user_id}", lambda: self.identity.delete_user(user_id))
        )

        try:
            # A trigger on the auth table may already have created the profile
            await self.db.upsert(
                "profiles", data.profile_record(user_id), on_conflict="user_id"
            )
            compensations.append(
                (
                    f"profile {user_id}",
                    lambda: self.db.delete("profiles", {"user_id": user_id}),
                )
            )

            # Replace any default role assigned by the trigger
            await self.db.delete("user_roles", {"user_id": user_id})
            await self.db.create(
                "user_roles", {"user_id": user_id, "role": data.role.value}
            )
        except StoreError as e:
            logger.error(f"Error provisioning user {user_id}: {e.code} {e.message}")
            await self._rollback(compensations)
            raise UserProvisioningError()

        logger.info(f"Created user {user_id} with role {data.role.value}")
        return UserResponse(
            id=user_id,
            email=data.email,
            name=data.name,
            role=data.role,
            avatar=data.avatar,
            group_id=data.group_id,
            squad_id=data.squad_id,
            category_id=data.category_id,
            is_coringa=data.is_coringa,
        )

    async def update_user(self, user_id: str, changes: UserUpdate) -> None:
        attributes = changes.auth_attributes()
        if attributes:
            try:
                await self.identity.update_user(user_id, attributes)
            except IdentityError as e:
                logger.error(f"Error updating auth user {user_id}: {e.message}")
                raise IdentityRejectedError(e.message)

        try:
            fields = changes.profile_fields()
            if fields:
                rows = await self.db.update("profiles", {"user_id": user_id}, fields)
                if not rows:
                    raise ResourceNotFoundError("User")
            if changes.role:
                await self.db.update(
                    "user_roles", {"user_id": user_id}, {"role": changes.role.value}
                )
        except StoreError as e:
            logger.error(f"Error updating user {user_id}: {e.message}")
            raise TransientStoreError("Could not update the user, try again")

    async def delete_user(self, user_id: str) -> None:
        if await self.is_ceo(user_id):
            raise CeoProtectedError()
        try:
            # Profile and role rows cascade from the auth user
            await self.identity.delete_user(user_id)
        except IdentityError as e:
            logger.error(f"Error deleting user {user_id}: {e.message}")
            raise TransientStoreError(e.message)
        logger.info(f"Deleted user {user_id}")

    async def delete_group(self, group_id: str, delete_users: bool = False) -> int:
        """
        Delete an organization group, optionally with its members.

        CEO members are always kept. Member deletions are best effort.

        Returns:
            Number of group members when `delete_users` is set, otherwise 0
        """
        try:
            members = await self.db.find_many(
                "profiles", {"group_id": group_id}, columns="user_id"
            )
        except StoreError as e:
            logger.error(f"Error fetching group {group_id} profiles: {e.message}")
            raise TransientStoreError()

        if delete_users:
            for member in members:
                member_id = member["user_id"]
                if await self.is_ceo(member_id):
                    continue
                try:
                    await self.identity.delete_user(member_id)
                except IdentityError as e:
                    logger.error(f"Error deleting user {member_id}: {e.message}")

        try:
            # Squads and role limits cascade from the group
            await self.db.delete("organization_groups", {"id": group_id})
        except StoreError as e:
            logger.error(f"Error deleting group {group_id}: {e.message}")
            raise TransientStoreError()

        return len(members) if delete_users else 0
