"""
User Service

Creates and updates user records while keeping email, phone and username
unique, including under concurrent writes.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User

logger = logging.getLogger(__name__)

EMAIL_TAKEN = Error("EMAIL_ALREADY_EXISTS", "User with this email already exists")
PHONE_TAKEN = Error("PHONE_ALREADY_EXISTS", "User with this phone number already exists")
USERNAME_TAKEN = Error("USERNAME_TAKEN", "Username is already taken")

CONFLICT_CODES = (EMAIL_TAKEN.code, PHONE_TAKEN.code, USERNAME_TAKEN.code)


class UserService:
    """
    Business Rules:
    - Uniqueness is checked up front for a precise error code
    - A write that still hits a unique constraint (lost race) is rolled back
      and reported with the same conflict codes, never as a server error
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def find_conflict(
        self,
        email: Optional[str],
        phone: Optional[str],
        username: Optional[str],
        exclude_user_id: Optional[UUID] = None,
    ) -> Optional[Error]:
        checks = (
            (email, self.uow.users.get_by_email, EMAIL_TAKEN),
            (phone, self.uow.users.get_by_phone, PHONE_TAKEN),
            (username, self.uow.users.get_by_username, USERNAME_TAKEN),
        )
        for value, lookup, error in checks:
            if not value:
                continue
            holder = await lookup(value)
            if holder is not None and holder.id != exclude_user_id:
                return error
        return None

    async def create_user(self, user: User) -> Result[User]:
        email, phone, username = user.email, user.phone, user.username

        conflict = await self.find_conflict(email, phone, username)
        if conflict is not None:
            return Return.err(conflict)

        try:
            created = await self.uow.users.create(user)
            await self.uow.commit()
        except IntegrityError:
            await self.uow.rollback()
            logger.info(f"User insert for {email} lost a unique constraint race")
            conflict = await self.find_conflict(email, phone, username)
            return Return.err(conflict or EMAIL_TAKEN)

        return Return.ok(created)

    async def save_user(self, user: User) -> Result[User]:
        """Persist changes to an existing user; the caller checked conflicts already"""
        user_id, email, phone, username = user.id, user.email, user.phone, user.username

        try:
            saved = await self.uow.users.update(user)
            await self.uow.commit()
        except IntegrityError:
            await self.uow.rollback()
            logger.info(f"Update of user {user_id} lost a unique constraint race")
            conflict = await self.find_conflict(email, phone, username, exclude_user_id=user_id)
            return Return.err(conflict or EMAIL_TAKEN)

        return Return.ok(saved)
