from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import RefreshToken, User, UserRole, UserSession, UserStatus

SORTABLE_COLUMNS = {
    "created_at": User.created_at,
    "updated_at": User.updated_at,
    "last_login_at": User.last_login_at,
    "email": User.email,
    "username": User.username,
}


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_phone(self, phone: str) -> Optional[User]:
        """Get user by phone number"""
        stmt = select(User).where(User.phone == phone)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        stmt = select(User).where(User.username == username)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def list(
        self,
        skip: int = 0,
        take: int = 10,
        status: Optional[UserStatus] = None,
        search: Optional[str] = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> Tuple[List[User], int]:
        """Case-insensitive search over email, username and names; substring match on phone"""
        conditions = []
        if status is not None:
            conditions.append(User.status == status)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    User.email.ilike(pattern),
                    User.username.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.phone.contains(search),
                )
            )

        column = SORTABLE_COLUMNS.get(order_by, User.created_at)
        stmt = (
            select(User)
            .where(*conditions)
            .order_by(column.desc() if descending else column.asc())
            .offset(skip)
            .limit(take)
        )
        users = (await self.session.exec(stmt)).all()

        count_stmt = select(func.count()).select_from(User).where(*conditions)
        total = (await self.session.exec(count_stmt)).one()
        return list(users), total

    async def delete(self, user_id: UUID) -> bool:
        """Auth events have no foreign key and are kept for audit"""
        for model in (UserRole, UserSession, RefreshToken):
            await self.session.execute(delete(model).where(model.user_id == user_id))
        result = await self.session.execute(delete(User).where(User.id == user_id))
        await self.session.flush()
        return result.rowcount > 0
