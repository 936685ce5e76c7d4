from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.auth_event_repository import AuthEventRepository
from src.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from src.adapter.repositories.role_repository import RoleRepository
from src.adapter.repositories.user_repository import UserRepository
from src.adapter.repositories.user_role_repository import UserRoleRepository
from src.adapter.repositories.user_session_repository import UserSessionRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.refresh_tokens = RefreshTokenRepository(self.session)
        self.user_sessions = UserSessionRepository(self.session)
        self.roles = RoleRepository(self.session)
        self.user_roles = UserRoleRepository(self.session)
        self.auth_events = AuthEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Uncommitted work is discarded; committed work is unaffected
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
