from abc import ABC, abstractmethod

from src.app.repositories.auth_event_repository import IAuthEventRepository
from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.app.repositories.role_repository import IRoleRepository
from src.app.repositories.user_repository import IUserRepository
from src.app.repositories.user_role_repository import IUserRoleRepository
from src.app.repositories.user_session_repository import IUserSessionRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    refresh_tokens: IRefreshTokenRepository
    user_sessions: IUserSessionRepository
    roles: IRoleRepository
    user_roles: IUserRoleRepository
    auth_events: IAuthEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
