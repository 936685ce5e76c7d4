"""
Request guard

FastAPI dependency that runs the AccessGuard for a named operation and
stores the caller's Identity on request.state.
"""

from typing import Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.api.error import BEARER_CHALLENGE, ClientError
from src.api.policies import policy_for
from src.app.services.access_guard import AccessGuard, Identity
from src.app.services.role_service import RoleService
from src.app.services.session_service import SessionService
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.depends import get_clock, get_config, get_unit_of_work

security = HTTPBearer(auto_error=False)

_STATUS_BY_CODE = {
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
}


def require(operation: str):
    """Build a dependency enforcing the policy declared for `operation`"""
    policy = policy_for(operation)

    async def dependency(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        uow: UnitOfWork = Depends(get_unit_of_work),
        config=Depends(get_config),
        clock=Depends(get_clock),
    ) -> Identity:
        guard = AccessGuard(
            uow,
            TokenService(uow, config, clock),
            RoleService(uow),
            SessionService(uow, clock),
        )
        token = credentials.credentials if credentials else None
        result = await guard.authorize(policy, token)

        if result.is_err():
            error = result.error
            status_code = _STATUS_BY_CODE.get(error.code, status.HTTP_401_UNAUTHORIZED)
            headers = BEARER_CHALLENGE if status_code == status.HTTP_401_UNAUTHORIZED else None
            raise ClientError(error, status_code=status_code, headers=headers)

        request.state.identity = result.value
        return result.value

    return dependency
