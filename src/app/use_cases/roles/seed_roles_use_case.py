from src.libs.result import Result, Return
from src.app.services.role_service import RoleService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SeedRolesResponse


class SeedRolesUseCase:
    """Install the default permission catalogue and the ADMIN/USER roles; idempotent"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.role_service = RoleService(uow)

    async def execute(self) -> Result[SeedRolesResponse]:
        async with self.uow:
            counts = await self.role_service.seed_roles()
            return Return.ok(
                SeedRolesResponse(
                    permissions_created=counts["permissions"],
                    roles_created=counts["roles"],
                )
            )
