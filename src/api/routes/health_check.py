from fastapi import APIRouter, Depends, status

from src.api.guard import require
from src.app.services.clock import Clock
from src.depends import get_clock

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require("health"))],
)
async def health_check(clock: Clock = Depends(get_clock)):
    """Liveness check; public"""
    return {"status": "ok", "timestamp": clock.now().isoformat()}
