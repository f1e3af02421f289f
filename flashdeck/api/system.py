"""Health endpoints"""

from fastapi import APIRouter

from flashdeck import __version__
from flashdeck.core.database import db_manager
from flashdeck.shared.schemas import HealthResponse

router = APIRouter(prefix="/observability", tags=["Системные"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for load balancer."""
    postgres = "healthy" if await db_manager.health_check() else "unhealthy"
    return HealthResponse(
        status=postgres,
        version=__version__,
        dependencies={"postgres": postgres},
    )


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    """Liveness check endpoint."""
    return {"alive": True}
