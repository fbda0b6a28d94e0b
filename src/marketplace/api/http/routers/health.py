"""Health check endpoint for monitoring service availability."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.marketplace.api.http.app_data import ApplicationDependencies
from src.marketplace.api.http.deps import get_app_dependencies

router = APIRouter(tags=["health"])


@router.get("/health", response_model=None)
def health(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> dict[str, Any] | JSONResponse:
    """Report liveness together with database connectivity.

    Returns 503 when the database does not answer.
    """
    db_healthy = app_deps.database_service.health_check()

    response = {
        "status": "healthy" if db_healthy else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if db_healthy else "disconnected",
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content=response)
    return response
