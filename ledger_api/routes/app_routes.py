from datetime import datetime, UTC
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ledger_api.config import settings
from ledger_api.dependencies import get_current_user
from ledger_api.models.user import User
from ledger_api.schemas.common_schemas import HealthResponse, UserProfileResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request):
    """Anonymous liveness probe; 503 until startup has verified the database"""
    ready = getattr(request.app.state, "ready", False)
    health = HealthResponse(
        status="ok" if ready else "starting",
        timestamp=datetime.now(UTC),
        version=settings.APP_VERSION,
    )
    if not ready:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=health.model_dump(mode="json"),
        )
    return health


@router.get("/user", response_model=UserProfileResponse)
def get_profile(user: User = Depends(get_current_user)):
    """Profile of the authenticated user"""
    return user
