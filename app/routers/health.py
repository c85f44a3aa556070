from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.config import settings
from app.core.deps import get_db
from app.services.postgres import PostgresService

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]


@router.get("/health", response_model=HealthResponse)
def health_check(db: PostgresService = Depends(get_db)):
    dependencies: Dict[str, str] = {"postgres": db.check_health()}

    if dependencies["postgres"] != "healthy":
        # 503 so load balancers stop routing to this instance
        raise HTTPException(
            status_code=503,
            detail=HealthResponse(
                status="degraded",
                timestamp=datetime.now(timezone.utc),
                version=settings.APP_VERSION,
                dependencies=dependencies,
            ).model_dump(mode="json"),
        )

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
    )
