from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from app.schemas.envelope import HealthEnvelope

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthEnvelope)
def health_check() -> HealthEnvelope:
    """Liveness probe; does not touch the store."""
    return HealthEnvelope(
        message="Book Management API is running",
        timestamp=datetime.now(timezone.utc),
    )
