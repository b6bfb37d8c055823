"""
Notes API - Health Check Route
===============================

What:  GET /api/health → {"ok": true}.
How:   The store is in-process memory, so there is no dependency to check:
       if this handler runs, the service can serve requests.
"""

from fastapi import APIRouter

from notes_api.schemas.note import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(ok=True)
