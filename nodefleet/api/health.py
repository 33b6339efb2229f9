"""Health check endpoints."""
from fastapi import APIRouter, Response

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check():
    """Liveness probe - empty 200."""
    return Response(status_code=200)
