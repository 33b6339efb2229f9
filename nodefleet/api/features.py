"""Feature listing endpoint."""
from fastapi import APIRouter
from typing import List

router = APIRouter(tags=["System"])

FEATURES: List[str] = ["Feature 1", "Feature 2"]


@router.get("/v1/features", response_model=List[str])
async def list_features():
    return FEATURES
