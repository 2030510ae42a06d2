from fastapi import APIRouter

from app.schemas.weather import HealthResponse


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse()
