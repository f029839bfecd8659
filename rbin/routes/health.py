"""
Health check route.
"""
from fastapi import APIRouter, Depends

from rbin.models import HealthCheck
from rbin.routes.pastes import get_service
from rbin.service import PasteService

router = APIRouter()


@router.get("/api/healthz", response_model=HealthCheck)
async def health_check(service: PasteService = Depends(get_service)) -> HealthCheck:
    """
    Health check endpoint.
    Returns 200 with ok=true if the paste directory is writable.
    """
    return HealthCheck(ok=service.is_healthy())
