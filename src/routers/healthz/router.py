from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.config.backend import BackendKind, BackendMode, get_backend_mode

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = "0.1.0"
    backend: BackendKind


@router.get("/", response_model=HealthCheckResponse)
async def health_check(mode: BackendMode = Depends(get_backend_mode)) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running.
    Reports which guest backend was selected at startup.
    """
    return HealthCheckResponse(status="healthy", backend=mode.kind)
