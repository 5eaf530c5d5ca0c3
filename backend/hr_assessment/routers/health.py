from fastapi import APIRouter

from ..catalog import utc_timestamp
from ..schemas import HealthResponse
from ..settings import settings

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health():
	return HealthResponse(
		status="healthy",
		timestamp=utc_timestamp(),
		version=settings.app_version,
		lab45Configured=settings.completion_configured,
	)
