from fastapi import APIRouter

from ..core.ai_client import ai_client
from ..settings import settings as app_settings

router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/status")
def get_ai_status():
    """Which models extraction will try, and the last backend error if any."""
    return {
        "ai_mode": app_settings.ai_mode,
        "ai_available": ai_client.is_available(),
        "extraction_models": app_settings.extraction_models,
        "structuring_model": app_settings.structuring_model,
        "has_api_key": bool(app_settings.gemini_api_key),
        "has_video_api_key": bool(app_settings.youtube_api_key),
        "last_error": ai_client.last_error,
        "last_error_at": ai_client.last_error_at
    }
