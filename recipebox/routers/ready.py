from fastapi import APIRouter

from ..core.ai_client import ai_client

router = APIRouter(tags=["ready"])


@router.get("/ready")
async def ready():
    return {"ok": True, "ai_available": ai_client.is_available()}
