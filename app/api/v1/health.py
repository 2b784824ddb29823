from fastapi import APIRouter

from app.ai.config import load_ai_config

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    cfg = load_ai_config()
    return {
        "status": "healthy",
        "llm": {"enabled": cfg.enabled, "provider": cfg.provider, "model": cfg.model},
    }
