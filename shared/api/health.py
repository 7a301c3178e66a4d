"""Health check API endpoints."""
from fastapi import APIRouter

from config import get_settings

router = APIRouter(tags=["health"])


@router.get("/")
def read_root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Digital DGP Backend",
        "version": "1.0.0"
    }


@router.get("/config/models")
def get_model_config():
    """Return the configured provider and model per collaborator."""
    settings = get_settings()
    return {
        "sentence_source": {"provider": settings.llm_provider, "model_id": settings.sentence_model},
        "grader": {"provider": settings.llm_provider, "model_id": settings.grader_model},
        "audio": {"provider": "google", "model_id": settings.audio_model},
    }
