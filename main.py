"""
Digital DGP Backend - FastAPI Application

Entry point for the daily grammar practice API: practice sessions move one
generated sentence through five weekday stages, each graded by an LLM.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_settings, validate_required_settings
from shared.api import health
from dgp.api import sessions

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("dgp.main")

# Validate configuration on startup
validate_required_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Digital DGP Backend",
    description="Daily grammar practice with LLM-generated sentences and grading",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(sessions.router)
app.include_router(sessions.sfx_router)


@app.on_event("startup")
async def startup_event():
    """Build the session registry so the first request does not pay for it."""
    from dgp.services.session_registry import get_session_registry

    logger.info("Starting Digital DGP Backend...")
    get_session_registry()
    logger.info(f"Application started ({settings.environment}, provider={settings.llm_provider})")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
