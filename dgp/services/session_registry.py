"""
Session Registry

In-memory map of session id -> SessionController. Builds the shared LLM
collaborators (sentence source, grader, audio) from Settings once and hands
them to every new session.
"""

import logging
import threading
from typing import Dict, Optional

from config import Settings, get_settings, validate_required_settings
from shared.services.llm_service import LLMService
from shared.utils.exceptions import SessionNotFoundException
from dgp.agents.audio import AmbientAudioSource
from dgp.agents.grader import GraderAgent
from dgp.agents.sentence_source import SentenceSourceAgent
from dgp.exceptions import ConfigurationError
from dgp.models.stages import Difficulty
from dgp.pool.sentence_pool import SentenceSource
from dgp.services.session_controller import SessionController

logger = logging.getLogger("dgp.session_registry")


def _build_llm_service(settings: Settings, provider: str, model_id: str) -> LLMService:
    return LLMService(
        provider=provider,
        model_id=model_id,
        openai_api_key=settings.openai_api_key or None,
        gemini_api_key=settings.gemini_api_key or None,
        max_retries=settings.llm_max_retries,
        timeout=settings.llm_timeout,
    )


class SessionRegistry:
    """Thread-safe registry of live practice sessions."""

    def __init__(
        self,
        source: SentenceSource,
        grader: GraderAgent,
        audio: Optional[AmbientAudioSource] = None,
        settings: Optional[Settings] = None,
    ):
        self.source = source
        self.grader = grader
        self.audio = audio
        self.settings = settings or get_settings()
        self._sessions: Dict[str, SessionController] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SessionRegistry":
        """Wire real agents using the configured provider and models."""
        settings = settings or get_settings()
        try:
            validate_required_settings(settings)
        except ValueError as e:
            raise ConfigurationError("llm_provider", str(e)) from e

        source = SentenceSourceAgent(
            _build_llm_service(settings, settings.llm_provider, settings.sentence_model),
            temperature=settings.sentence_temperature,
        )
        grader = GraderAgent(
            _build_llm_service(settings, settings.llm_provider, settings.grader_model),
            temperature=0.2,
        )

        # Audio is Gemini-only; without a key sessions simply stay silent
        audio = None
        if settings.gemini_api_key:
            audio = AmbientAudioSource(
                _build_llm_service(settings, "google", settings.audio_model),
                voice_name=settings.audio_voice,
            )

        logger.info(
            f"Session registry ready: provider={settings.llm_provider}, "
            f"sentence_model={settings.sentence_model}, grader_model={settings.grader_model}, "
            f"audio={'on' if audio else 'off'}"
        )
        return cls(source, grader, audio=audio, settings=settings)

    async def create(self, difficulty: Optional[Difficulty] = None) -> SessionController:
        """Create a session and load its first sentence."""
        controller = SessionController(
            self.source,
            self.grader,
            audio=self.audio,
            difficulty=difficulty or Difficulty(self.settings.default_difficulty),
            batch_size=self.settings.pool_batch_size,
            low_water_mark=self.settings.pool_low_water_mark,
            advance_delay_seconds=self.settings.advance_delay_seconds,
        )
        with self._lock:
            self._sessions[controller.session_id] = controller
        await controller.start()
        return controller

    def get(self, session_id: str) -> SessionController:
        with self._lock:
            controller = self._sessions.get(session_id)
        if controller is None:
            raise SessionNotFoundException(session_id)
        return controller

    async def delete(self, session_id: str) -> None:
        with self._lock:
            controller = self._sessions.pop(session_id, None)
        if controller is None:
            raise SessionNotFoundException(session_id)
        await controller.close()
        controller.orchestrator.log_store.clear_session(session_id)
        logger.info(f"Session {session_id} deleted")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions


# Global registry instance
_registry: Optional[SessionRegistry] = None


def get_session_registry() -> SessionRegistry:
    """Get or create the process-wide session registry."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry.from_settings()
    return _registry


def reset_session_registry():
    """Drop the global registry (useful for testing)."""
    global _registry
    _registry = None
