"""
Ambient Audio Source

Generates the looping stage track and short sound effects with a Gemini
speech model. Every call is best-effort: failures are logged and come back
as None so stage progression never waits on audio.
"""

import asyncio
import base64
import logging
from typing import Dict, Optional

from shared.services.llm_service import LLMService
from dgp.models.session_state import SfxKind
from dgp.models.stages import Stage
from dgp.prompts.templates import AMBIENT_TRACK_TEMPLATE, SFX_SOUNDS, SFX_TEMPLATE

logger = logging.getLogger("dgp.audio")


class AmbientAudioSource:
    """Stage tracks and sound effects as base64-encoded audio payloads."""

    def __init__(self, llm_service: LLMService, voice_name: str = "Kore"):
        self.llm = llm_service
        self.voice_name = voice_name
        self._sfx_cache: Dict[str, str] = {}

    async def _synthesize(self, prompt: str) -> str:
        loop = asyncio.get_event_loop()
        audio = await loop.run_in_executor(
            None, lambda: self.llm.synthesize_speech(prompt, voice_name=self.voice_name)
        )
        return base64.b64encode(audio).decode("ascii")

    async def generate_track(self, stage: Stage) -> Optional[str]:
        try:
            return await self._synthesize(AMBIENT_TRACK_TEMPLATE.render(stage=stage.value))
        except Exception as e:
            logger.warning(f"Ambient track for {stage.value} unavailable: {e}")
            return None

    async def generate_sfx(self, kind: SfxKind) -> Optional[str]:
        if kind in self._sfx_cache:
            return self._sfx_cache[kind]
        try:
            payload = await self._synthesize(SFX_TEMPLATE.render(sound=SFX_SOUNDS[kind]))
        except Exception as e:
            logger.warning(f"Sound effect '{kind}' unavailable: {e}")
            return None
        self._sfx_cache[kind] = payload
        return payload
