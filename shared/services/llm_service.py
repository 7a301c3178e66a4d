"""
LLM Service: centralized interface for all LLM API calls.

Routes calls to the correct provider (Google Gemini or OpenAI) based on the
provider + model_id the service was built with. Each practice collaborator
(sentence source, grader, audio) gets its own instance bound to its model.

The primary entry point is `call()`. Speech synthesis for ambient tracks and
sound effects goes through `synthesize_speech()` (Gemini only).
"""

import json
import time
from typing import Dict, Any, Optional
from openai import OpenAI, OpenAIError, RateLimitError, APITimeoutError
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
import logging

logger = logging.getLogger(__name__)

# Gemini status codes worth retrying (rate limit, overloaded)
_GEMINI_RETRYABLE_CODES = {429, 503}


class LLMService:
    """
    Service for making LLM API calls with retry logic and error handling.

    Both `provider` and `model_id` are REQUIRED, there are no defaults.
    They come from Settings via the session registry.
    """

    def __init__(
        self,
        *,
        provider: str,
        model_id: str,
        openai_api_key: Optional[str] = None,
        gemini_api_key: Optional[str] = None,
        max_retries: int = 3,
        initial_retry_delay: float = 1.0,
        timeout: int = 60,
    ):
        self.max_retries = max_retries
        self.initial_retry_delay = initial_retry_delay
        self.timeout = timeout
        self.provider = provider
        self.model_id = model_id

        self.client = OpenAI(api_key=openai_api_key) if openai_api_key else None

        if gemini_api_key:
            self.gemini_client = genai.Client(
                api_key=gemini_api_key,
                http_options=types.HttpOptions(timeout=timeout * 1000),
            )
            self.has_gemini = True
        else:
            self.has_gemini = False

    # ─── Primary entry point ───────────────────────────────────────────

    def call(
        self,
        prompt: str,
        json_mode: bool = True,
        temperature: float = 0.7,
        json_schema: Optional[Dict[str, Any]] = None,
        schema_name: str = "response",
    ) -> Dict[str, Any]:
        """
        Generic LLM call that routes to the correct API based on self.provider.

        Always returns: {output_text: str, reasoning: str|None}
        """
        if self.provider == "google":
            text = self._call_gemini(
                prompt,
                model_name=self.model_id,
                temperature=temperature,
                json_mode=json_mode,
                json_schema=json_schema,
            )
        else:
            text = self._call_chat_completions(
                prompt,
                self.model_id,
                temperature=temperature,
                json_mode=json_mode,
                json_schema=json_schema,
                schema_name=schema_name,
            )
        return {"output_text": text, "reasoning": None}

    # ─── OpenAI Chat Completions API ──────────────────────────────────

    def _call_chat_completions(
        self,
        prompt: str,
        model: str,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        json_mode: bool = True,
        json_schema: Optional[Dict[str, Any]] = None,
        schema_name: str = "response",
    ) -> str:
        """Call OpenAI Chat Completions API. Returns raw text."""
        if self.client is None:
            raise LLMServiceError("OpenAI API key not configured")

        logger.info(json.dumps({
            "step": "LLM_CALL",
            "status": "starting",
            "model": model,
            "params": {
                "json_mode": json_mode,
                "has_schema": json_schema is not None,
                "schema_name": schema_name if json_schema else None,
            }
        }))

        def _api_call():
            kwargs = {
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "max_completion_tokens": max_tokens,
                "temperature": temperature,
                "timeout": self.timeout,
            }
            if json_schema:
                kwargs["response_format"] = {
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_name,
                        "schema": json_schema,
                        "strict": True,
                    },
                }
            elif json_mode:
                kwargs["response_format"] = {"type": "json_object"}
            response = self.client.chat.completions.create(**kwargs)
            return response.choices[0].message.content

        return self._execute_with_retry(_api_call, model)

    # ─── Gemini ───────────────────────────────────────────────────────

    def _call_gemini(
        self,
        prompt: str,
        model_name: str = "gemini-3-pro-preview",
        temperature: float = 0.7,
        json_mode: bool = True,
        json_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Call Google Gemini. Returns raw text."""
        if not self.has_gemini:
            raise LLMServiceError("Gemini API key not configured")

        logger.info(json.dumps({
            "step": "LLM_CALL",
            "status": "starting",
            "model": model_name,
            "params": {
                "temperature": temperature,
                "json_mode": json_mode,
                "has_schema": json_schema is not None,
            }
        }))

        def _api_call():
            config = {"temperature": temperature}
            if json_mode or json_schema:
                config["response_mime_type"] = "application/json"
            if json_schema:
                config["response_json_schema"] = json_schema
            response = self.gemini_client.models.generate_content(
                model=model_name, contents=prompt, config=config
            )
            return response.text

        return self._execute_with_retry(_api_call, f"Gemini-{model_name}")

    def synthesize_speech(self, prompt: str, voice_name: str = "Kore") -> bytes:
        """
        Render a prompt with a Gemini speech model.

        Returns the raw audio bytes of the first inline part (24kHz mono PCM
        for the preview TTS models). Raises LLMServiceError when no audio
        came back.
        """
        if not self.has_gemini:
            raise LLMServiceError("Gemini API key not configured")

        logger.info(json.dumps({
            "step": "TTS_CALL",
            "status": "starting",
            "model": self.model_id,
            "params": {"voice": voice_name}
        }))

        def _api_call():
            response = self.gemini_client.models.generate_content(
                model=self.model_id,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name)
                        )
                    ),
                ),
            )
            try:
                return response.candidates[0].content.parts[0].inline_data.data
            except (AttributeError, IndexError, TypeError):
                return None

        audio = self._execute_with_retry(_api_call, f"Gemini-{self.model_id}")
        if not audio:
            raise LLMServiceError(f"Gemini-{self.model_id} returned no audio")
        return audio

    # ─── Helpers ──────────────────────────────────────────────────────

    def _execute_with_retry(self, api_call_fn, model_name: str) -> Any:
        """Execute API call with exponential backoff retry logic."""
        last_error = None
        delay = self.initial_retry_delay
        start_time = time.time()

        for attempt in range(self.max_retries):
            try:
                result = api_call_fn()
                duration_ms = int((time.time() - start_time) * 1000)

                logger.info(json.dumps({
                    "step": "LLM_CALL",
                    "status": "complete",
                    "model": model_name,
                    "output": {"response_length": len(result) if result else 0},
                    "duration_ms": duration_ms,
                    "attempts": attempt + 1
                }))

                if attempt > 0:
                    logger.info(f"{model_name} call succeeded on attempt {attempt + 1}")
                return result

            except (RateLimitError, APITimeoutError) as e:
                last_error = e
                logger.warning(
                    f"{model_name} rate limit/timeout (attempt {attempt + 1}/{self.max_retries}). "
                    f"Retrying in {delay}s..."
                )
                time.sleep(delay)
                delay *= 2

            except genai_errors.APIError as e:
                if e.code not in _GEMINI_RETRYABLE_CODES:
                    logger.error(f"{model_name} API error: {str(e)}")
                    raise LLMServiceError(f"{model_name} API error: {str(e)}") from e
                last_error = e
                logger.warning(
                    f"{model_name} returned {e.code} (attempt {attempt + 1}/{self.max_retries}). "
                    f"Retrying in {delay}s..."
                )
                time.sleep(delay)
                delay *= 2

            except OpenAIError as e:
                logger.error(f"{model_name} API error: {str(e)}")
                raise LLMServiceError(f"{model_name} API error: {str(e)}") from e

            except Exception as e:
                logger.error(f"{model_name} unexpected error: {str(e)}")
                raise LLMServiceError(f"{model_name} unexpected error: {str(e)}") from e

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(json.dumps({
            "step": "LLM_CALL",
            "status": "failed",
            "model": model_name,
            "error": str(last_error),
            "duration_ms": duration_ms,
            "attempts": self.max_retries
        }))
        raise LLMServiceError(
            f"{model_name} failed after {self.max_retries} attempts. Last error: {str(last_error)}"
        ) from last_error


class LLMServiceError(Exception):
    """Custom exception for LLM service errors"""
    pass
