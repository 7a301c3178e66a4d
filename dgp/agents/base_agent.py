"""
Base Agent for the Practice System

Abstract base class for the structured-output agents (sentence source,
grader). Uses the LLMService from shared.services for LLM calls.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Type, Optional
import json
import time
import asyncio
import logging

from pydantic import BaseModel

from shared.services.llm_service import LLMService
from dgp.exceptions import AgentError, AgentExecutionError
from dgp.utils.schema_utils import get_strict_schema, parse_json_safely, validate_agent_output


logger = logging.getLogger("dgp.agents")


class AgentContext(BaseModel):
    """Standard context passed to all agents."""

    session_id: str = "anonymous"
    stage: Optional[str] = None
    sentence: Optional[str] = None
    difficulty: Optional[str] = None
    additional_context: Dict[str, Any] = {}


class BaseAgent(ABC):
    """
    Abstract base class for all structured-output agents.

    Provides logging, output parsing and validation. The blocking SDK call
    runs in the default executor so the event loop stays free.
    """

    def __init__(
        self,
        llm_service: LLMService,
        temperature: float = 0.7,
    ):
        self.llm = llm_service
        self.temperature = temperature
        self._last_prompt: Optional[str] = None

    @property
    @abstractmethod
    def agent_name(self) -> str:
        ...

    @abstractmethod
    def get_output_model(self) -> Type[BaseModel]:
        ...

    @abstractmethod
    def build_prompt(self, context: AgentContext) -> str:
        ...

    @property
    def last_prompt(self) -> Optional[str]:
        return self._last_prompt

    @property
    def model_id(self) -> Optional[str]:
        return getattr(self.llm, "model_id", None)

    async def execute(self, context: AgentContext) -> BaseModel:
        """Execute the agent and return validated output."""
        start_time = time.time()

        logger.info(json.dumps({
            "agent": self.agent_name,
            "event": "started",
            "session_id": context.session_id,
            "stage": context.stage,
        }))

        try:
            prompt = self.build_prompt(context)
            self._last_prompt = prompt

            output_model = self.get_output_model()
            schema = get_strict_schema(output_model)

            loop = asyncio.get_event_loop()
            result = await loop.run_in_executor(
                None,
                lambda: self.llm.call(
                    prompt=prompt,
                    json_mode=True,
                    temperature=self.temperature,
                    json_schema=schema,
                    schema_name=output_model.__name__,
                ),
            )

            parsed = parse_json_safely(result.get("output_text") or "", agent_name=self.agent_name)
            validated = validate_agent_output(
                output=parsed,
                model=output_model,
                agent_name=self.agent_name,
            )

            duration_ms = int((time.time() - start_time) * 1000)
            logger.info(json.dumps({
                "agent": self.agent_name,
                "event": "completed",
                "session_id": context.session_id,
                "duration_ms": duration_ms,
            }))

            return validated

        except AgentError:
            raise

        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(json.dumps({
                "agent": self.agent_name,
                "event": "failed",
                "session_id": context.session_id,
                "error": str(e),
                "duration_ms": duration_ms,
            }))
            raise AgentExecutionError(self.agent_name, str(e)) from e
