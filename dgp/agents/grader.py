"""
Grader Agent

Sends one stage's work for the active sentence to the LLM and returns its
verdict. Correctness is decided entirely by the model.
"""

import json
from typing import Any, Dict, Optional, Type
from pydantic import BaseModel, Field

from dgp.agents.base_agent import BaseAgent, AgentContext
from dgp.exceptions import AgentError, GradingError
from dgp.models.stages import Stage
from dgp.prompts.templates import GRADING_TEMPLATE


class GradingVerdict(BaseModel):
    """Output model for the Grader Agent."""

    is_correct: bool = Field(description="Whether the stage work is fully correct")
    feedback: str = Field(description="Feedback shown to the student")
    correct_data: Optional[str] = Field(default=None, description="Correct analysis, if provided")


class GraderAgent(BaseAgent):
    """Grades a single stage of the weekly drill."""

    @property
    def agent_name(self) -> str:
        return "grader"

    def get_output_model(self) -> Type[BaseModel]:
        return GradingVerdict

    def build_prompt(self, context: AgentContext) -> str:
        sentence = context.sentence or ""
        indexed_words = ", ".join(f"{i}: {w}" for i, w in enumerate(sentence.split()))
        return GRADING_TEMPLATE.render(
            sentence=sentence,
            indexed_words=indexed_words,
            stage=context.stage,
            work_json=json.dumps(context.additional_context.get("work", {}), sort_keys=True),
        )

    async def grade(
        self,
        stage: Stage,
        sentence: str,
        work: Dict[str, Any],
        session_id: str = "anonymous",
    ) -> GradingVerdict:
        """Grade *work* (a JSON-ready snapshot). Raises GradingError on failure."""
        context = AgentContext(
            session_id=session_id,
            stage=stage.value,
            sentence=sentence,
            additional_context={"work": work},
        )
        try:
            return await self.execute(context)
        except AgentError as e:
            raise GradingError(stage.value, str(e)) from e
