"""
Sentence Source Agent

Asks the LLM for a batch of practice sentences at a difficulty and
normalizes them to the sentence format every stage works on: lowercase
words, single spaces, no punctuation.
"""

import re
from typing import Type
from pydantic import BaseModel, Field

from dgp.agents.base_agent import BaseAgent, AgentContext
from dgp.exceptions import AgentError, SentenceGenerationError
from dgp.models.stages import Difficulty
from dgp.prompts.templates import DIFFICULTY_GUIDANCE, SENTENCE_BATCH_TEMPLATE


_NON_WORD = re.compile(r"[^a-z0-9'\s]")


def normalize_sentence(raw: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace."""
    text = _NON_WORD.sub(" ", raw.lower().replace("-", " "))
    text = text.replace("'", "")
    return " ".join(text.split())


class SentenceBatch(BaseModel):
    """Output model for the Sentence Source Agent."""

    sentences: list[str] = Field(description="Practice sentences, lowercase with no punctuation")


class SentenceSourceAgent(BaseAgent):
    """Generates practice sentences in batches for the sentence pool."""

    @property
    def agent_name(self) -> str:
        return "sentence_source"

    def get_output_model(self) -> Type[BaseModel]:
        return SentenceBatch

    def build_prompt(self, context: AgentContext) -> str:
        difficulty = context.difficulty or Difficulty.EASY.value
        return SENTENCE_BATCH_TEMPLATE.render(
            count=context.additional_context.get("count", 5),
            difficulty=difficulty,
            difficulty_guidance=DIFFICULTY_GUIDANCE.get(difficulty, ""),
        )

    async def generate_batch(
        self,
        difficulty: Difficulty,
        count: int,
        session_id: str = "pool",
    ) -> list[str]:
        """
        Return up to *count* normalized sentences.

        Raises SentenceGenerationError when the call fails or nothing usable
        comes back; callers decide whether to fall back.
        """
        context = AgentContext(
            session_id=session_id,
            difficulty=difficulty.value,
            additional_context={"count": count},
        )
        try:
            batch: SentenceBatch = await self.execute(context)
        except AgentError as e:
            raise SentenceGenerationError(difficulty.value, str(e)) from e

        sentences = [s for s in (normalize_sentence(raw) for raw in batch.sentences) if s]
        if not sentences:
            raise SentenceGenerationError(difficulty.value, "empty batch")
        return sentences[:count]
