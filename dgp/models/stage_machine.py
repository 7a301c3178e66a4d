"""
Stage Machine

Owns the current stage, the completed-stage history and the per-stage work
for the active sentence. Transitions are linear Monday -> Friday; Friday is
terminal and completing it flags the sentence as done instead of moving on.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from dgp.exceptions import StateTransitionError
from dgp.models.stage_work import StageHistory, StageWork
from dgp.models.stages import STAGE_ORDER, Stage, next_stage, stage_index


class StageMachine(BaseModel):
    current_stage: Stage = Stage.MONDAY
    completed_stages: list[Stage] = Field(default_factory=list)
    history: StageHistory = Field(default_factory=StageHistory)
    sentence_complete: bool = Field(
        default=False,
        description="Set once Friday was graded correct; cleared by reset_for_new_sentence",
    )
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def current_work(self) -> StageWork:
        return self.history.for_stage(self.current_stage)

    def work_for(self, stage: Stage) -> StageWork:
        return self.history.for_stage(stage)

    def advance(self) -> Optional[Stage]:
        """
        Move past the current stage after a correct verdict.

        Returns the newly active stage, or None when Friday was just
        completed (the caller is expected to start a new sentence).
        """
        if self.sentence_complete:
            raise StateTransitionError(
                self.current_stage.value, "next", "sentence already complete"
            )

        upcoming = next_stage(self.current_stage)
        if upcoming is None:
            self.sentence_complete = True
            self.updated_at = datetime.utcnow()
            return None

        self.completed_stages.append(self.current_stage)
        self.current_stage = upcoming
        self.updated_at = datetime.utcnow()
        self.check_invariants()
        return upcoming

    def reset_for_new_sentence(self) -> None:
        self.current_stage = Stage.MONDAY
        self.completed_stages = []
        self.history = StageHistory()
        self.sentence_complete = False
        self.updated_at = datetime.utcnow()

    def check_invariants(self) -> None:
        """Completed stages must be exactly the stages before the current one."""
        expected = list(STAGE_ORDER[: stage_index(self.current_stage)])
        if self.completed_stages != expected:
            raise StateTransitionError(
                from_state=",".join(s.value for s in self.completed_stages),
                to_state=self.current_stage.value,
                reason="completed stages must be the ordered prefix before the current stage",
            )
