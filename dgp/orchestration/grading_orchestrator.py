"""
Grading Orchestrator

Submit -> Grader -> apply verdict. A correct verdict advances the stage
machine (or, on Friday, starts a new sentence after a short pause); an
incorrect verdict or a failed call only updates the feedback.
"""

import asyncio
import logging
import time
from typing import Literal, Optional, Set
from pydantic import BaseModel, Field

from dgp.agents.audio import AmbientAudioSource
from dgp.agents.grader import GraderAgent, GradingVerdict
from dgp.exceptions import GradingError, SubmissionInProgressError
from dgp.models.grading_logs import GradingLogEntry, GradingLogStore, get_grading_log_store
from dgp.models.session_state import (
    CHECKING_FEEDBACK,
    CONNECTION_LOST_FEEDBACK,
    SessionState,
)
from dgp.models.stages import Stage
from dgp.pool.sentence_pool import SentencePool

logger = logging.getLogger("dgp.orchestrator")


class SubmitResult(BaseModel):
    """Outcome of one stage submission."""
    outcome: Literal["correct", "incorrect", "error"]
    feedback: str
    graded_stage: Stage
    verdict: Optional[GradingVerdict] = None
    next_stage: Optional[Stage] = Field(default=None, description="Stage made active by this submission")
    sentence_complete: bool = False


class GradingOrchestrator:
    """
    Drives a session's stage machine from grader verdicts.

    One orchestrator belongs to one session. Ambient track requests are
    fire-and-forget; the post-Friday advancement is kept in
    `pending_advance` so callers (and tests) can await it.
    """

    def __init__(
        self,
        grader: GraderAgent,
        pool: SentencePool,
        audio: Optional[AmbientAudioSource] = None,
        advance_delay_seconds: float = 2.5,
        log_store: Optional[GradingLogStore] = None,
    ):
        self.grader = grader
        self.pool = pool
        self.audio = audio
        self.advance_delay_seconds = advance_delay_seconds
        self.log_store = log_store or get_grading_log_store()
        self.pending_advance: Optional[asyncio.Task] = None
        self._background: Set[asyncio.Task] = set()

    @property
    def advance_pending(self) -> bool:
        return self.pending_advance is not None and not self.pending_advance.done()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def _log_event(self, session: SessionState, agent_name: str, event_type: str, **fields) -> None:
        self.log_store.add_log(GradingLogEntry(
            session_id=session.session_id,
            agent_name=agent_name,
            event_type=event_type,
            **fields,
        ))

    async def submit(self, session: SessionState) -> SubmitResult:
        """
        Grade the current stage's work.

        The work is serialized at call time; edits made while the grader is
        thinking land on the live record and are not part of this verdict.
        """
        if session.is_loading or self.advance_pending:
            raise SubmissionInProgressError(session.session_id)

        stage = session.current_stage
        sentence = session.sentence
        work = session.machine.work_for(stage).model_dump(mode="json")

        session.is_loading = True
        session.feedback = CHECKING_FEEDBACK
        session.touch()
        start_time = time.time()

        logger.info(f"Submitting {stage.value} for session {session.session_id}")

        try:
            verdict = await self.grader.grade(stage, sentence, work, session_id=session.session_id)
        except GradingError as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.warning(f"Grading failed for session {session.session_id}: {e}")
            session.is_loading = False
            session.feedback = CONNECTION_LOST_FEEDBACK
            session.sfx_cue = "error"
            session.touch()
            self._log_event(
                session, "grader", "failed",
                stage=stage.value, sentence=sentence, submitted_work=work,
                duration_ms=duration_ms, prompt=self.grader.last_prompt,
                model=self.grader.model_id, metadata={"error": str(e)},
            )
            return SubmitResult(outcome="error", feedback=session.feedback, graded_stage=stage)

        duration_ms = int((time.time() - start_time) * 1000)
        session.is_loading = False
        session.feedback = verdict.feedback
        session.touch()
        self._log_event(
            session, "grader", "graded",
            stage=stage.value, sentence=sentence, submitted_work=work,
            output=verdict.model_dump(), duration_ms=duration_ms,
            prompt=self.grader.last_prompt, model=self.grader.model_id,
        )

        if not verdict.is_correct:
            session.sfx_cue = "error"
            return SubmitResult(
                outcome="incorrect", feedback=verdict.feedback,
                graded_stage=stage, verdict=verdict,
            )

        session.sfx_cue = "success"
        upcoming = session.machine.advance()

        if upcoming is None:
            logger.info(f"Sentence complete for session {session.session_id}")
            self.pending_advance = asyncio.ensure_future(self._advance_sentence(session))
            return SubmitResult(
                outcome="correct", feedback=verdict.feedback, graded_stage=stage,
                verdict=verdict, sentence_complete=True,
            )

        self.request_track(session, upcoming)
        return SubmitResult(
            outcome="correct", feedback=verdict.feedback, graded_stage=stage,
            verdict=verdict, next_stage=upcoming,
        )

    async def _advance_sentence(self, session: SessionState) -> None:
        # Keep the success feedback on screen before swapping the sentence
        await asyncio.sleep(self.advance_delay_seconds)
        session.is_loading = True
        sentence = await self.pool.draw()
        session.sentences_completed += 1
        session.start_sentence(sentence)
        session.is_loading = False
        self._log_event(session, "orchestrator", "sentence_started", stage=Stage.MONDAY.value, sentence=sentence)
        self.request_track(session, Stage.MONDAY)

    def request_track(self, session: SessionState, stage: Stage) -> None:
        """Ask for a new ambient track without waiting for it."""
        if self.audio is None:
            return
        self._spawn(self._refresh_track(session, stage))

    async def _refresh_track(self, session: SessionState, stage: Stage) -> None:
        track = await self.audio.generate_track(stage)
        if track is not None:
            session.ambient_track = track

    async def drain(self) -> None:
        """Wait for the pending advancement and any outstanding audio requests."""
        if self.pending_advance is not None:
            await asyncio.wait({self.pending_advance})
        if self._background:
            await asyncio.wait(set(self._background))

    def close(self) -> None:
        if self.advance_pending:
            self.pending_advance.cancel()
        for task in list(self._background):
            task.cancel()
